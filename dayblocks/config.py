"""
Configuration management using Pydantic models loaded from YAML.
"""

import re
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_PALETTE = [
    "#f87171", "#60a5fa", "#34d399", "#fbbf24", "#a78bfa",
    "#fb923c", "#a3e635", "#f472b6", "#38bdf8", "#c084fc",
]

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


class DragConfig(BaseModel):
    """Drag interaction settings."""
    activation_threshold_minutes: int = 5

    @field_validator("activation_threshold_minutes")
    @classmethod
    def validate_threshold(cls, value: int) -> int:
        """Threshold must be a positive multiple of the 5-minute grid."""
        if value <= 0 or value % 5:
            raise ValueError(f"activation_threshold_minutes must be a positive multiple of 5, got {value}")
        return value


class TimelineConfig(BaseModel):
    """Linear timeline geometry (pixels)."""
    top_pixels: float = 0.0
    height_pixels: float = 1440.0

    @field_validator("height_pixels")
    @classmethod
    def validate_height(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("height_pixels must be greater than zero")
        return value


class DialConfig(BaseModel):
    """Circular dial geometry (pixels)."""
    size: float = 720.0
    center_x: Optional[float] = None
    center_y: Optional[float] = None

    @model_validator(mode="after")
    def fill_center(self) -> "DialConfig":
        """Default the centre to the middle of the canvas."""
        if self.size <= 0:
            raise ValueError("size must be greater than zero")
        if self.center_x is None:
            self.center_x = self.size / 2
        if self.center_y is None:
            self.center_y = self.size / 2
        return self


class AppConfig(BaseModel):
    """Application configuration."""
    palette: List[str] = Field(default_factory=lambda: list(DEFAULT_PALETTE))
    drag: DragConfig = Field(default_factory=DragConfig)
    timeline: TimelineConfig = Field(default_factory=TimelineConfig)
    dial: DialConfig = Field(default_factory=DialConfig)
    schedule_file: Path = Path("schedule.yaml")
    log_level: str = "WARNING"

    @field_validator("palette")
    @classmethod
    def validate_palette(cls, value: List[str]) -> List[str]:
        """Ensure colors are hex tokens, deduplicated, and at least one is given."""
        invalid = [color for color in value if not _HEX_COLOR.match(color)]
        if invalid:
            raise ValueError(f"palette entries must be #rrggbb colors, got {invalid}")
        # Preserve order while removing duplicates
        deduped: List[str] = []
        for color in value:
            if color.lower() not in deduped:
                deduped.append(color.lower())
        if not deduped:
            raise ValueError("palette must contain at least one color")
        return deduped

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @property
    def default_color(self) -> str:
        return self.palette[0]

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    @classmethod
    def load_or_default(cls, config_path: Optional[Path]) -> "AppConfig":
        """Load the given or default config file; fall back to defaults if none exists."""
        path = config_path or get_default_config_path()
        if config_path is None and not path.exists():
            return cls()
        return cls.load_from_yaml(path)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
