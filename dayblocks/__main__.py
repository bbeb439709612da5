"""
Convenience entry point for running dayblocks as a module.

Usage: python -m dayblocks [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
