"""
dayblocks - compose a 24-hour day out of labeled, non-overlapping time blocks.
"""

__version__ = "0.1.0"
