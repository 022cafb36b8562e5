"""
Utility modules for the batch launcher.
"""

from .logging_config import setup_logging_from_file

__all__ = [
    "setup_logging_from_file",
]
