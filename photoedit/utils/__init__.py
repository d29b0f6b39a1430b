"""
Utility modules for PhotoEdit
"""

from .logging import BatchStats, setup_console_logging

__all__ = [
    'BatchStats',
    'setup_console_logging',
]
