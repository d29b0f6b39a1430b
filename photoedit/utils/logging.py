"""
Logging utilities for PhotoEdit
Provides console logging setup and batch run statistics
"""

import logging
import sys
import time
from typing import Any, Dict, List, Optional


class BatchStats:
    """Tracks per-image outcomes of a batch run"""

    def __init__(self, total: int = 0):
        self.start_time = time.time()
        self.total_images = total
        self.processed_images = 0
        self.errors: List[Dict[str, str]] = []
        self.processing_times: List[float] = []

    def add_result(self, processing_time: Optional[float] = None):
        """Record one successfully written image"""
        self.processed_images += 1
        if processing_time is not None:
            self.processing_times.append(processing_time)

    def add_error(self, file_name: str, error: str):
        """Record one failed image"""
        self.errors.append({'file': file_name, 'error': error})

    @property
    def failed_images(self) -> int:
        return len(self.errors)

    def get_elapsed_time(self) -> float:
        return time.time() - self.start_time

    def get_average_processing_time(self) -> float:
        if not self.processing_times:
            return 0.0
        return sum(self.processing_times) / len(self.processing_times)

    def get_summary(self) -> Dict[str, Any]:
        """Get batch summary"""
        elapsed = self.get_elapsed_time()
        return {
            'total_images': self.total_images,
            'processed_images': self.processed_images,
            'failed_images': self.failed_images,
            'elapsed_time': elapsed,
            'average_time_per_image': self.get_average_processing_time(),
            'images_per_second': self.processed_images / elapsed if elapsed > 0 else 0,
        }


def setup_console_logging(level: str = "INFO", color: bool = True,
                          fmt: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'):
    """
    Setup console logging with optional color support

    Replaces any handler installed by an earlier call, so repeated CLI
    invocations in one process do not duplicate output.

    Args:
        level: Logging level name
        color: Whether to use colored output when stderr is a terminal
        fmt: Log record format

    Returns:
        The installed handler
    """
    console_handler = logging.StreamHandler(sys.stderr)

    if color and sys.stderr.isatty():
        try:
            import colorlog
            formatter = colorlog.ColoredFormatter(
                '%(log_color)s' + fmt + '%(reset)s',
                log_colors={
                    'DEBUG': 'cyan',
                    'INFO': 'green',
                    'WARNING': 'yellow',
                    'ERROR': 'red',
                    'CRITICAL': 'red,bg_white',
                }
            )
        except ImportError:
            # colorlog is an optional extra
            formatter = logging.Formatter(fmt)
    else:
        formatter = logging.Formatter(fmt)

    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in list(root_logger.handlers):
        if getattr(handler, '_photoedit_console', False):
            root_logger.removeHandler(handler)
    console_handler._photoedit_console = True
    root_logger.addHandler(console_handler)
    return console_handler
