"""Services package.

Keep this module lightweight: importing `services` must not pull in the
game core or the gateways.
"""

from .logger import PerformanceLogger, cleanup_logging, get_logger, setup_logging
from .notifier import Events, ResultNotifier

__all__ = [
    "Events",
    "PerformanceLogger",
    "ResultNotifier",
    "cleanup_logging",
    "get_logger",
    "setup_logging",
]
