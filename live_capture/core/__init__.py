"""Core infrastructure shared by the capture controller."""

from .logging_config import configure_logging, resolve_log_level
from .logging_utils import StructuredLogger, ensure_structured_logger, get_module_logger
from .task_manager import BackgroundTaskManager

__all__ = [
    "BackgroundTaskManager",
    "StructuredLogger",
    "configure_logging",
    "ensure_structured_logger",
    "get_module_logger",
    "resolve_log_level",
]
