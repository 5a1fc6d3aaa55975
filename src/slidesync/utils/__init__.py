"""Host-side helpers; :func:`setup_logging` is the logging entry point."""

from .logging import get_log_path, get_logger, setup_logging

__all__ = ["get_log_path", "get_logger", "setup_logging"]
