"""Observability – structlog configuration and logger helper."""
from schedin.observability.logging.factory import JsonLoggerFactory, configure_logging
from schedin.observability.logging.processors import get_logger

__all__ = ["JsonLoggerFactory", "configure_logging", "get_logger"]
