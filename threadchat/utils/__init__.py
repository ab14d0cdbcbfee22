"""Utilities package."""

from .logger import get_app_logger, get_component_logger, setup_logger, init_app_logger
from .locks import KeyedLock
from .clock import utcnow

__all__ = [
    "get_app_logger",
    "get_component_logger",
    "setup_logger",
    "init_app_logger",
    "KeyedLock",
    "utcnow",
]
