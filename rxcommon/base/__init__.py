"""Low-level shared utilities for rxren."""

from .logging import get_logger, setup_logging, RxLogger

__all__ = [
    "get_logger",
    "setup_logging",
    "RxLogger",
]
