"""
Utility modules for EchoPath.

This package contains:
    - logger: Structured logging with structlog
"""

from echopath.utils.logger import LogContext, get_logger, setup_logging

__all__ = [
    "LogContext",
    "get_logger",
    "setup_logging",
]
