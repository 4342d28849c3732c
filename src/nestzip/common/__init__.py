"""Common utilities shared by nestzip packages."""

from .config import ConfigLoader
from .logging import setup_logging
from .logging_config import LoggingConfig
from .errors import NestZipError

__all__ = [
    'ConfigLoader',
    'LoggingConfig',
    'setup_logging',
    'NestZipError',
]
