"""Base error definitions for nestzip packages."""

from typing import Any, Dict


class NestZipError(Exception):
    """Base exception for all nestzip errors.

    ``exit_code`` is the process exit status reported by the CLI when the
    error aborts a unit of work.
    """

    exit_code: int = 1

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context
