from __future__ import annotations


class AppError(Exception):
    """
    Error carrying the HTTP status code the error handler should answer with.
    """

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidStatusError(ValueError):
    """Raised by a repository when a merged todo status is not TODO or DONE."""


class ConfigError(ValueError):
    """Raised when an environment variable holds an unusable value."""
