"""Exceptions raised through a message's completion signal."""

from typing import Any, Optional


class FetchError(Exception):
    """Raised to whoever awaits a fetch when the message is marked as errored."""

    def __init__(self, code: str, message: Optional[str] = None, details: Any = None):
        super().__init__(message or code)
        self.code = code
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.message:
            return f"{self.code}: {self.message}"
        return self.code
