"""
Exceptions raised by the chat core.
"""
from typing import Optional


class ChatError(Exception):
    """Base class for every error raised by the chat core."""


class ConfigError(ChatError):
    pass


class ReadError(ChatError):
    """An attachment could not be read or is not an accepted type."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class TransportError(ChatError):
    """The generation request failed before or during streaming."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @classmethod
    def from_exception(cls, exc: BaseException) -> 'TransportError':
        if isinstance(exc, TransportError):
            return exc
        err = cls(str(exc) or type(exc).__name__)
        err.__cause__ = exc
        return err


class TranscriptError(ChatError):
    pass
