"""Typed failures of the movie catalog.

Adapters raise these; application services decide whether to surface them
or keep showing stale data next to them.
"""

from __future__ import annotations

from typing import Optional


class NetworkError(Exception):
    """Base class for every catalog failure."""

    retryable: bool = True
    default_user_message: str = "Something went wrong. Please try again."

    def __init__(self, message: str = "", *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message or self.default_user_message)
        self.message = message or self.default_user_message
        self.cause = cause

    @property
    def is_retryable(self) -> bool:
        return bool(self.retryable)

    @property
    def user_message(self) -> str:
        return self.default_user_message

    def to_dict(self) -> dict[str, object]:
        return {
            "type": type(self).__name__,
            "message": self.message,
            "user_message": self.user_message,
            "retryable": self.is_retryable,
        }


class InvalidRequestError(NetworkError):
    """Malformed input (e.g. an empty search query); fix the input, do not retry."""

    retryable = False
    default_user_message = "The request was invalid."


class TransportError(NetworkError):
    """Connection problems and timeouts."""

    default_user_message = "Could not reach the movie service. Check your connection."


class HTTPStatusError(NetworkError):
    default_user_message = "The movie service returned an error."

    def __init__(self, status_code: int, message: str = "", *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message or f"HTTP {status_code}", cause=cause)
        self.status_code = int(status_code)

    def to_dict(self) -> dict[str, object]:
        out = super().to_dict()
        out["status_code"] = self.status_code
        return out


class DecodeError(NetworkError):
    """The response arrived but could not be parsed into catalog records."""

    default_user_message = "The movie service sent data we could not read."


__all__ = [
    "DecodeError",
    "HTTPStatusError",
    "InvalidRequestError",
    "NetworkError",
    "TransportError",
]
