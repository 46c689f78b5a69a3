from domain.catalog.errors import (
    DecodeError,
    HTTPStatusError,
    InvalidRequestError,
    NetworkError,
    TransportError,
)

__all__ = [
    "DecodeError",
    "HTTPStatusError",
    "InvalidRequestError",
    "NetworkError",
    "TransportError",
]
