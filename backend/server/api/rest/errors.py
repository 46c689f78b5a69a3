from __future__ import annotations

from typing import Optional

from fastapi import HTTPException

from domain.catalog import InvalidRequestError, NetworkError


def catalog_http_error(error: Optional[NetworkError]) -> HTTPException:
    """Map a catalog failure onto an HTTP error whose detail carries the retry hint."""
    if error is None:
        error = NetworkError()
    status_code = 400 if isinstance(error, InvalidRequestError) else 502
    return HTTPException(status_code=status_code, detail=error.to_dict())
