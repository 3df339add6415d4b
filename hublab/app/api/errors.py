from __future__ import annotations

from typing import Any

from fastapi import HTTPException


def api_error(status_code: int, error: str, **extra: Any) -> HTTPException:
    """HTTPException whose detail carries ``error`` plus any diagnostic payload."""
    if not extra:
        return HTTPException(status_code=status_code, detail=error)
    return HTTPException(status_code=status_code, detail={"error": error, **extra})
