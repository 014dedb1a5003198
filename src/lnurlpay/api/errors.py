"""LNURL error envelope responses."""

from __future__ import annotations

from fastapi.responses import JSONResponse

from ..application.dtos import ErrorResponseDTO


def error_response(status_code: int, reason: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponseDTO(reason=reason).model_dump(),
    )
