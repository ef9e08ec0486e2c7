"""
Domain error taxonomy.

Services raise these; the exception handler installed in ``app.main`` renders
them as ``{"error": {"kind": ..., "detail": ...}}`` so callers can branch on
``kind`` without matching on messages.
"""
from typing import Any, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from loguru import logger


class DomainError(Exception):
    kind = "domain_error"
    status_code = 400

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.kind)
        self.detail = detail or self.kind


class ValidationError(DomainError):
    kind = "validation_error"
    status_code = 422


class SelfReferenceError(DomainError):
    kind = "self_reference"
    status_code = 422


class AlreadyExists(DomainError):
    """Duplicate create. Carries the row that already exists."""

    kind = "already_exists"
    status_code = 409

    def __init__(self, detail: str = "", existing: Optional[Any] = None):
        super().__init__(detail)
        self.existing = existing


class NotAuthorized(DomainError):
    kind = "not_authorized"
    status_code = 403


class NotFound(DomainError):
    kind = "not_found"
    status_code = 404


class NotConnected(DomainError):
    kind = "not_connected"
    status_code = 422


def error_body(kind: str, detail: str) -> dict:
    return {"error": {"kind": kind, "detail": detail}}


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    logger.info(f"Domain error | path={request.url.path} kind={exc.kind} detail={exc.detail}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.kind, exc.detail))
