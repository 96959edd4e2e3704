from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

_LOG = logging.getLogger("kb.errors")


class KnowledgeBaseError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(KnowledgeBaseError):
    status_code = 400


class NotFoundError(KnowledgeBaseError):
    status_code = 404


class ConflictError(KnowledgeBaseError):
    status_code = 409


class FatalStoreError(KnowledgeBaseError):
    """The record store snapshot could not be read. Not recoverable per call."""

    status_code = 500


class StoreWriteError(KnowledgeBaseError):
    """A snapshot that had to be written in full was rejected by the store."""

    status_code = 500


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(FatalStoreError)
    async def _fatal_store_handler(request: Request, exc: FatalStoreError):
        _LOG.critical(
            "record store unreadable path=%s request_id=%s: %s",
            request.url.path,
            getattr(request.state, "request_id", "-"),
            exc.detail,
        )
        return JSONResponse(status_code=exc.status_code, content={"detail": "Internal server error"})

    @app.exception_handler(KnowledgeBaseError)
    async def _domain_error_handler(request: Request, exc: KnowledgeBaseError):
        if exc.status_code >= 500:
            _LOG.error("unhandled domain error path=%s: %s", request.url.path, exc.detail)
            return JSONResponse(status_code=exc.status_code, content={"detail": "Internal server error"})
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": describe_request_errors(exc.errors())})


def describe_request_errors(errors) -> str:
    """One-line summary of pydantic request errors, e.g. ``parent_topic_id: Input should be a valid integer``."""
    parts = []
    for error in errors:
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        message = str(error.get("msg") or "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return ("Invalid request: " + "; ".join(parts)) if parts else "Invalid request"
