from __future__ import annotations

import logging
import re
from time import perf_counter
from typing import Dict
from uuid import uuid4

from fastapi import FastAPI, Request

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,128}$")
_LOG = logging.getLogger("kb.http")

# Swagger UI and ReDoc load their bundles from a CDN and run inline scripts.
DOCS_PATHS = ("/docs", "/redoc")
API_CSP = "default-src 'none'; frame-ancestors 'none'"
DOCS_CSP = (
    "default-src 'self'; script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; img-src 'self' data: https:; "
    "frame-ancestors 'none'"
)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
}


def security_headers_for(path: str) -> Dict[str, str]:
    headers = dict(SECURITY_HEADERS)
    headers["Content-Security-Policy"] = DOCS_CSP if path.startswith(DOCS_PATHS) else API_CSP
    # Every payload is a single snapshot read.
    headers["Cache-Control"] = "no-store"
    return headers


def request_id_from_header(raw: str | None) -> str:
    value = str(raw or "").strip()
    if _REQUEST_ID_RE.fullmatch(value):
        return value
    return uuid4().hex


def install_http_hardening(app: FastAPI) -> None:
    @app.middleware("http")
    async def _http_hardening_middleware(request: Request, call_next):
        request.state.request_id = request_id_from_header(request.headers.get(REQUEST_ID_HEADER))
        started_at = perf_counter()

        response = await call_next(request)

        response.headers.update(security_headers_for(request.url.path))
        response.headers[REQUEST_ID_HEADER] = request.state.request_id

        elapsed_ms = (perf_counter() - started_at) * 1000.0
        _LOG.log(
            logging.WARNING if response.status_code >= 500 else logging.INFO,
            "%s %s status=%s duration_ms=%.2f request_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request.state.request_id,
        )
        return response
