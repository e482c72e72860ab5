"""Shared-secret API key gate for the MCP endpoint.

Requests to a protected path must carry ``x-api-key`` matching the
configured key. Rejected requests never reach the router, so no credential
exchange or backend call happens for them.
"""

from __future__ import annotations

import secrets

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse

API_KEY_HEADER = "x-api-key"


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Reject requests to protected paths without a valid API key.

    Parameters
    ----------
    api_key : str
        Expected header value.
    protected_paths : frozenset[str]
        Exact paths that require the key. Everything else (e.g. ``/healthz``)
        passes through untouched.
    """

    def __init__(
        self,
        app: object,
        *,
        api_key: str,
        protected_paths: frozenset[str],
    ) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        if not api_key:
            raise ValueError("api_key must not be empty")
        self._api_key = api_key.encode()
        self.protected_paths = protected_paths

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path not in self.protected_paths:
            return await call_next(request)

        supplied = request.headers.get(API_KEY_HEADER, "")
        if not supplied or not secrets.compare_digest(supplied.encode(), self._api_key):
            return JSONResponse(status_code=401, content={"detail": "Unauthorized"})

        return await call_next(request)
