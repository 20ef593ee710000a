"""Cache busting for magazine PDFs."""

from __future__ import annotations

import time
from typing import Any, Callable, Mapping, Optional

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint


def is_magazine_pdf(path: str) -> bool:
    return path.startswith("/magazine/") and path.endswith("/magazine.pdf")


def magazine_version(
    config: Mapping[str, Any], now_ms: Optional[Callable[[], int]] = None
) -> str:
    """Release version, else deployment id, else the current epoch in milliseconds."""
    version = config.get("release_version") or config.get("deployment_id")
    if version:
        return str(version)
    return str((now_ms or (lambda: int(time.time() * 1000)))())


class MagazineVersionMiddleware(BaseHTTPMiddleware):
    """Redirects unversioned ``/magazine/.../magazine.pdf`` requests to ``?v=<version>``."""

    def __init__(
        self,
        app,
        *,
        magazine_config: Mapping[str, Any],
        now_ms: Optional[Callable[[], int]] = None,
    ) -> None:
        super().__init__(app)
        self.magazine_config = magazine_config
        self.now_ms = now_ms

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint):
        if not is_magazine_pdf(request.url.path) or "v" in request.query_params:
            return await call_next(request)
        version = magazine_version(self.magazine_config, self.now_ms)
        target = request.url.include_query_params(v=version)
        return RedirectResponse(url=str(target), status_code=307)
