"""Error taxonomy shared by services and the HTTP layer."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class DashboardError(Exception):
    status_code = 400
    default_detail = "Request failed"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.default_detail)

    @property
    def detail(self) -> str:
        return str(self)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=self.detail)


class UnauthorizedError(DashboardError):
    """Raised before any database work when a privileged operation is not allowed."""

    status_code = 403
    default_detail = "Unauthorized"


class DataServiceError(DashboardError):
    """A stored procedure, view or table call failed in the database."""

    status_code = 502
    default_detail = ""

    def __init__(self, detail: str | None = None, procedure: str | None = None):
        Exception.__init__(self, detail or "")
        self.procedure = procedure


def error_message(exc: BaseException, fallback: str) -> str:
    """Message to show for ``exc``: its own text when it has one, else ``fallback``."""
    message = str(exc).strip()
    return message or fallback


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DashboardError)
    async def _dashboard_error_handler(request: Request, exc: DashboardError):
        if exc.status_code >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc.detail or exc.__class__.__name__)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail or "Data service error"})
