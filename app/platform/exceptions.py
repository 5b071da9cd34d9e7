import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.platform.response import api_response


# ─────────────────────────────────────────────────────────────
# Analysis errors
# ─────────────────────────────────────────────────────────────

class AnalysisError(Exception):
    """Base class for everything that can go wrong while analyzing a page."""


class TransportError(AnalysisError):
    """DNS, connect, timeout or protocol failure while fetching the page."""


class HTTPStatusError(AnalysisError):
    """The page answered with a final status other than 200."""

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Non-200 status code for {url}: {status_code}")


class ParseError(AnalysisError):
    """Markup could not be parsed, or the page URL itself is not a valid URL."""


class PersistenceError(AnalysisError):
    """The aggregate result row could not be replaced."""


class LinkInsertError(AnalysisError):
    """A single broken-link row could not be stored. Never fatal."""


class AnalysisCancelled(Exception):
    """Raised inside a running analysis once a stop was requested."""


# ─────────────────────────────────────────────────────────────
# HTTP exception handlers
# ─────────────────────────────────────────────────────────────

def add_exception_handlers(app):
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return api_response(message=str(exc.detail) or "Error", status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return api_response(
            message="Validation failed",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            data={"errors": exc.errors()},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logging.exception(f"Unhandled exception: {exc}")
        return api_response(
            message="Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
