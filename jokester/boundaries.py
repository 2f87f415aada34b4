"""
Route boundaries — fallback renderers for handlers that fail.

A *catch boundary* renders an expected HTTP failure (an ``HTTPException``
raised by a route) and an *error boundary* renders anything unexpected.
Routes register their own boundaries against their endpoint function;
routes without one fall back to the generic pages below.
"""

import logging
from typing import Callable, Dict, Optional
from urllib.parse import urlencode

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from jokester.config import TEMPLATES_DIR
from jokester.exceptions import LoginRequired
from jokester.utils.http import wants_json

logger = logging.getLogger(__name__)
templates = Jinja2Templates(directory=TEMPLATES_DIR)

GENERIC_ERROR = "Something unexpected went wrong. Sorry about that."

CatchBoundary = Callable[[Request, StarletteHTTPException], Optional[Response]]
ErrorBoundary = Callable[[Request, Exception], Response]

_catch_boundaries: Dict[Callable, CatchBoundary] = {}
_error_boundaries: Dict[Callable, ErrorBoundary] = {}


def catch_boundary(*endpoints: Callable):
    """Register the decorated function as the catch boundary of ``endpoints``.

    The boundary may return ``None`` for statuses it does not handle, in
    which case the generic page is rendered.
    """
    def register(boundary: CatchBoundary) -> CatchBoundary:
        for endpoint in endpoints:
            _catch_boundaries[endpoint] = boundary
        return boundary
    return register


def error_boundary(*endpoints: Callable):
    """Register the decorated function as the error boundary of ``endpoints``."""
    def register(boundary: ErrorBoundary) -> ErrorBoundary:
        for endpoint in endpoints:
            _error_boundaries[endpoint] = boundary
        return boundary
    return register


def render_boundary(
    request: Request,
    message: str,
    status_code: int,
    link: Optional[dict] = None,
) -> HTMLResponse:
    """Render the shared ``error-container`` page."""
    return templates.TemplateResponse(
        request,
        "boundary.html",
        {"message": message, "link": link},
        status_code=status_code,
    )


# ═══════════════════════════════════════════════════════════════
#  Exception handlers
# ═══════════════════════════════════════════════════════════════

async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> Response:
    if wants_json(request):
        return await http_exception_handler(request, exc)
    boundary = _catch_boundaries.get(request.scope.get("endpoint"))
    if boundary is not None:
        response = boundary(request, exc)
        if response is not None:
            return response
    return render_boundary(request, str(exc.detail), exc.status_code)


async def handle_login_required(request: Request, exc: LoginRequired) -> Response:
    query = urlencode({"redirectTo": exc.redirect_to})
    return RedirectResponse(url=f"/login?{query}", status_code=status.HTTP_303_SEE_OTHER)


async def handle_unexpected_error(request: Request, exc: Exception) -> Response:
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    boundary = _error_boundaries.get(request.scope.get("endpoint"))
    if boundary is not None:
        return boundary(request, exc)
    return render_boundary(request, GENERIC_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_boundaries(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(LoginRequired, handle_login_required)
    app.add_exception_handler(Exception, handle_unexpected_error)
