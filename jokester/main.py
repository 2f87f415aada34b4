"""
Jokester — FastAPI application entry-point.

Run with:
    uvicorn jokester.main:app --reload
or the ``jokester`` console script.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from jokester import models  # noqa: F401  (registers tables on Base.metadata)
from jokester.boundaries import register_boundaries
from jokester.config import STATIC_DIR, TEMPLATES_DIR, settings
from jokester.database import Base, engine
from jokester.models.user import User
from jokester.routers import auth, jokes
from jokester.routers.auth import get_current_user

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan: create tables on startup ──
@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{settings.APP_NAME} started")
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="A place to share your hilarious jokes.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=("*",))
register_boundaries(app)

# ── Static files & templates ──
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
templates = Jinja2Templates(directory=TEMPLATES_DIR)

# ── Register routers ──
app.include_router(auth.router)
app.include_router(jokes.router)


# ── Landing page ──
@app.get("/", response_class=HTMLResponse)
async def homepage(
    request: Request,
    current_user: Optional[User] = Depends(get_current_user),
):
    return templates.TemplateResponse(
        request, "home.html", {"current_user": current_user}
    )


def run() -> None:
    """Console entry point."""
    uvicorn.run("jokester.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
