"""
Jokes router — browse jokes, create a joke, delete your own.

Endpoints:
    GET  /jokes                  → a random joke
    GET  /jokes/new              → new joke form (401 when signed out)
    POST /jokes/new              → validate, create, redirect to the joke
    POST /jokes/new/preview      → render the form view for in-flight values
    GET  /jokes/{joke_id}        → joke detail
    POST /jokes/{joke_id}        → _method=delete, owner only
"""

import logging
from typing import Mapping, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from jokester.boundaries import catch_boundary, error_boundary, render_boundary
from jokester.config import TEMPLATES_DIR
from jokester.database import get_db
from jokester.models.user import User
from jokester.routers.auth import get_current_user, get_user_id, require_user_id
from jokester.schemas.joke import (
    FORM_NOT_SUBMITTED,
    JokeActionData,
    JokeFieldErrors,
    JokeFields,
    JokeOut,
    validate_joke_content,
    validate_joke_name,
)
from jokester.services.jokes import (
    create_joke,
    delete_joke,
    get_joke,
    get_random_joke,
    list_recent_jokes,
)
from jokester.utils.http import wants_json

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jokes", tags=["jokes"])
templates = Jinja2Templates(directory=TEMPLATES_DIR)


async def _layout(db: AsyncSession, current_user: Optional[User]) -> dict:
    """Context shared by every page under /jokes (header + sidebar)."""
    return {
        "current_user": current_user,
        "jokes_list": await list_recent_jokes(db),
    }


# ═══════════════════════════════════════════════════════════════
#  Random joke
# ═══════════════════════════════════════════════════════════════

@router.get("", response_class=HTMLResponse)
async def jokes_index(
    request: Request,
    current_user: Optional[User] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    joke = await get_random_joke(db)
    if not joke:
        raise HTTPException(status_code=404, detail="No random joke found")
    return templates.TemplateResponse(
        request,
        "jokes/index.html",
        {**await _layout(db, current_user), "joke": joke},
    )


@catch_boundary(jokes_index)
def jokes_index_catch_boundary(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return render_boundary(request, "There are no jokes to display.", 404)
    return None


# ═══════════════════════════════════════════════════════════════
#  New joke
# ═══════════════════════════════════════════════════════════════

def _optimistic_joke(submission: Optional[Mapping]) -> Optional[dict]:
    """The in-flight joke, when its values would already pass validation."""
    if submission is None:
        return None
    name = submission.get("name")
    content = submission.get("content")
    if (
        isinstance(name, str)
        and isinstance(content, str)
        and not validate_joke_content(content)
        and not validate_joke_name(name)
    ):
        return {"name": name, "content": content}
    return None


async def render_new_joke(
    request: Request,
    db: AsyncSession,
    current_user: Optional[User],
    action_data: Optional[JokeActionData] = None,
    submission: Optional[Mapping] = None,
    status_code: int = status.HTTP_200_OK,
):
    """
    Render the new joke view.

    ``action_data`` repopulates and annotates the form after a rejected
    submission. ``submission`` holds in-flight form values; when they are
    already valid the joke is previewed in place of the form.
    """
    return templates.TemplateResponse(
        request,
        "jokes/new.html",
        {
            **await _layout(db, current_user),
            "action_data": action_data,
            "preview": _optimistic_joke(submission),
        },
        status_code=status_code,
    )


async def _bad_request(
    request: Request,
    db: AsyncSession,
    action_data: JokeActionData,
):
    if wants_json(request):
        return JSONResponse(action_data.to_payload(), status_code=status.HTTP_400_BAD_REQUEST)
    current_user = await get_current_user(request, db)
    return await render_new_joke(
        request, db, current_user, action_data=action_data,
        status_code=status.HTTP_400_BAD_REQUEST,
    )


@router.get("/new", response_class=HTMLResponse)
async def new_joke_page(
    request: Request,
    user_id: Optional[str] = Depends(get_user_id),
    current_user: Optional[User] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Show the empty form to signed-in users only."""
    if not user_id or current_user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return await render_new_joke(request, db, current_user)


@router.post("/new")
async def create_joke_action(
    request: Request,
    user_id: str = Depends(require_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Validate the submitted joke, store it and redirect to its page."""
    form = await request.form()
    name = form.get("name")
    content = form.get("content")
    if not isinstance(name, str) or not isinstance(content, str):
        return await _bad_request(request, db, JokeActionData(form_error=FORM_NOT_SUBMITTED))

    field_errors = JokeFieldErrors(
        name=validate_joke_name(name),
        content=validate_joke_content(content),
    )
    if field_errors.any():
        logger.debug(f"Rejected joke from {user_id}: {field_errors.model_dump(exclude_none=True)}")
        return await _bad_request(
            request,
            db,
            JokeActionData(
                field_errors=field_errors,
                fields=JokeFields(name=name, content=content),
            ),
        )

    joke = await create_joke(db, name=name, content=content, jokester_id=user_id)
    await db.commit()
    return RedirectResponse(url=f"/jokes/{joke.id}", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/new/preview", response_class=HTMLResponse)
async def new_joke_preview(
    request: Request,
    user_id: Optional[str] = Depends(get_user_id),
    current_user: Optional[User] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Render the view for values that are still being submitted."""
    if not user_id or current_user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    form = await request.form()
    return await render_new_joke(request, db, current_user, submission=form)


@catch_boundary(new_joke_page, create_joke_action, new_joke_preview)
def new_joke_catch_boundary(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 401:
        return render_boundary(
            request,
            "You must be logged in to create a joke.",
            401,
            link={"href": "/login", "text": "Login"},
        )
    return None


# ═══════════════════════════════════════════════════════════════
#  Joke detail + delete
# ═══════════════════════════════════════════════════════════════

@router.get("/{joke_id}", response_class=HTMLResponse)
async def joke_detail(
    joke_id: str,
    request: Request,
    user_id: Optional[str] = Depends(get_user_id),
    current_user: Optional[User] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    joke = await get_joke(db, joke_id)
    if not joke:
        raise HTTPException(status_code=404, detail="What a joke! Not found.")
    if wants_json(request):
        return JSONResponse(JokeOut.model_validate(joke).model_dump(mode="json"))
    return templates.TemplateResponse(
        request,
        "jokes/detail.html",
        {
            **await _layout(db, current_user),
            "joke": joke,
            "is_owner": user_id == joke.jokester_id,
        },
    )


@router.post("/{joke_id}")
async def joke_action(
    joke_id: str,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Delete a joke; only ``_method=delete`` from its owner is accepted."""
    form = await request.form()
    method = form.get("_method")
    if method != "delete":
        raise HTTPException(status_code=400, detail=f"The _method {method} is not supported")
    user_id = await require_user_id(request, db)
    joke = await get_joke(db, joke_id)
    if not joke:
        raise HTTPException(status_code=404, detail="Can't delete what does not exist")
    if joke.jokester_id != user_id:
        raise HTTPException(status_code=401, detail="Pssh, nice try. That's not your joke")
    await delete_joke(db, joke)
    await db.commit()
    return RedirectResponse(url="/jokes", status_code=status.HTTP_303_SEE_OTHER)


@catch_boundary(joke_detail, joke_action)
def joke_catch_boundary(request: Request, exc: StarletteHTTPException):
    joke_id = request.path_params.get("joke_id")
    if exc.status_code == 400:
        return render_boundary(request, "What you're trying to do is not allowed.", 400)
    if exc.status_code == 404:
        return render_boundary(request, f'Huh? What the heck is "{joke_id}"?', 404)
    if exc.status_code == 401:
        return render_boundary(request, f"Sorry, but {joke_id} is not your joke.", 401)
    return None


@error_boundary(joke_detail, joke_action)
def joke_error_boundary(request: Request, exc: Exception):
    joke_id = request.path_params.get("joke_id")
    return render_boundary(
        request,
        f"There was an error loading joke by the id {joke_id}. Sorry.",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
