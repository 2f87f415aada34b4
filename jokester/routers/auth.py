"""
Authentication router — username/password sign-in + JWT cookie session.

Endpoints:
    GET  /login   → login / register page
    POST /login   → handle login or registration, set JWT cookie
    POST /logout  → clear JWT cookie, back to the login page
    GET  /logout  → back to the landing page
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jokester.config import TEMPLATES_DIR, settings
from jokester.database import get_db
from jokester.exceptions import LoginRequired
from jokester.models.user import User
from jokester.schemas.user import (
    LOGIN_TYPES,
    LoginActionData,
    LoginFieldErrors,
    LoginFields,
    validate_password,
    validate_redirect_url,
    validate_username,
)
from jokester.services.passwords import hash_password, verify_password
from jokester.utils.http import wants_json

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])
templates = Jinja2Templates(directory=TEMPLATES_DIR)

COOKIE_KEY = "access_token"


# ═══════════════════════════════════════════════════════════════
#  Session helpers
# ═══════════════════════════════════════════════════════════════

def create_access_token(data: dict) -> str:
    """Create a signed JWT with an expiry claim."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _set_auth_cookie(response: RedirectResponse, user_id: str) -> RedirectResponse:
    """Attach the JWT cookie to a response."""
    token = create_access_token({"sub": user_id})
    response.set_cookie(
        key=COOKIE_KEY,
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite="lax",
    )
    return response


async def get_user_id(request: Request) -> Optional[str]:
    """
    Decode the JWT from the cookie and return the user id it carries.
    Returns None when no valid token is present (allows public pages).
    """
    token = request.cookies.get(COOKIE_KEY)
    if not token:
        return None
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except JWTError:
        return None
    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        return None
    return user_id


async def require_user_id(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> str:
    """
    Like ``get_user_id`` but sends anonymous visitors to the login page.
    A token whose user no longer exists counts as anonymous.
    """
    user_id = await get_user_id(request)
    if not user_id or await db.get(User, user_id) is None:
        raise LoginRequired(redirect_to=request.url.path)
    return user_id


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Load the signed-in User, or None for anonymous visitors."""
    user_id = await get_user_id(request)
    if not user_id:
        return None
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def _find_user(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


def _login_page(
    request: Request,
    redirect_to: str,
    action_data: Optional[LoginActionData] = None,
    status_code: int = status.HTTP_200_OK,
):
    if action_data is not None and wants_json(request):
        return JSONResponse(action_data.to_payload(), status_code=status_code)
    return templates.TemplateResponse(
        request,
        "login.html",
        {
            "redirect_to": redirect_to,
            "action_data": action_data,
            "login_types": LOGIN_TYPES,
        },
        status_code=status_code,
    )


def _bad_request(request: Request, redirect_to: str, action_data: LoginActionData):
    return _login_page(request, redirect_to, action_data, status.HTTP_400_BAD_REQUEST)


# ═══════════════════════════════════════════════════════════════
#  Page routes
# ═══════════════════════════════════════════════════════════════

@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    """Render the login / register form."""
    redirect_to = validate_redirect_url(request.query_params.get("redirectTo"))
    return _login_page(request, redirect_to)


@router.post("/login")
async def login(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Log in an existing user or register a new one, then set the JWT cookie."""
    form = await request.form()
    login_type = form.get("loginType")
    username = form.get("username")
    password = form.get("password")
    raw_redirect = form.get("redirectTo")
    redirect_to = validate_redirect_url(raw_redirect if isinstance(raw_redirect, str) else None)

    if not all(isinstance(value, str) for value in (login_type, username, password)):
        return _bad_request(
            request, redirect_to, LoginActionData(form_error="Form not submitted correctly.")
        )

    fields = LoginFields(login_type=login_type, username=username, password=password)
    field_errors = LoginFieldErrors(
        username=validate_username(username),
        password=validate_password(password),
    )
    if field_errors.any():
        return _bad_request(
            request, redirect_to, LoginActionData(field_errors=field_errors, fields=fields)
        )

    if login_type == "login":
        user = await _find_user(db, username)
        if not user or not verify_password(password, user.password_hash):
            logger.info(f"Failed login for {username}")
            return _bad_request(
                request,
                redirect_to,
                LoginActionData(
                    form_error="Username/Password combination is incorrect", fields=fields
                ),
            )
    elif login_type == "register":
        user_exists = LoginActionData(
            form_error=f"User with username {username} already exists", fields=fields
        )
        if await _find_user(db, username):
            return _bad_request(request, redirect_to, user_exists)
        user = User(username=username, password_hash=hash_password(password))
        db.add(user)
        try:
            await db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same name.
            await db.rollback()
            return _bad_request(request, redirect_to, user_exists)
        logger.info(f"Registered user {username} ({user.id})")
    else:
        return _bad_request(
            request, redirect_to, LoginActionData(form_error="Login type invalid", fields=fields)
        )

    response = RedirectResponse(url=redirect_to, status_code=status.HTTP_303_SEE_OTHER)
    return _set_auth_cookie(response, user.id)


# ═══════════════════════════════════════════════════════════════
#  Logout
# ═══════════════════════════════════════════════════════════════

@router.post("/logout")
async def logout():
    """Clear the auth cookie and return to the login page."""
    response = RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(key=COOKIE_KEY)
    return response


@router.get("/logout")
async def logout_page():
    return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
