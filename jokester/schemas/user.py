"""User Pydantic schemas — login form payloads and validators."""

from typing import Optional

from jokester.schemas.common import CamelModel

LOGIN_TYPES = ("login", "register")


def validate_username(username: str) -> Optional[str]:
    if len(username) < 3:
        return "Usernames must be at least 3 characters long"
    return None


def validate_password(password: str) -> Optional[str]:
    if len(password) < 6:
        return "Passwords must be at least 6 characters long"
    return None


def validate_redirect_url(url: Optional[str], default: str = "/jokes") -> str:
    """Only allow local absolute paths (no backslashes); anything else falls back to ``default``."""
    if not url or not url.startswith("/") or url.startswith("//") or "\\" in url:
        return default
    return url


class LoginFieldErrors(CamelModel):
    username: Optional[str] = None
    password: Optional[str] = None

    def any(self) -> bool:
        return bool(self.username or self.password)


class LoginFields(CamelModel):
    login_type: str
    username: str
    password: str


class LoginActionData(CamelModel):
    """Failure payload of the login action."""
    form_error: Optional[str] = None
    field_errors: Optional[LoginFieldErrors] = None
    fields: Optional[LoginFields] = None

    def to_payload(self) -> dict:
        # The password is never echoed back.
        return self.model_dump(
            by_alias=True, exclude_none=True, exclude={"fields": {"password"}}
        )
