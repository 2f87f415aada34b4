"""Joke Pydantic schemas and the new-joke field validators."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from jokester.schemas.common import CamelModel

# The messages lag the checks by one character; kept as shipped.
NAME_TOO_SHORT = "That joke's name is too short. Min 3 characters"
CONTENT_TOO_SHORT = "That joke's content is too short. Min 10 characters"
FORM_NOT_SUBMITTED = "Form not submitted correctly. Name and Content are required."


def validate_joke_name(name: str) -> Optional[str]:
    if len(name) < 2:
        return NAME_TOO_SHORT
    return None


def validate_joke_content(content: str) -> Optional[str]:
    if len(content) < 11:
        return CONTENT_TOO_SHORT
    return None


class JokeFieldErrors(CamelModel):
    name: Optional[str] = None
    content: Optional[str] = None

    def any(self) -> bool:
        return bool(self.name or self.content)


class JokeFields(CamelModel):
    name: str
    content: str


class JokeActionData(CamelModel):
    """Failure payload of the new-joke action, used to redisplay the form."""
    form_error: Optional[str] = None
    field_errors: Optional[JokeFieldErrors] = None
    fields: Optional[JokeFields] = None

    def to_payload(self) -> dict:
        """Wire shape: ``formError`` / ``fieldErrors`` / ``fields``, unset keys dropped."""
        return self.model_dump(by_alias=True, exclude_none=True)


class JokeOut(BaseModel):
    """Public joke representation."""
    id: str
    name: str
    content: str
    jokester_id: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
