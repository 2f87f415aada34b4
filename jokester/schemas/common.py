"""Shared Pydantic base for form payloads sent back as camelCase JSON."""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = {"alias_generator": to_camel, "populate_by_name": True}
