"""Shared schema base classes."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model speaking the school backend's camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
