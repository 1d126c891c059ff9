"""Shared pydantic base for camelCase wire models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Wire format is camelCase (``correctAnswerIndex``); Python code uses
    snake_case. Both spellings are accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
