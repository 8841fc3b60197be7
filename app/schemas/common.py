"""Shared API schema pieces: camelCase models and the success envelope."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Fields are snake_case in Python and camelCase on the wire (both accepted on input)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(CamelModel, Generic[T]):
    """Success envelope: {success, statusCode, message, data}."""

    success: bool = True
    status_code: int = Field(default=200)
    message: str
    data: T | None = None


def ok(message: str, data: Any = None, status_code: int = 200) -> ApiResponse[Any]:
    return ApiResponse(success=True, status_code=status_code, message=message, data=data)
