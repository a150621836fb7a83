# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Shared pydantic bases: camelCase on the wire, snake_case in Python."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    # Requests accept both "firstName" and "first_name"; responses emit camelCase
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(ApiModel):
    success: bool = True
    message: str
    data: Optional[Any] = None


def ok(message: str, data=None) -> dict:
    """
    Success envelope for endpoints without a typed response model.  Any
    pydantic models in *data* are dumped with their camelCase aliases.
    """
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True, mode="json")
    elif isinstance(data, list):
        data = [d.model_dump(by_alias=True, mode="json") if isinstance(d, BaseModel) else d for d in data]
    return {"success": True, "message": message, "data": data}
