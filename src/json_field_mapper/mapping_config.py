"""Validated shape of a json field mapping definition.

A mapping definition arrives as a flat dict, e.g.::

    {"type": "json", "ignore_above": 256, "null_value": "NULL"}

This module only checks types and shape. Whether a setting is allowed for a
json field is decided by the mapper builder, so a directive such as ``store``
is accepted here and rejected there with a field-specific message.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from json_field_mapper.mapper.emitter import IGNORE_ABOVE_UNBOUNDED
from json_field_mapper.mapper.field_type import IndexOptions


class JsonFieldMappingConfig(BaseModel):
    """Settings accepted in a json field mapping."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: Literal["json"] = "json"
    index: bool = Field(default=True, description="Index the field at all")
    index_options: IndexOptions = Field(default=IndexOptions.DOCS, description="Per-term detail to record")
    ignore_above: int = Field(
        default=IGNORE_ABOVE_UNBOUNDED,
        description="Leaf values longer than this are not indexed",
    )
    null_value: str | None = Field(default=None, description="Text indexed in place of explicit nulls")
    split_queries_on_whitespace: bool = Field(
        default=False,
        description="Split query text on whitespace before matching",
    )
    store: bool | None = None
    multi_fields: dict[str, Any] | None = Field(default=None, alias="fields")
    copy_to: list[str] | str | None = None

    @model_validator(mode="before")
    @classmethod
    def _reject_explicit_null_value(cls, data: Any) -> Any:
        if isinstance(data, dict) and "null_value" in data and data["null_value"] is None:
            raise ValueError("Property [null_value] cannot be null.")
        return data

    @field_validator("ignore_above", mode="before")
    @classmethod
    def _reject_boolean_threshold(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError(f"[ignore_above] must be an integer, got {str(value).lower()}")
        return value

    @field_validator("null_value", mode="before")
    @classmethod
    def _stringify_null_value(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return value
