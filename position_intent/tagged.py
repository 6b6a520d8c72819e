"""Base models for externally tagged variant types.

Encoded forms follow the order manager's wire format: a payload variant is a
single-key object ``{"<tag>": <payload>}`` and a unit variant is the bare
``"<tag>"`` string.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import (
    BaseModel,
    ConfigDict,
    SerializerFunctionWrapHandler,
    model_serializer,
    model_validator,
)
from pydantic_core import PydanticUndefined


class TaggedVariant(BaseModel):
    """Frozen variant value identified by its ``tag``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    tag: ClassVar[str]


class UnitVariant(TaggedVariant):
    """Variant without payload, encoded as its tag string."""

    @model_validator(mode="before")
    @classmethod
    def _unwrap_tag(cls, data: Any) -> Any:
        if isinstance(data, str) and data == cls.tag:
            return {}
        return data

    @model_serializer(mode="plain")
    def _serialize_tag(self) -> str:
        return self.tag

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class PayloadVariant(TaggedVariant):
    """Variant carrying one payload field, encoded as ``{tag: payload}``."""

    payload_field: ClassVar[str]

    def __init__(self, payload: Any = PydanticUndefined, /, **data: Any) -> None:
        # Positional payload, e.g. `Dollars(1)`; keyword and wire input go to the validators.
        if payload is not PydanticUndefined:
            data[type(self).payload_field] = payload
        super().__init__(**data)

    @model_validator(mode="before")
    @classmethod
    def _unwrap_tag(cls, data: Any) -> Any:
        if isinstance(data, dict) and set(data) == {cls.tag}:
            return {cls.payload_field: data[cls.tag]}
        return data

    @model_serializer(mode="wrap")
    def _serialize_tagged(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        return {self.tag: handler(self)[self.payload_field]}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({getattr(self, self.payload_field)!r})"


def variant_tag(value: Any) -> str | None:
    """Resolve the tag of a variant instance or of its encoded form."""
    if isinstance(value, TaggedVariant):
        return value.tag
    if isinstance(value, str):
        return value
    if isinstance(value, dict) and len(value) == 1:
        return next(iter(value))
    return None
