"""Pydantic base model for ArangoDB request options and response payloads."""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ArangoModel(BaseModel):
    """Model whose fields map to camelCase JSON keys.

    Fields are populated from either spelling, unknown keys returned by newer
    servers are kept, and ``to_body()`` renders the wire representation
    without unset (``None``) values.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        use_enum_values=True,
        protected_namespaces=(),
    )

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    @classmethod
    def from_response(cls, data: Any) -> Self:
        return cls.model_validate(data or {})


def dump_options(options: ArangoModel | dict[str, Any] | None) -> dict[str, Any]:
    """Render options passed either as a model or as a plain dict."""
    if options is None:
        return {}
    if isinstance(options, ArangoModel):
        return options.to_body()
    return dict(options)


__all__ = ["ArangoModel", "dump_options"]
