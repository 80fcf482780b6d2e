"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Pluggable schema validators.

The client only relies on ``parse(value) -> T`` raising on mismatch. Pydantic
models and type adapters are wrapped so they satisfy the same contract.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

from pydantic import BaseModel, TypeAdapter

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Validator(Protocol[T_co]):
    """Validation capability accepted anywhere a schema is expected."""

    def parse(self, value: Any) -> T_co: ...


@dataclass(frozen=True, slots=True)
class ModelValidator(Generic[T]):
    """Adapt a pydantic ``BaseModel`` subclass to ``Validator``."""

    model: type[T]

    def parse(self, value: Any) -> T:
        return self.model.model_validate(value)  # type: ignore[attr-defined]


@dataclass(frozen=True, slots=True)
class AdapterValidator(Generic[T]):
    """Adapt a pydantic ``TypeAdapter`` to ``Validator``."""

    adapter: TypeAdapter[T]

    def parse(self, value: Any) -> T:
        return self.adapter.validate_python(value)


def as_validator(schema: Any) -> Validator[Any]:
    """Normalize a schema-like object into a ``Validator``."""
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return ModelValidator(schema)
    if isinstance(schema, TypeAdapter):
        return AdapterValidator(schema)
    if callable(getattr(schema, "parse", None)):
        return schema
    raise TypeError(
        f"Unsupported schema {schema!r}: expected a pydantic model, "
        "a TypeAdapter or an object exposing parse()"
    )


def validate(schema: Any, value: Any) -> Any:
    """Run ``value`` through ``schema`` and return the parsed result."""
    return as_validator(schema).parse(value)


def to_plain_mapping(value: Any) -> dict[str, Any]:
    """Turn validated params (model or mapping) into a plain dict without None values."""
    if isinstance(value, BaseModel):
        value = value.model_dump(by_alias=True, exclude_none=True)
    if not isinstance(value, Mapping):
        raise TypeError(f"Query params must be a mapping, got {type(value).__name__}")
    return {str(k): v for k, v in value.items() if v is not None}


def encode_json_body(data: Any) -> bytes:
    """Serialize a request body; pydantic models are dumped in JSON mode."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(data, ensure_ascii=False, default=str).encode("utf-8")
