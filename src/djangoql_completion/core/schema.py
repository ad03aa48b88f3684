"""Introspection schema and dotted-name resolution.

The schema mirrors the JSON served by the DjangoQL introspection endpoint::

    {
        "current_model": "core.book",
        "models": {"core.book": {"author": {"type": "relation", "relation": "auth.user"}}},
        "suggestions_api_url": "/admin/core/book/suggestions/"
    }
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FieldType(str, Enum):
    """Field types understood by the completion engine."""

    INT = "int"
    FLOAT = "float"
    STR = "str"
    BOOL = "bool"
    DATE = "date"
    DATETIME = "datetime"
    RELATION = "relation"
    UNKNOWN = "unknown"


class FieldDef(BaseModel):
    """Definition of a single model field."""

    model_config = ConfigDict(frozen=True)

    type: FieldType = Field(default=FieldType.UNKNOWN, description="Field type")
    relation: Optional[str] = Field(default=None, description="Target model of a relation")
    options: Union[list[str], bool, None] = Field(
        default=None,
        description="Inline value list, or True when values come from the suggestions API",
    )
    nullable: bool = Field(default=False, description="Whether None is an acceptable value")

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> Any:
        if isinstance(value, FieldType):
            return value
        try:
            return FieldType(value)
        except ValueError:
            return FieldType.UNKNOWN

    @property
    def is_relation(self) -> bool:
        return self.type is FieldType.RELATION

    @property
    def has_remote_options(self) -> bool:
        return self.options is True

    @property
    def inline_options(self) -> Optional[list[str]]:
        if isinstance(self.options, list):
            return self.options
        return None

    @property
    def has_options(self) -> bool:
        """True for a list of values, even an empty one, or values served remotely."""
        return self.inline_options is not None or self.has_remote_options


class Schema(BaseModel):
    """Graph of models and their fields."""

    model_config = ConfigDict(frozen=True)

    current_model: Optional[str] = Field(default=None, description="Model the query starts from")
    models: dict[str, dict[str, FieldDef]] = Field(
        default_factory=dict, description="Field definitions keyed by model id"
    )
    suggestions_api_url: Optional[str] = Field(
        default=None, description="Endpoint serving paginated field values"
    )

    def get_field(self, model: Optional[str], field_name: Optional[str]) -> Optional[FieldDef]:
        """Return the definition of ``model.field_name`` if both are known."""
        if model is None or field_name is None:
            return None
        return self.models.get(model, {}).get(field_name)

    def with_current_model(self, model: str) -> "Schema":
        return self.model_copy(update={"current_model": model})


@dataclass(frozen=True, slots=True)
class ResolvedName:
    """Result of walking a dotted name through the schema."""

    model: Optional[str]
    field: Optional[str]
    model_stack: tuple[str, ...] = ()


def resolve_name(schema: Schema, name: str) -> ResolvedName:
    """Walk ``name`` (e.g. ``author.groups.user``) starting at the current model.

    Every relation segment moves to its target model and is pushed onto the
    model stack. A scalar segment becomes the resolved field. The first
    unknown segment, or a relation pointing at an undeclared model, aborts
    with ``model`` and ``field`` set to None.
    """
    model = schema.current_model
    field_name: Optional[str] = None
    stack: list[str] = []

    if model is None:
        return ResolvedName(model=None, field=None, model_stack=())

    stack.append(model)
    for part in name.split("."):
        field_def = schema.models.get(model, {}).get(part)
        if field_def is None:
            model = None
            field_name = None
            break
        if field_def.is_relation:
            if field_def.relation not in schema.models:
                model = None
                field_name = None
                break
            model = field_def.relation
            stack.append(model)
            field_name = None
        else:
            field_name = part

    return ResolvedName(model=model, field=field_name, model_stack=tuple(stack))
