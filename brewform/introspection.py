"""
Record type introspection.

Lists the declared fields of pydantic models, dataclasses and attrs classes
in declaration order, and unwraps the indirections around a field's type
(Annotated metadata, type aliases, NewType, ``X | None``).
"""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Iterator
from typing import Annotated, Any, Union, get_args, get_origin

import attrs
import pydantic

from brewform.markers import Embedded, Tags

__all__ = [
    'RecordField',
    'dereference',
    'indirections',
    'is_record_type',
    'record_fields',
]

# json_schema_extra keys accepted in place of a Tags marker on pydantic fields
_TAG_KEYS = ('request', 'response', 'db')


@attrs.define(frozen=True)
class RecordField:
    """One declared field of a record type."""

    identifier: str
    annotation: Any
    metadata: tuple[Any, ...] = ()

    @property
    def tags(self) -> Tags | None:
        for item in self.metadata:
            if isinstance(item, Tags):
                return item
        return None

    @property
    def embedded(self) -> bool:
        return any(isinstance(item, Embedded) for item in self.metadata)


def is_record_type(tp: Any) -> bool:
    """True for pydantic model classes, dataclasses and attrs classes."""
    if not isinstance(tp, type):
        return False
    return issubclass(tp, pydantic.BaseModel) or dataclasses.is_dataclass(tp) or attrs.has(tp)


def record_fields(record_type: type) -> list[RecordField]:
    """
    Declared fields of a record type, in declaration order.

    Args:
        record_type: Pydantic model, dataclass or attrs class

    Returns:
        Fields with their annotation and Annotated metadata

    Raises:
        TypeError: If record_type is not a record type
    """
    if isinstance(record_type, type) and issubclass(record_type, pydantic.BaseModel):
        return [_pydantic_field(name, info) for name, info in record_type.model_fields.items()]

    if dataclasses.is_dataclass(record_type):
        names = [field.name for field in dataclasses.fields(record_type)]
    elif attrs.has(record_type):
        names = [field.name for field in attrs.fields(record_type)]
    else:
        raise TypeError(f'{record_type!r} is not a record type')

    hints = typing.get_type_hints(record_type, include_extras=True)
    return [_annotated_field(name, hints.get(name, Any)) for name in names]


def _pydantic_field(name: str, info: pydantic.fields.FieldInfo) -> RecordField:
    # Pydantic moves Annotated metadata into FieldInfo.metadata
    metadata = tuple(info.metadata)
    extra = info.json_schema_extra
    if isinstance(extra, dict) and not any(isinstance(item, Tags) for item in metadata):
        values = {key: extra[key] for key in _TAG_KEYS if isinstance(extra.get(key), str)}
        if values:
            metadata += (Tags(**values),)
    return RecordField(name, info.annotation, metadata)


def _annotated_field(name: str, annotation: Any) -> RecordField:
    if get_origin(annotation) is Annotated:
        base, *metadata = get_args(annotation)
        return RecordField(name, base, tuple(metadata))
    return RecordField(name, annotation)


def _is_union(tp: Any) -> bool:
    origin = get_origin(tp)
    return origin is Union or origin is types.UnionType


def _unwrap(tp: Any) -> Any | None:
    """One level of indirection removed, or None when tp is not indirect."""
    if get_origin(tp) is Annotated:
        return get_args(tp)[0]

    # Python 3.12+ type alias
    if hasattr(tp, '__value__'):
        return tp.__value__

    if hasattr(tp, '__supertype__'):
        return tp.__supertype__

    if _is_union(tp):
        members = [arg for arg in get_args(tp) if arg is not type(None)]
        if len(members) == 1:
            return members[0]

    return None


def indirections(tp: Any) -> Iterator[Any]:
    """Yield tp and each type reached by unwrapping it, outermost first."""
    while tp is not None:
        yield tp
        tp = _unwrap(tp)


def dereference(tp: Any) -> Any:
    """The innermost non-indirect type behind tp."""
    for level in indirections(tp):
        tp = level
    return tp
