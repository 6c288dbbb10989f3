"""
Record flattening.

Walks a record type's fields in declaration order and produces one
FieldDescriptor per leaf, keyed by dotted path:

    class Address(BaseModel):
        street1: str

    class Person(BaseModel):
        name: Annotated[str, Tags(request='name,required')]
        address: Address

    flatten_record(Person)
    # {'name': FieldDescriptor(label='Name', required=True, type='text'),
    #  'address.street1': FieldDescriptor(label='Address.Street1', required=False, type='text')}

Precedence rules:
- Fields of an Embedded record are spliced in at the same prefix; fields of
  the embedding record win any path they share.
- A nested record's expansion only adds paths; a path already loaded by an
  earlier field keeps its descriptor.
- A field whose type implements FieldDeclarer or InputTyper (at any level of
  Optional/Annotated indirection) is not dereferenced or recursed into.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from brewform.config import BrewformSettings, settings as default_settings
from brewform.exceptions import CyclicRecordError, UnsupportedKindError
from brewform.introspection import RecordField, dereference, indirections, is_record_type, record_fields
from brewform.kinds import ValueKind, input_kind, kind_of
from brewform.protocols import declares_fields, declares_input_type
from brewform.schemas import FieldDescriptor
from brewform.tags import FieldMetadata, field_metadata

__all__ = ['field_label', 'flatten_record']

logger = logging.getLogger(__name__)

# First word character after a non-word character (or at the start)
_WORD_START = re.compile(r'(?<!\w)(\w)')


def field_label(name: str) -> str:
    """Default label for a field path: underscores to spaces, each word capitalized.

    Only the first letter of each word changes: 'address.street1' -> 'Address.Street1'.
    """
    return _WORD_START.sub(lambda match: match.group(1).upper(), name.replace('_', ' '))


def flatten_record(
    record_type: type,
    prefix: str = '',
    *,
    settings: BrewformSettings | None = None,
) -> dict[str, FieldDescriptor]:
    """
    Derive the form fields of a record type.

    Args:
        record_type: Pydantic model, dataclass or attrs class
        prefix: Path prefix for every field ('' at the top level, else ending in '.')
        settings: Settings providing MAX_DEPTH (defaults to module settings)

    Returns:
        Mapping of dotted path to field descriptor, in declaration order

    Raises:
        UnsupportedKindError: If a leaf field's kind has no input type
        CyclicRecordError: If record_type contains itself or nests deeper than MAX_DEPTH
    """
    return _Flattener(settings or default_settings).flatten(record_type, prefix)


class _Flattener:
    """Single-use walker; tracks the record types on the current path."""

    def __init__(self, settings: BrewformSettings) -> None:
        self.max_depth = settings.MAX_DEPTH
        self._stack: list[type] = []

    def flatten(self, record_type: type, prefix: str) -> dict[str, FieldDescriptor]:
        if record_type in self._stack or len(self._stack) >= self.max_depth:
            raise CyclicRecordError(prefix.rstrip('.') or record_type.__name__, record_type)
        self._stack.append(record_type)
        try:
            return self._flatten_fields(record_type, prefix)
        finally:
            self._stack.pop()

    def _flatten_fields(self, record_type: type, prefix: str) -> dict[str, FieldDescriptor]:
        fields: dict[str, FieldDescriptor] = {}
        for field in record_fields(record_type):
            if field.embedded:
                # Fields already loaded from the embedding record win
                for path, descriptor in self._embedded(field, prefix).items():
                    fields.setdefault(path, descriptor)
                continue

            meta = field_metadata(field.identifier, field.tags)
            if meta.skipped:
                logger.debug('Skipping field %s.%s', record_type.__name__, field.identifier)
                continue
            descriptors, expanded = self._field(field, meta, prefix + meta.name)
            if expanded:
                # Record expansion never replaces paths loaded by earlier fields
                for path, descriptor in descriptors.items():
                    fields.setdefault(path, descriptor)
            else:
                fields.update(descriptors)
        return fields

    def _embedded(self, field: RecordField, prefix: str) -> dict[str, FieldDescriptor]:
        for level in indirections(field.annotation):
            if declares_fields(level):
                return dict(level.declare_form_fields(prefix))

        embedded_type = dereference(field.annotation)
        if not is_record_type(embedded_type):
            path = prefix + field.identifier.lower()
            raise UnsupportedKindError(path, str(kind_of(embedded_type)), _type_name(embedded_type))
        logger.debug('Merging embedded record %s at %r', embedded_type.__name__, prefix)
        return self.flatten(embedded_type, prefix)

    def _field(
        self, field: RecordField, meta: FieldMetadata, path: str
    ) -> tuple[dict[str, FieldDescriptor], bool]:
        """Descriptors for one field, and whether they expand it into several paths."""
        for level in indirections(field.annotation):
            if declares_fields(level):
                logger.debug('Field %s declares its own fields', path)
                return dict(level.declare_form_fields(path)), True
            if declares_input_type(level):
                sample = level.declare_input_type()
                value_type = sample if isinstance(sample, type) else type(sample)
                logger.debug('Field %s declares input type %s', path, value_type.__name__)
                return {path: _leaf(meta, path, value_type)}, False

        value_type = dereference(field.annotation)
        if is_record_type(value_type):
            return self.flatten(value_type, path + '.'), True
        return {path: _leaf(meta, path, value_type)}, False


def _leaf(meta: FieldMetadata, path: str, value_type: Any) -> FieldDescriptor:
    kind = kind_of(value_type)
    if kind is ValueKind.RECORD:
        # Only reachable through a declared input type; records are never leaves
        raise UnsupportedKindError(path, str(kind), _type_name(value_type))
    options = {key: value for key, value in meta.options.items() if key not in ('label', 'required')}
    return FieldDescriptor(
        label=meta.label() or field_label(path),
        required=meta.required(),
        type=input_kind(kind, path=path, type_name=_type_name(value_type)),
        options=options,
    )


def _type_name(tp: Any) -> str:
    return getattr(tp, '__name__', None) or repr(tp)
