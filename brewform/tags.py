"""
Field annotation parsing.

A request tag is ``name[,key[=value]]*``:

    >>> parse_tag('addr,label=Street,required')
    FieldMetadata(name='addr', options=mappingproxy({'label': 'Street', 'required': True}))

An empty name falls back to the response tag, then the db tag, then the
lower-cased field identifier. A request name of '-' skips the field.
"""

from __future__ import annotations

import functools
from collections.abc import Mapping
from types import MappingProxyType

import attrs

from brewform.markers import Tags

__all__ = ['SKIP', 'FieldMetadata', 'field_metadata', 'parse_tag']

SKIP = '-'


def _freeze(options: Mapping[str, str | bool]) -> Mapping[str, str | bool]:
    return MappingProxyType(dict(options))


@attrs.define(frozen=True)
class FieldMetadata:
    """Resolved name and options for one field."""

    name: str
    options: Mapping[str, str | bool] = attrs.field(factory=dict, converter=_freeze)

    @property
    def skipped(self) -> bool:
        return self.name == SKIP

    def label(self) -> str | None:
        label = self.options.get('label')
        return label if isinstance(label, str) else None

    def required(self) -> bool:
        required = self.options.get('required', False)
        if isinstance(required, str):
            return required.lower() == 'true'
        return required


@functools.lru_cache(maxsize=1024)
def parse_tag(tag: str) -> FieldMetadata:
    """Split a request tag into its name override and options.

    Segments without '=' are flags set to True; values split on the first '='.
    """
    name, *segments = tag.split(',')
    options: dict[str, str | bool] = {}
    for segment in segments:
        key, sep, value = segment.partition('=')
        options[key] = value if sep else True
    return FieldMetadata(name, options)


@functools.lru_cache(maxsize=1024)
def field_metadata(identifier: str, tags: Tags | None = None) -> FieldMetadata:
    """
    Resolve a field's form name and options.

    Args:
        identifier: Declared attribute name of the field
        tags: Naming annotations attached to the field, if any

    Returns:
        FieldMetadata whose name is the skip sentinel when the field must be omitted
    """
    tags = tags or Tags()
    parsed = parse_tag(tags.request)
    if parsed.name:
        return parsed

    name = ''
    for candidate in (tags.response, tags.db, identifier.lower()):
        if not candidate:
            continue
        name = candidate.split(',', 1)[0]
        # Only the request tag can skip a field
        if name and name != SKIP:
            break
    return FieldMetadata(name, parsed.options)
