"""
Value kind classification and form input type mapping.

kind_of() reduces a dereferenced Python type to a ValueKind; input_kind()
maps the primitive kinds to form input types:

    bool            -> checkbox
    int, float      -> number
    str             -> text

Every other kind fails with UnsupportedKindError. Records are expanded by the
flattener before a leaf ever reaches input_kind().
"""

from __future__ import annotations

import asyncio
import collections.abc
import enum
import numbers
import queue
from decimal import Decimal
from fractions import Fraction
from typing import Any, Literal, get_args, get_origin

from brewform.exceptions import UnsupportedKindError
from brewform.introspection import is_record_type
from brewform.schemas import InputKind

__all__ = ['ValueKind', 'input_kind', 'kind_of']


class ValueKind(enum.StrEnum):
    BOOL = 'bool'
    INT = 'int'
    FLOAT = 'float'
    COMPLEX = 'complex'
    STR = 'str'
    SEQUENCE = 'sequence'
    MAPPING = 'mapping'
    CALLABLE = 'callable'
    CHANNEL = 'channel'
    RECORD = 'record'
    UNKNOWN = 'unknown'


INPUT_KINDS: dict[ValueKind, InputKind] = {
    ValueKind.BOOL: 'checkbox',
    ValueKind.INT: 'number',
    ValueKind.FLOAT: 'number',
    ValueKind.STR: 'text',
}

_CHANNEL_TYPES: tuple[type, ...] = (queue.Queue, queue.SimpleQueue, asyncio.Queue)

# Checked in order; bool before int, str before Sequence
_KIND_BY_CLASS: tuple[tuple[type, ValueKind], ...] = (
    (bool, ValueKind.BOOL),
    (numbers.Integral, ValueKind.INT),
    (float, ValueKind.FLOAT),
    (Decimal, ValueKind.FLOAT),
    (Fraction, ValueKind.FLOAT),
    (numbers.Real, ValueKind.FLOAT),
    (numbers.Complex, ValueKind.COMPLEX),
    (str, ValueKind.STR),
    (bytes, ValueKind.SEQUENCE),
    (bytearray, ValueKind.SEQUENCE),
    (collections.abc.Mapping, ValueKind.MAPPING),
    (collections.abc.Sequence, ValueKind.SEQUENCE),
    (collections.abc.Set, ValueKind.SEQUENCE),
    (_CHANNEL_TYPES, ValueKind.CHANNEL),
)


def kind_of(tp: Any) -> ValueKind:
    """
    Classify a dereferenced type.

    Args:
        tp: A class or a typing form such as list[int] or Literal['a', 'b']

    Returns:
        The ValueKind of tp; UNKNOWN when nothing matches
    """
    origin = get_origin(tp)
    if origin is Literal:
        kinds = {kind_of(type(value)) for value in get_args(tp)}
        return kinds.pop() if len(kinds) == 1 else ValueKind.UNKNOWN
    if origin is collections.abc.Callable:
        return ValueKind.CALLABLE
    if origin is not None:
        # Parameterized generics (list[int], dict[str, int], ...) classify by origin
        tp = origin

    if not isinstance(tp, type):
        return ValueKind.UNKNOWN
    if is_record_type(tp):
        return ValueKind.RECORD
    for cls, kind in _KIND_BY_CLASS:
        if issubclass(tp, cls):
            return kind
    if issubclass(tp, collections.abc.Callable):
        return ValueKind.CALLABLE
    return ValueKind.UNKNOWN


def input_kind(kind: ValueKind, *, path: str, type_name: str | None = None) -> InputKind:
    """
    Map a value kind to its form input type.

    Args:
        kind: Kind of the leaf value
        path: Dotted path of the field, reported on failure
        type_name: Name of the offending type, reported on failure

    Raises:
        UnsupportedKindError: If kind has no input type
    """
    try:
        return INPUT_KINDS[kind]
    except KeyError:
        raise UnsupportedKindError(path, str(kind), type_name) from None
