"""
Capabilities a record type can implement to customize its form.

- FieldDeclarer: supplies its own fields instead of automatic derivation.
- InputTyper: a field type that reports the kind of value it accepts.
- Pather: a record that knows the URL its form submits to.

FieldDeclarer and InputTyper are checked on classes, so their methods are
classmethods. Pather is checked on the instance being marshaled.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from brewform.schemas import FieldDescriptor


@runtime_checkable
class FieldDeclarer(Protocol):
    """A record type that declares its own form fields."""

    @classmethod
    def declare_form_fields(cls, prefix: str) -> Mapping[str, FieldDescriptor]:
        """
        Fields for this type, keyed by full dotted path.

        Args:
            prefix: Path of the field being declared ('' at the top level)
        """
        ...


@runtime_checkable
class InputTyper(Protocol):
    """A field type whose input kind is that of a substitute value."""

    @classmethod
    def declare_input_type(cls) -> Any:
        """A sample value (or a type) whose kind is used for this field."""
        ...


@runtime_checkable
class Pather(Protocol):
    """A record that supplies its own form action."""

    def form_path(self) -> str: ...


def declares_fields(tp: Any) -> bool:
    return isinstance(tp, type) and isinstance(tp, FieldDeclarer)


def declares_input_type(tp: Any) -> bool:
    return isinstance(tp, type) and isinstance(tp, InputTyper)
