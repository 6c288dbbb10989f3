"""
Shared exceptions for brewform.

Exception Hierarchy:
    BrewformError (base)
    ├── DerivationError (form derivation failures)
    │   ├── UnsupportedKindError (leaf kind has no input type)
    │   ├── NonStructureTopLevelError (top-level value is not a record)
    │   └── CyclicRecordError (record type contains itself)
    └── CodecError (content negotiation and serialization failures)
        ├── DelegateResolutionError (no serializer for negotiated subtype)
        ├── DelegateMarshalError (raised by delegate serializers)
        └── UnmarshalNotImplementedError (form data parsing is not supported)
"""

from __future__ import annotations

from collections.abc import Sequence


class BrewformError(Exception):
    """Base exception for all brewform errors."""


class DerivationError(BrewformError):
    """Base exception for failures while deriving a form from a record type."""


class UnsupportedKindError(DerivationError):
    """Raised when a leaf field's value kind has no form input type."""

    def __init__(self, path: str, kind: str, type_name: str | None = None) -> None:
        self.path = path
        self.kind = kind
        self.type_name = type_name
        detail = f' ({type_name})' if type_name else ''
        super().__init__(f"Field '{path}' has unsupported kind '{kind}'{detail} for form input")


class NonStructureTopLevelError(DerivationError):
    """Raised when the value passed to marshal is not a record and declares no fields."""

    def __init__(self, value_type: object) -> None:
        self.value_type = value_type
        name = getattr(value_type, '__name__', repr(value_type))
        super().__init__(f'Cannot marshal non-record type {name} to a form')


class CyclicRecordError(DerivationError):
    """Raised when a record type is reached again while it is still being flattened."""

    def __init__(self, path: str, record_type: type) -> None:
        self.path = path
        self.record_type = record_type
        super().__init__(f"Record type {record_type.__name__} is cyclic or too deeply nested at field '{path}'")


class CodecError(BrewformError):
    """Base exception for codec negotiation and serialization failures."""


class DelegateResolutionError(CodecError):
    """Raised when no delegate serializer is registered for a MIME type."""

    def __init__(self, mime_type: str, available: Sequence[str] = ()) -> None:
        self.mime_type = mime_type
        self.available = list(available)
        available_str = ', '.join(self.available) or 'none'
        super().__init__(f"No delegate serializer registered for '{mime_type}' (available: {available_str})")


class DelegateMarshalError(CodecError):
    """Raised by a delegate serializer that cannot encode a value."""

    def __init__(self, mime_type: str, reason: str) -> None:
        self.mime_type = mime_type
        super().__init__(f'{mime_type} serializer failed: {reason}')


class UnmarshalNotImplementedError(CodecError, NotImplementedError):
    """Raised by every unmarshal call; parsing submitted forms is not supported."""

    def __init__(self) -> None:
        super().__init__('Unmarshal is not implemented for form descriptors')
