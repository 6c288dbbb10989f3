"""
Form descriptors for typed records.

Derives the form one should use for user input of a record type (pydantic
model, dataclass or attrs class) and serializes it for the
application/vnd.brewnet.form MIME type.
"""

from __future__ import annotations

from brewform.assembler import MarshalOptions, assemble_form, form_fields
from brewform.codec import FormCodec
from brewform.exceptions import (
    BrewformError,
    CodecError,
    CyclicRecordError,
    DelegateMarshalError,
    DelegateResolutionError,
    DerivationError,
    NonStructureTopLevelError,
    UnmarshalNotImplementedError,
    UnsupportedKindError,
)
from brewform.flatten import flatten_record
from brewform.markers import Embedded, Tags
from brewform.protocols import FieldDeclarer, InputTyper, Pather
from brewform.registry import CodecRegistry, get_codec_registry, set_codec_registry
from brewform.schemas import FieldDescriptor, FormDescriptor, InputKind

__all__ = [
    # Records
    'Embedded',
    'Tags',
    'FieldDeclarer',
    'InputTyper',
    'Pather',
    # Derivation
    'MarshalOptions',
    'assemble_form',
    'flatten_record',
    'form_fields',
    'FieldDescriptor',
    'FormDescriptor',
    'InputKind',
    # Codec
    'FormCodec',
    'CodecRegistry',
    'get_codec_registry',
    'set_codec_registry',
    # Errors
    'BrewformError',
    'DerivationError',
    'UnsupportedKindError',
    'NonStructureTopLevelError',
    'CyclicRecordError',
    'CodecError',
    'DelegateResolutionError',
    'DelegateMarshalError',
    'UnmarshalNotImplementedError',
]
