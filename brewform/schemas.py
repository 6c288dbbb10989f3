"""
Form descriptor schemas.

FormDescriptor is the value handed to delegate serializers, as the plain
structure returned by as_structured():

    {
        'action': 'https://example.com/people',
        'method': 'POST',
        'fields': {
            'name': {'label': 'Name', 'required': True, 'type': 'text'},
            'address.street1': {'label': 'Address.Street1', 'required': False, 'type': 'text'},
        },
    }
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

import pydantic

# Semantic HTML input types a field can map to
InputKind = Literal['checkbox', 'number', 'text']

# Reserved descriptor keys; options never override these
CORE_FIELD_KEYS = frozenset({'label', 'required', 'type'})


class StrictModel(pydantic.BaseModel):
    """Base model with strict validation settings."""

    model_config = pydantic.ConfigDict(
        extra='forbid',  # Reject unknown fields (fail-fast)
        strict=True,  # Strict type validation
        frozen=True,  # Immutable after creation
    )


class FieldDescriptor(StrictModel):
    """Normalized metadata for one input field of a form."""

    label: str
    required: bool = False
    type: InputKind
    options: Mapping[str, str | bool] = pydantic.Field(default_factory=dict)  # Extension options from the tag

    def as_structured(self) -> dict[str, Any]:
        structured: dict[str, Any] = {key: value for key, value in self.options.items() if key not in CORE_FIELD_KEYS}
        structured['label'] = self.label
        structured['required'] = self.required
        structured['type'] = self.type
        return structured


class FormDescriptor(StrictModel):
    """
    A form for entering a value of some record type.

    fields is keyed by dotted path, in declaration order (depth first).
    """

    action: str
    method: str
    fields: Mapping[str, FieldDescriptor]

    def as_structured(self) -> dict[str, Any]:
        """Plain dict/str/bool structure for delegate serializers."""
        return {
            'action': self.action,
            'method': self.method,
            'fields': {path: field.as_structured() for path, field in self.fields.items()},
        }

    def as_field_list(self) -> list[dict[str, Any]]:
        """List form of fields, each entry carrying its path as 'id'."""
        return [{'id': path, **field.as_structured()} for path, field in self.fields.items()]
