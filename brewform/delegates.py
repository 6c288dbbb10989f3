"""
Delegate serializers.

The form codec only decides the structure of a response; a delegate turns
that structure into bytes for the negotiated '+suffix' format.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

import yaml

from brewform.config import settings
from brewform.exceptions import DelegateMarshalError

__all__ = ['DelegateSerializer', 'JsonDelegate', 'YamlDelegate']


@runtime_checkable
class DelegateSerializer(Protocol):
    """Protocol for serializers the form codec delegates byte encoding to."""

    def marshal(self, value: Any, options: Mapping[str, Any] | None = None) -> bytes:
        """
        Encode a structured value (dicts, lists, str, bool, numbers).

        Raises:
            DelegateMarshalError: If the value cannot be encoded
        """
        ...


class JsonDelegate:
    """application/json delegate."""

    mime_type = 'application/json'

    def __init__(self, indent: int | None = None) -> None:
        self.indent = indent

    def marshal(self, value: Any, options: Mapping[str, Any] | None = None) -> bytes:
        # Caller options first, then this delegate, then module settings
        indent = options.get('indent') if options else None
        if indent is None:
            indent = self.indent
        if indent is None:
            indent = settings.JSON_INDENT
        try:
            return json.dumps(value, indent=indent, ensure_ascii=False).encode('utf-8')
        except (TypeError, ValueError) as e:
            raise DelegateMarshalError(self.mime_type, str(e)) from e


class YamlDelegate:
    """application/yaml delegate."""

    mime_type = 'application/yaml'

    def marshal(self, value: Any, options: Mapping[str, Any] | None = None) -> bytes:
        try:
            text = yaml.safe_dump(value, sort_keys=False, allow_unicode=True)
        except yaml.YAMLError as e:
            raise DelegateMarshalError(self.mime_type, str(e)) from e
        return text.encode('utf-8')
