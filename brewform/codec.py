"""
Codec for application/vnd.brewnet.form.

When requesting this codec, include a sub-format to use for converting to
bytes - the form codec only decides the structure of the response. Most
clients want "application/vnd.brewnet.form+json" in their Accept header.

Any data using this MIME type has the URL to send data to (action) and the
method to use (method) at the top level, next to the fields used to build
the form. The key of each field is the name to use when sending form data;
each field carries at least a label and an input type:

    "checkbox": <input type="checkbox">
    "number": <input type="number">
    "text": <input type="text">
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import attrs

from brewform.assembler import MarshalOptions, assemble_form
from brewform.config import BrewformSettings, settings as default_settings
from brewform.exceptions import UnmarshalNotImplementedError
from brewform.mime import MimeType, base_type
from brewform.registry import CodecRegistry, get_codec_registry

__all__ = ['FormCodec']

logger = logging.getLogger(__name__)

FILE_EXTENSION = '.brewform'


class FormCodec:
    """
    Marshals any record into the form one should use for user input of it.

    Unmarshaling submitted form data is not supported.
    """

    def __init__(
        self,
        domain: str = '',
        *,
        registry: CodecRegistry | None = None,
        matched_type: MimeType | None = None,
        settings: BrewformSettings | None = None,
    ) -> None:
        """
        Initialize form codec.

        Args:
            domain: Scheme and host forms submit to
            registry: Delegate registry; the process-wide registry when None
            matched_type: Negotiated MIME type this codec was bound to
            settings: Settings; module settings when None
        """
        self.domain = domain
        self.matched_type = matched_type
        self.settings = settings or default_settings
        self._registry = registry

    @property
    def registry(self) -> CodecRegistry:
        return self._registry if self._registry is not None else get_codec_registry()

    @property
    def mime_category(self) -> str:
        return 'application'

    @property
    def mime_name(self) -> str:
        return f'vnd.{self.settings.PRODUCT}.form'

    @property
    def base_mime_type(self) -> str:
        return self.settings.base_mime_type

    def content_type(self) -> str:
        return f'{self.base_mime_type}+{self.settings.DEFAULT_SUBFORMAT}'

    def file_extension(self) -> str:
        return FILE_EXTENSION

    def can_marshal_with_callback(self) -> bool:
        return True

    def types(self) -> list[MimeType]:
        """Full MIME types this codec can produce."""
        return [MimeType(self.mime_category, self.mime_name, suffix) for suffix in self._suffixes()]

    def _suffixes(self) -> list[str]:
        suffixes = []
        for mime_type in self.registry.mime_types():
            category, _, name = mime_type.partition('/')
            if category == self.mime_category and name not in suffixes:
                suffixes.append(name)
        return suffixes

    def content_type_supported(self, content_type: str) -> bool:
        """True when content_type is this codec's base type, with any '+suffix'."""
        return base_type(content_type) == self.base_mime_type

    def bind(self, matched: MimeType) -> FormCodec | None:
        """
        A codec for one negotiated MIME type.

        Returns:
            New codec bound to matched, or None if matched is not a form type
        """
        if matched.category != self.mime_category:
            return None
        if matched.name not in ('*', self.mime_name):
            return None
        return FormCodec(self.domain, registry=self._registry, matched_type=matched, settings=self.settings)

    def delegate_mime(self, matched_type: str | MimeType | None = None) -> str:
        """MIME type of the delegate for a negotiated type: its suffix under 'application/'."""
        if isinstance(matched_type, str):
            matched_type = MimeType.parse(matched_type)
        matched_type = matched_type or self.matched_type
        suffix = matched_type.suffix if matched_type is not None else None
        if not suffix or suffix == '*':
            suffix = self.settings.DEFAULT_SUBFORMAT
        return f'{self.mime_category}/{suffix}'

    def example(self) -> dict[str, Any]:
        return {
            'action': 'https://path/to/endpoint',
            'method': self.settings.DEFAULT_METHOD,
            'fields': {
                'name': {'label': 'Name', 'required': True, 'type': 'text'},
                'address.street1': {'label': 'Address Line 1', 'required': False, 'type': 'text'},
                'address.street2': {'label': 'Address Line 2', 'required': False, 'type': 'text'},
            },
        }

    def _options(self, options: MarshalOptions | Mapping[str, Any] | None) -> MarshalOptions:
        if options is None:
            options = MarshalOptions()
        elif not isinstance(options, MarshalOptions):
            options = MarshalOptions(
                domain=options.get('domain', ''),
                request_path=options.get('request_path', ''),
                http_method=options.get('http_method'),
                matched_type=options.get('matched_type'),
            )
        if not options.domain and self.domain:
            options = attrs.evolve(options, domain=self.domain)
        if options.matched_type is None and self.matched_type is not None:
            options = attrs.evolve(options, matched_type=str(self.matched_type))
        return options

    def marshal(self, record: Any, options: MarshalOptions | Mapping[str, Any] | None = None) -> bytes:
        """
        Bytes describing the form to use for entering a value of record's type.

        Args:
            record: Record instance or record type
            options: Request context (MarshalOptions or an equivalent mapping)

        Raises:
            DerivationError: If no form can be derived for record
            DelegateResolutionError: If no delegate handles the negotiated suffix
            DelegateMarshalError: Propagated from the delegate
        """
        options = self._options(options)
        descriptor = assemble_form(record, options, settings=self.settings)
        delegate_mime = self.delegate_mime(options.matched_type)
        delegate = self.registry.resolve(delegate_mime)
        logger.debug('Marshaling %d form fields with %s delegate', len(descriptor.fields), delegate_mime)
        return delegate.marshal(
            descriptor.as_structured(),
            {'matched_type': options.matched_type, 'indent': self.settings.JSON_INDENT},
        )

    def unmarshal(self, data: bytes, target: Any) -> None:
        """Not supported; always raises UnmarshalNotImplementedError."""
        raise UnmarshalNotImplementedError()
