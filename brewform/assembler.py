"""
Form descriptor assembly.

Builds the top level of a form: where it submits (action), how (method),
and its fields.
"""

from __future__ import annotations

import logging
from typing import Any, get_origin

import attrs

from brewform.config import BrewformSettings, settings as default_settings
from brewform.exceptions import NonStructureTopLevelError
from brewform.flatten import flatten_record
from brewform.introspection import dereference, indirections, is_record_type
from brewform.mime import MimeType
from brewform.protocols import Pather, declares_fields
from brewform.schemas import FieldDescriptor, FormDescriptor

__all__ = ['MarshalOptions', 'assemble_form', 'form_fields']

logger = logging.getLogger(__name__)


@attrs.define(frozen=True)
class MarshalOptions:
    """
    Caller-supplied request context for one marshal call.

    domain: scheme and host the form submits to, e.g. 'https://example.com/'
    request_path: path of the current request, appended to domain
    http_method: explicit method, overriding everything else
    matched_type: negotiated content type, e.g. 'application/vnd.brewnet.form+json; method=PUT'
    """

    domain: str = ''
    request_path: str = ''
    http_method: str | None = None
    matched_type: str | None = None


def _is_type_form(value: Any) -> bool:
    return isinstance(value, type) or get_origin(value) is not None or hasattr(value, '__value__')


def form_fields(record: Any, *, settings: BrewformSettings | None = None) -> dict[str, FieldDescriptor]:
    """
    Fields of the form for a record instance or record type.

    Raises:
        NonStructureTopLevelError: If record is not a record and declares no fields
        UnsupportedKindError: If a leaf field's kind has no input type
    """
    target = record if _is_type_form(record) else type(record)
    for level in indirections(target):
        if declares_fields(level):
            logger.debug('%s declares its own fields', level.__name__)
            return dict(level.declare_form_fields(''))

    record_type = dereference(target)
    if not is_record_type(record_type):
        raise NonStructureTopLevelError(record_type)
    return flatten_record(record_type, settings=settings)


def _method(options: MarshalOptions, settings: BrewformSettings) -> str:
    if options.http_method:
        return options.http_method
    if options.matched_type:
        method = MimeType.parse(options.matched_type).params.get('method')
        if method:
            return method
    return settings.DEFAULT_METHOD


def _action(record: Any, options: MarshalOptions) -> str:
    if not _is_type_form(record) and isinstance(record, Pather):
        return record.form_path()
    domain = options.domain
    if domain.endswith('/'):
        domain = domain[:-1]
    return domain + options.request_path


def assemble_form(
    record: Any,
    options: MarshalOptions | None = None,
    *,
    settings: BrewformSettings | None = None,
) -> FormDescriptor:
    """
    Build the form descriptor for a record.

    Args:
        record: Record instance (or record type) to build a form for
        options: Request context; defaults to an empty domain and path
        settings: Settings providing DEFAULT_METHOD and MAX_DEPTH

    Returns:
        A new FormDescriptor

    Raises:
        NonStructureTopLevelError: If record is not a record and declares no fields
        UnsupportedKindError: If a leaf field's kind has no input type
        CyclicRecordError: If a record type contains itself
    """
    options = options or MarshalOptions()
    settings = settings or default_settings
    return FormDescriptor(
        action=_action(record, options),
        method=_method(options, settings),
        fields=form_fields(record, settings=settings),
    )
