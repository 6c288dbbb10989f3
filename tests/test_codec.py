"""Tests for the form codec, MIME handling and delegate registry."""

from __future__ import annotations

import json
import threading
from collections.abc import Iterator, Mapping
from typing import Any

import pytest
import yaml

from brewform.assembler import MarshalOptions
from brewform.codec import FormCodec
from brewform.config import BrewformSettings
from brewform.delegates import JsonDelegate
from brewform.exceptions import (
    DelegateMarshalError,
    DelegateResolutionError,
    UnmarshalNotImplementedError,
    UnsupportedKindError,
)
from brewform.mime import MimeType, base_type
from brewform.registry import CodecRegistry, default_registry, get_codec_registry, set_codec_registry
from tests.records import Inventory, Person, SignupForm


class FailingDelegate:
    def __init__(self) -> None:
        self.error = DelegateMarshalError('application/json', 'disk full')

    def marshal(self, value: Any, options: Mapping[str, Any] | None = None) -> bytes:
        raise self.error


@pytest.fixture
def codec() -> FormCodec:
    return FormCodec('https://example.com/', registry=default_registry())


@pytest.fixture
def fresh_global_registry() -> Iterator[None]:
    set_codec_registry(None)
    yield
    set_codec_registry(None)


# ==============================================================================
# MIME types
# ==============================================================================


def test_parse_mime_type() -> None:
    mime = MimeType.parse('application/vnd.brewnet.form+json; method=PUT')
    assert mime.category == 'application'
    assert mime.name == 'vnd.brewnet.form'
    assert mime.suffix == 'json'
    assert mime.params == {'method': 'PUT'}
    assert mime.base == 'application/vnd.brewnet.form'
    assert str(mime) == 'application/vnd.brewnet.form+json; method=PUT'


def test_parse_mime_type_requires_slash() -> None:
    with pytest.raises(ValueError):
        MimeType.parse('json')


def test_base_type_strips_suffix_and_params() -> None:
    assert base_type('application/vnd.brewnet.form+json; charset=utf-8') == 'application/vnd.brewnet.form'


# ==============================================================================
# Content type matching
# ==============================================================================


@pytest.mark.parametrize(
    ('content_type', 'supported'),
    [
        ('application/vnd.brewnet.form+json', True),
        ('application/vnd.brewnet.form+yaml', True),
        ('application/vnd.brewnet.form', True),
        ('application/vnd.brewnet.form+json; charset=utf-8', True),
        ('Application/vnd.brewnet.form+json', False),
        ('application/json', False),
        ('application/vnd.brewnet.formx+json', False),
    ],
)
def test_content_type_supported(codec: FormCodec, content_type: str, supported: bool) -> None:
    assert codec.content_type_supported(content_type) is supported


def test_codec_description(codec: FormCodec) -> None:
    assert codec.content_type() == 'application/vnd.brewnet.form+json'
    assert codec.file_extension() == '.brewform'
    assert codec.can_marshal_with_callback()
    assert [str(mime) for mime in codec.types()] == [
        'application/vnd.brewnet.form+json',
        'application/vnd.brewnet.form+yaml',
    ]
    assert set(codec.example()) == {'action', 'method', 'fields'}


@pytest.mark.parametrize(
    ('matched', 'binds'),
    [
        ('application/vnd.brewnet.form+json', True),
        ('application/*', True),
        ('application/json', False),
        ('text/vnd.brewnet.form+json', False),
    ],
)
def test_bind(codec: FormCodec, matched: str, binds: bool) -> None:
    bound = codec.bind(MimeType.parse(matched))
    assert (bound is not None) is binds
    if bound is not None:
        assert bound.matched_type == MimeType.parse(matched)
        assert bound.domain == codec.domain


@pytest.mark.parametrize(
    ('matched', 'delegate'),
    [
        (None, 'application/json'),
        ('application/vnd.brewnet.form', 'application/json'),
        ('application/vnd.brewnet.form+*', 'application/json'),
        ('application/vnd.brewnet.form+yaml', 'application/yaml'),
        ('application/vnd.brewnet.form+xml', 'application/xml'),
    ],
)
def test_delegate_mime(codec: FormCodec, matched: str | None, delegate: str) -> None:
    assert codec.delegate_mime(matched) == delegate


# ==============================================================================
# Marshal / Unmarshal
# ==============================================================================


def test_marshal_json(codec: FormCodec) -> None:
    data = codec.marshal(SignupForm, MarshalOptions(request_path='/submit'))
    assert json.loads(data) == {
        'action': 'https://example.com/submit',
        'method': 'POST',
        'fields': {
            'name': {'label': 'Name', 'required': True, 'type': 'text'},
            'address.street1': {'label': 'Address.Street1', 'required': False, 'type': 'text'},
        },
    }


def test_marshal_accepts_option_mapping(codec: FormCodec) -> None:
    data = codec.marshal(Person, {'request_path': '/people', 'http_method': 'PUT'})
    decoded = json.loads(data)
    assert decoded['action'] == 'https://example.com/people'
    assert decoded['method'] == 'PUT'


def test_bound_codec_uses_matched_suffix_and_method(codec: FormCodec) -> None:
    bound = codec.bind(MimeType.parse('application/vnd.brewnet.form+yaml; method=PATCH'))
    assert bound is not None
    decoded = yaml.safe_load(bound.marshal(Person))
    assert decoded['method'] == 'PATCH'
    assert list(decoded['fields']) == ['name', 'age', 'address.street1', 'address.street2']


def test_marshal_unknown_suffix(codec: FormCodec) -> None:
    with pytest.raises(DelegateResolutionError) as exc_info:
        codec.marshal(Person, MarshalOptions(matched_type='application/vnd.brewnet.form+xml'))
    assert exc_info.value.mime_type == 'application/xml'
    assert 'application/json' in exc_info.value.available


def test_marshal_derivation_error_before_delegate(codec: FormCodec) -> None:
    with pytest.raises(UnsupportedKindError):
        codec.marshal(Inventory)


def test_delegate_error_propagates_verbatim() -> None:
    registry = CodecRegistry()
    delegate = FailingDelegate()
    registry.register('application/json', delegate)
    with pytest.raises(DelegateMarshalError) as exc_info:
        FormCodec(registry=registry).marshal(Person)
    assert exc_info.value is delegate.error


def test_unmarshal_not_implemented(codec: FormCodec) -> None:
    with pytest.raises(UnmarshalNotImplementedError):
        codec.unmarshal(b'name=Ada', Person)
    with pytest.raises(NotImplementedError):
        codec.unmarshal(b'', Person)


# ==============================================================================
# Delegates and registry
# ==============================================================================


def test_json_delegate_wraps_encoding_errors() -> None:
    with pytest.raises(DelegateMarshalError, match='application/json'):
        JsonDelegate().marshal({'x': object()})


def test_json_delegate_indent() -> None:
    assert JsonDelegate(indent=2).marshal({'a': 1}) == b'{\n  "a": 1\n}'


def test_json_delegate_indent_from_options() -> None:
    assert JsonDelegate().marshal({'a': 1}, {'indent': 2}) == b'{\n  "a": 1\n}'


def test_marshal_uses_codec_settings_indent() -> None:
    codec = FormCodec(registry=default_registry(), settings=BrewformSettings(JSON_INDENT=2))
    data = codec.marshal(SignupForm, MarshalOptions(request_path='/submit'))
    assert data.startswith(b'{\n  "action": "/submit",\n')
    assert json.loads(data)['method'] == 'POST'


def test_registry_rejects_non_delegates() -> None:
    with pytest.raises(TypeError):
        CodecRegistry().register('application/json', object())  # type: ignore[arg-type]


def test_registry_resolution_error_lists_available() -> None:
    with pytest.raises(DelegateResolutionError, match='application/json'):
        default_registry().resolve('application/msgpack')


@pytest.mark.usefixtures('fresh_global_registry')
def test_global_registry_initialized_once_across_threads() -> None:
    barrier = threading.Barrier(16)
    seen: list[CodecRegistry] = []
    lock = threading.Lock()

    def worker() -> None:
        barrier.wait()
        registry = get_codec_registry()
        with lock:
            seen.append(registry)

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(seen) == 16
    assert all(registry is seen[0] for registry in seen)


@pytest.mark.usefixtures('fresh_global_registry')
def test_set_codec_registry_replaces_global() -> None:
    registry = CodecRegistry()
    set_codec_registry(registry)
    assert get_codec_registry() is registry
    assert FormCodec().registry is registry
