"""Tests for form descriptor assembly."""

from __future__ import annotations

import pytest

from brewform.assembler import MarshalOptions, assemble_form, form_fields
from brewform.config import BrewformSettings
from brewform.exceptions import NonStructureTopLevelError, UnsupportedKindError
from brewform.schemas import FieldDescriptor
from tests.records import Address, ChangePassword, Inventory, Person, Search, SignupForm


def test_signup_form_end_to_end() -> None:
    form = assemble_form(SignupForm(name='Ada', street1='1 Main St'), MarshalOptions(request_path='/submit'))
    assert form.as_structured() == {
        'action': '/submit',
        'method': 'POST',
        'fields': {
            'name': {'label': 'Name', 'required': True, 'type': 'text'},
            'address.street1': {'label': 'Address.Street1', 'required': False, 'type': 'text'},
        },
    }


def test_record_type_and_instance_give_same_form() -> None:
    person = Person(name='Ada', age=36, address=Address(street1='1 Main St'))
    assert assemble_form(person) == assemble_form(Person)


def test_optional_record_type_at_top_level() -> None:
    assert list(form_fields(Person | None)) == list(form_fields(Person))


def test_assembly_is_idempotent() -> None:
    options = MarshalOptions(domain='https://example.com', request_path='/people')
    assert assemble_form(Person, options) == assemble_form(Person, options)


def test_action_joins_domain_and_request_path() -> None:
    form = assemble_form(Person, MarshalOptions(domain='https://example.com/', request_path='/people'))
    assert form.action == 'https://example.com/people'


def test_pather_overrides_action() -> None:
    form = assemble_form(ChangePassword(password='x'), MarshalOptions(domain='https://example.com'))
    assert form.action == 'https://accounts.example.com/password'


@pytest.mark.parametrize(
    ('options', 'expected'),
    [
        (MarshalOptions(), 'POST'),
        (MarshalOptions(http_method='PUT'), 'PUT'),
        (MarshalOptions(matched_type='application/vnd.brewnet.form+json; method=PATCH'), 'PATCH'),
        (MarshalOptions(http_method='PUT', matched_type='application/vnd.brewnet.form+json; method=PATCH'), 'PUT'),
    ],
)
def test_method_precedence(options: MarshalOptions, expected: str) -> None:
    assert assemble_form(Person, options).method == expected


def test_default_method_from_settings() -> None:
    assert assemble_form(Person, settings=BrewformSettings(DEFAULT_METHOD='GET')).method == 'GET'


def test_top_level_field_declarer() -> None:
    form = assemble_form(Search)
    assert form.fields == {'q': FieldDescriptor(label='Search', required=True, type='text')}


@pytest.mark.parametrize('value', [42, 'text', int, [Person]])
def test_non_record_top_level_rejected(value: object) -> None:
    with pytest.raises(NonStructureTopLevelError):
        assemble_form(value)


def test_unsupported_field_fails_whole_form() -> None:
    with pytest.raises(UnsupportedKindError, match='attributes'):
        assemble_form(Inventory)


def test_field_list_form() -> None:
    form = assemble_form(SignupForm)
    assert form.as_field_list()[1] == {
        'id': 'address.street1',
        'label': 'Address.Street1',
        'required': False,
        'type': 'text',
    }
