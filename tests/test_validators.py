"""
Tests for the contact form field rules.
"""
import pytest

from contact.exceptions import SubmissionInvalid
from contact.validators import (
    normalize_phone,
    validate_email,
    validate_phone,
    validate_submission,
)


VALID = {
    'name': 'Juan Pérez',
    'company': 'Zyph Demo SRL',
    'email': 'juan@example.com',
    'phone': '+595981123456',
    'message': 'Necesito una cotización para un proyecto de datos.',
}


def submit(**changes):
    fields = dict(VALID, **changes)
    validate_submission(
        fields['name'], fields['company'], fields['email'], fields['phone'], fields['message']
    )


def rule_of(**changes):
    with pytest.raises(SubmissionInvalid) as excinfo:
        submit(**changes)
    return excinfo.value.rule


class TestRequiredFields:

    @pytest.mark.parametrize('field', ['name', 'company', 'email', 'phone', 'message'])
    @pytest.mark.parametrize('empty', ['', None])
    def test_missing_field_is_rejected(self, field, empty):
        assert rule_of(**{field: empty}) == 'required'

    def test_required_rule_checked_before_others(self):
        """An invalid email does not hide a missing company."""
        assert rule_of(company='', email='not-an-email', name='x') == 'required'

    def test_valid_submission_passes(self):
        assert submit() is None


class TestNameLength:

    @pytest.mark.parametrize('length', [1, 51])
    def test_out_of_range_rejected(self, length):
        assert rule_of(name='a' * length) == 'name_length'

    @pytest.mark.parametrize('length', [2, 50])
    def test_boundaries_accepted(self, length):
        submit(name='a' * length)

    def test_message_names_the_rule(self):
        with pytest.raises(SubmissionInvalid) as excinfo:
            submit(name='a')
        assert excinfo.value.message == 'El nombre debe tener entre 2 y 50 caracteres'
        assert excinfo.value.status_code == 400

    def test_name_rule_checked_before_email(self):
        assert rule_of(name='a', email='bad') == 'name_length'


class TestEmail:

    @pytest.mark.parametrize('email', ['not-an-email', 'a@b', 'a b@c.com', '@b.co', 'a@b.', 'a@@b.co'])
    def test_invalid_rejected(self, email):
        assert rule_of(email=email) == 'email'

    @pytest.mark.parametrize('email', ['a@b.co', 'first.last+tag@sub.example.org'])
    def test_valid_accepted(self, email):
        assert validate_email(email)
        submit(email=email)

    def test_trailing_newline_rejected(self):
        assert not validate_email('a@b.co\n')


class TestPhone:

    def test_formatting_characters_stripped(self):
        assert normalize_phone('+595 (21) 123-4567') == '+595211234567'

    @pytest.mark.parametrize('phone', ['12345', '+595 (21) 123-4567', '+1 800 555-0199', '9'])
    def test_valid_accepted(self, phone):
        assert validate_phone(phone)

    @pytest.mark.parametrize('phone', ['0123', '+0123', 'abc', '++595', '1' * 17, '12.34'])
    def test_invalid_rejected(self, phone):
        assert not validate_phone(phone)
        assert rule_of(phone=phone) == 'phone'

    def test_sixteen_digits_accepted(self):
        assert validate_phone('1' * 16)


class TestMessageLength:

    @pytest.mark.parametrize('length', [9, 1001])
    def test_out_of_range_rejected(self, length):
        assert rule_of(message='m' * length) == 'message_length'

    @pytest.mark.parametrize('length', [10, 1000])
    def test_boundaries_accepted(self, length):
        submit(message='m' * length)

    def test_phone_rule_checked_before_message(self):
        assert rule_of(phone='0123', message='short') == 'phone'
