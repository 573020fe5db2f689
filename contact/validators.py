"""
Contact Form Validators

Pure field checks for contact form submissions. Rules run in a fixed
order and validation stops at the first rule that fails.
"""
import re

from .exceptions import SubmissionInvalid


EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
PHONE_RE = re.compile(r'^[+]?[1-9][0-9]{0,15}$')
PHONE_FORMATTING_RE = re.compile(r'[\s\-()]')

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
MESSAGE_MIN_LENGTH = 10
MESSAGE_MAX_LENGTH = 1000

# (rule, message) in evaluation order
RULE_FORMAT = ('format', 'Formato de datos inválido')
RULE_REQUIRED = ('required', 'Todos los campos son obligatorios')
RULE_NAME_LENGTH = (
    'name_length',
    f'El nombre debe tener entre {NAME_MIN_LENGTH} y {NAME_MAX_LENGTH} caracteres',
)
RULE_EMAIL = ('email', 'Email inválido')
RULE_PHONE = ('phone', 'Teléfono inválido')
RULE_MESSAGE_LENGTH = (
    'message_length',
    f'El mensaje debe tener entre {MESSAGE_MIN_LENGTH} y {MESSAGE_MAX_LENGTH} caracteres',
)


def normalize_phone(phone):
    """Strip spaces, hyphens and parentheses from a phone number."""
    return PHONE_FORMATTING_RE.sub('', phone)


def validate_email(email):
    return bool(EMAIL_RE.fullmatch(email))


def validate_phone(phone):
    """
    Check a phone number against the international dial pattern.

    '+595 (21) 123-4567' is checked as '+595211234567'.
    """
    return bool(PHONE_RE.fullmatch(normalize_phone(phone)))


def validate_submission(name, company, email, phone, message):
    """
    Validate the five contact form fields.

    Raises:
        SubmissionInvalid: for the first rule that fails, in the order
            required, name length, email, phone, message length.
    """
    if not all([name, company, email, phone, message]):
        raise SubmissionInvalid(*RULE_REQUIRED)

    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        raise SubmissionInvalid(*RULE_NAME_LENGTH)

    if not validate_email(email):
        raise SubmissionInvalid(*RULE_EMAIL)

    if not validate_phone(phone):
        raise SubmissionInvalid(*RULE_PHONE)

    if not MESSAGE_MIN_LENGTH <= len(message) <= MESSAGE_MAX_LENGTH:
        raise SubmissionInvalid(*RULE_MESSAGE_LENGTH)
