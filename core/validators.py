from django.core.exceptions import ValidationError
from phonenumber_field.phonenumber import to_python
from phonenumbers.phonenumberutil import is_possible_number


def validate_possible_number(phone, country=None):
    """
    Validate phone number using phonenumbers library.
    Raises a distinct error code for each way the number can be wrong.
    """
    if not phone:
        raise ValidationError(
            "Phone number is required.",
            code="required",
        )

    try:
        phone_number = to_python(phone, country)
    except Exception:
        raise ValidationError(
            "Invalid phone number format. Use international format with country code (e.g., +1 2025551234).",
            code="invalid_format",
        )

    if not phone_number:
        raise ValidationError(
            "Could not parse phone number. Include the country code (e.g., +1 for US, +44 for UK).",
            code="parse_error",
        )

    if not is_possible_number(phone_number):
        raise ValidationError(
            f"Phone number {phone} has incorrect length for its country code.",
            code="invalid_length",
        )

    if not phone_number.is_valid():
        raise ValidationError(
            f"Phone number {phone} is not valid for its region.",
            code="invalid",
        )

    return phone_number


def _is_symbol(char):
    return not char.isalnum() and not char.isspace()


class CharacterClassValidator:
    """
    Password validator requiring at least one upper-case letter, one
    lower-case letter, one digit and one symbol.

    Length is left to django's MinimumLengthValidator, both are registered
    in AUTH_PASSWORD_VALIDATORS.
    """

    RULES = (
        ('password_no_upper', str.isupper, "at least one uppercase letter"),
        ('password_no_lower', str.islower, "at least one lowercase letter"),
        ('password_no_digit', str.isdigit, "at least one digit"),
        ('password_no_symbol', _is_symbol, "at least one symbol"),
    )

    def validate(self, password, user=None):
        errors = [
            ValidationError(f"This password must contain {description}.", code=code)
            for code, check, description in self.RULES
            if not any(check(char) for char in password)
        ]
        if errors:
            raise ValidationError(errors)

    def get_help_text(self):
        return (
            "Your password must contain at least one uppercase letter, one lowercase "
            "letter, one digit and one symbol."
        )
