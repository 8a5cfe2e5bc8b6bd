from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.test import SimpleTestCase

from core.validators import CharacterClassValidator, validate_possible_number


class PasswordStrengthTest(SimpleTestCase):
    """Each of the five rules rejects on its own; together they accept."""

    def assert_rejected_with(self, password, code):
        with self.assertRaises(ValidationError) as cm:
            validate_password(password)
        codes = [error.code for error in cm.exception.error_list]
        self.assertEqual(codes, [code])

    def test_strong_password_accepted(self):
        self.assertIsNone(validate_password('TestPass123!'))

    def test_too_short_rejected(self):
        self.assert_rejected_with('Tp12!ab', 'password_too_short')

    def test_missing_uppercase_rejected(self):
        self.assert_rejected_with('testpass123!', 'password_no_upper')

    def test_missing_lowercase_rejected(self):
        self.assert_rejected_with('TESTPASS123!', 'password_no_lower')

    def test_missing_digit_rejected(self):
        self.assert_rejected_with('TestPass!!!!', 'password_no_digit')

    def test_missing_symbol_rejected(self):
        self.assert_rejected_with('TestPass1234', 'password_no_symbol')

    def test_whitespace_is_not_a_symbol(self):
        self.assert_rejected_with('Test Pass 123', 'password_no_symbol')

    def test_all_missing_classes_reported(self):
        with self.assertRaises(ValidationError) as cm:
            CharacterClassValidator().validate('abcdefgh')
        codes = {error.code for error in cm.exception.error_list}
        self.assertEqual(codes, {'password_no_upper', 'password_no_digit', 'password_no_symbol'})


class PhoneValidatorTest(SimpleTestCase):

    def test_valid_number(self):
        phone_number = validate_possible_number('+12025551234')
        self.assertEqual(phone_number.as_e164, '+12025551234')

    def test_empty_number(self):
        with self.assertRaises(ValidationError) as cm:
            validate_possible_number('')
        self.assertEqual(cm.exception.code, 'required')

    def test_too_short_number(self):
        with self.assertRaises(ValidationError) as cm:
            validate_possible_number('+1202555')
        self.assertEqual(cm.exception.code, 'invalid_length')
