import re
from datetime import date

PASSWORD_SPECIAL_CHARS = '!@#$%^&*(),.?":{}|<>'
MINIMUM_AGE = 18

_REPEATED_CHAR = re.compile(r"(.)\1{3,}")
_PHONE = re.compile(r"\+7\d{10}")
_FOUR_DIGITS = re.compile(r"\d{4}")
_SIX_DIGITS = re.compile(r"\d{6}")
_CYRILLIC_NAME = re.compile(r"[А-ЯЁа-яё\s-]+")


def is_password_strong(password):
    """
    At least 8 characters with a digit, an uppercase letter and a special
    character, and no character repeated 4 or more times in a row.
    """
    if not password or len(password) < 8:
        return False
    if _REPEATED_CHAR.search(password):
        return False
    if not re.search(r"\d", password):
        return False
    if not re.search(r"[A-Z]", password):
        return False
    if not any(ch in PASSWORD_SPECIAL_CHARS for ch in password):
        return False
    return True


def is_phone_valid(phone):
    return bool(phone) and _PHONE.fullmatch(phone) is not None


def is_document_series_valid(series):
    return bool(series) and _FOUR_DIGITS.fullmatch(series) is not None


def is_document_number_valid(number):
    return bool(number) and _SIX_DIGITS.fullmatch(number) is not None


def is_cyrillic(value):
    return bool(value) and _CYRILLIC_NAME.fullmatch(value) is not None


def age_on(birth_date, today=None):
    today = today or date.today()
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years
