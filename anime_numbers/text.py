from __future__ import annotations

import string

from .rules import DASHES


def index_of_first_digit(value: str) -> int:
    for i, ch in enumerate(value):
        if ch.isdecimal():
            return i
    return -1


def leading_digits(value: str) -> str:
    end = 0
    while end < len(value) and value[end].isdecimal():
        end += 1
    return value[:end]


# int() refuses digit strings past its conversion limit
NUMBER_DIGITS_MAX = 18


def string_to_int(value: str) -> int:
    """
    Integer value of the leading digit run; 0 when there is none. Runs of more
    than NUMBER_DIGITS_MAX significant digits give 10 ** NUMBER_DIGITS_MAX.
    """
    digits = leading_digits(value).lstrip("0")
    if not digits:
        return 0
    if len(digits) > NUMBER_DIGITS_MAX:
        return 10 ** NUMBER_DIGITS_MAX
    return int(digits)


def is_numeric_string(value: str) -> bool:
    return bool(value) and value.isdecimal()


def is_dash_character(value: str) -> bool:
    return len(value) == 1 and value in DASHES


def is_hexadecimal_string(value: str) -> bool:
    return bool(value) and all(c in string.hexdigits for c in value)


def is_crc32(value: str) -> bool:
    return len(value) == 8 and is_hexadecimal_string(value)


def is_resolution(value: str) -> bool:
    # "1080p", "1920x1080", "1280×720"
    if len(value) > 6:
        for i, ch in enumerate(value):
            if ch in "xX×":
                return 3 <= i <= len(value) - 4 and value[:i].isdecimal() and value[i + 1:].isdecimal()
        return False
    return len(value) > 3 and value[-1] in "pP" and value[:-1].isdecimal()


def canonical_number(value: str) -> str:
    """
    Drop leading zeros from the leading digit run, keeping at least one digit.
    "001" -> "1", "07.5" -> "7.5", "04a" -> "4a".
    """
    digits = leading_digits(value)
    if not digits:
        return value
    return (digits.lstrip("0") or "0") + value[len(digits):]
