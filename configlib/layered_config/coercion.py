"""
Conversion of raw configuration strings into typed values.

Integers follow C integer-literal conventions (``0x`` hex, leading ``0`` octal,
decimal otherwise) and may carry one unit suffix: ``k``, ``m`` or ``g``
(case-insensitive, powers of 1024). Booleans accept ``true/yes/on`` and
``false/no/off`` (case-insensitive) or any integer; a key without a value
counts as true.
"""

from __future__ import annotations
import re
from typing import Optional

from .errors import ConfigTypeError

INT32_MIN, INT32_MAX = -(2 ** 31), 2 ** 31 - 1
INT64_MIN, INT64_MAX = -(2 ** 63), 2 ** 63 - 1

UNIT_FACTORS = {
    "k": 1024,
    "m": 1024 * 1024,
    "g": 1024 * 1024 * 1024,
}

TRUE_TOKENS = frozenset({"true", "yes", "on"})
FALSE_TOKENS = frozenset({"false", "no", "off"})

# sign, then the longest literal strtol(base=0) would consume, then the rest
_INT_LITERAL = re.compile(
    r"\s*(?P<sign>[+-]?)(?P<digits>0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)(?P<rest>.*)",
    re.DOTALL,
)


def _describe(name: Optional[str]) -> str:
    return f" for {name}" if name else ""


def _parse_literal(digits: str) -> int:
    if digits[:2] in ("0x", "0X"):
        return int(digits[2:], 16)
    if len(digits) > 1 and digits[0] == "0":
        return int(digits[1:], 8)
    return int(digits, 10)


def parse_integer(raw: Optional[str], name: Optional[str] = None) -> int:
    """
    Parse a signed integer with an optional k/m/g suffix.

    Args:
        raw: Raw value as stored in a backend
        name: Variable name, only used for the error message

    Raises:
        ConfigTypeError: raw is missing, not an integer literal, has trailing
            garbage or does not fit into signed 64 bits
    """
    if raw is None:
        raise ConfigTypeError(f"Failed to get value{_describe(name)}. Value is missing", name=name)

    m = _INT_LITERAL.fullmatch(raw)
    if m is None:
        raise ConfigTypeError(f"Failed to get value{_describe(name)}. {raw!r} is not a number", name=name)

    num = _parse_literal(m.group("digits"))
    if m.group("sign") == "-":
        num = -num
    if not INT64_MIN <= num <= INT64_MAX:
        raise ConfigTypeError(
            f"Failed to get value{_describe(name)}. {raw!r} does not fit into 64 bits", name=name
        )

    rest = m.group("rest")
    if not rest:
        return num
    factor = UNIT_FACTORS.get(rest.lower()) if len(rest) == 1 else None
    if factor is None:
        raise ConfigTypeError(
            f"Failed to get value{_describe(name)}. Value {raw!r} is of invalid type", name=name
        )
    return check_range(num * factor, INT64_MIN, INT64_MAX, name)


def parse_bool(raw: Optional[str], name: Optional[str] = None) -> bool:
    """Interpret a raw value as a boolean. ``None`` (no value assigned) is true."""
    if raw is None:
        return True

    lowered = raw.lower()
    if lowered in TRUE_TOKENS:
        return True
    if lowered in FALSE_TOKENS:
        return False

    return parse_integer(raw, name) != 0


def check_range(value: int, lo: int, hi: int, name: Optional[str] = None) -> int:
    if not lo <= value <= hi:
        raise ConfigTypeError(
            f"Failed to get value{_describe(name)}. {value} does not fit into [{lo}, {hi}]", name=name
        )
    return value


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def format_integer(value: int) -> str:
    return str(int(value))
