"""Shared wire types for searcher requests and responses.

256-bit quantities are held as Python ints so nothing is ever truncated to
64 bits. On the wire they are emitted as decimal strings and accepted as ints,
decimal strings or 0x-prefixed hex strings.
"""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field, PlainSerializer

# Maximum uint256 value
UINT256_MAX = 2**256 - 1

# Signed 256-bit bounds
INT256_MIN = -(2**255)
INT256_MAX = 2**255 - 1

# int() also takes whitespace, "+" and "_" separators; the wire forms do not
_DECIMAL_RE = re.compile(r"-?[0-9]+")
_HEX_RE = re.compile(r"0[xX][0-9a-fA-F]+")
_H256_RE = re.compile(r"(?:0[xX])?([0-9a-fA-F]{64})")


def _parse_integer(value: Any, type_name: str) -> int:
    """Parse an int, decimal string or 0x-prefixed hex string."""
    # bool is an int subclass but never a valid quantity
    if isinstance(value, bool):
        raise ValueError(f"{type_name} must be string or int, got bool")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ValueError(f"{type_name} must be string or int, got {type(value).__name__}")

    if _HEX_RE.fullmatch(value):
        return int(value[2:], 16)
    if _DECIMAL_RE.fullmatch(value):
        return int(value, 10)
    raise ValueError(f"{type_name} must be a decimal or 0x-hex integer string: '{value}'")


def validate_uint256(value: Any) -> int:
    """Validate that a value is a valid uint256.

    Args:
        value: Value to validate (int, decimal string or 0x-hex string)

    Returns:
        The value as a Python int

    Raises:
        ValueError: If value is not an integer within [0, 2^256-1]
    """
    int_value = _parse_integer(value, "Uint256")
    if int_value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if int_value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return int_value


def validate_int256(value: Any) -> int:
    """Validate that a value is a valid int256.

    Hex strings are read as a plain magnitude, not two's complement.

    Raises:
        ValueError: If value is not an integer within [-2^255, 2^255-1]
    """
    int_value = _parse_integer(value, "Int256")
    if int_value < INT256_MIN:
        raise ValueError(f"Int256 underflow: {value} < -2^255")
    if int_value > INT256_MAX:
        raise ValueError(f"Int256 overflow: {value} > 2^255-1")
    return int_value


def normalize_h256(value: Any) -> str:
    """Normalize a 256-bit hash to lowercase 0x-prefixed form.

    The 0x prefix is optional on input.

    Raises:
        ValueError: If value is not exactly 32 bytes of hex
    """
    if not isinstance(value, str):
        raise ValueError(f"H256 must be a hex string, got {type(value).__name__}")
    digits = value[2:] if value[:2] in ("0x", "0X") else value
    if len(digits) != 64:
        raise ValueError(f"H256 must be 64 hex characters, got {len(digits)}")
    match = _H256_RE.fullmatch(value)
    if match is None:
        raise ValueError(f"H256 must be hex: '{value}'")
    return "0x" + match.group(1).lower()


# 256-bit unsigned integer
Uint256 = Annotated[
    int,
    BeforeValidator(validate_uint256),
    PlainSerializer(str, return_type=str, when_used="json"),
    Field(description="256-bit unsigned integer, decimal string on the wire"),
]

# 256-bit signed integer
Int256 = Annotated[
    int,
    BeforeValidator(validate_int256),
    PlainSerializer(str, return_type=str, when_used="json"),
    Field(description="256-bit signed integer, decimal string on the wire"),
]

# 32-byte hash (auth tokens)
H256 = Annotated[
    str,
    BeforeValidator(normalize_h256),
    Field(description="32-byte value as 0x-prefixed lowercase hex"),
]

# Ethereum address (40 hex chars after 0x prefix)
Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{40}$")]

# Arbitrary hex bytes (whole bytes only)
Bytes = Annotated[str, Field(pattern=r"^0x([a-fA-F0-9]{2})*$")]

# Auth token issued on bid acceptance
AuthToken = H256
