"""Shared type definitions for pool models.

Asset and account identifiers are opaque strings. Hex addresses are
normalized to lowercase so the same account never appears under two keys.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field, PlainSerializer

from dex.constants import UINT256_MAX
from dex.errors import InvalidIdentifier


def validate_uint256(value: Any) -> int:
    """Validate that a value is an unsigned 256-bit integer.

    Accepts ints and decimal strings, since large amounts travel as strings
    in JSON.

    Args:
        value: Value to validate (string or int)

    Returns:
        The value as an int

    Raises:
        ValueError: If value is not a valid non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 cannot be a boolean")

    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err

    if not isinstance(value, int):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return value


# 256-bit unsigned integer, accepted as int or decimal string
Uint256 = Annotated[
    int,
    BeforeValidator(validate_uint256),
    PlainSerializer(str, return_type=str, when_used="json"),
    Field(description="256-bit unsigned integer (int or decimal string)"),
]

# Non-empty asset or account identifier
Identifier = Annotated[str, Field(min_length=1, max_length=256)]


def is_valid_address(address: str) -> bool:
    """Check if a string is a valid Ethereum-style address.

    Args:
        address: String to validate

    Returns:
        True if valid 0x-prefixed 40 hex char address
    """
    if not isinstance(address, str):
        return False
    if not address.startswith("0x"):
        return False
    if len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def normalize_identifier(value: Any, kind: str = "identifier") -> str:
    """Normalize an asset or account identifier.

    Strips surrounding whitespace and lowercases hex addresses. Other
    identifiers are kept verbatim (case-sensitive).

    Args:
        value: Raw identifier
        kind: What the identifier names, used in error messages

    Returns:
        The normalized identifier

    Raises:
        InvalidIdentifier: If value is not a non-empty string
    """
    if not isinstance(value, str):
        raise InvalidIdentifier(f"{kind} must be a string, got {type(value).__name__}")
    ident = value.strip()
    if not ident:
        raise InvalidIdentifier(f"{kind} must not be empty")
    if is_valid_address(ident.lower()):
        return ident.lower()
    return ident
