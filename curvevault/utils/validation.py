"""
Input Validation - Sanitization of values entering the vault.

Every public vault operation receives caller-supplied addresses and
integer amounts. These helpers reject:
- Malformed addresses
- Negative or oversized amounts
- Non-integer quantities (floats would silently lose precision)
- Oversized batch requests
"""

from typing import Any, Optional, Tuple

# =============================================================================
# Constants
# =============================================================================

ADDRESS_SIZE = 20
MAX_BATCH_LENGTH = 256

# Amounts mirror an unsigned 256-bit word
MIN_AMOUNT = 0
MAX_AMOUNT = 2**256 - 1
MIN_TIMESTAMP = 0
MAX_TIMESTAMP = 2**64 - 1

ZERO_ADDRESS = bytes(ADDRESS_SIZE)


# =============================================================================
# Validation Functions
# =============================================================================


def validate_bytes(
    data: Any,
    name: str,
    expected_length: Optional[int] = None,
    max_length: Optional[int] = None,
) -> Tuple[bool, str]:
    """
    Validate bytes input.

    Args:
        data: Data to validate
        name: Field name for error messages
        expected_length: Exact expected length
        max_length: Maximum allowed length

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(data, (bytes, bytearray)):
        return False, f"{name} must be bytes, got {type(data).__name__}"

    if expected_length is not None and len(data) != expected_length:
        return False, f"{name} must be {expected_length} bytes, got {len(data)}"

    if max_length is not None and len(data) > max_length:
        return False, f"{name} exceeds max length {max_length}, got {len(data)}"

    return True, ""


def validate_address(address: Any, name: str = "address") -> Tuple[bool, str]:
    """Validate a 20-byte address."""
    return validate_bytes(address, name, expected_length=ADDRESS_SIZE)


def validate_recipient(address: Any, name: str = "recipient") -> Tuple[bool, str]:
    """Validate an address that will receive value (must not be zero)."""
    valid, err = validate_address(address, name)
    if not valid:
        return valid, err
    if bytes(address) == ZERO_ADDRESS:
        return False, f"{name} must not be the zero address"
    return True, ""


def validate_integer(
    value: Any,
    name: str,
    min_val: int = MIN_AMOUNT,
    max_val: int = MAX_AMOUNT,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.

    Args:
        value: Value to validate
        name: Field name for errors
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        (is_valid, error_message)
    """
    # bool is an int subclass; a True amount is always a bug
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be int, got {type(value).__name__}"

    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_amount(amount: Any, name: str = "amount") -> Tuple[bool, str]:
    """Validate a native-currency or token amount."""
    return validate_integer(amount, name, MIN_AMOUNT, MAX_AMOUNT)


def validate_timestamp(timestamp: Any, name: str = "timestamp") -> Tuple[bool, str]:
    """Validate a ledger timestamp (seconds)."""
    return validate_integer(timestamp, name, MIN_TIMESTAMP, MAX_TIMESTAMP)


def validate_batch(
    data: Any,
    name: str,
    max_length: int = MAX_BATCH_LENGTH,
) -> Tuple[bool, str]:
    """
    Validate a list/tuple argument of a batch operation.

    Args:
        data: Data to validate
        name: Field name for errors
        max_length: Maximum allowed length

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(data, (list, tuple)):
        return False, f"{name} must be list/tuple, got {type(data).__name__}"

    if len(data) > max_length:
        return False, f"{name} exceeds max length {max_length}, got {len(data)}"

    return True, ""


def validate_hex_address(value: Any, name: str = "address") -> Tuple[bool, str]:
    """
    Validate a hex-encoded address (with or without 0x prefix).

    Used by the CLI, where addresses arrive as strings.
    """
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"

    hex_str = value[2:] if value.startswith("0x") else value

    if len(hex_str) % 2 != 0:
        return False, f"{name} has odd length, invalid hex"

    try:
        bytes.fromhex(hex_str)
    except ValueError:
        return False, f"{name} contains invalid hex characters"

    if len(hex_str) // 2 != ADDRESS_SIZE:
        return False, f"{name} must be {ADDRESS_SIZE} bytes, got {len(hex_str) // 2}"

    return True, ""


__all__ = [
    "validate_bytes",
    "validate_address",
    "validate_recipient",
    "validate_integer",
    "validate_amount",
    "validate_timestamp",
    "validate_batch",
    "validate_hex_address",
    "ADDRESS_SIZE",
    "MAX_AMOUNT",
    "ZERO_ADDRESS",
]
