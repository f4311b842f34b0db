"""
Hashing and account primitives for curvevault.

This module provides:
- Keccak-256 hashing (EVM-compatible)
- secp256k1 keypairs for simulated participants
- Address derivation from public keys
- Deterministic vault address derivation

Addresses are raw 20-byte values throughout the engine; hex strings only
appear at the CLI and logging boundary.
"""

import secrets
from dataclasses import dataclass

from Crypto.Hash import keccak
from py_ecc.secp256k1 import secp256k1


# =============================================================================
# Constants
# =============================================================================

# secp256k1 curve order (number of points on the curve)
SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

# Domain separator for vault address derivation
VAULT_ADDRESS_PREFIX = b"\xff"


# =============================================================================
# Hashing
# =============================================================================


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum-style).

    Used for: address derivation, vault address salts.
    """
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


# =============================================================================
# Keys and Addresses
# =============================================================================


@dataclass
class KeyPair:
    """
    An ECDSA keypair on secp256k1.

    Attributes:
        private_key: 32-byte secret key (integer in [1, order-1])
        public_key: 64-byte uncompressed public key (x || y coordinates)
    """
    private_key: bytes
    public_key: bytes

    @property
    def address(self) -> bytes:
        """20-byte address: last 20 bytes of keccak256(public_key)."""
        return address_from_public_key(self.public_key)

    @property
    def address_hex(self) -> str:
        return bytes_to_hex(self.address)


def private_key_to_public_key(private_key: bytes) -> bytes:
    """
    Derive public key from private key.

    Args:
        private_key: 32-byte private key

    Returns:
        64-byte uncompressed public key
    """
    if len(private_key) != 32:
        raise ValueError("Private key must be 32 bytes")

    public_key_point = secp256k1.privtopub(private_key)
    x_bytes = public_key_point[0].to_bytes(32, byteorder="big")
    y_bytes = public_key_point[1].to_bytes(32, byteorder="big")
    return x_bytes + y_bytes


def generate_keypair() -> KeyPair:
    """Generate a new random keypair."""
    private_key_int = secrets.randbelow(SECP256K1_ORDER - 1) + 1
    private_key = private_key_int.to_bytes(32, byteorder="big")
    return KeyPair(private_key=private_key, public_key=private_key_to_public_key(private_key))


def keypair_from_label(label: str) -> KeyPair:
    """
    Derive a deterministic keypair from a human-readable label.

    Simulations and tests use this so that "alice" is the same account
    on every run.
    """
    private_key_int = int.from_bytes(keccak256(label.encode()), "big") % (SECP256K1_ORDER - 1) + 1
    private_key = private_key_int.to_bytes(32, byteorder="big")
    return KeyPair(private_key=private_key, public_key=private_key_to_public_key(private_key))


def address_from_public_key(public_key: bytes) -> bytes:
    """Derive a 20-byte address from a 64-byte public key."""
    if len(public_key) != 64:
        raise ValueError("Public key must be 64 bytes")
    return keccak256(public_key)[-20:]


def address_from_label(label: str) -> bytes:
    """Shortcut for keypair_from_label(label).address."""
    return keypair_from_label(label).address


def vault_address(
    factory: bytes,
    curator: bytes,
    asset_address: bytes,
    asset_id: int,
    initial_token_supply: int,
    initial_token_price: int,
) -> bytes:
    """
    Deterministic vault address (CREATE2 style).

    The same curator/asset/supply/price tuple created by the same factory
    always maps to the same address.
    """
    salt = keccak256(
        curator
        + asset_address
        + asset_id.to_bytes(32, "big")
        + initial_token_supply.to_bytes(32, "big")
        + initial_token_price.to_bytes(32, "big")
    )
    return keccak256(VAULT_ADDRESS_PREFIX + factory + salt)[-20:]


# =============================================================================
# Utility Functions
# =============================================================================


def bytes_to_hex(data: bytes) -> str:
    """Convert bytes to hex string with 0x prefix."""
    return "0x" + data.hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """Convert hex string (with or without 0x prefix) to bytes."""
    if hex_str.startswith("0x") or hex_str.startswith("0X"):
        hex_str = hex_str[2:]
    return bytes.fromhex(hex_str)


def short_hex(data: bytes, length: int = 10) -> str:
    """Abbreviated hex for log lines."""
    return bytes_to_hex(data)[:length] + "..."


__all__ = [
    "keccak256",
    "KeyPair",
    "generate_keypair",
    "keypair_from_label",
    "private_key_to_public_key",
    "address_from_public_key",
    "address_from_label",
    "vault_address",
    "bytes_to_hex",
    "hex_to_bytes",
    "short_hex",
]
