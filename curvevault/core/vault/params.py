"""
Vault creation parameters.

Immutable pydantic model validated before any state is touched. Addresses
may be given as 20 raw bytes or as hex strings.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from curvevault.crypto import hex_to_bytes
from curvevault.utils.validation import (
    MAX_AMOUNT,
    validate_address,
    validate_hex_address,
    validate_recipient,
)


def _to_address(value, name: str) -> bytes:
    if isinstance(value, str):
        valid, err = validate_hex_address(value, name)
        if not valid:
            raise ValueError(err)
        return hex_to_bytes(value)
    if isinstance(value, bytearray):
        value = bytes(value)
    valid, err = validate_address(value, name)
    if not valid:
        raise ValueError(err)
    return value


class VaultParams(BaseModel):
    """Everything the curator supplies when fractionalizing an asset."""

    asset_address: bytes = Field(..., description="Contract of the escrowed non-fungible asset")
    asset_id: int = Field(..., ge=0, le=MAX_AMOUNT, description="Token id of the escrowed asset")
    curator: bytes = Field(..., description="Account that deposits the asset and earns curator fees")
    name: str = Field(..., min_length=1, max_length=64, description="Fraction token name")
    symbol: str = Field(..., min_length=1, max_length=16, description="Fraction token symbol")
    initial_token_supply: int = Field(..., gt=0, le=MAX_AMOUNT, description="Supply at the curve boundary")
    initial_token_price: int = Field(..., gt=0, le=MAX_AMOUNT, description="Price of one whole token")
    min_buyout_time: int = Field(0, ge=0, description="Earliest timestamp a buyout may start")
    curator_fee: Optional[int] = Field(None, ge=0, description="Curator fee rate, default derived from ratios")

    model_config = {"frozen": True}

    @field_validator("asset_address", mode="before")
    @classmethod
    def validate_asset_address(cls, v):
        return _to_address(v, "asset_address")

    @field_validator("curator", mode="before")
    @classmethod
    def validate_curator(cls, v):
        address = _to_address(v, "curator")
        valid, err = validate_recipient(address, "curator")
        if not valid:
            raise ValueError(err)
        return address

    @field_validator("asset_id", "initial_token_supply", "initial_token_price", "min_buyout_time", mode="before")
    @classmethod
    def reject_bool(cls, v):
        """bool would otherwise pass as 0/1"""
        if isinstance(v, bool):
            raise ValueError("must be int, got bool")
        return v


__all__ = ["VaultParams"]
