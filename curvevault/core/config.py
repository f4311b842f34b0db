"""
Protocol configuration parameters for curvevault.

Defines curve constants, fee rates, auction timing and oracle sizing.
All rates are expressed in SCALE units (parts per million).
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values

# Fixed-point denominator for ratios and fee rates
SCALE = 1_000_000

ENV_PREFIX = "CURVEVAULT_"


@dataclass(frozen=True)
class ProtocolConfig:
    """Protocol-wide configuration parameters"""

    # Curve parameters
    primary_reserve_ratio: int = 250_000  # 25% reserve ratio above initial supply
    min_secondary_reserve_ratio: int = 50_000  # Lowest secondary ratio accepted at creation
    token_decimals: int = 18

    # Fees (SCALE units, charged on the gross trade amount)
    curve_fee: int = 4_000  # 0.4% credited to the secondary reserve
    default_admin_fee: int = 2_000  # 0.2% forwarded to the fee recipient
    max_admin_fee: int = 20_000
    max_curator_fee: int = 10_000

    # Buyout parameters
    rejection_premium: int = 100_000  # Rejection valuation = bid * 110%
    buyout_duration: int = 36 * 60 * 60  # Seconds
    twav_size: int = 6  # Ring buffer capacity

    # Factory parameters
    min_initial_reserve_balance: int = 10**9

    # Paths
    log_dir: Path = Path("logs")

    def __post_init__(self):
        """Reject configurations the engine cannot operate under"""
        if not 0 < self.primary_reserve_ratio <= SCALE:
            raise ValueError(f"primary_reserve_ratio must be in (0, {SCALE}], got {self.primary_reserve_ratio}")
        if not 0 < self.min_secondary_reserve_ratio <= self.primary_reserve_ratio:
            raise ValueError("min_secondary_reserve_ratio must be in (0, primary_reserve_ratio]")
        if self.twav_size < 2:
            raise ValueError(f"twav_size must be >= 2, got {self.twav_size}")
        if self.buyout_duration <= 0:
            raise ValueError(f"buyout_duration must be positive, got {self.buyout_duration}")
        if self.default_admin_fee > self.max_admin_fee:
            raise ValueError("default_admin_fee exceeds max_admin_fee")

    @property
    def scale(self) -> int:
        return SCALE

    @property
    def token_unit(self) -> int:
        """One whole token in base units."""
        return 10**self.token_decimals


# Global config instance (can be overridden)
config = ProtocolConfig()


def _coerce(raw: str, current):
    if isinstance(current, Path):
        return Path(raw)
    return int(raw.replace("_", ""))


def load_config(env_file: Optional[str] = None) -> ProtocolConfig:
    """
    Load configuration from a dotenv file and the process environment.

    Variables are named CURVEVAULT_<FIELD>, e.g. CURVEVAULT_TWAV_SIZE=10.
    Process environment wins over the file.

    Args:
        env_file: Optional path to a .env file

    Returns:
        ProtocolConfig instance
    """
    values = {}
    if env_file:
        values.update(dotenv_values(env_file))
    values.update({k: v for k, v in os.environ.items() if k.startswith(ENV_PREFIX)})

    defaults = ProtocolConfig()
    overrides = {}
    for f in fields(ProtocolConfig):
        raw = values.get(ENV_PREFIX + f.name.upper())
        if raw is None:
            continue
        try:
            overrides[f.name] = _coerce(raw, getattr(defaults, f.name))
        except ValueError as e:
            raise ValueError(f"Invalid value for {ENV_PREFIX}{f.name.upper()}: {raw!r}") from e

    return replace(defaults, **overrides)
