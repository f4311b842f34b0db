"""
Valuation - implied vault valuation from its two reserves.

Below (or at) the initial supply only the secondary curve is live:

    valuation = secondary_reserve * SCALE / secondary_ratio

Above it, the secondary term is frozen at the value crystallized at the
boundary and the primary curve adds the value of every token minted since:

    valuation = secondary_reserve * SCALE / secondary_ratio
              + (primary_reserve - fictitious_reserve) * SCALE / primary_ratio

The fictitious primary reserve makes the primary curve start at the same
price the secondary curve ends at.
"""

from dataclasses import dataclass

from curvevault.core.config import SCALE
from curvevault.core.curve.fixed_point import mul_div


@dataclass(frozen=True)
class CurveState:
    """Point-in-time view of the reserves that price a vault."""
    total_supply: int
    initial_token_supply: int
    primary_reserve_balance: int
    primary_reserve_ratio: int
    secondary_reserve_balance: int
    secondary_reserve_ratio: int
    fictitious_primary_reserve_balance: int

    @property
    def on_primary_curve(self) -> bool:
        return self.total_supply > self.initial_token_supply

    @property
    def primary_surplus(self) -> int:
        """Real reserve held by the primary curve."""
        return self.primary_reserve_balance - self.fictitious_primary_reserve_balance


def initial_valuation(initial_token_supply: int, initial_token_price: int, token_unit: int) -> int:
    """Valuation implied by issuing the whole initial supply at the initial price."""
    return mul_div(initial_token_supply, initial_token_price, token_unit)


def fictitious_reserve(primary_reserve_ratio: int, valuation: int) -> int:
    """Primary reserve that prices the boundary at `valuation`."""
    return mul_div(primary_reserve_ratio, valuation, SCALE)


def secondary_ratio(secondary_reserve_balance: int, valuation: int) -> int:
    """Secondary reserve ratio that prices `valuation` with the given reserve."""
    return mul_div(secondary_reserve_balance, SCALE, valuation)


def max_secondary_balance(secondary_reserve_ratio: int, valuation: int) -> int:
    """Secondary reserve held when supply sits exactly at the boundary."""
    return mul_div(secondary_reserve_ratio, valuation, SCALE)


def current_valuation(state: CurveState) -> int:
    """
    Implied valuation of the vault.

    Args:
        state: Current reserves and supply

    Returns:
        Valuation in native base units
    """
    valuation = mul_div(state.secondary_reserve_balance, SCALE, state.secondary_reserve_ratio)
    if state.on_primary_curve:
        valuation += mul_div(state.primary_surplus, SCALE, state.primary_reserve_ratio)
    return valuation


def implied_bid(deposit: int, state: CurveState) -> int:
    """
    Bid implied by a buyout deposit.

    The reserves already committed to the vault count towards the bid, so a
    bidder only escrows the difference to the current valuation.
    """
    return deposit + state.primary_surplus + state.secondary_reserve_balance
