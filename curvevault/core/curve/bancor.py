"""
Bancor Formula - constant reserve ratio bonding curve.

Conceptual Background:
---------------------
A curve with reserve ratio r (0 < r <= 1) keeps

    reserve_balance = r * supply * price

at every point, so the marginal price is reserve / (supply * r). Buying
with `amount` of reserve currency mints

    supply * ((1 + amount / reserve) ** r - 1)

tokens, and burning `tokens` releases

    reserve * (1 - (1 - tokens / supply) ** (1 / r))

Both results are floored. Rounding always favours the reserve, so a
purchase followed by a sale of the minted tokens never returns more than
was paid in.

Ratios are SCALE-denominated integers (250_000 == 25%).
"""

from curvevault.core.config import SCALE
from curvevault.core.curve.fixed_point import floor_mul_decay, floor_mul_growth, mul_div, power
from curvevault.core.errors import CurveError


def _check_curve(supply: int, reserve_balance: int, reserve_ratio: int) -> None:
    if supply <= 0:
        raise CurveError(f"supply must be positive, got {supply}")
    if reserve_balance <= 0:
        raise CurveError(f"reserve_balance must be positive, got {reserve_balance}")
    if not 0 < reserve_ratio <= SCALE:
        raise CurveError(f"reserve_ratio must be in (0, {SCALE}], got {reserve_ratio}")


def purchase_return(
    supply: int,
    reserve_balance: int,
    reserve_ratio: int,
    amount_in: int,
) -> int:
    """
    Tokens minted for depositing `amount_in` into the reserve.

    Args:
        supply: Current token supply on this curve
        reserve_balance: Current reserve balance of this curve
        reserve_ratio: Reserve ratio in SCALE units
        amount_in: Reserve currency deposited (net of fees)

    Returns:
        Number of tokens to mint
    """
    _check_curve(supply, reserve_balance, reserve_ratio)
    if amount_in < 0:
        raise CurveError(f"amount_in must be non-negative, got {amount_in}")

    if amount_in == 0:
        return 0

    # Linear curve: price is constant
    if reserve_ratio == SCALE:
        return mul_div(supply, amount_in, reserve_balance)

    growth = power(reserve_balance + amount_in, reserve_balance, reserve_ratio, SCALE)
    return max(floor_mul_growth(supply, growth), 0)


def sale_return(
    supply: int,
    reserve_balance: int,
    reserve_ratio: int,
    tokens_in: int,
) -> int:
    """
    Reserve currency released for burning `tokens_in`.

    Args:
        supply: Current token supply on this curve
        reserve_balance: Current reserve balance of this curve
        reserve_ratio: Reserve ratio in SCALE units
        tokens_in: Tokens burned

    Returns:
        Reserve currency to release (gross, before fees)
    """
    _check_curve(supply, reserve_balance, reserve_ratio)
    if tokens_in < 0:
        raise CurveError(f"tokens_in must be non-negative, got {tokens_in}")
    if tokens_in > supply:
        raise CurveError(f"tokens_in {tokens_in} exceeds supply {supply}")

    if tokens_in == 0:
        return 0

    # Burning everything drains the reserve
    if tokens_in == supply:
        return reserve_balance

    if reserve_ratio == SCALE:
        return mul_div(reserve_balance, tokens_in, supply)

    remaining = power(supply - tokens_in, supply, SCALE, reserve_ratio)
    return min(floor_mul_decay(reserve_balance, remaining), reserve_balance)


def spot_price(supply: int, reserve_balance: int, reserve_ratio: int, unit: int) -> int:
    """
    Marginal price of `unit` base units of token, in reserve base units.

    price = reserve / (supply * r), scaled to one token of `unit` base units.
    """
    _check_curve(supply, reserve_balance, reserve_ratio)
    return (reserve_balance * SCALE * unit) // (supply * reserve_ratio)
