"""
Fixed-Point Arithmetic - integer ratios and fractional powers.

All balances are integers in base units. Ratios and fee rates are integers
in SCALE units. The only non-integer step of the engine is the fractional
power inside the bonding-curve formulas; it is evaluated in a dedicated
decimal context wide enough for 256-bit operands and floored back to an
integer, so every public result is an int.
"""

from decimal import Context, Decimal, ROUND_FLOOR, localcontext

from curvevault.core.config import SCALE

# 78 significant digits covers any 256-bit operand exactly
PRECISION = 78

_CONTEXT = Context(prec=PRECISION, rounding=ROUND_FLOOR)


def mul_div(a: int, b: int, denominator: int) -> int:
    """floor(a * b / denominator)"""
    if denominator == 0:
        raise ZeroDivisionError("mul_div by zero")
    return (a * b) // denominator


def mul_div_up(a: int, b: int, denominator: int) -> int:
    """ceil(a * b / denominator)"""
    if denominator == 0:
        raise ZeroDivisionError("mul_div_up by zero")
    return -((-a * b) // denominator)


def scale_by(amount: int, rate: int) -> int:
    """Apply a SCALE-denominated rate to an amount, rounding down."""
    return mul_div(amount, rate, SCALE)


def power(base_n: int, base_d: int, exp_n: int, exp_d: int) -> Decimal:
    """
    (base_n / base_d) ** (exp_n / exp_d) at PRECISION digits.

    Args:
        base_n: Base numerator (> 0)
        base_d: Base denominator (> 0)
        exp_n: Exponent numerator
        exp_d: Exponent denominator (> 0)
    """
    with localcontext(_CONTEXT):
        base = Decimal(base_n) / Decimal(base_d)
        exponent = Decimal(exp_n) / Decimal(exp_d)
        return base ** exponent


def floor_mul_growth(value: int, growth: Decimal) -> int:
    """floor(value * (growth - 1)), for growth >= 1."""
    with localcontext(_CONTEXT):
        product = Decimal(value) * (growth - 1)
        return int(product.to_integral_value(rounding=ROUND_FLOOR))


def floor_mul_decay(value: int, remaining: Decimal) -> int:
    """floor(value * (1 - remaining)), for 0 <= remaining <= 1."""
    with localcontext(_CONTEXT):
        product = Decimal(value) * (1 - remaining)
        return int(product.to_integral_value(rounding=ROUND_FLOOR))
