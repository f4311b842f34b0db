"""
Bonding curve math.

Pure integer-in, integer-out functions:
- purchase_return / sale_return: Bancor constant reserve ratio formula
- fixed-point helpers for SCALE-denominated rates
"""

from curvevault.core.curve.bancor import (
    purchase_return,
    sale_return,
    spot_price,
)

from curvevault.core.curve.fixed_point import (
    mul_div,
    mul_div_up,
    scale_by,
    PRECISION,
)

__all__ = [
    "purchase_return",
    "sale_return",
    "spot_price",
    "mul_div",
    "mul_div_up",
    "scale_by",
    "PRECISION",
]
