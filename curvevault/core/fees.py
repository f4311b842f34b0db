"""
Fees - Trade fee computation and distribution for curvevault.

Every trade pays up to three fee streams, all computed on the gross trade
amount (the value sent in on a buy, the curve output on a sell):

- admin: forwarded to the protocol fee recipient on every trade
- curator: accrued in the vault until the curator redeems it
- curve: credited to the secondary reserve (primary-curve trades only),
  which raises the floor valuation of the vault over time

Rates are SCALE-denominated. The distributor only computes splits and keeps
running totals; the vault applies them to its own balances.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from curvevault.core.config import SCALE
from curvevault.core.curve.fixed_point import mul_div_up, scale_by
from curvevault.utils.logger import get_logger

logger = get_logger("fees")


class FeeRegime(IntEnum):
    """Which curve a trade leg executes on."""
    ON_PRIMARY = 0
    ON_SECONDARY = 1


@dataclass(frozen=True)
class FeeBreakdown:
    """Fee split for a single trade leg."""
    gross: int
    admin: int
    curator: int
    curve: int
    regime: FeeRegime

    @property
    def total(self) -> int:
        return self.admin + self.curator + self.curve

    @property
    def net(self) -> int:
        """Amount left for the curve after fees."""
        return self.gross - self.total


class FeeDistributor:
    """
    Computes fee splits for the trading engine.

    Attributes:
        curve_fee: Curve fee rate in SCALE units
    """

    def __init__(self, curve_fee: int):
        if not 0 <= curve_fee < SCALE:
            raise ValueError(f"curve_fee must be in [0, {SCALE}), got {curve_fee}")
        self.curve_fee = curve_fee

        # Running totals
        self.total_fees_collected: int = 0
        self.total_admin_fees: int = 0
        self.total_curator_fees: int = 0
        self.total_curve_fees: int = 0

    def split(
        self,
        gross: int,
        regime: FeeRegime,
        admin_rate: int,
        curator_rate: int,
        curve_headroom: Optional[int] = None,
    ) -> FeeBreakdown:
        """
        Split a gross amount into fee streams.

        Args:
            gross: Gross trade amount
            regime: Curve the leg executes on
            admin_rate: Admin fee rate read from the protocol at trade time
            curator_rate: The vault's curator fee rate
            curve_headroom: Maximum curve fee the secondary reserve can absorb

        Returns:
            FeeBreakdown for the leg
        """
        admin = scale_by(gross, admin_rate)
        curator = scale_by(gross, curator_rate)
        curve = 0
        if regime == FeeRegime.ON_PRIMARY:
            curve = scale_by(gross, self.curve_fee)
            if curve_headroom is not None:
                curve = min(curve, max(curve_headroom, 0))

        return FeeBreakdown(
            gross=gross,
            admin=admin,
            curator=curator,
            curve=curve,
            regime=regime,
        )

    def gross_for_net(self, net: int, admin_rate: int, curator_rate: int) -> int:
        """
        Smallest gross amount whose secondary-regime net covers `net`.

        Used to size the secondary leg of a buy that crosses the curve
        boundary: the leg must deliver exactly the reserve still missing
        below the boundary after its own fees.
        """
        rate = admin_rate + curator_rate
        if rate >= SCALE:
            raise ValueError("Secondary fee rates consume the whole amount")
        gross = mul_div_up(net, SCALE, SCALE - rate)
        # Floors in the split can leave a unit or two of slack
        while gross > net and self._secondary_net(gross - 1, admin_rate, curator_rate) >= net:
            gross -= 1
        return gross

    @staticmethod
    def _secondary_net(gross: int, admin_rate: int, curator_rate: int) -> int:
        return gross - scale_by(gross, admin_rate) - scale_by(gross, curator_rate)

    def record(self, breakdown: FeeBreakdown) -> None:
        """Add an applied breakdown to the running totals."""
        self.total_fees_collected += breakdown.total
        self.total_admin_fees += breakdown.admin
        self.total_curator_fees += breakdown.curator
        self.total_curve_fees += breakdown.curve

        logger.debug(
            f"Fees on {breakdown.regime.name} gross={breakdown.gross}: "
            f"admin={breakdown.admin} curator={breakdown.curator} curve={breakdown.curve}"
        )

    def stats(self) -> dict:
        """Get fee statistics."""
        return {
            "total_collected": self.total_fees_collected,
            "admin": self.total_admin_fees,
            "curator": self.total_curator_fees,
            "curve": self.total_curve_fees,
        }
