"""
Trade Planning - buys and sells across the two curves.

Conceptual Background:
---------------------
Supply below the initial issuance trades on the secondary curve, supply
above it on the primary curve. A trade that crosses the boundary is split
into two legs:

    buy:  secondary leg up to the boundary, primary leg for the rest
    sell: primary leg down to the boundary, secondary leg for the rest

Each leg pays the fees of the curve it executes on. Primary legs also pay
the curve fee, which moves into the secondary reserve and re-prices the
secondary curve.

Planning is pure: plan_buy / plan_sell take a CurveState and return the
legs plus the state the vault ends up in. The vault applies a plan after
its checks pass; quotes use the same functions without applying.
"""

from dataclasses import dataclass, replace
from typing import Tuple

from curvevault.core.curve.bancor import purchase_return, sale_return
from curvevault.core.fees import FeeBreakdown, FeeDistributor, FeeRegime
from curvevault.core.valuation import CurveState, max_secondary_balance, secondary_ratio


# =============================================================================
# Plan Types
# =============================================================================


@dataclass(frozen=True)
class TradeLeg:
    """
    One curve's part of a trade.

    Attributes:
        fees: Fee split of the leg (gross is what the leg consumed or released)
        tokens: Tokens minted (buy) or burned (sell) by the leg
        reserve_delta: Signed change of the leg's own reserve, excluding
            any curve fee credited to the secondary reserve
    """
    fees: FeeBreakdown
    tokens: int
    reserve_delta: int

    @property
    def regime(self) -> FeeRegime:
        return self.fees.regime


@dataclass(frozen=True)
class TradePlan:
    """Legs of a trade and the curve state after applying them."""
    legs: Tuple[TradeLeg, ...]
    state: CurveState

    @property
    def tokens(self) -> int:
        return sum(leg.tokens for leg in self.legs)

    @property
    def amount_out(self) -> int:
        """Native currency paid to the seller."""
        return sum(leg.fees.net for leg in self.legs)

    @property
    def admin_fee(self) -> int:
        return sum(leg.fees.admin for leg in self.legs)

    @property
    def curator_fee(self) -> int:
        return sum(leg.fees.curator for leg in self.legs)

    @property
    def curve_fee(self) -> int:
        return sum(leg.fees.curve for leg in self.legs)

    @property
    def crosses_boundary(self) -> bool:
        return len(self.legs) > 1


# =============================================================================
# Helpers
# =============================================================================


def _credit_curve_fee(state: CurveState, curve_fee: int, initial_valuation: int) -> CurveState:
    if curve_fee == 0:
        return state
    balance = state.secondary_reserve_balance + curve_fee
    return replace(
        state,
        secondary_reserve_balance=balance,
        secondary_reserve_ratio=secondary_ratio(balance, initial_valuation),
    )


def _curve_headroom(state: CurveState) -> int:
    """Curve fee the secondary reserve can absorb without out-pricing the primary curve."""
    return state.fictitious_primary_reserve_balance - state.secondary_reserve_balance


def _buy_primary(
    state: CurveState,
    gross: int,
    fees: FeeDistributor,
    admin_rate: int,
    curator_rate: int,
    initial_valuation: int,
) -> Tuple[TradeLeg, CurveState]:
    breakdown = fees.split(gross, FeeRegime.ON_PRIMARY, admin_rate, curator_rate, _curve_headroom(state))
    tokens = purchase_return(
        state.total_supply,
        state.primary_reserve_balance,
        state.primary_reserve_ratio,
        breakdown.net,
    )
    state = replace(
        state,
        total_supply=state.total_supply + tokens,
        primary_reserve_balance=state.primary_reserve_balance + breakdown.net,
    )
    state = _credit_curve_fee(state, breakdown.curve, initial_valuation)
    return TradeLeg(fees=breakdown, tokens=tokens, reserve_delta=breakdown.net), state


# =============================================================================
# Planning
# =============================================================================


def plan_buy(
    state: CurveState,
    value: int,
    fees: FeeDistributor,
    admin_rate: int,
    curator_rate: int,
    initial_valuation: int,
) -> TradePlan:
    """
    Plan a buy of `value` native currency.

    Args:
        state: Curve state before the trade
        value: Native currency sent with the buy
        fees: Fee calculator (carries the curve fee rate)
        admin_rate: Protocol admin fee rate at trade time
        curator_rate: Curator fee rate of the vault
        initial_valuation: Valuation at the initial supply and price

    Returns:
        TradePlan with one or two legs
    """
    if state.total_supply >= state.initial_token_supply:
        leg, state = _buy_primary(state, value, fees, admin_rate, curator_rate, initial_valuation)
        return TradePlan(legs=(leg,), state=state)

    boundary_tokens = state.initial_token_supply - state.total_supply
    diff = max_secondary_balance(state.secondary_reserve_ratio, initial_valuation) - state.secondary_reserve_balance
    # The floored ratio can put the boundary balance below the reserve already held
    filled = diff <= 0
    needed = 0 if filled else fees.gross_for_net(diff, admin_rate, curator_rate)

    if filled or value < needed:
        breakdown = fees.split(value, FeeRegime.ON_SECONDARY, admin_rate, curator_rate)
        tokens = purchase_return(
            state.total_supply,
            state.secondary_reserve_balance,
            state.secondary_reserve_ratio,
            breakdown.net,
        )
        # Supply reaches the boundary only with the boundary reserve behind it
        tokens = min(tokens, boundary_tokens if filled else boundary_tokens - 1)
        state = replace(
            state,
            total_supply=state.total_supply + tokens,
            secondary_reserve_balance=state.secondary_reserve_balance + breakdown.net,
        )
        leg = TradeLeg(fees=breakdown, tokens=tokens, reserve_delta=breakdown.net)
        return TradePlan(legs=(leg,), state=state)

    # Secondary leg tops the reserve up to exactly the boundary balance
    breakdown = fees.split(needed, FeeRegime.ON_SECONDARY, admin_rate, curator_rate)
    secondary_leg = TradeLeg(fees=breakdown, tokens=boundary_tokens, reserve_delta=diff)
    state = replace(
        state,
        total_supply=state.initial_token_supply,
        secondary_reserve_balance=state.secondary_reserve_balance + diff,
    )

    remainder = value - diff - breakdown.admin - breakdown.curator
    if remainder == 0:
        return TradePlan(legs=(secondary_leg,), state=state)

    primary_leg, state = _buy_primary(state, remainder, fees, admin_rate, curator_rate, initial_valuation)
    return TradePlan(legs=(secondary_leg, primary_leg), state=state)


def plan_sell(
    state: CurveState,
    tokens_in: int,
    fees: FeeDistributor,
    admin_rate: int,
    curator_rate: int,
    initial_valuation: int,
) -> TradePlan:
    """
    Plan a sale of `tokens_in` fraction tokens.

    The caller guarantees tokens_in < state.total_supply.

    Returns:
        TradePlan with one or two legs; amount_out is what the seller receives
    """
    legs = []
    remaining = tokens_in

    if state.on_primary_curve:
        primary_tokens = state.total_supply - state.initial_token_supply
        if tokens_in <= primary_tokens:
            leg_tokens = tokens_in
            gross = min(
                sale_return(
                    state.total_supply,
                    state.primary_reserve_balance,
                    state.primary_reserve_ratio,
                    tokens_in,
                ),
                state.primary_surplus,
            )
        else:
            # Selling through the boundary releases the whole real primary reserve
            leg_tokens = primary_tokens
            gross = state.primary_surplus

        breakdown = fees.split(gross, FeeRegime.ON_PRIMARY, admin_rate, curator_rate, _curve_headroom(state))
        state = replace(
            state,
            total_supply=state.total_supply - leg_tokens,
            primary_reserve_balance=state.primary_reserve_balance - gross,
        )
        state = _credit_curve_fee(state, breakdown.curve, initial_valuation)
        legs.append(TradeLeg(fees=breakdown, tokens=leg_tokens, reserve_delta=-gross))
        remaining -= leg_tokens

    if remaining > 0:
        gross = sale_return(
            state.total_supply,
            state.secondary_reserve_balance,
            state.secondary_reserve_ratio,
            remaining,
        )
        breakdown = fees.split(gross, FeeRegime.ON_SECONDARY, admin_rate, curator_rate)
        state = replace(
            state,
            total_supply=state.total_supply - remaining,
            secondary_reserve_balance=state.secondary_reserve_balance - gross,
        )
        legs.append(TradeLeg(fees=breakdown, tokens=remaining, reserve_delta=-gross))

    return TradePlan(legs=tuple(legs), state=state)


__all__ = ["TradeLeg", "TradePlan", "plan_buy", "plan_sell"]
