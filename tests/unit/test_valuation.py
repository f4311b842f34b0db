"""
Unit tests for valuation and trade planning.

Tests cover:
1. Creation-time quantities
2. Valuation in both curve regimes
3. Buyout bid accounting
4. Single and two-leg trade plans
"""

from dataclasses import replace

import pytest

from curvevault.core.curve import purchase_return, sale_return
from curvevault.core.fees import FeeDistributor, FeeRegime
from curvevault.core.valuation import (
    CurveState,
    current_valuation,
    fictitious_reserve,
    implied_bid,
    initial_valuation,
    max_secondary_balance,
    secondary_ratio,
)
from curvevault.core.vault.trading import plan_buy, plan_sell

SUPPLY = 10**24
VALUATION = 10**20
FICTITIOUS = 25 * 10**18
SECONDARY = 10**19
ADMIN = 2_000
CURATOR = 4_000


@pytest.fixture
def boundary_state():
    """Vault state right after creation."""
    return CurveState(
        total_supply=SUPPLY,
        initial_token_supply=SUPPLY,
        primary_reserve_balance=FICTITIOUS,
        primary_reserve_ratio=250_000,
        secondary_reserve_balance=SECONDARY,
        secondary_reserve_ratio=100_000,
        fictitious_primary_reserve_balance=FICTITIOUS,
    )


@pytest.fixture
def fees():
    return FeeDistributor(curve_fee=4_000)


class TestCreationQuantities:
    """Tests for the values fixed at vault creation."""

    def test_initial_valuation(self):
        assert initial_valuation(SUPPLY, 10**14, 10**18) == VALUATION

    def test_fictitious_reserve(self):
        assert fictitious_reserve(250_000, VALUATION) == FICTITIOUS

    def test_secondary_ratio(self):
        assert secondary_ratio(SECONDARY, VALUATION) == 100_000

    def test_max_secondary_balance(self):
        assert max_secondary_balance(100_000, VALUATION) == SECONDARY


class TestValuation:
    """Tests for the implied valuation."""

    def test_boundary(self, boundary_state):
        assert not boundary_state.on_primary_curve
        assert current_valuation(boundary_state) == VALUATION

    def test_primary_surplus_counts_four_times(self, boundary_state):
        state = replace(
            boundary_state,
            total_supply=SUPPLY + 1,
            primary_reserve_balance=FICTITIOUS + 10**18,
        )
        assert state.primary_surplus == 10**18
        assert current_valuation(state) == VALUATION + 4 * 10**18

    def test_secondary_regime(self, boundary_state):
        state = replace(boundary_state, total_supply=SUPPLY // 2, secondary_reserve_balance=SECONDARY // 2)
        assert current_valuation(state) == VALUATION // 2

    def test_implied_bid_counts_reserves(self, boundary_state):
        assert implied_bid(9 * 10**19, boundary_state) == VALUATION


class TestPlanBuy:
    """Tests for buy planning."""

    def test_primary_only(self, boundary_state, fees):
        plan = plan_buy(boundary_state, 10**18, fees, ADMIN, CURATOR, VALUATION)

        assert len(plan.legs) == 1
        leg = plan.legs[0]
        assert leg.regime == FeeRegime.ON_PRIMARY
        assert leg.fees.net == 990 * 10**15
        assert plan.tokens == purchase_return(SUPPLY, FICTITIOUS, 250_000, 990 * 10**15)
        assert plan.state.primary_reserve_balance == FICTITIOUS + 990 * 10**15
        assert plan.state.secondary_reserve_balance == SECONDARY + 4 * 10**15
        assert plan.state.secondary_reserve_ratio == 100_040

    def test_secondary_only(self, boundary_state, fees):
        sold = SUPPLY // 10
        released = sale_return(SUPPLY, SECONDARY, 100_000, sold)
        state = replace(
            boundary_state,
            total_supply=SUPPLY - sold,
            secondary_reserve_balance=SECONDARY - released,
        )

        plan = plan_buy(state, 10**18, fees, ADMIN, CURATOR, VALUATION)

        assert len(plan.legs) == 1
        assert plan.legs[0].regime == FeeRegime.ON_SECONDARY
        assert plan.curve_fee == 0
        assert plan.state.total_supply < SUPPLY
        assert plan.state.secondary_reserve_ratio == 100_000

    def test_short_buy_stops_below_boundary(self, boundary_state, fees):
        state = replace(
            boundary_state,
            total_supply=SUPPLY - 1,
            secondary_reserve_balance=SECONDARY - 10**6,
        )

        plan = plan_buy(state, 10**6, fees, ADMIN, CURATOR, VALUATION)

        assert plan.tokens == 0
        assert plan.state.total_supply == SUPPLY - 1
        assert plan.state.secondary_reserve_balance == SECONDARY - 6_000

        follow = plan_buy(plan.state, 10**18, fees, ADMIN, CURATOR, VALUATION)
        assert follow.crosses_boundary
        assert follow.legs[0].reserve_delta == 6_000
        assert follow.state.secondary_reserve_balance >= SECONDARY

    def test_zero_value_at_filled_reserve(self, boundary_state, fees):
        state = replace(boundary_state, total_supply=SUPPLY - 10, secondary_reserve_balance=SECONDARY + 1)
        plan = plan_buy(state, 0, fees, ADMIN, CURATOR, VALUATION)
        assert plan.tokens == 0
        assert plan.state == state

    def test_crossing_buy_is_sum_of_legs(self, boundary_state, fees):
        sold = SUPPLY // 10
        released = sale_return(SUPPLY, SECONDARY, 100_000, sold)
        state = replace(
            boundary_state,
            total_supply=SUPPLY - sold,
            secondary_reserve_balance=SECONDARY - released,
        )
        value = 20 * 10**18

        plan = plan_buy(state, value, fees, ADMIN, CURATOR, VALUATION)

        needed = fees.gross_for_net(released, ADMIN, CURATOR)
        secondary = fees.split(needed, FeeRegime.ON_SECONDARY, ADMIN, CURATOR)
        remainder = value - released - secondary.admin - secondary.curator
        primary = fees.split(remainder, FeeRegime.ON_PRIMARY, ADMIN, CURATOR, FICTITIOUS - SECONDARY)
        primary_tokens = purchase_return(SUPPLY, FICTITIOUS, 250_000, primary.net)

        assert plan.crosses_boundary
        assert plan.legs[0].tokens == sold
        assert plan.legs[0].reserve_delta == released
        assert plan.legs[1].tokens == primary_tokens
        assert plan.tokens == sold + primary_tokens
        assert plan.state.secondary_reserve_balance == SECONDARY + primary.curve
        assert plan.state.primary_reserve_balance == FICTITIOUS + primary.net


class TestPlanSell:
    """Tests for sell planning."""

    def test_secondary_only(self, boundary_state, fees):
        plan = plan_sell(boundary_state, SUPPLY // 10, fees, ADMIN, CURATOR, VALUATION)
        gross = 6_513_215_599_000_000_000
        assert plan.legs[0].fees.gross == gross
        assert plan.amount_out == gross - gross * ADMIN // 10**6 - gross * CURATOR // 10**6
        assert plan.state.secondary_reserve_balance == SECONDARY - gross
        assert plan.state.secondary_reserve_ratio == 100_000

    def test_crossing_sell_empties_primary_first(self, boundary_state, fees):
        bought = plan_buy(boundary_state, 10**18, fees, ADMIN, CURATOR, VALUATION)
        state = bought.state
        primary_tokens = state.total_supply - SUPPLY

        plan = plan_sell(state, primary_tokens + SUPPLY // 10, fees, ADMIN, CURATOR, VALUATION)

        assert plan.crosses_boundary
        assert plan.legs[0].regime == FeeRegime.ON_PRIMARY
        assert plan.legs[0].fees.gross == 990 * 10**15
        assert plan.legs[1].tokens == SUPPLY // 10
        assert plan.state.primary_reserve_balance == FICTITIOUS
        assert plan.state.total_supply == SUPPLY - SUPPLY // 10


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
