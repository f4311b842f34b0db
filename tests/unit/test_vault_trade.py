"""
Unit tests for vault creation and trading.

Tests cover:
1. State after creation
2. Buys and sells on each curve and across the boundary
3. Fee accrual and admin fee forwarding
4. Slippage, pause and balance checks
5. Atomic rollback and re-entrancy
"""

from types import SimpleNamespace

import pytest

from curvevault.core.config import SCALE
from curvevault.core.curve import purchase_return
from curvevault.core.errors import (
    ExcessSell,
    InsufficientTokens,
    OnlyAdmin,
    Paused,
    Reentrancy,
    ReturnTooLow,
    TransferFailed,
)
from curvevault.core.protocol import ProtocolAdmin
from curvevault.core.state import Chain
from curvevault.core.vault import VaultParams, VaultStatus
from curvevault.crypto import address_from_label

SUPPLY = 10**24
PRICE = 10**14
RESERVE = 10**19
VALUATION = 10**20
FICTITIOUS = 25 * 10**18
FUNDING = 10**24


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def env():
    """Chain with one vault at its creation state."""
    accounts = {label: address_from_label(label) for label in ("admin", "fee", "curator", "alice", "bob")}
    chain = Chain(timestamp=1_000)
    for address in accounts.values():
        chain.mint(address, FUNDING)
    nft = address_from_label("nft")
    chain.custody.mint_erc721(nft, 7, accounts["curator"])

    protocol = ProtocolAdmin(chain, admin=accounts["admin"], fee_to=accounts["fee"])
    vault = protocol.create_vault(
        accounts["curator"],
        RESERVE,
        VaultParams(
            asset_address=nft,
            asset_id=7,
            curator=accounts["curator"],
            name="Test Vault",
            symbol="TV",
            initial_token_supply=SUPPLY,
            initial_token_price=PRICE,
        ),
    )
    return SimpleNamespace(chain=chain, protocol=protocol, vault=vault, nft=nft, **accounts)


def assert_reserves_backed(vault):
    """Vault balance covers the real reserves plus everything owed."""
    assert vault.balance == (
        vault.primary_reserve_balance
        - vault.fictitious_primary_reserve_balance
        + vault.secondary_reserve_balance
        + vault.fee_accrued_curator
        + vault.buyout_valuation_deposit
        + vault.total_unsettled_bids
    )


# =============================================================================
# Creation
# =============================================================================


class TestCreation:
    """Tests for the state of a new vault."""

    def test_initial_state(self, env):
        vault = env.vault
        assert vault.total_supply == SUPPLY
        assert vault.balance_of(env.curator) == SUPPLY
        assert vault.initial_valuation == VALUATION
        assert vault.primary_reserve_balance == FICTITIOUS
        assert vault.fictitious_primary_reserve_balance == FICTITIOUS
        assert vault.secondary_reserve_balance == RESERVE
        assert vault.secondary_reserve_ratio == 100_000
        assert vault.curator_fee == 4_000
        assert vault.current_status == VaultStatus.INITIALIZED
        assert vault.current_valuation() == VALUATION

    def test_asset_and_reserve_escrowed(self, env):
        assert env.chain.custody.owner_of(env.nft, 7) == env.vault.address
        assert env.vault.balance == RESERVE
        assert env.chain.balance_of(env.curator) == FUNDING - RESERVE

    def test_token_metadata(self, env):
        assert env.vault.name == "Test Vault"
        assert env.vault.symbol == "TV"
        assert env.vault.decimals == 18


# =============================================================================
# Buying
# =============================================================================


class TestBuy:
    """Tests for buys."""

    def test_primary_buy(self, env):
        vault = env.vault
        value = 10**18
        net = value - value * 10_000 // SCALE
        expected = purchase_return(SUPPLY, FICTITIOUS, 250_000, net)

        minted = vault.buy(env.alice, value, expected, env.alice)

        assert minted == expected
        assert vault.balance_of(env.alice) == expected
        assert vault.total_supply == SUPPLY + expected
        assert vault.primary_reserve_balance == FICTITIOUS + net
        assert vault.secondary_reserve_balance == RESERVE + 4 * 10**15
        assert vault.secondary_reserve_ratio == 100_040
        assert vault.fee_accrued_curator == 4 * 10**15
        assert env.chain.balance_of(env.fee) == FUNDING + 2 * 10**15
        assert env.chain.balance_of(env.alice) == FUNDING - value
        assert_reserves_backed(vault)

    def test_buy_raises_valuation(self, env):
        vault = env.vault
        before = vault.current_valuation()
        vault.buy(env.alice, 10**18, 0, env.alice)
        assert vault.current_valuation() > before

    def test_mint_to_other_address(self, env):
        minted = env.vault.buy(env.alice, 10**18, 0, env.bob)
        assert env.vault.balance_of(env.bob) == minted
        assert env.vault.balance_of(env.alice) == 0

    def test_return_too_low_rolls_back(self, env):
        vault = env.vault
        quote = vault.quote_buy(10**18).tokens

        with pytest.raises(ReturnTooLow):
            vault.buy(env.alice, 10**18, quote + 1, env.alice)

        assert vault.total_supply == SUPPLY
        assert vault.balance == RESERVE
        assert vault.fee_accrued_curator == 0
        assert env.chain.balance_of(env.alice) == FUNDING

    def test_quote_does_not_mutate(self, env):
        env.vault.quote_buy(10**18)
        assert env.vault.total_supply == SUPPLY
        assert env.vault.primary_reserve_balance == FICTITIOUS

    def test_admin_fee_read_at_trade_time(self, env):
        env.protocol.set_admin_fee(env.admin, 10_000)
        env.vault.buy(env.alice, 10**18, 0, env.alice)
        assert env.chain.balance_of(env.fee) == FUNDING + 10**16

    def test_crossing_buy(self, env):
        vault = env.vault
        vault.sell(env.curator, SUPPLY // 10, 0, env.curator)
        env.chain.advance(12)

        plan = vault.quote_buy(20 * 10**18)
        minted = vault.buy(env.alice, 20 * 10**18, 0, env.alice)

        assert plan.crosses_boundary
        assert minted == plan.tokens
        assert plan.legs[0].tokens == SUPPLY // 10
        assert vault.total_supply == SUPPLY + plan.legs[1].tokens
        assert vault.secondary_reserve_balance == RESERVE + plan.legs[1].fees.curve
        assert_reserves_backed(vault)

    def test_no_free_tokens_when_reserve_above_boundary_balance(self, env):
        """Curve fees leave the reserve above the floored boundary balance."""
        vault = env.vault
        minted = vault.buy(env.alice, 12_345_678_901_234_567, 0, env.alice)
        vault.sell(env.alice, minted, 0, env.alice)
        vault.sell(env.curator, 10**15, 0, env.curator)
        assert vault.secondary_reserve_balance >= vault.max_secondary_reserve_balance

        assert vault.buy(env.bob, 0, 0, env.bob) == 0
        assert vault.balance_of(env.bob) == 0
        assert vault.total_supply == SUPPLY - 10**15

        assert vault.buy(env.bob, 10**15, 0, env.bob) == 10**15
        assert vault.total_supply == SUPPLY
        assert_reserves_backed(vault)


# =============================================================================
# Selling
# =============================================================================


class TestSell:
    """Tests for sells."""

    def test_secondary_sell(self, env):
        vault = env.vault
        gross = 6_513_215_599_000_000_000
        net = gross - gross * 2_000 // SCALE - gross * 4_000 // SCALE

        received = vault.sell(env.curator, SUPPLY // 10, net, env.curator)

        assert received == net
        assert vault.total_supply == SUPPLY - SUPPLY // 10
        assert vault.secondary_reserve_balance == RESERVE - gross
        assert vault.secondary_reserve_ratio == 100_000
        assert env.chain.balance_of(env.curator) == FUNDING - RESERVE + net
        assert_reserves_backed(vault)

    def test_sell_lowers_valuation(self, env):
        vault = env.vault
        before = vault.current_valuation()
        vault.sell(env.curator, SUPPLY // 10, 0, env.curator)
        assert vault.current_valuation() < before

    def test_crossing_sell(self, env):
        vault = env.vault
        vault.buy(env.alice, 10**18, 0, env.alice)
        vault.transfer(env.alice, env.curator, vault.balance_of(env.alice))
        amount = vault.total_supply - SUPPLY + SUPPLY // 10

        plan = vault.quote_sell(amount)
        received = vault.sell(env.curator, amount, 0, env.curator)

        assert plan.crosses_boundary
        assert received == plan.amount_out
        assert vault.primary_reserve_balance == FICTITIOUS
        assert vault.total_supply == SUPPLY - SUPPLY // 10
        assert_reserves_backed(vault)

    def test_round_trip_never_creates_value(self, env):
        vault = env.vault
        minted = vault.buy(env.alice, 10**18, 0, env.alice)
        received = vault.sell(env.alice, minted, 0, env.alice)
        assert received < 10**18
        assert env.chain.balance_of(env.alice) < FUNDING

    def test_excess_sell(self, env):
        with pytest.raises(ExcessSell):
            env.vault.sell(env.curator, SUPPLY, 0, env.curator)

    def test_insufficient_tokens(self, env):
        with pytest.raises(InsufficientTokens):
            env.vault.sell(env.alice, 1, 0, env.alice)

    def test_return_too_low(self, env):
        quote = env.vault.quote_sell(SUPPLY // 10).amount_out
        with pytest.raises(ReturnTooLow):
            env.vault.sell(env.curator, SUPPLY // 10, quote + 1, env.curator)
        assert env.vault.balance_of(env.curator) == SUPPLY


# =============================================================================
# Guards and Atomicity
# =============================================================================


class TestGuards:
    """Tests for pause, rejected transfers and re-entrancy."""

    def test_paused_blocks_trading(self, env):
        env.protocol.pause(env.admin)
        with pytest.raises(Paused):
            env.vault.buy(env.alice, 10**18, 0, env.alice)
        with pytest.raises(Paused):
            env.vault.sell(env.curator, 1, 0, env.curator)
        with pytest.raises(Paused):
            env.vault.transfer(env.curator, env.bob, 1)

        env.protocol.unpause(env.admin)
        assert env.vault.buy(env.alice, 10**18, 0, env.alice) > 0

    def test_only_admin_pauses(self, env):
        with pytest.raises(OnlyAdmin):
            env.protocol.pause(env.alice)

    def test_refused_admin_fee_rolls_back(self, env):
        env.chain.register_receiver(env.fee, lambda chain, sender, amount: False)

        with pytest.raises(TransferFailed):
            env.vault.buy(env.alice, 10**18, 0, env.alice)

        assert env.vault.total_supply == SUPPLY
        assert env.vault.balance == RESERVE
        assert env.vault.fees.stats()["total_collected"] == 0
        assert env.chain.balance_of(env.alice) == FUNDING

    def test_reentrant_receiver(self, env):
        vault = env.vault
        minted = vault.buy(env.alice, 10**18, 0, env.alice)
        env.chain.advance(1)

        def reenter(chain, sender, amount):
            vault.buy(env.alice, 1, 0, env.alice)

        env.chain.register_receiver(env.alice, reenter)

        with pytest.raises(TransferFailed) as exc_info:
            vault.sell(env.alice, minted // 2, 0, env.alice)

        assert isinstance(exc_info.value.__cause__, Reentrancy)
        assert vault.balance_of(env.alice) == minted
        assert_reserves_backed(vault)

    def test_invalid_recipient(self, env):
        with pytest.raises(ValueError):
            env.vault.buy(env.alice, 10**18, 0, bytes(20))

    def test_float_amount_rejected(self, env):
        with pytest.raises(ValueError):
            env.vault.buy(env.alice, 1.5, 0, env.alice)


class TestTokenTransfer:
    """Tests for fraction token transfers."""

    def test_transfer(self, env):
        env.vault.transfer(env.curator, env.bob, 1_000)
        assert env.vault.balance_of(env.bob) == 1_000
        assert env.vault.balance_of(env.curator) == SUPPLY - 1_000

    def test_overdraft(self, env):
        with pytest.raises(InsufficientTokens):
            env.vault.transfer(env.bob, env.alice, 1)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
