"""
Vault - fractionalized asset with a dual bonding curve and buyout auction.

Conceptual Background:
---------------------
A curator escrows one non-fungible asset and seeds a secondary reserve.
The vault issues the whole initial token supply to the curator and from
then on mints and burns tokens against its two reserves:

1. **Secondary curve** (supply <= initial supply): backed by real funds
   seeded by the curator plus the curve fees of primary trades
2. **Primary curve** (supply > initial supply): starts from a fictitious
   reserve so its opening price equals the secondary curve's closing price

Buyout Lifecycle:
----------------
    INITIALIZED --initiate_buyout--> BUYOUT --deadline passes--> BOUGHT_OUT
         ^                             |
         +------- TWAV rejection ------+

While a buyout runs, every trade samples the pre-trade valuation into the
TWAV oracle (once per timestamp). If the trailing average reaches the
rejection valuation, the bid is rejected and its deposit parked as an
unsettled bid for the bidder. If the deadline passes first, the bidder
withdraws the asset and token holders redeem their share of the vault
balance.

Execution:
---------
Every public operation is atomic and non-reentrant. Checks run first,
then state changes, then outbound transfers; any failure restores the
vault, the chain balances and custody to their state before the call.
"""

from copy import deepcopy
from functools import wraps
from typing import TYPE_CHECKING, Dict, Optional, Sequence, Tuple

from curvevault.core.config import SCALE, ProtocolConfig
from curvevault.core.errors import (
    BidTooLow,
    BoughtOut,
    BuyoutNotEnded,
    BuyoutTooEarly,
    ExcessInitialFunds,
    ExcessSell,
    InsufficientTokens,
    InvalidFee,
    NothingToWithdraw,
    NotPaused,
    OnlyAdmin,
    OnlyCurator,
    OnlyWinner,
    Paused,
    Reentrancy,
    ReturnTooLow,
    SecondaryRatioTooLow,
    StatusNotBuyout,
    StatusNotInitialized,
)
from curvevault.core.fees import FeeDistributor
from curvevault.core.state.chain import Chain
from curvevault.core.twav import TwavObservation, TwavOracle
from curvevault.core.valuation import (
    CurveState,
    current_valuation,
    fictitious_reserve,
    implied_bid,
    initial_valuation,
    max_secondary_balance,
    secondary_ratio,
)
from curvevault.core.vault.params import VaultParams
from curvevault.core.vault.status import VaultStatus, effective_status
from curvevault.core.vault.token import FractionToken
from curvevault.core.vault.trading import TradePlan, plan_buy, plan_sell
from curvevault.crypto import short_hex
from curvevault.utils.logger import get_logger
from curvevault.utils.validation import (
    validate_address,
    validate_amount,
    validate_batch,
    validate_recipient,
)

if TYPE_CHECKING:
    from curvevault.core.protocol import ProtocolAdmin

logger = get_logger("vault")

# Attributes restored when an operation fails
_MUTABLE_STATE = (
    "token",
    "twav",
    "fees",
    "curator",
    "fee_accrued_curator",
    "primary_reserve_balance",
    "secondary_reserve_balance",
    "secondary_reserve_ratio",
    "status",
    "bidder",
    "buyout_bid",
    "buyout_valuation_deposit",
    "buyout_rejection_valuation",
    "buyout_end_time",
    "unsettled_bids",
    "total_unsettled_bids",
)


# =============================================================================
# Helpers
# =============================================================================


def transactional(method):
    """Run a vault operation atomically and reject nested entry."""

    @wraps(method)
    def wrapper(self, *args, **kwargs):
        if self._entered:
            raise Reentrancy()
        self._entered = True
        try:
            with self.chain.atomic():
                return method(self, *args, **kwargs)
        finally:
            self._entered = False

    return wrapper


def _require(check: Tuple[bool, str]) -> None:
    is_valid, error = check
    if not is_valid:
        raise ValueError(error)


# =============================================================================
# Vault
# =============================================================================


class Vault:
    """
    One fractionalized asset.

    Attributes:
        address: Vault account on the chain (holds the reserves)
        asset_address / asset_id: The escrowed non-fungible asset
        curator: Account that earns the curator fee
        initial_token_supply: Supply at the boundary between the curves
        initial_valuation: Valuation at the initial supply and price
        primary_reserve_balance: Primary reserve, fictitious part included
        secondary_reserve_balance: Real secondary reserve
        status: Stored status (see current_status for the effective one)
        unsettled_bids: Rejected buyout deposits awaiting withdrawal
    """

    def __init__(
        self,
        protocol: "ProtocolAdmin",
        chain: Chain,
        params: VaultParams,
        address: bytes,
        secondary_reserve_balance: int,
        config: ProtocolConfig,
    ):
        """
        Initialize a vault and issue the initial supply to the curator.

        Funding and asset escrow are the factory's job; see
        ProtocolAdmin.create_vault.

        Raises:
            ExcessInitialFunds: secondary reserve prices above the primary ratio
            SecondaryRatioTooLow: secondary reserve below the minimum ratio
            InvalidFee: explicit curator fee above the maximum
        """
        self.protocol = protocol
        self.chain = chain
        self.config = config
        self.address = address

        # Asset
        self.asset_address = params.asset_address
        self.asset_id = params.asset_id
        self.min_buyout_time = params.min_buyout_time

        # Curves
        self.initial_token_supply = params.initial_token_supply
        self.initial_token_price = params.initial_token_price
        self.initial_valuation = initial_valuation(
            params.initial_token_supply, params.initial_token_price, config.token_unit
        )
        if self.initial_valuation == 0:
            raise ValueError("Initial supply and price imply a zero valuation")

        self.primary_reserve_ratio = config.primary_reserve_ratio
        self.fictitious_primary_reserve_balance = fictitious_reserve(
            config.primary_reserve_ratio, self.initial_valuation
        )
        self.primary_reserve_balance = self.fictitious_primary_reserve_balance
        self.secondary_reserve_balance = secondary_reserve_balance
        self.secondary_reserve_ratio = secondary_ratio(secondary_reserve_balance, self.initial_valuation)

        if self.secondary_reserve_ratio > self.primary_reserve_ratio:
            raise ExcessInitialFunds()
        if self.secondary_reserve_ratio < config.min_secondary_reserve_ratio:
            raise SecondaryRatioTooLow()

        # Curator
        self.curator = params.curator
        if params.curator_fee is None:
            self.curator_fee = self.secondary_reserve_ratio * 10_000 // self.primary_reserve_ratio
        elif params.curator_fee > config.max_curator_fee:
            raise InvalidFee(f"Curator fee {params.curator_fee} exceeds {config.max_curator_fee}")
        else:
            self.curator_fee = params.curator_fee
        self.fee_accrued_curator = 0

        # Buyout
        self.status = VaultStatus.INITIALIZED
        self.bidder: Optional[bytes] = None
        self.buyout_bid = 0
        self.buyout_valuation_deposit = 0
        self.buyout_rejection_valuation = 0
        self.buyout_end_time = 0
        self.unsettled_bids: Dict[bytes, int] = {}
        self.total_unsettled_bids = 0

        # Components
        self.fees = FeeDistributor(config.curve_fee)
        self.twav = TwavOracle(config.twav_size)
        self.token = FractionToken(params.name, params.symbol, config.token_decimals)
        self.token.mint(params.curator, params.initial_token_supply)

        self._entered = False
        chain.register_state(self)

        logger.info(
            f"Vault {short_hex(address)} created: {params.symbol} supply={params.initial_token_supply} "
            f"valuation={self.initial_valuation} secondary_ratio={self.secondary_reserve_ratio}"
        )

    # =========================================================================
    # Snapshot
    # =========================================================================

    def snapshot(self) -> dict:
        return {name: deepcopy(getattr(self, name)) for name in _MUTABLE_STATE}

    def restore(self, snapshot: dict) -> None:
        for name, value in snapshot.items():
            setattr(self, name, deepcopy(value))

    # =========================================================================
    # Read Surface
    # =========================================================================

    @property
    def now(self) -> int:
        return self.chain.timestamp

    @property
    def name(self) -> str:
        return self.token.name

    @property
    def symbol(self) -> str:
        return self.token.symbol

    @property
    def decimals(self) -> int:
        return self.token.decimals

    @property
    def total_supply(self) -> int:
        return self.token.total_supply

    def balance_of(self, holder: bytes) -> int:
        return self.token.balance_of(holder)

    @property
    def balance(self) -> int:
        """Native currency held by the vault."""
        return self.chain.balance_of(self.address)

    @property
    def current_status(self) -> VaultStatus:
        return effective_status(self.status, self.buyout_end_time, self.now)

    @property
    def last_block_timestamp(self) -> int:
        return self.twav.last_timestamp

    @property
    def twav_index(self) -> int:
        return self.twav.index

    def twav_observation(self, i: int) -> TwavObservation:
        return self.twav.observation(i)

    @property
    def twav_observations(self):
        return self.twav.observations

    @property
    def max_secondary_reserve_balance(self) -> int:
        return max_secondary_balance(self.secondary_reserve_ratio, self.initial_valuation)

    def curve_state(self) -> CurveState:
        return CurveState(
            total_supply=self.total_supply,
            initial_token_supply=self.initial_token_supply,
            primary_reserve_balance=self.primary_reserve_balance,
            primary_reserve_ratio=self.primary_reserve_ratio,
            secondary_reserve_balance=self.secondary_reserve_balance,
            secondary_reserve_ratio=self.secondary_reserve_ratio,
            fictitious_primary_reserve_balance=self.fictitious_primary_reserve_balance,
        )

    def current_valuation(self) -> int:
        return current_valuation(self.curve_state())

    def quote_buy(self, value: int) -> TradePlan:
        """Plan a buy at current state without executing it."""
        return plan_buy(
            self.curve_state(),
            value,
            self.fees,
            self.protocol.fee_admin,
            self.curator_fee,
            self.initial_valuation,
        )

    def quote_sell(self, tokens_in: int) -> TradePlan:
        """Plan a sale at current state without executing it."""
        if tokens_in >= self.total_supply:
            raise ExcessSell()
        return plan_sell(
            self.curve_state(),
            tokens_in,
            self.fees,
            self.protocol.fee_admin,
            self.curator_fee,
            self.initial_valuation,
        )

    # =========================================================================
    # Guards
    # =========================================================================

    def _when_not_paused(self) -> None:
        if self.protocol.paused:
            raise Paused()

    def _when_not_bought_out(self) -> None:
        if self.current_status == VaultStatus.BOUGHT_OUT:
            raise BoughtOut()

    def _only_curator(self, sender: bytes) -> None:
        if sender != self.curator:
            raise OnlyCurator()

    def _only_winner(self, sender: bytes) -> None:
        if self.current_status != VaultStatus.BOUGHT_OUT or sender != self.bidder:
            raise OnlyWinner()

    # =========================================================================
    # TWAV and Rejection
    # =========================================================================

    def _update_twav(self) -> None:
        """Sample the current valuation and reject the bid if it has been outbid."""
        if self.twav.record(self.current_valuation(), self.now):
            self._check_rejection()

    def _check_rejection(self) -> None:
        average = self.twav.trailing_average()
        if average < self.buyout_rejection_valuation:
            return

        bidder = self.bidder
        deposit = self.buyout_valuation_deposit
        self.unsettled_bids[bidder] = self.unsettled_bids.get(bidder, 0) + deposit
        self.total_unsettled_bids += deposit

        self.bidder = None
        self.buyout_bid = 0
        self.buyout_valuation_deposit = 0
        self.buyout_rejection_valuation = 0
        self.buyout_end_time = 0
        self.twav.clear()
        self.status = VaultStatus.INITIALIZED

        logger.info(
            f"Buyout by {short_hex(bidder)} rejected on {self.symbol}: "
            f"TWAV {average} reached rejection valuation, {deposit} left unsettled"
        )

    # =========================================================================
    # Trading
    # =========================================================================

    def _apply_plan(self, plan: TradePlan) -> None:
        state = plan.state
        self.primary_reserve_balance = state.primary_reserve_balance
        self.secondary_reserve_balance = state.secondary_reserve_balance
        self.secondary_reserve_ratio = state.secondary_reserve_ratio
        self.fee_accrued_curator += plan.curator_fee
        for leg in plan.legs:
            self.fees.record(leg.fees)

    def _pay_admin_fee(self, amount: int) -> None:
        if amount > 0:
            self.chain.transfer(self.address, self.protocol.fee_to, amount)

    @transactional
    def buy(self, sender: bytes, value: int, min_tokens_out: int, to: bytes) -> int:
        """
        Buy fraction tokens with native currency.

        Args:
            sender: Buyer paying `value`
            value: Native currency sent with the call
            min_tokens_out: Minimum tokens to accept
            to: Receiver of the minted tokens

        Returns:
            Tokens minted
        """
        _require(validate_address(sender, "sender"))
        _require(validate_recipient(to, "to"))
        _require(validate_amount(value, "value"))
        _require(validate_amount(min_tokens_out, "min_tokens_out"))
        self._when_not_bought_out()
        self._when_not_paused()

        self.chain.transfer(sender, self.address, value)
        if self.status == VaultStatus.BUYOUT:
            self._update_twav()

        plan = self.quote_buy(value)
        if plan.tokens < min_tokens_out:
            raise ReturnTooLow(f"Return too low: {plan.tokens} < {min_tokens_out}")

        self._apply_plan(plan)
        self.token.mint(to, plan.tokens)
        self._pay_admin_fee(plan.admin_fee)

        logger.debug(
            f"Buy {self.symbol}: {short_hex(sender)} paid {value} for {plan.tokens} "
            f"({len(plan.legs)} leg(s)), supply={self.total_supply}"
        )
        return plan.tokens

    @transactional
    def sell(self, sender: bytes, tokens_in: int, min_amount_out: int, to: bytes) -> int:
        """
        Sell fraction tokens for native currency.

        Args:
            sender: Token holder
            tokens_in: Tokens to burn
            min_amount_out: Minimum native currency to accept
            to: Receiver of the proceeds

        Returns:
            Native currency paid out, net of fees
        """
        _require(validate_address(sender, "sender"))
        _require(validate_recipient(to, "to"))
        _require(validate_amount(tokens_in, "tokens_in"))
        _require(validate_amount(min_amount_out, "min_amount_out"))
        self._when_not_bought_out()
        self._when_not_paused()

        if tokens_in >= self.total_supply:
            raise ExcessSell()
        if self.balance_of(sender) < tokens_in:
            raise InsufficientTokens(f"Balance {self.balance_of(sender)} < {tokens_in}")

        if self.status == VaultStatus.BUYOUT:
            self._update_twav()

        plan = self.quote_sell(tokens_in)
        if plan.amount_out < min_amount_out:
            raise ReturnTooLow(f"Return too low: {plan.amount_out} < {min_amount_out}")

        self._apply_plan(plan)
        self.token.burn(sender, tokens_in)
        self._pay_admin_fee(plan.admin_fee)
        self.chain.transfer(self.address, to, plan.amount_out)

        logger.debug(
            f"Sell {self.symbol}: {short_hex(sender)} burned {tokens_in} for {plan.amount_out} "
            f"({len(plan.legs)} leg(s)), supply={self.total_supply}"
        )
        return plan.amount_out

    # =========================================================================
    # Buyout
    # =========================================================================

    @transactional
    def initiate_buyout(self, sender: bytes, value: int) -> int:
        """
        Start a buyout auction.

        The reserves already in the vault count towards the bid, so the
        bidder escrows only the gap to the current valuation. Anything
        above that is refunded.

        Args:
            sender: Bidder
            value: Native currency sent with the call

        Returns:
            The bid valuation
        """
        _require(validate_recipient(sender, "sender"))
        _require(validate_amount(value, "value"))
        self._when_not_paused()
        if self.now < self.min_buyout_time:
            raise BuyoutTooEarly()
        if self.current_status != VaultStatus.INITIALIZED:
            raise StatusNotInitialized()

        self.chain.transfer(sender, self.address, value)

        valuation = self.current_valuation()
        bid = implied_bid(value, self.curve_state())
        if bid < valuation:
            raise BidTooLow(f"Bid too low: {bid} < {valuation}")

        excess = bid - valuation
        self.bidder = sender
        self.buyout_bid = valuation
        self.buyout_valuation_deposit = value - excess
        self.buyout_rejection_valuation = valuation * (SCALE + self.config.rejection_premium) // SCALE
        self.buyout_end_time = self.now + self.config.buyout_duration
        self.status = VaultStatus.BUYOUT
        self.twav.record(valuation, self.now)

        if excess > 0:
            self.chain.transfer(self.address, sender, excess)

        logger.info(
            f"Buyout of {self.symbol} initiated by {short_hex(sender)}: valuation={valuation} "
            f"deposit={self.buyout_valuation_deposit} rejection_at={self.buyout_rejection_valuation} "
            f"ends={self.buyout_end_time}"
        )
        return valuation

    @transactional
    def update_twav(self, sender: bytes) -> None:
        """Record a TWAV observation without trading."""
        _require(validate_address(sender, "sender"))
        self._when_not_paused()
        if self.current_status != VaultStatus.BUYOUT:
            raise StatusNotBuyout()
        self._update_twav()

    @transactional
    def redeem(self, sender: bytes, to: bytes) -> int:
        """
        Burn the sender's whole balance for a share of the vault after a buyout.

        The curator's accrued fees and unsettled bids are not part of the
        redeemable balance.

        Returns:
            Native currency paid to `to`
        """
        _require(validate_address(sender, "sender"))
        _require(validate_recipient(to, "to"))
        self._when_not_paused()
        if self.status != VaultStatus.BUYOUT:
            raise StatusNotBuyout()
        if self.now < self.buyout_end_time:
            raise BuyoutNotEnded()

        balance = self.balance_of(sender)
        redeemable = self.balance - self.fee_accrued_curator - self.total_unsettled_bids
        amount = redeemable * balance // self.total_supply if self.total_supply else 0

        self.token.burn(sender, balance)
        if amount > 0:
            self.chain.transfer(self.address, to, amount)

        logger.info(f"Redeemed {balance} {self.symbol} of {short_hex(sender)} for {amount}")
        return amount

    @transactional
    def withdraw_unsettled_bids(self, sender: bytes, to: bytes) -> int:
        """Withdraw deposits of rejected buyouts credited to `sender`."""
        _require(validate_address(sender, "sender"))
        _require(validate_recipient(to, "to"))
        self._when_not_paused()

        amount = self.unsettled_bids.get(sender, 0)
        if amount == 0:
            raise NothingToWithdraw()

        del self.unsettled_bids[sender]
        self.total_unsettled_bids -= amount
        self.chain.transfer(self.address, to, amount)

        logger.info(f"Unsettled bid of {amount} withdrawn by {short_hex(sender)}")
        return amount

    # =========================================================================
    # Winner Withdrawals
    # =========================================================================

    @transactional
    def withdraw_erc721(self, sender: bytes, asset_address: bytes, asset_id: int, to: bytes) -> None:
        """Move a non-fungible asset held by the vault to `to`."""
        _require(validate_recipient(to, "to"))
        self._when_not_paused()
        self._only_winner(sender)
        self.chain.custody.transfer_erc721(self.address, to, asset_address, asset_id)
        logger.info(f"Winner {short_hex(sender)} withdrew ERC721 {short_hex(asset_address)}#{asset_id}")

    @transactional
    def withdraw_multiple_erc721(
        self,
        sender: bytes,
        asset_addresses: Sequence[bytes],
        asset_ids: Sequence[int],
        to: bytes,
    ) -> None:
        _require(validate_batch(asset_addresses, "asset_addresses"))
        _require(validate_batch(asset_ids, "asset_ids"))
        _require(validate_recipient(to, "to"))
        if len(asset_addresses) != len(asset_ids):
            raise ValueError("asset_addresses and asset_ids length mismatch")
        self._when_not_paused()
        self._only_winner(sender)
        for asset_address, asset_id in zip(asset_addresses, asset_ids):
            self.chain.custody.transfer_erc721(self.address, to, asset_address, asset_id)
        logger.info(f"Winner {short_hex(sender)} withdrew {len(asset_ids)} ERC721 assets")

    @transactional
    def withdraw_erc20(self, sender: bytes, token: bytes, to: bytes) -> int:
        """Move the vault's whole balance of a fungible token to `to`."""
        _require(validate_recipient(to, "to"))
        self._when_not_paused()
        self._only_winner(sender)
        amount = self.chain.custody.balance_of_erc20(token, self.address)
        self.chain.custody.transfer_erc20(self.address, to, token, amount)
        logger.info(f"Winner {short_hex(sender)} withdrew {amount} of ERC20 {short_hex(token)}")
        return amount

    @transactional
    def withdraw_multiple_erc20(self, sender: bytes, tokens: Sequence[bytes], to: bytes) -> None:
        _require(validate_batch(tokens, "tokens"))
        _require(validate_recipient(to, "to"))
        self._when_not_paused()
        self._only_winner(sender)
        for token in tokens:
            amount = self.chain.custody.balance_of_erc20(token, self.address)
            self.chain.custody.transfer_erc20(self.address, to, token, amount)
        logger.info(f"Winner {short_hex(sender)} withdrew {len(tokens)} ERC20 balances")

    @transactional
    def withdraw_erc1155(self, sender: bytes, asset_address: bytes, asset_id: int, to: bytes) -> int:
        """Move the vault's whole balance of one multi-token id to `to`."""
        _require(validate_recipient(to, "to"))
        self._when_not_paused()
        self._only_winner(sender)
        amount = self.chain.custody.balance_of_erc1155(asset_address, asset_id, self.address)
        self.chain.custody.transfer_erc1155(self.address, to, asset_address, asset_id, amount)
        logger.info(
            f"Winner {short_hex(sender)} withdrew {amount} of ERC1155 {short_hex(asset_address)}#{asset_id}"
        )
        return amount

    @transactional
    def withdraw_multiple_erc1155(
        self,
        sender: bytes,
        asset_addresses: Sequence[bytes],
        asset_ids: Sequence[int],
        to: bytes,
    ) -> None:
        _require(validate_batch(asset_addresses, "asset_addresses"))
        _require(validate_batch(asset_ids, "asset_ids"))
        _require(validate_recipient(to, "to"))
        if len(asset_addresses) != len(asset_ids):
            raise ValueError("asset_addresses and asset_ids length mismatch")
        self._when_not_paused()
        self._only_winner(sender)
        for asset_address, asset_id in zip(asset_addresses, asset_ids):
            amount = self.chain.custody.balance_of_erc1155(asset_address, asset_id, self.address)
            self.chain.custody.transfer_erc1155(self.address, to, asset_address, asset_id, amount)
        logger.info(f"Winner {short_hex(sender)} withdrew {len(asset_ids)} ERC1155 balances")

    # =========================================================================
    # Curator
    # =========================================================================

    @transactional
    def redeem_curator_fee(self, sender: bytes, to: bytes) -> int:
        """Pay out the curator's accrued fees."""
        _require(validate_recipient(to, "to"))
        self._when_not_paused()
        self._only_curator(sender)

        amount = self.fee_accrued_curator
        self.fee_accrued_curator = 0
        if amount > 0:
            self.chain.transfer(self.address, to, amount)

        logger.info(f"Curator fee of {amount} redeemed on {self.symbol}")
        return amount

    @transactional
    def update_curator(self, sender: bytes, new_curator: bytes) -> None:
        _require(validate_recipient(new_curator, "new_curator"))
        self._when_not_paused()
        self._only_curator(sender)
        self.curator = new_curator
        logger.info(f"Curator of {self.symbol} changed to {short_hex(new_curator)}")

    # =========================================================================
    # Token
    # =========================================================================

    @transactional
    def transfer(self, sender: bytes, to: bytes, amount: int) -> None:
        """Move fraction tokens between holders."""
        _require(validate_address(sender, "sender"))
        _require(validate_recipient(to, "to"))
        _require(validate_amount(amount, "amount"))
        self._when_not_paused()
        self.token.transfer(sender, to, amount)

    # =========================================================================
    # Emergency
    # =========================================================================

    @transactional
    def withdraw_asset_when_paused(self, sender: bytes, asset_address: bytes, asset_id: int, to: bytes) -> None:
        """Admin escape hatch: move an escrowed asset out while the protocol is paused."""
        _require(validate_recipient(to, "to"))
        if not self.protocol.paused:
            raise NotPaused()
        if sender != self.protocol.admin:
            raise OnlyAdmin()
        self.chain.custody.transfer_erc721(self.address, to, asset_address, asset_id)
        logger.warning(
            f"Asset {short_hex(asset_address)}#{asset_id} withdrawn from paused vault {self.symbol} by admin"
        )

    # =========================================================================
    # Statistics
    # =========================================================================

    def stats(self) -> dict:
        """Get vault statistics."""
        return {
            "address": self.address.hex(),
            "symbol": self.symbol,
            "status": self.current_status.name,
            "total_supply": self.total_supply,
            "initial_token_supply": self.initial_token_supply,
            "valuation": self.current_valuation(),
            "initial_valuation": self.initial_valuation,
            "primary_reserve_balance": self.primary_reserve_balance,
            "fictitious_primary_reserve_balance": self.fictitious_primary_reserve_balance,
            "secondary_reserve_balance": self.secondary_reserve_balance,
            "secondary_reserve_ratio": self.secondary_reserve_ratio,
            "fee_accrued_curator": self.fee_accrued_curator,
            "total_unsettled_bids": self.total_unsettled_bids,
            "balance": self.balance,
            "buyout_bid": self.buyout_bid,
            "buyout_rejection_valuation": self.buyout_rejection_valuation,
            "buyout_end_time": self.buyout_end_time,
            "twav": self.twav.trailing_average(),
            "fees": self.fees.stats(),
        }

    def __repr__(self) -> str:
        return (
            f"Vault({self.symbol}, status={self.current_status.name}, "
            f"supply={self.total_supply}, valuation={self.current_valuation()})"
        )


__all__ = ["Vault", "transactional"]
