"""
Error taxonomy for vault operations.

Every failed operation raises one of these after the vault, the chain
ledger and asset custody have been restored to their pre-call state.

- PreconditionError: wrong status, wrong time window, wrong caller, paused
- SlippageError: output or bid below what the caller required
- InvariantError: the operation would break a vault invariant
- TransferFailed: a recipient rejected an outbound native transfer
- CurveError: invalid input to the curve math
"""


class VaultError(Exception):
    """Base class for all vault operation failures."""

    reason = "vault error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.reason)


# =============================================================================
# Preconditions
# =============================================================================


class PreconditionError(VaultError):
    reason = "precondition failed"


class Paused(PreconditionError):
    reason = "Paused"


class NotPaused(PreconditionError):
    reason = "Not paused"


class BoughtOut(PreconditionError):
    reason = "Bought out"


class StatusNotInitialized(PreconditionError):
    reason = "Status != initialized"


class StatusNotBuyout(PreconditionError):
    reason = "Status != buyout"


class BuyoutTooEarly(PreconditionError):
    reason = "minBuyoutTime > now"


class BuyoutNotEnded(PreconditionError):
    reason = "buyoutEndTime > now"


class OnlyCurator(PreconditionError):
    reason = "Only curator"


class OnlyWinner(PreconditionError):
    reason = "Only winner"


class OnlyAdmin(PreconditionError):
    reason = "Only admin"


class NothingToWithdraw(PreconditionError):
    reason = "Nothing to withdraw"


class Reentrancy(PreconditionError):
    reason = "Reentrant call"


# =============================================================================
# Slippage
# =============================================================================


class SlippageError(VaultError):
    reason = "slippage"


class ReturnTooLow(SlippageError):
    reason = "Return too low"


class BidTooLow(SlippageError):
    reason = "Bid too low"


# =============================================================================
# Invariants
# =============================================================================


class InvariantError(VaultError):
    reason = "invariant violated"


class ExcessSell(InvariantError):
    reason = "Excess sell"


class ExcessInitialFunds(InvariantError):
    reason = "Excess initial funds"


class SecondaryRatioTooLow(InvariantError):
    reason = "secResRatio too low"


class InvalidFee(InvariantError):
    reason = "Invalid fee"


class FeeTooHigh(InvariantError):
    reason = "Fee too high"


class InitialReserveTooLow(InvariantError):
    reason = "Initial reserve balance too low"


class InsufficientTokens(InvariantError):
    reason = "Insufficient token balance"


class InsufficientBalance(InvariantError):
    reason = "Insufficient native balance"


class AssetNotHeld(InvariantError):
    reason = "Asset not held by sender"


# =============================================================================
# Transfers and math
# =============================================================================


class TransferFailed(VaultError):
    reason = "ETH transfer failed"


class CurveError(ValueError):
    """Invalid input to the bonding-curve formulas."""
