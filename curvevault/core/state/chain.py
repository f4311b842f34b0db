"""
Chain - native-currency ledger and clock shared by every vault.

Conceptual Background:
---------------------
Vault operations run against a single ordered execution environment:

1. **Balances**: native currency held by each 20-byte address
2. **Clock**: the current timestamp. Operations issued without advancing
   the clock share a timestamp, which is how one block is modelled
3. **Receivers**: addresses backed by code. A receive hook runs on every
   inbound transfer and may refuse it or call back into a vault

Atomicity:
---------
Vault operations run inside Chain.atomic(). It snapshots balances, custody
and every registered participant (vaults, the protocol admin) and restores
them when the block raises, so a transfer refused halfway through an
operation leaves no partial payment behind.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Protocol, Tuple

from curvevault.core.errors import InsufficientBalance, TransferFailed
from curvevault.core.state.custody import AssetCustody
from curvevault.crypto import short_hex
from curvevault.utils.logger import get_logger

logger = get_logger("chain")

# hook(chain, sender, amount) -> False to refuse the transfer
ReceiveHook = Callable[["Chain", bytes, int], Optional[bool]]


class Stateful(Protocol):
    """Anything whose state must roll back with the chain."""

    def snapshot(self) -> Any: ...

    def restore(self, snapshot: Any) -> None: ...


# =============================================================================
# Chain State
# =============================================================================


@dataclass
class ChainSnapshot:
    """Restorable copy of balances, custody records and participant state."""
    balances: Dict[bytes, int]
    custody: tuple
    participants: List[Tuple[Stateful, Any]] = field(default_factory=list)


class Chain:
    """
    Shared ledger of native balances, time and asset custody.

    Attributes:
        balances: address -> native balance
        timestamp: Current time in seconds
        custody: Ownership records for escrowed assets
    """

    def __init__(self, timestamp: int = 1, custody: Optional[AssetCustody] = None):
        """
        Initialize the chain.

        Args:
            timestamp: Starting time. Must be positive, zero marks an
                empty TWAV slot.
            custody: Asset custody records. None = fresh, empty custody.
        """
        if timestamp <= 0:
            raise ValueError(f"timestamp must be positive, got {timestamp}")
        self.balances: Dict[bytes, int] = {}
        self.timestamp = timestamp
        self.custody = custody if custody is not None else AssetCustody()
        self._receivers: Dict[bytes, ReceiveHook] = {}
        self._participants: List[Stateful] = []

        # Statistics
        self.transfer_count = 0
        self.refused_count = 0

    # =========================================================================
    # Clock
    # =========================================================================

    def advance(self, seconds: int) -> int:
        """Move the clock forward. Returns the new timestamp."""
        if seconds < 0:
            raise ValueError(f"Cannot move time backwards by {-seconds}s")
        self.timestamp += seconds
        return self.timestamp

    def set_time(self, timestamp: int) -> None:
        if timestamp < self.timestamp:
            raise ValueError(f"Cannot rewind from {self.timestamp} to {timestamp}")
        self.timestamp = timestamp

    # =========================================================================
    # Balances
    # =========================================================================

    def balance_of(self, address: bytes) -> int:
        return self.balances.get(address, 0)

    def mint(self, address: bytes, amount: int) -> None:
        """Create native currency out of thin air (funding test accounts)."""
        if amount < 0:
            raise ValueError(f"amount must be non-negative, got {amount}")
        self.balances[address] = self.balance_of(address) + amount

    def transfer(self, sender: bytes, to: bytes, amount: int) -> None:
        """
        Move native currency and run the recipient's receive hook.

        Args:
            sender: Paying address
            to: Receiving address
            amount: Amount in base units

        Raises:
            InsufficientBalance: sender cannot cover the amount
            TransferFailed: the recipient refused the transfer
        """
        if amount < 0:
            raise ValueError(f"amount must be non-negative, got {amount}")
        balance = self.balance_of(sender)
        if amount > balance:
            raise InsufficientBalance(f"{short_hex(sender)} has {balance}, needs {amount}")

        self.balances[sender] = balance - amount
        self.balances[to] = self.balance_of(to) + amount
        self.transfer_count += 1

        hook = self._receivers.get(to)
        if hook is None:
            return

        try:
            accepted = hook(self, sender, amount)
        except Exception as e:
            self.refused_count += 1
            logger.warning(f"Transfer of {amount} to {short_hex(to)} reverted in receiver: {e}")
            raise TransferFailed() from e

        if accepted is False:
            self.refused_count += 1
            logger.warning(f"Transfer of {amount} to {short_hex(to)} refused by receiver")
            raise TransferFailed()

    # =========================================================================
    # Receivers
    # =========================================================================

    def register_receiver(self, address: bytes, hook: ReceiveHook) -> None:
        """Attach a receive hook to `address`."""
        self._receivers[address] = hook

    def remove_receiver(self, address: bytes) -> None:
        self._receivers.pop(address, None)

    def has_receiver(self, address: bytes) -> bool:
        return address in self._receivers

    # =========================================================================
    # Snapshot
    # =========================================================================

    def register_state(self, participant: Stateful) -> None:
        """Include `participant` in every snapshot taken from now on."""
        self._participants.append(participant)

    def snapshot(self) -> ChainSnapshot:
        return ChainSnapshot(
            balances=dict(self.balances),
            custody=self.custody.snapshot(),
            participants=[(p, p.snapshot()) for p in self._participants],
        )

    def restore(self, snapshot: ChainSnapshot) -> None:
        self.balances = dict(snapshot.balances)
        self.custody.restore(snapshot.custody)
        self._participants = [participant for participant, _ in snapshot.participants]
        for participant, state in snapshot.participants:
            participant.restore(state)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """
        Run a block all-or-nothing.

        Any exception restores balances, custody and every registered
        participant to their state on entry, then propagates.
        """
        snapshot = self.snapshot()
        try:
            yield
        except Exception:
            self.restore(snapshot)
            raise

    def stats(self) -> dict:
        """Get chain statistics."""
        return {
            "timestamp": self.timestamp,
            "accounts": len(self.balances),
            "total_supply": sum(self.balances.values()),
            "transfers": self.transfer_count,
            "refused": self.refused_count,
            "receivers": len(self._receivers),
        }

    def __repr__(self) -> str:
        return f"Chain(timestamp={self.timestamp}, accounts={len(self.balances)})"
