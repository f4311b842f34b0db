"""
TWAV - Time-weighted average valuation oracle.

Conceptual Background:
---------------------
While a buyout is running, the vault samples its own valuation and keeps a
fixed-size ring buffer of cumulative (valuation x elapsed seconds) readings:

    slot[i] = (timestamp_i, cumulative_i)
    cumulative_i = cumulative_{i-1} + valuation_i * (timestamp_i - timestamp_{i-1})

The trailing average over the window held by the buffer is

    (newest.cumulative - oldest.cumulative) / (newest.timestamp - oldest.timestamp)

Manipulation resistance:
-----------------------
At most one observation is written per timestamp. Many trades packed into
one block therefore contribute a single sample, and no zero-length interval
ever enters the denominator. The average is only reported once the buffer
has been filled, so a single spike cannot dominate a short window.
"""

from dataclasses import dataclass
from typing import List

from curvevault.utils.logger import get_logger

logger = get_logger("twav")


@dataclass(frozen=True)
class TwavObservation:
    """A single ring-buffer slot."""
    timestamp: int = 0
    cumulative_valuation: int = 0


EMPTY_OBSERVATION = TwavObservation()


class TwavOracle:
    """
    Fixed-capacity ring buffer of cumulative valuation observations.

    Attributes:
        size: Number of slots (fixed at construction)
        index: Slot the next observation is written to
        last_timestamp: Timestamp of the newest observation (0 when empty)
    """

    def __init__(self, size: int):
        if size < 2:
            raise ValueError(f"TWAV buffer needs at least 2 slots, got {size}")
        self.size = size
        self._slots: List[TwavObservation] = [EMPTY_OBSERVATION] * size
        self.index = 0
        self.last_timestamp = 0

    # =========================================================================
    # Read surface
    # =========================================================================

    def observation(self, i: int) -> TwavObservation:
        """Slot `i` of the buffer, in storage order."""
        if not 0 <= i < self.size:
            raise IndexError(f"Index {i} out of range [0, {self.size})")
        return self._slots[i]

    @property
    def observations(self) -> List[TwavObservation]:
        return list(self._slots)

    @property
    def is_full(self) -> bool:
        """True once every slot has been written at least once."""
        return self._slots[self.size - 1].timestamp != 0

    @property
    def newest(self) -> TwavObservation:
        return self._slots[(self.index + self.size - 1) % self.size]

    @property
    def oldest(self) -> TwavObservation:
        """The slot the next write will overwrite."""
        return self._slots[self.index]

    # =========================================================================
    # Updates
    # =========================================================================

    def record(self, valuation: int, timestamp: int) -> bool:
        """
        Record an observation.

        Args:
            valuation: Current vault valuation
            timestamp: Ledger timestamp of the observation

        Returns:
            True if a slot was written, False if this timestamp already
            has an observation
        """
        if timestamp == self.last_timestamp:
            return False
        if timestamp < self.last_timestamp:
            raise ValueError(f"Timestamp {timestamp} precedes last observation {self.last_timestamp}")

        elapsed = timestamp - self.last_timestamp
        previous = self._slots[(self.index + self.size - 1) % self.size]
        cumulative = previous.cumulative_valuation + valuation * elapsed

        self._slots[self.index] = TwavObservation(timestamp=timestamp, cumulative_valuation=cumulative)
        self.index = (self.index + 1) % self.size
        self.last_timestamp = timestamp

        logger.debug(f"TWAV observation t={timestamp} valuation={valuation} cumulative={cumulative}")
        return True

    def trailing_average(self) -> int:
        """
        Average valuation across the window held by the buffer.

        Returns 0 until the buffer has been filled once.
        """
        if not self.is_full:
            return 0

        newest = self.newest
        oldest = self.oldest
        return (newest.cumulative_valuation - oldest.cumulative_valuation) // (
            newest.timestamp - oldest.timestamp
        )

    def clear(self) -> None:
        """Reset every slot, the write index and the last timestamp."""
        self._slots = [EMPTY_OBSERVATION] * self.size
        self.index = 0
        self.last_timestamp = 0

    def __repr__(self) -> str:
        return f"TwavOracle(size={self.size}, index={self.index}, last_timestamp={self.last_timestamp})"
