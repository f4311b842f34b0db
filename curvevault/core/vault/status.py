"""Vault lifecycle status."""

from enum import IntEnum


class VaultStatus(IntEnum):
    """
    Stored status of a vault.

    BOUGHT_OUT is never written. A vault whose buyout deadline has passed
    keeps BUYOUT in storage and is reported as BOUGHT_OUT by
    effective_status().
    """
    INITIALIZED = 0
    BUYOUT = 1
    BOUGHT_OUT = 2


def effective_status(status: VaultStatus, buyout_end_time: int, now: int) -> VaultStatus:
    """Status as seen by every operation at time `now`."""
    if status == VaultStatus.BUYOUT and now >= buyout_end_time:
        return VaultStatus.BOUGHT_OUT
    return status


__all__ = ["VaultStatus", "effective_status"]
