"""Native-currency ledger, clock and asset custody"""
from curvevault.core.state.custody import AssetCustody
from curvevault.core.state.chain import Chain, ChainSnapshot, ReceiveHook, Stateful

__all__ = [
    "AssetCustody",
    "Chain",
    "ChainSnapshot",
    "ReceiveHook",
    "Stateful",
]
