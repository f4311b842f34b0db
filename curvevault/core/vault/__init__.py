"""Vault engine: trading, buyout auction and fraction token"""
from curvevault.core.vault.status import VaultStatus, effective_status
from curvevault.core.vault.params import VaultParams
from curvevault.core.vault.token import FractionToken
from curvevault.core.vault.trading import TradeLeg, TradePlan, plan_buy, plan_sell
from curvevault.core.vault.vault import Vault

__all__ = [
    "VaultStatus",
    "effective_status",
    "VaultParams",
    "FractionToken",
    "TradeLeg",
    "TradePlan",
    "plan_buy",
    "plan_sell",
    "Vault",
]
