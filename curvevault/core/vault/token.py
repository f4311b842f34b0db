"""
Fraction Token - fungible claim on a vault.

Plain balance ledger with mint/burn controlled by the vault. Holders move
tokens with transfer(); only the vault mints on buys and burns on sells
and redemption.
"""

from typing import Dict

from curvevault.core.errors import InsufficientTokens


class FractionToken:
    """
    Balance ledger of a vault's fraction token.

    Attributes:
        name: Token name
        symbol: Token symbol
        decimals: Base-unit exponent of one whole token
        total_supply: Sum of all balances
    """

    def __init__(self, name: str, symbol: str, decimals: int = 18):
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self.total_supply = 0
        self._balances: Dict[bytes, int] = {}

    def balance_of(self, holder: bytes) -> int:
        return self._balances.get(holder, 0)

    @property
    def holders(self) -> int:
        return sum(1 for balance in self._balances.values() if balance > 0)

    def mint(self, to: bytes, amount: int) -> None:
        self._balances[to] = self.balance_of(to) + amount
        self.total_supply += amount

    def burn(self, holder: bytes, amount: int) -> None:
        balance = self.balance_of(holder)
        if amount > balance:
            raise InsufficientTokens(f"Balance {balance} < {amount}")
        self._balances[holder] = balance - amount
        self.total_supply -= amount

    def transfer(self, sender: bytes, to: bytes, amount: int) -> None:
        balance = self.balance_of(sender)
        if amount > balance:
            raise InsufficientTokens(f"Balance {balance} < {amount}")
        self._balances[sender] = balance - amount
        self._balances[to] = self.balance_of(to) + amount

    def __repr__(self) -> str:
        return f"FractionToken({self.symbol}, supply={self.total_supply}, holders={self.holders})"


__all__ = ["FractionToken"]
