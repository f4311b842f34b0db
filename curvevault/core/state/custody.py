"""
Asset Custody - ownership records for escrowed assets.

Tracks the three asset standards a vault can hold:
- Non-fungible (ERC721-style): one owner per (contract, id)
- Fungible (ERC20-style): balance per (contract, holder)
- Multi-fungible (ERC1155-style): balance per (contract, id, holder)

Contracts are identified by 20-byte addresses, like accounts.
"""

from copy import deepcopy
from typing import Dict, List, Optional, Sequence, Tuple

from curvevault.core.errors import AssetNotHeld
from curvevault.crypto import short_hex
from curvevault.utils.logger import get_logger

logger = get_logger("custody")


class AssetCustody:
    """
    Ownership ledger for external assets.

    Attributes:
        erc721_owners: (contract, id) -> owner
        erc20_balances: (contract, holder) -> balance
        erc1155_balances: (contract, id, holder) -> balance
    """

    def __init__(self):
        self.erc721_owners: Dict[Tuple[bytes, int], bytes] = {}
        self.erc20_balances: Dict[Tuple[bytes, bytes], int] = {}
        self.erc1155_balances: Dict[Tuple[bytes, int, bytes], int] = {}

    # =========================================================================
    # Non-fungible
    # =========================================================================

    def mint_erc721(self, contract: bytes, asset_id: int, owner: bytes) -> None:
        key = (contract, asset_id)
        if key in self.erc721_owners:
            raise ValueError(f"Token {asset_id} of {short_hex(contract)} already minted")
        self.erc721_owners[key] = owner

    def owner_of(self, contract: bytes, asset_id: int) -> Optional[bytes]:
        return self.erc721_owners.get((contract, asset_id))

    def transfer_erc721(self, sender: bytes, to: bytes, contract: bytes, asset_id: int) -> None:
        """Move a non-fungible asset from `sender` to `to`."""
        if self.owner_of(contract, asset_id) != sender:
            raise AssetNotHeld(f"{short_hex(sender)} does not own token {asset_id} of {short_hex(contract)}")
        self.erc721_owners[(contract, asset_id)] = to
        logger.debug(f"ERC721 {short_hex(contract)}#{asset_id}: {short_hex(sender)} -> {short_hex(to)}")

    # =========================================================================
    # Fungible
    # =========================================================================

    def mint_erc20(self, contract: bytes, holder: bytes, amount: int) -> None:
        key = (contract, holder)
        self.erc20_balances[key] = self.erc20_balances.get(key, 0) + amount

    def balance_of_erc20(self, contract: bytes, holder: bytes) -> int:
        return self.erc20_balances.get((contract, holder), 0)

    def transfer_erc20(self, sender: bytes, to: bytes, contract: bytes, amount: int) -> None:
        balance = self.balance_of_erc20(contract, sender)
        if amount > balance:
            raise AssetNotHeld(f"{short_hex(sender)} holds {balance} of {short_hex(contract)}, needs {amount}")
        self.erc20_balances[(contract, sender)] = balance - amount
        self.mint_erc20(contract, to, amount)

    # =========================================================================
    # Multi-fungible
    # =========================================================================

    def mint_erc1155(self, contract: bytes, asset_id: int, holder: bytes, amount: int) -> None:
        key = (contract, asset_id, holder)
        self.erc1155_balances[key] = self.erc1155_balances.get(key, 0) + amount

    def balance_of_erc1155(self, contract: bytes, asset_id: int, holder: bytes) -> int:
        return self.erc1155_balances.get((contract, asset_id, holder), 0)

    def transfer_erc1155(
        self,
        sender: bytes,
        to: bytes,
        contract: bytes,
        asset_id: int,
        amount: int,
    ) -> None:
        balance = self.balance_of_erc1155(contract, asset_id, sender)
        if amount > balance:
            raise AssetNotHeld(
                f"{short_hex(sender)} holds {balance} of {short_hex(contract)}#{asset_id}, needs {amount}"
            )
        self.erc1155_balances[(contract, asset_id, sender)] = balance - amount
        self.mint_erc1155(contract, asset_id, to, amount)

    def batch_transfer_erc1155(
        self,
        sender: bytes,
        to: bytes,
        contract: bytes,
        asset_ids: Sequence[int],
        amounts: Sequence[int],
    ) -> None:
        if len(asset_ids) != len(amounts):
            raise ValueError("asset_ids and amounts length mismatch")
        for asset_id, amount in zip(asset_ids, amounts):
            self.transfer_erc1155(sender, to, contract, asset_id, amount)

    # =========================================================================
    # Snapshot
    # =========================================================================

    def snapshot(self) -> Tuple[dict, dict, dict]:
        return (
            dict(self.erc721_owners),
            dict(self.erc20_balances),
            dict(self.erc1155_balances),
        )

    def restore(self, snapshot: Tuple[dict, dict, dict]) -> None:
        erc721, erc20, erc1155 = deepcopy(snapshot)
        self.erc721_owners = erc721
        self.erc20_balances = erc20
        self.erc1155_balances = erc1155

    def assets_of(self, holder: bytes) -> List[Tuple[bytes, int]]:
        """Non-fungible assets owned by `holder`."""
        return [key for key, owner in self.erc721_owners.items() if owner == holder]

    def __repr__(self) -> str:
        return (
            f"AssetCustody(erc721={len(self.erc721_owners)}, "
            f"erc20={len(self.erc20_balances)}, erc1155={len(self.erc1155_balances)})"
        )
