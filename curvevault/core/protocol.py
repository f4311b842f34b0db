"""
Protocol Admin - factory and shared settings for every vault.

Vaults hold a reference to the admin and read from it at call time:
- fee_admin: admin fee rate charged on every trade
- fee_to: recipient of admin fees
- paused: global pause switch
- admin: account allowed to change the above

Changing a setting here therefore takes effect on every vault at once.
"""

from typing import Dict, List, Optional

from curvevault.core.config import ProtocolConfig, config as default_config
from curvevault.core.errors import FeeTooHigh, InitialReserveTooLow, OnlyAdmin, Paused
from curvevault.core.state.chain import Chain
from curvevault.core.vault.params import VaultParams
from curvevault.core.vault.vault import Vault
from curvevault.crypto import keccak256, short_hex, vault_address
from curvevault.utils.logger import get_logger
from curvevault.utils.validation import validate_amount, validate_recipient

logger = get_logger("protocol")


class ProtocolAdmin:
    """
    Vault factory and holder of protocol-wide settings.

    Attributes:
        address: Factory account, used to derive vault addresses
        admin: Account with admin rights
        fee_to: Recipient of admin fees
        fee_admin: Admin fee rate in SCALE units
        paused: True while the protocol is paused
        vaults: vault address -> Vault
    """

    def __init__(
        self,
        chain: Chain,
        admin: bytes,
        fee_to: Optional[bytes] = None,
        config: Optional[ProtocolConfig] = None,
    ):
        is_valid, error = validate_recipient(admin, "admin")
        if not is_valid:
            raise ValueError(error)

        self.chain = chain
        self.config = config or default_config
        self.admin = admin
        self.fee_to = fee_to or admin
        self.fee_admin = self.config.default_admin_fee
        self.paused = False
        self.address = keccak256(b"curvevault.factory" + admin)[-20:]
        self.vaults: Dict[bytes, Vault] = {}

        chain.register_state(self)

    # =========================================================================
    # Snapshot
    # =========================================================================

    def snapshot(self) -> tuple:
        return (self.admin, self.fee_to, self.fee_admin, self.paused, dict(self.vaults))

    def restore(self, snapshot: tuple) -> None:
        self.admin, self.fee_to, self.fee_admin, self.paused, vaults = snapshot
        self.vaults = dict(vaults)

    # =========================================================================
    # Settings
    # =========================================================================

    def _only_admin(self, sender: bytes) -> None:
        if sender != self.admin:
            raise OnlyAdmin()

    def set_admin_fee(self, sender: bytes, fee: int) -> None:
        """Set the admin fee rate charged by every vault."""
        self._only_admin(sender)
        is_valid, error = validate_amount(fee, "fee")
        if not is_valid:
            raise ValueError(error)
        if fee > self.config.max_admin_fee:
            raise FeeTooHigh(f"Admin fee {fee} exceeds {self.config.max_admin_fee}")
        self.fee_admin = fee
        logger.info(f"Admin fee set to {fee}")

    def set_fee_to(self, sender: bytes, fee_to: bytes) -> None:
        self._only_admin(sender)
        is_valid, error = validate_recipient(fee_to, "fee_to")
        if not is_valid:
            raise ValueError(error)
        self.fee_to = fee_to
        logger.info(f"Admin fee recipient set to {short_hex(fee_to)}")

    def set_admin(self, sender: bytes, new_admin: bytes) -> None:
        self._only_admin(sender)
        is_valid, error = validate_recipient(new_admin, "new_admin")
        if not is_valid:
            raise ValueError(error)
        self.admin = new_admin
        logger.info(f"Admin role moved to {short_hex(new_admin)}")

    def pause(self, sender: bytes) -> None:
        self._only_admin(sender)
        self.paused = True
        logger.warning("Protocol paused")

    def unpause(self, sender: bytes) -> None:
        self._only_admin(sender)
        self.paused = False
        logger.info("Protocol unpaused")

    # =========================================================================
    # Factory
    # =========================================================================

    def get_vault_address(self, params: VaultParams) -> bytes:
        """Address create_vault would assign to a vault for `params`."""
        return vault_address(
            self.address,
            params.curator,
            params.asset_address,
            params.asset_id,
            params.initial_token_supply,
            params.initial_token_price,
        )

    def create_vault(self, sender: bytes, value: int, params: VaultParams) -> Vault:
        """
        Fractionalize an asset.

        Pulls the asset from `sender` into the new vault, funds the
        secondary reserve with `value` and mints the initial supply to the
        curator. All or nothing.

        Args:
            sender: Current owner of the asset, paying the initial reserve
            value: Initial secondary reserve balance
            params: Validated creation parameters

        Returns:
            The new vault

        Raises:
            Paused: protocol is paused
            InitialReserveTooLow: value below the minimum initial reserve
            AssetNotHeld: sender does not own the asset
        """
        is_valid, error = validate_amount(value, "value")
        if not is_valid:
            raise ValueError(error)
        if self.paused:
            raise Paused()
        if value < self.config.min_initial_reserve_balance:
            raise InitialReserveTooLow(
                f"Initial reserve {value} below {self.config.min_initial_reserve_balance}"
            )

        address = self.get_vault_address(params)
        if address in self.vaults:
            raise ValueError(f"Vault {short_hex(address)} already exists")

        with self.chain.atomic():
            vault = Vault(
                protocol=self,
                chain=self.chain,
                params=params,
                address=address,
                secondary_reserve_balance=value,
                config=self.config,
            )
            self.chain.custody.transfer_erc721(sender, address, params.asset_address, params.asset_id)
            self.chain.transfer(sender, address, value)
            self.vaults[address] = vault

        logger.info(
            f"Created vault {short_hex(address)} for {short_hex(params.asset_address)}#{params.asset_id} "
            f"curated by {short_hex(params.curator)}"
        )
        return vault

    def list_vaults(self) -> List[Vault]:
        return list(self.vaults.values())

    def stats(self) -> dict:
        """Get protocol statistics."""
        return {
            "vaults": len(self.vaults),
            "fee_admin": self.fee_admin,
            "paused": self.paused,
            "fee_to_balance": self.chain.balance_of(self.fee_to),
        }


__all__ = ["ProtocolAdmin"]
