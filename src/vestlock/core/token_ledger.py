"""
vestlock - In-Memory Token Ledger

Multi-asset balance ledger used as the custodial backend of vesting
engines in simulations and tests. Each asset has a fixed supply allotted
to its owner at creation and can be closed by that owner, which makes
every transfer of the asset fail until it is reopened.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from .vesting_exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


class TokenLedger:
    """
    Holds balances per asset and executes transfers between holders.

    Transfers return False instead of raising, mirroring a token contract
    that reports success or failure to its caller.
    """

    def __init__(self) -> None:
        # {asset: {holder: amount}}
        self.balances: dict[str, dict[str, int]] = {}
        self.owners: dict[str, str] = {}
        self.total_supply: dict[str, int] = {}
        self.closed: set[str] = set()
        self._lock = threading.RLock()

    def create_asset(self, asset: str, owner: str, supply: int) -> None:
        """
        Register a new asset and allot its whole supply to owner.

        Args:
            asset: Asset identifier
            owner: Holder receiving the supply and controlling close/open
            supply: Fixed supply in base units
        """
        if not asset:
            raise ValueError("Asset identifier cannot be empty.")
        if not owner:
            raise ValueError("Asset owner cannot be empty.")
        if not isinstance(supply, int) or isinstance(supply, bool) or supply < 0:
            raise ValueError("Supply must be a non-negative integer.")

        with self._lock:
            if asset in self.balances:
                raise ValueError(f"Asset {asset} already exists.")
            self.balances[asset] = {owner: supply}
            self.owners[asset] = owner
            self.total_supply[asset] = supply

        logger.info(
            "Asset created",
            extra={"event": "ledger.asset_created", "asset": asset, "supply": supply},
        )

    def balance_of(self, asset: str, holder: str) -> int:
        with self._lock:
            return self.balances.get(asset, {}).get(holder, 0)

    def transfer(self, asset: str, sender: str, recipient: str, amount: int) -> bool:
        """
        Transfer amount of asset from sender to recipient.

        Returns:
            True if the transfer was applied, False otherwise.
        """
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            logger.warning(
                "Rejected transfer with invalid amount",
                extra={"event": "ledger.transfer_rejected", "asset": asset, "amount": repr(amount)},
            )
            return False
        if not recipient:
            logger.warning(
                "Rejected transfer to empty recipient",
                extra={"event": "ledger.transfer_rejected", "asset": asset},
            )
            return False

        with self._lock:
            holders = self.balances.get(asset)
            if holders is None:
                logger.warning(
                    "Rejected transfer of unknown asset",
                    extra={"event": "ledger.transfer_rejected", "asset": asset},
                )
                return False
            if asset in self.closed:
                logger.warning(
                    "Rejected transfer while asset is closed",
                    extra={"event": "ledger.transfer_rejected", "asset": asset},
                )
                return False

            sender_balance = holders.get(sender, 0)
            if sender_balance < amount:
                logger.warning(
                    "Insufficient balance for transfer",
                    extra={
                        "event": "ledger.transfer_rejected",
                        "asset": asset,
                        "sender": sender[:10],
                        "amount": amount,
                        "sender_balance": sender_balance,
                    },
                )
                return False

            holders[sender] = sender_balance - amount
            holders[recipient] = holders.get(recipient, 0) + amount

        logger.debug(
            "Transferred %s %s from %s to %s",
            amount,
            asset,
            sender[:10],
            recipient[:10],
            extra={"event": "ledger.transfer", "asset": asset, "amount": amount},
        )
        return True

    def close(self, asset: str, caller: str) -> None:
        """Suspend all transfers of asset. Owner only."""
        self._require_owner(asset, caller)
        with self._lock:
            self.closed.add(asset)
        logger.info("Asset closed", extra={"event": "ledger.closed", "asset": asset})

    def open(self, asset: str, caller: str) -> None:
        """Resume transfers of asset. Owner only."""
        self._require_owner(asset, caller)
        with self._lock:
            self.closed.discard(asset)
        logger.info("Asset opened", extra={"event": "ledger.opened", "asset": asset})

    def is_closed(self, asset: str) -> bool:
        return asset in self.closed

    def get_asset_metrics(self, asset: str) -> dict[str, Any]:
        """Returns supply and holder statistics for one asset."""
        with self._lock:
            holders = self.balances.get(asset, {})
            return {
                "asset": asset,
                "owner": self.owners.get(asset),
                "total_supply": self.total_supply.get(asset, 0),
                "holders": sum(1 for amount in holders.values() if amount > 0),
                "closed": asset in self.closed,
            }

    def _require_owner(self, asset: str, caller: str) -> None:
        owner = self.owners.get(asset)
        if owner is None:
            raise KeyError(f"Unknown asset {asset}")
        if caller != owner:
            raise UnauthorizedError(
                f"Only the owner of {asset} can change its state",
                details={"asset": asset, "caller": caller},
            )
