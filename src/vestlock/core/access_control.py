"""
Issuer access control for vesting engines.

A single owner holds the issuer capability: only the owner may revoke
revocable schedules or close the assets it issued. Ownership can be handed
over, but never to an empty address, so the capability cannot get stuck.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .vesting_exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


@dataclass
class OwnerAccessControl:
    """
    Owner-based capability gate.

    Usage:
        ac = OwnerAccessControl(owner="0xissuer")
        if ac.is_authorized(caller):
            perform_privileged_operation()
    """

    owner: str

    def __post_init__(self) -> None:
        if not self.owner:
            raise ValueError("Owner address cannot be empty.")

    def is_authorized(self, caller: str) -> bool:
        authorized = bool(caller) and caller.lower() == self.owner.lower()
        if not authorized:
            logger.warning(
                "Access denied: caller is not the owner",
                extra={
                    "event": "access_control.denied",
                    "caller": (caller or "")[:10],
                    "owner": self.owner[:10],
                },
            )
        return authorized

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        """
        Hand the issuer capability to new_owner.

        Raises:
            UnauthorizedError: caller is not the current owner
            ValueError: new_owner is empty
        """
        if not self.is_authorized(caller):
            raise UnauthorizedError(
                "Only the owner can transfer ownership",
                details={"caller": caller},
            )
        if not new_owner:
            raise ValueError("New owner address cannot be empty.")

        previous = self.owner
        self.owner = new_owner
        logger.info(
            "Ownership transferred",
            extra={
                "event": "access_control.ownership_transferred",
                "previous_owner": previous[:10],
                "new_owner": new_owner[:10],
            },
        )
