"""
vestlock - Collaborator Protocol Interfaces

The vesting engine never owns the asset ledger, the time source or the
issuer gate. They are injected as structural interfaces so that an
in-memory adapter, a chain client or a test double can be used without
inheritance.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Ledger(Protocol):
    """
    Protocol for a balance-bearing, multi-asset ledger.

    The engine is itself one holder on the ledger. Only balance reads and
    outgoing transfers are consumed.
    """

    def balance_of(self, asset: str, holder: str) -> int:
        """
        Get the balance of a holder for one asset.

        Args:
            asset: Asset identifier
            holder: Holder address

        Returns:
            Balance in base units (0 for unknown holders)
        """
        ...

    def transfer(self, asset: str, sender: str, recipient: str, amount: int) -> bool:
        """
        Move amount of asset from sender to recipient.

        Args:
            asset: Asset identifier
            sender: Debited holder
            recipient: Credited holder
            amount: Base units to move

        Returns:
            True if the transfer completed, False otherwise
        """
        ...


@runtime_checkable
class Clock(Protocol):
    """Protocol for a read-only, monotonically advancing time source."""

    def now(self) -> int:
        """Return the current Unix timestamp in seconds."""
        ...


@runtime_checkable
class AccessControl(Protocol):
    """Protocol for the issuer capability gate used by revocation."""

    def is_authorized(self, caller: str) -> bool:
        """Return True if caller holds the issuer capability."""
        ...
