"""
Vesting-specific exception hierarchy for vestlock.

Provides typed exceptions for schedule construction, release and revocation
so callers can tell apart permanent failures, retryable failures and
authorization problems without string matching.
"""

from __future__ import annotations
from typing import Optional, Any, Dict


class VestingError(Exception):
    """Base exception for all vesting-related errors.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error
        recoverable: Whether the operation can be retried later
    """

    recoverable = False

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        recoverable: Optional[bool] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if recoverable is not None:
            self.recoverable = recoverable


# ==================== Construction Errors ====================


class InvalidScheduleError(VestingError):
    """Raised when schedule parameters violate construction rules.

    Examples: non-positive duration, cliff longer than duration, zero phases,
    empty beneficiary or issuer. No state is created when this is raised.
    """
    pass


# ==================== Release Errors ====================


class NothingToReleaseError(VestingError):
    """Raised by a strict-policy release when nothing has accrued yet."""
    recoverable = True  # More may vest later


# ==================== Revocation Errors ====================


class NotRevocableError(VestingError):
    """Raised when revoking a schedule created without revocation rights."""
    pass


class AlreadyRevokedError(VestingError):
    """Raised when revoking an asset that has already been revoked."""
    pass


class UnauthorizedError(VestingError):
    """Raised when the caller lacks the issuer capability."""
    pass


# ==================== Ledger Errors ====================


class LedgerTransferError(VestingError):
    """Raised when the underlying ledger transfer did not complete.

    Any staged bookkeeping change has been rolled back when this is raised.
    """
    recoverable = True  # Caller may retry once the ledger accepts transfers


class ReentrantCallError(VestingError):
    """Raised when a mutating call re-enters the engine through the ledger."""
    pass
