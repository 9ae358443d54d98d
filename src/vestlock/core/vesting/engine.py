"""
Token vesting engine.

Holds a custodial balance on an injected ledger and releases it to a fixed
beneficiary according to a vesting schedule. If the schedule is revocable,
the issuer can reclaim the unvested remainder once per asset; whatever had
vested by then stays claimable by the beneficiary.

Security features:
- Checks-effects-interactions: bookkeeping is committed before any ledger
  transfer and rolled back if the transfer fails
- Reentrancy protection on release and revoke
- One clock reading per call
- Exact integer arithmetic for vested amounts
"""

from __future__ import annotations

import hashlib
import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Callable

from .. import vesting_metrics
from ..protocols import AccessControl, Clock, Ledger
from ..vesting_exceptions import (
    AlreadyRevokedError,
    InvalidScheduleError,
    LedgerTransferError,
    NothingToReleaseError,
    NotRevocableError,
    ReentrantCallError,
    UnauthorizedError,
    VestingError,
)
from .account import VestingAccount
from .schedule import ReleasePolicy, VestingSchedule

logger = logging.getLogger(__name__)

_engine_nonce = itertools.count(1)


@dataclass(frozen=True)
class VestingEvent:
    """Record of a committed release or revocation."""
    kind: str  # "released" or "revoked"
    asset: str
    amount: int
    timestamp: int
    recipient: str


class VestingEngine:
    """
    Releases a vesting allocation held in custody on a ledger.

    The allocation of an asset is whatever the engine holds on the ledger
    plus what it has already released, so funding happens by transferring
    tokens to engine.address.

    Usage:
        engine = VestingEngine(schedule, ledger, clock, OwnerAccessControl("0xissuer"))
        ledger.transfer("UST", "0xissuer", engine.address, 10_000)
        engine.release("UST")
    """

    def __init__(
        self,
        schedule: VestingSchedule,
        ledger: Ledger,
        clock: Clock,
        access_control: AccessControl,
        address: str | None = None,
    ):
        if not isinstance(schedule, VestingSchedule):
            raise InvalidScheduleError("A validated VestingSchedule is required.")
        if ledger is None or clock is None or access_control is None:
            raise InvalidScheduleError("Ledger, clock and access control are required.")

        self.schedule = schedule
        self.ledger = ledger
        self.clock = clock
        self.access_control = access_control
        self.address = address or self._derive_address(schedule)
        self.account = VestingAccount()
        self.events: list[VestingEvent] = []

        self._lock = threading.RLock()
        self._locked = False

        logger.info(
            "Vesting engine created",
            extra={
                "event": "vesting.created",
                "engine": self.address[:10],
                "beneficiary": schedule.beneficiary[:10],
                "kind": schedule.kind.value,
                "start": schedule.start,
                "end": schedule.end,
                "revocable": schedule.revocable,
                "release_policy": schedule.release_policy.value,
            },
        )

    @staticmethod
    def _derive_address(schedule: VestingSchedule) -> str:
        seed = (
            f"vesting:{schedule.beneficiary}:{schedule.start}:{schedule.duration}:"
            f"{schedule.params}:{next(_engine_nonce)}"
        )
        digest = hashlib.sha3_256(seed.encode()).digest()
        return f"0x{digest[-20:].hex()}"

    @property
    def beneficiary(self) -> str:
        return self.schedule.beneficiary

    def _current_time(self) -> int:
        timestamp = self.clock.now()
        try:
            return int(timestamp)
        except (TypeError, ValueError) as exc:
            raise ValueError("Clock must return an integer timestamp") from exc

    # ==================== Views ====================

    def _total(self, asset: str) -> int:
        # A release in flight is counted in released but has not left custody yet
        return (
            self.ledger.balance_of(asset, self.address)
            + self.account.released_of(asset)
            - self.account.pending_of(asset)
        )

    def _vested_at(self, asset: str, now: int) -> int:
        total = self._total(asset)
        frozen_total = self.account.frozen_total(asset)
        if frozen_total is None:
            return self.schedule.vested_amount(total, now)
        # After revocation the curve keeps advancing against the allocation
        # frozen at revoke time, capped by what is actually left
        return min(self.schedule.vested_amount(frozen_total, now), total)

    def vested_amount(self, asset: str) -> int:
        """Amount of asset vested now, released or not."""
        with self._lock:
            return self._vested_at(asset, self._current_time())

    def releasable_amount(self, asset: str) -> int:
        """Amount of asset that a release would transfer now."""
        with self._lock:
            now = self._current_time()
            return max(0, self._vested_at(asset, now) - self.account.released_of(asset))

    def released(self, asset: str) -> int:
        return self.account.released_of(asset)

    def revoked(self, asset: str) -> bool:
        return self.account.is_revoked(asset)

    def status(self, asset: str) -> dict:
        """Snapshot of the schedule and accounting for one asset."""
        with self._lock:
            now = self._current_time()
            released = self.account.released_of(asset)
            total = self._total(asset)
            vested = self._vested_at(asset, now)
            fraction = self.schedule.vested_fraction(now)

            if self.account.is_revoked(asset):
                state = "revoked"
            elif fraction >= 1:
                state = "completed"
            elif fraction <= 0:
                state = "pending"
            else:
                state = "vesting"

            return {
                "engine": self.address,
                "asset": asset,
                **self.schedule.to_dict(),
                "total": total,
                "vested": vested,
                "released": released,
                "releasable": max(0, vested - released),
                "revoked": self.account.is_revoked(asset),
                "state": state,
                "timestamp": now,
            }

    # ==================== Mutations ====================

    def release(self, asset: str) -> int:
        """
        Transfer the currently releasable amount of asset to the beneficiary.

        Callable by anyone, since funds can only move to the beneficiary.

        Returns:
            Amount transferred (0 for an empty lenient release)

        Raises:
            NothingToReleaseError: nothing accrued and the policy is strict
            LedgerTransferError: the ledger refused the transfer
            ReentrantCallError: called from inside another engine call
        """
        with self._lock:
            self._require_not_locked()
            try:
                self._locked = True
                now = self._current_time()
                releasable = self._vested_at(asset, now) - self.account.released_of(asset)

                if releasable <= 0:
                    if self.schedule.release_policy == ReleasePolicy.STRICT:
                        raise NothingToReleaseError(
                            f"No {asset} is releasable yet",
                            details={"asset": asset, "timestamp": now},
                        )
                    logger.debug(
                        "Nothing to release",
                        extra={"event": "vesting.release_noop", "engine": self.address[:10], "asset": asset},
                    )
                    return 0

                self.account.record_release(asset, releasable)
                self._transfer(
                    asset,
                    self.schedule.beneficiary,
                    releasable,
                    rollback=lambda: self.account.rollback_release(asset, releasable),
                )
                self.account.settle_release(asset, releasable)

                self.events.append(
                    VestingEvent("released", asset, releasable, now, self.schedule.beneficiary)
                )
                logger.info(
                    "Vested tokens released",
                    extra={
                        "event": "vesting.released",
                        "engine": self.address[:10],
                        "asset": asset,
                        "amount": releasable,
                        "released_total": self.account.released_of(asset),
                    },
                )
                vesting_metrics.record_release(asset, releasable)
                self._refresh_custody_gauge(asset)
                return releasable

            except VestingError as exc:
                vesting_metrics.record_failure("release", exc)
                raise
            finally:
                self._locked = False

    def revoke(self, asset: str, caller: str) -> int:
        """
        Reclaim the unvested remainder of asset for the issuer.

        The vested-but-unreleased portion stays in custody and remains
        releasable by the beneficiary. Vesting continues against the
        allocation held at revoke time, so the vested amount never exceeds
        it; tokens sent to the engine beyond that allocation stay locked and
        cannot be refunded.

        Args:
            asset: Asset to revoke
            caller: Must hold the issuer capability; receives the refund

        Returns:
            Amount refunded to the caller

        Raises:
            NotRevocableError: the schedule was created non-revocable
            AlreadyRevokedError: asset was revoked before
            UnauthorizedError: caller lacks the issuer capability
            LedgerTransferError: the ledger refused the refund
        """
        with self._lock:
            self._require_not_locked()
            try:
                self._locked = True
                if not self.schedule.revocable:
                    raise NotRevocableError(
                        "Vesting schedule is not revocable", details={"asset": asset}
                    )
                if self.account.is_revoked(asset):
                    raise AlreadyRevokedError(
                        f"Asset {asset} is already revoked", details={"asset": asset}
                    )
                if not self.access_control.is_authorized(caller):
                    raise UnauthorizedError(
                        "Caller is not allowed to revoke", details={"asset": asset, "caller": caller}
                    )

                now = self._current_time()
                balance = self.ledger.balance_of(asset, self.address)
                total = self._total(asset)
                vested = self._vested_at(asset, now)
                refund = max(0, min(total - vested, balance))

                self.account.mark_revoked(asset, total)
                if refund > 0:
                    self._transfer(
                        asset,
                        caller,
                        refund,
                        rollback=lambda: self.account.rollback_revoke(asset),
                    )

                self.events.append(VestingEvent("revoked", asset, refund, now, caller))
                logger.info(
                    "Vesting revoked",
                    extra={
                        "event": "vesting.revoked",
                        "engine": self.address[:10],
                        "asset": asset,
                        "refund": refund,
                        "vested": vested,
                    },
                )
                vesting_metrics.record_refund(asset, refund)
                self._refresh_custody_gauge(asset)
                return refund

            except VestingError as exc:
                vesting_metrics.record_failure("revoke", exc)
                raise
            finally:
                self._locked = False

    # ==================== Internals ====================

    def _transfer(self, asset: str, recipient: str, amount: int, rollback: Callable[[], None]) -> None:
        details = {"asset": asset, "recipient": recipient, "amount": amount}
        try:
            completed = self.ledger.transfer(asset, self.address, recipient, amount)
        except VestingError:
            rollback()
            raise
        except Exception as exc:
            rollback()
            logger.error(
                "Ledger transfer raised, bookkeeping rolled back",
                extra={"event": "vesting.transfer_error", "engine": self.address[:10], **details},
                exc_info=True,
            )
            raise LedgerTransferError(f"Ledger transfer of {asset} failed: {exc}", details=details) from exc

        if not completed:
            rollback()
            logger.warning(
                "Ledger transfer refused, bookkeeping rolled back",
                extra={"event": "vesting.transfer_failed", "engine": self.address[:10], **details},
            )
            raise LedgerTransferError(f"Ledger refused transfer of {asset}", details=details)

    def _refresh_custody_gauge(self, asset: str) -> None:
        vesting_metrics.update_custody_balance(
            self.address, asset, self.ledger.balance_of(asset, self.address)
        )

    def _require_not_locked(self) -> None:
        if self._locked:
            raise ReentrantCallError("Vesting engine is locked")
