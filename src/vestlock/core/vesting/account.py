from __future__ import annotations

from dataclasses import dataclass, field

from ..vesting_exceptions import AlreadyRevokedError


@dataclass
class VestingAccount:
    """
    Per-asset bookkeeping of one vesting engine.

    released only grows, except when a release is rolled back before it was
    committed. revoked is one-way once a revocation commits.
    """

    released: dict[str, int] = field(default_factory=dict)
    revoked: dict[str, bool] = field(default_factory=dict)
    # Total allocation (balance + released) at the moment of revocation
    revoked_total: dict[str, int] = field(default_factory=dict)
    # Released amounts whose ledger transfer has not completed yet
    pending: dict[str, int] = field(default_factory=dict)

    def released_of(self, asset: str) -> int:
        return self.released.get(asset, 0)

    def is_revoked(self, asset: str) -> bool:
        return self.revoked.get(asset, False)

    def frozen_total(self, asset: str) -> int | None:
        return self.revoked_total.get(asset)

    def pending_of(self, asset: str) -> int:
        return self.pending.get(asset, 0)

    def record_release(self, asset: str, amount: int) -> None:
        if amount <= 0:
            raise ValueError("Release amount must be positive.")
        self.released[asset] = self.released_of(asset) + amount
        self.pending[asset] = self.pending_of(asset) + amount

    def settle_release(self, asset: str, amount: int) -> None:
        remaining = self.pending_of(asset) - amount
        if remaining < 0:
            raise ValueError("Cannot settle more than is pending.")
        if remaining:
            self.pending[asset] = remaining
        else:
            self.pending.pop(asset, None)

    def rollback_release(self, asset: str, amount: int) -> None:
        remaining = self.released_of(asset) - amount
        if remaining < 0:
            raise ValueError("Cannot roll back more than was released.")
        if remaining:
            self.released[asset] = remaining
        else:
            self.released.pop(asset, None)
        self.settle_release(asset, min(amount, self.pending_of(asset)))

    def mark_revoked(self, asset: str, total: int) -> None:
        if self.is_revoked(asset):
            raise AlreadyRevokedError(f"Asset {asset} is already revoked", details={"asset": asset})
        self.revoked[asset] = True
        self.revoked_total[asset] = total

    def rollback_revoke(self, asset: str) -> None:
        self.revoked.pop(asset, None)
        self.revoked_total.pop(asset, None)

    def snapshot(self, asset: str) -> dict:
        return {
            "released": self.released_of(asset),
            "revoked": self.is_revoked(asset),
            "frozen_total": self.frozen_total(asset),
            "pending": self.pending_of(asset),
        }
