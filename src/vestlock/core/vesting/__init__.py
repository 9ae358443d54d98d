"""
vestlock vesting core.

- Schedule: continuous (cliff + duration) and phased (phase count + duration) curves
- Account: per-asset released/revoked bookkeeping
- Engine: release and revoke against a custodial ledger balance

The deployment factory lives in vestlock.core.vesting.factory.
"""

from .account import VestingAccount
from .engine import VestingEngine, VestingEvent
from .schedule import (
    ReleasePolicy,
    ScheduleKind,
    ScheduleParams,
    VestingSchedule,
)

__all__ = [
    # Schedule
    "VestingSchedule",
    "ScheduleParams",
    "ScheduleKind",
    "ReleasePolicy",
    # Account
    "VestingAccount",
    # Engine
    "VestingEngine",
    "VestingEvent",
]
