"""
Unit tests for VestingEngine construction, views and status reporting.
"""

import pytest

from vestlock.core.access_control import OwnerAccessControl
from vestlock.core.clock import ManualClock
from vestlock.core.protocols import AccessControl, Clock, Ledger
from vestlock.core.token_ledger import TokenLedger
from vestlock.core.vesting.engine import VestingEngine
from vestlock.core.vesting.schedule import VestingSchedule
from vestlock.core.vesting_exceptions import InvalidScheduleError

from support import AMOUNT, ASSET, BENEFICIARY, OWNER, WEEK, YEAR


def test_collaborators_satisfy_protocols(engine):
    assert isinstance(engine.ledger, Ledger)
    assert isinstance(engine.clock, Clock)
    assert isinstance(engine.access_control, AccessControl)


def test_engine_requires_validated_schedule(ledger, clock):
    with pytest.raises(InvalidScheduleError):
        VestingEngine(
            schedule={"beneficiary": BENEFICIARY},
            ledger=ledger,
            clock=clock,
            access_control=OwnerAccessControl(OWNER),
        )


def test_engine_requires_collaborators(ledger, start):
    schedule = VestingSchedule.continuous(BENEFICIARY, start, YEAR, 2 * YEAR, True)
    with pytest.raises(InvalidScheduleError):
        VestingEngine(schedule=schedule, ledger=ledger, clock=None, access_control=OwnerAccessControl(OWNER))


def test_engine_addresses_are_unique(make_engine):
    first = make_engine(amount=0)
    second = make_engine(amount=0)

    assert first.address.startswith("0x")
    assert len(first.address) == 42
    assert first.address != second.address


def test_explicit_address_is_kept(ledger, clock, start):
    schedule = VestingSchedule.continuous(BENEFICIARY, start, YEAR, 2 * YEAR, True)
    engine = VestingEngine(schedule, ledger, clock, OwnerAccessControl(OWNER), address="0xvault")

    assert engine.address == "0xvault"
    assert engine.beneficiary == BENEFICIARY


def test_vested_amount_uses_custody_plus_released(engine, ledger, clock, start):
    clock.set(start + YEAR + 10 * WEEK)
    vested = engine.vested_amount(ASSET)
    engine.release(ASSET)

    assert engine.vested_amount(ASSET) == vested
    assert engine.releasable_amount(ASSET) == 0


def test_topping_up_custody_raises_allocation(engine, ledger, clock, start):
    clock.set(start + YEAR)
    assert engine.vested_amount(ASSET) == 5_000

    ledger.transfer(ASSET, OWNER, engine.address, AMOUNT)

    assert engine.vested_amount(ASSET) == 10_000


def test_unfunded_asset_has_nothing_vested(engine, clock, start):
    clock.set(start + 2 * YEAR)
    assert engine.vested_amount("UNKNOWN") == 0
    assert engine.releasable_amount("UNKNOWN") == 0


def test_non_numeric_clock_reading_rejected(ledger, start):
    class BrokenClock:
        def now(self):
            return "noon"

    schedule = VestingSchedule.continuous(BENEFICIARY, start, YEAR, 2 * YEAR, True)
    engine = VestingEngine(schedule, ledger, BrokenClock(), OwnerAccessControl(OWNER))

    with pytest.raises(ValueError):
        engine.vested_amount(ASSET)


def test_float_clock_reading_is_truncated(ledger, start):
    clock = ManualClock(start)
    clock.current_time = start + YEAR + 0.9
    schedule = VestingSchedule.continuous(BENEFICIARY, start, YEAR, 2 * YEAR, True)
    engine = VestingEngine(schedule, ledger, clock, OwnerAccessControl(OWNER))
    ledger.transfer(ASSET, OWNER, engine.address, AMOUNT)

    assert engine.vested_amount(ASSET) == 5_000


class TestStatus:
    def test_pending_before_cliff(self, engine):
        status = engine.status(ASSET)

        assert status["state"] == "pending"
        assert status["total"] == AMOUNT
        assert status["vested"] == 0
        assert status["releasable"] == 0
        assert status["beneficiary"] == BENEFICIARY
        assert status["kind"] == "continuous"

    def test_vesting_after_cliff(self, engine, clock, start):
        clock.set(start + YEAR)
        engine.release(ASSET)

        status = engine.status(ASSET)

        assert status["state"] == "vesting"
        assert status["released"] == 5_000
        assert status["vested"] == 5_000
        assert status["total"] == AMOUNT

    def test_completed_after_end(self, engine, clock, start):
        clock.set(start + 2 * YEAR)
        assert engine.status(ASSET)["state"] == "completed"

    def test_revoked(self, engine, clock, start):
        clock.set(start + YEAR)
        engine.revoke(ASSET, OWNER)

        status = engine.status(ASSET)

        assert status["state"] == "revoked"
        assert status["revoked"] is True
        assert status["total"] == 5_000
        assert status["releasable"] == 5_000


def test_engines_on_separate_ledgers_do_not_interfere(make_engine, clock, start):
    other_ledger = TokenLedger()
    other_ledger.create_asset(ASSET, OWNER, AMOUNT)
    first = make_engine()
    second = make_engine(on_ledger=other_ledger)
    clock.set(start + 2 * YEAR)

    first.release(ASSET)

    assert second.released(ASSET) == 0
    assert other_ledger.balance_of(ASSET, second.address) == AMOUNT
