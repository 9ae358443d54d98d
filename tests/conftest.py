"""
Test configuration and fixtures
"""
import sys
from pathlib import Path

# Add src and the shared test support module to Python path
project_root = Path(__file__).parent.parent
src_path = project_root / "src"
support_path = Path(__file__).parent / "vestlock_tests"

sys.path.insert(0, str(src_path))
sys.path.insert(0, str(support_path))

import pytest

from vestlock.core.access_control import OwnerAccessControl
from vestlock.core.clock import ManualClock
from vestlock.core.token_ledger import TokenLedger
from vestlock.core.vesting.engine import VestingEngine
from vestlock.core.vesting.schedule import ReleasePolicy, VestingSchedule

from support import AMOUNT, ASSET, BENEFICIARY, GENESIS, MINUTE, OWNER, YEAR


@pytest.fixture
def clock():
    return ManualClock(start_time=GENESIS)


@pytest.fixture
def ledger():
    token_ledger = TokenLedger()
    token_ledger.create_asset(ASSET, OWNER, 1_000_000)
    return token_ledger


@pytest.fixture
def start(clock):
    # Starts after instantiation
    return clock.now() + MINUTE


@pytest.fixture
def make_engine(ledger, clock, start):
    """Build a funded continuous engine (1 year cliff, 2 year duration) by default."""

    def _make(
        revocable=True,
        release_policy=ReleasePolicy.STRICT,
        schedule=None,
        amount=AMOUNT,
        on_ledger=None,
    ):
        target_ledger = on_ledger or ledger
        schedule = schedule or VestingSchedule.continuous(
            beneficiary=BENEFICIARY,
            start=start,
            cliff=YEAR,
            duration=2 * YEAR,
            revocable=revocable,
            release_policy=release_policy,
        )
        engine = VestingEngine(
            schedule=schedule,
            ledger=target_ledger,
            clock=clock,
            access_control=OwnerAccessControl(owner=OWNER),
        )
        if amount:
            assert target_ledger.transfer(ASSET, OWNER, engine.address, amount)
        return engine

    return _make


@pytest.fixture
def engine(make_engine):
    return make_engine()
