"""
Unit tests for VestingFactory deployment and lookup.
"""

import pytest

from vestlock.core.access_control import OwnerAccessControl
from vestlock.core.config import VestingConfig
from vestlock.core.vesting.factory import VestingFactory
from vestlock.core.vesting.schedule import ReleasePolicy, ScheduleKind
from vestlock.core.vesting_exceptions import InvalidScheduleError, UnauthorizedError

from support import AMOUNT, ASSET, BENEFICIARY, OWNER, STRANGER, YEAR


@pytest.fixture
def factory(ledger, clock):
    return VestingFactory(ledger, clock, config=VestingConfig())


def test_create_continuous_engine(factory, start):
    engine = factory.create_continuous(OWNER, BENEFICIARY, start, YEAR, 2 * YEAR, True)

    assert engine.schedule.kind == ScheduleKind.CONTINUOUS
    assert engine.schedule.params.cliff == YEAR
    assert isinstance(engine.access_control, OwnerAccessControl)
    assert engine.access_control.owner == OWNER
    assert factory.get(engine.address) is engine
    assert len(factory) == 1


def test_create_phased_engine(factory, ledger, clock, start):
    engine = factory.create_phased(OWNER, BENEFICIARY, start, 4, 4 * YEAR, False)
    ledger.transfer(ASSET, OWNER, engine.address, AMOUNT)
    clock.set(start + 2 * YEAR)

    assert engine.schedule.kind == ScheduleKind.PHASED
    assert engine.release(ASSET) == AMOUNT // 2


def test_issuer_controls_revocation(factory, ledger, clock, start):
    engine = factory.create_continuous(OWNER, BENEFICIARY, start, YEAR, 2 * YEAR, True)
    ledger.transfer(ASSET, OWNER, engine.address, AMOUNT)

    with pytest.raises(UnauthorizedError):
        engine.revoke(ASSET, STRANGER)
    assert engine.revoke(ASSET, OWNER) == AMOUNT


def test_default_release_policy_comes_from_config(ledger, clock, start):
    factory = VestingFactory(ledger, clock, config=VestingConfig(default_release_policy=ReleasePolicy.LENIENT))

    lenient = factory.create_continuous(OWNER, BENEFICIARY, start, YEAR, 2 * YEAR, True)
    strict = factory.create_continuous(
        OWNER, BENEFICIARY, start, YEAR, 2 * YEAR, True, release_policy=ReleasePolicy.STRICT
    )

    assert lenient.schedule.release_policy is ReleasePolicy.LENIENT
    assert strict.schedule.release_policy is ReleasePolicy.STRICT


def test_config_loaded_from_environment(ledger, clock, start, monkeypatch):
    monkeypatch.setenv("VESTLOCK_RELEASE_POLICY", "lenient")

    factory = VestingFactory(ledger, clock)
    engine = factory.create_phased(OWNER, BENEFICIARY, start, 2, YEAR, False)

    assert engine.schedule.release_policy is ReleasePolicy.LENIENT


def test_invalid_parameters_create_nothing(factory, start):
    with pytest.raises(InvalidScheduleError):
        factory.create_continuous(OWNER, BENEFICIARY, start, 3 * YEAR, 2 * YEAR, True)
    with pytest.raises(InvalidScheduleError):
        factory.create_phased(OWNER, BENEFICIARY, start, 0, YEAR, True)
    with pytest.raises(InvalidScheduleError):
        factory.create_continuous("", BENEFICIARY, start, YEAR, 2 * YEAR, True)

    assert len(factory) == 0
    assert factory.engines_for(BENEFICIARY) == []


def test_engines_indexed_by_beneficiary(factory, start):
    first = factory.create_continuous(OWNER, BENEFICIARY, start, YEAR, 2 * YEAR, True)
    second = factory.create_phased(OWNER, BENEFICIARY, start, 4, 4 * YEAR, True)
    other = factory.create_phased(OWNER, STRANGER, start, 4, 4 * YEAR, True)

    assert factory.engines_for(BENEFICIARY) == [first, second]
    assert factory.engines_for(STRANGER) == [other]
    assert factory.engines_for("0xnobody") == []


def test_unknown_engine_lookup(factory):
    with pytest.raises(KeyError):
        factory.get("0xmissing")
