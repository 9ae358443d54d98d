"""
Factory for deploying vesting engines.

Each engine vests one allocation for one beneficiary and is owned by the
issuer that created it. The factory keeps an index of deployed engines so
beneficiaries and operators can find them again.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from ..access_control import OwnerAccessControl
from ..config import VestingConfig, load_config
from ..protocols import Clock, Ledger
from ..vesting_exceptions import InvalidScheduleError
from .engine import VestingEngine
from .schedule import ReleasePolicy, VestingSchedule

logger = logging.getLogger(__name__)


class VestingFactory:
    """Creates vesting engines on a shared ledger and clock."""

    def __init__(self, ledger: Ledger, clock: Clock, config: Optional[VestingConfig] = None):
        self.ledger = ledger
        self.clock = clock
        self.config = config or load_config()
        self.engines: dict[str, VestingEngine] = {}
        self._by_beneficiary: dict[str, list[str]] = {}
        self._lock = threading.Lock()

    def create_continuous(
        self,
        issuer: str,
        beneficiary: str,
        start: int,
        cliff: int,
        duration: int,
        revocable: bool,
        release_policy: Optional[ReleasePolicy] = None,
    ) -> VestingEngine:
        """Deploy an engine vesting linearly after a cliff."""
        schedule = VestingSchedule.continuous(
            beneficiary=beneficiary,
            start=start,
            cliff=cliff,
            duration=duration,
            revocable=revocable,
            release_policy=release_policy or self.config.default_release_policy,
        )
        return self._deploy(issuer, schedule)

    def create_phased(
        self,
        issuer: str,
        beneficiary: str,
        start: int,
        phase_count: int,
        duration: int,
        revocable: bool,
        release_policy: Optional[ReleasePolicy] = None,
    ) -> VestingEngine:
        """Deploy an engine vesting in equal phases."""
        schedule = VestingSchedule.phased(
            beneficiary=beneficiary,
            start=start,
            phase_count=phase_count,
            duration=duration,
            revocable=revocable,
            release_policy=release_policy or self.config.default_release_policy,
        )
        return self._deploy(issuer, schedule)

    def _deploy(self, issuer: str, schedule: VestingSchedule) -> VestingEngine:
        if not issuer:
            raise InvalidScheduleError("Issuer address cannot be empty.")

        engine = VestingEngine(
            schedule=schedule,
            ledger=self.ledger,
            clock=self.clock,
            access_control=OwnerAccessControl(owner=issuer),
        )
        with self._lock:
            self.engines[engine.address] = engine
            self._by_beneficiary.setdefault(schedule.beneficiary, []).append(engine.address)

        logger.info(
            "Vesting engine deployed",
            extra={
                "event": "vesting_factory.deployed",
                "engine": engine.address[:10],
                "issuer": issuer[:10],
                "beneficiary": schedule.beneficiary[:10],
            },
        )
        return engine

    def get(self, address: str) -> VestingEngine:
        try:
            return self.engines[address]
        except KeyError:
            raise KeyError(f"No vesting engine at {address}") from None

    def engines_for(self, beneficiary: str) -> list[VestingEngine]:
        with self._lock:
            return [self.engines[address] for address in self._by_beneficiary.get(beneficiary, [])]

    def __len__(self) -> int:
        return len(self.engines)
