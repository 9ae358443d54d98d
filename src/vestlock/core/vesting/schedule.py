"""
Vesting schedule model.

Two release curves are supported, selected by a tag on the schedule
parameters:

- Continuous: nothing vests before the cliff, then the vested fraction is
  the linear share of elapsed time since start.
- Phased: the allocation vests in equal steps at phase boundaries. A
  timestamp exactly on a boundary has reached that phase.

Fractions are exact rationals and amounts are floored integers, so the
vested amount never exceeds the total and never decreases over time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from typing import Callable

from ..vesting_exceptions import InvalidScheduleError


ZERO = Fraction(0)
ONE = Fraction(1)


class ScheduleKind(str, Enum):
    CONTINUOUS = "continuous"
    PHASED = "phased"


class ReleasePolicy(str, Enum):
    """Outcome of a release call when nothing has accrued."""
    STRICT = "strict"    # Raise NothingToReleaseError
    LENIENT = "lenient"  # Return 0 without touching the ledger


@dataclass(frozen=True)
class ScheduleParams:
    """Model-specific parameters, tagged by kind."""
    kind: ScheduleKind
    cliff: int = 0
    phase_count: int = 1

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "kind", ScheduleKind(self.kind))
        except ValueError as exc:
            raise InvalidScheduleError(f"Unknown schedule kind: {self.kind!r}") from exc


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def continuous_fraction(start: int, duration: int, params: ScheduleParams, now: int) -> Fraction:
    if now < start + params.cliff or now <= start:
        return ZERO
    if now >= start + duration:
        return ONE
    return Fraction(now - start, duration)


def phased_fraction(start: int, duration: int, params: ScheduleParams, now: int) -> Fraction:
    if now <= start:
        return ZERO
    # floor((now - start) / (duration / phase_count)) without rounding the span
    phase_index = (now - start) * params.phase_count // duration
    phase_index = max(0, min(phase_index, params.phase_count))
    return Fraction(phase_index, params.phase_count)


FRACTION_FUNCTIONS: dict[ScheduleKind, Callable[[int, int, ScheduleParams, int], Fraction]] = {
    ScheduleKind.CONTINUOUS: continuous_fraction,
    ScheduleKind.PHASED: phased_fraction,
}


def apply_fraction(total: int, fraction: Fraction) -> int:
    """floor(total * fraction) in exact integer arithmetic."""
    if total <= 0:
        return 0
    return total * fraction.numerator // fraction.denominator


@dataclass(frozen=True)
class VestingSchedule:
    """
    Immutable vesting terms for one beneficiary.

    Attributes:
        beneficiary: Address receiving released amounts
        start: Unix timestamp at which vesting starts
        duration: Seconds until the whole allocation is vested
        revocable: Whether the issuer may reclaim the unvested remainder
        params: Continuous (cliff) or phased (phase_count) parameters
        release_policy: Strict or lenient handling of empty releases
    """

    beneficiary: str
    start: int
    duration: int
    revocable: bool
    params: ScheduleParams
    release_policy: ReleasePolicy = field(default=ReleasePolicy.STRICT)

    def __post_init__(self) -> None:
        if not self.beneficiary or not isinstance(self.beneficiary, str):
            raise InvalidScheduleError("Beneficiary address cannot be empty.")
        if not _is_int(self.start) or not _is_int(self.duration):
            raise InvalidScheduleError(
                "Time parameters must be integers (Unix timestamps/durations).",
                details={"start": repr(self.start), "duration": repr(self.duration)},
            )
        if self.start < 0:
            raise InvalidScheduleError("Start time cannot be negative.", details={"start": self.start})
        if self.duration <= 0:
            raise InvalidScheduleError(
                "Duration must be positive.", details={"duration": self.duration}
            )
        if not isinstance(self.revocable, bool):
            raise InvalidScheduleError("Revocable flag must be a boolean.")
        if not isinstance(self.params, ScheduleParams):
            raise InvalidScheduleError("Schedule parameters are missing.")

        try:
            policy = ReleasePolicy(self.release_policy)
        except ValueError as exc:
            raise InvalidScheduleError(
                f"Unknown release policy: {self.release_policy!r}"
            ) from exc
        object.__setattr__(self, "release_policy", policy)

        params = self.params
        if params.kind == ScheduleKind.CONTINUOUS:
            if not _is_int(params.cliff):
                raise InvalidScheduleError("Cliff must be an integer duration.")
            if params.cliff < 0 or params.cliff > self.duration:
                raise InvalidScheduleError(
                    "Cliff must be between zero and the vesting duration.",
                    details={"cliff": params.cliff, "duration": self.duration},
                )
        elif params.kind == ScheduleKind.PHASED:
            if params.cliff != 0:
                raise InvalidScheduleError("Phased schedules do not take a cliff.")
            if not _is_int(params.phase_count) or params.phase_count < 1:
                raise InvalidScheduleError(
                    "Phase count must be an integer of at least 1.",
                    details={"phase_count": repr(params.phase_count)},
                )
        else:
            raise InvalidScheduleError(f"Unknown schedule kind: {params.kind!r}")

    @classmethod
    def continuous(
        cls,
        beneficiary: str,
        start: int,
        cliff: int,
        duration: int,
        revocable: bool,
        release_policy: ReleasePolicy = ReleasePolicy.STRICT,
    ) -> VestingSchedule:
        return cls(
            beneficiary=beneficiary,
            start=start,
            duration=duration,
            revocable=revocable,
            params=ScheduleParams(kind=ScheduleKind.CONTINUOUS, cliff=cliff),
            release_policy=release_policy,
        )

    @classmethod
    def phased(
        cls,
        beneficiary: str,
        start: int,
        phase_count: int,
        duration: int,
        revocable: bool,
        release_policy: ReleasePolicy = ReleasePolicy.STRICT,
    ) -> VestingSchedule:
        return cls(
            beneficiary=beneficiary,
            start=start,
            duration=duration,
            revocable=revocable,
            params=ScheduleParams(kind=ScheduleKind.PHASED, phase_count=phase_count),
            release_policy=release_policy,
        )

    @property
    def kind(self) -> ScheduleKind:
        return self.params.kind

    @property
    def end(self) -> int:
        return self.start + self.duration

    @property
    def cliff_end(self) -> int:
        return self.start + self.params.cliff

    def vested_fraction(self, now: int) -> Fraction:
        """Share of the allocation vested at now, in [0, 1]."""
        return FRACTION_FUNCTIONS[self.params.kind](self.start, self.duration, self.params, now)

    def vested_amount(self, total: int, now: int) -> int:
        """Amount of total vested at now, floored toward zero."""
        return apply_fraction(total, self.vested_fraction(now))

    def to_dict(self) -> dict:
        return {
            "beneficiary": self.beneficiary,
            "kind": self.params.kind.value,
            "start": self.start,
            "duration": self.duration,
            "end": self.end,
            "cliff": self.params.cliff,
            "phase_count": self.params.phase_count,
            "revocable": self.revocable,
            "release_policy": self.release_policy.value,
        }
