"""
vestlock Configuration

All settings come from environment variables so the same code runs in
simulations, tests and hosted deployments:

- VESTLOCK_RELEASE_POLICY: strict | lenient (default strict)
- VESTLOCK_LOG_LEVEL: DEBUG | INFO | WARNING | ERROR | CRITICAL (default INFO)
- VESTLOCK_LOG_FILE: optional path of the rotating JSON log file
- VESTLOCK_ENVIRONMENT: environment label attached to every log line
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .vesting.schedule import ReleasePolicy

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


@dataclass(frozen=True)
class VestingConfig:
    default_release_policy: ReleasePolicy = ReleasePolicy.STRICT
    log_level: str = "INFO"
    log_file: Optional[str] = None
    environment: str = "production"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "VestingConfig":
        env = os.environ if environ is None else environ

        policy_name = env.get("VESTLOCK_RELEASE_POLICY", "strict").strip().lower()
        try:
            policy = ReleasePolicy(policy_name)
        except ValueError as exc:
            raise ConfigurationError(
                f"VESTLOCK_RELEASE_POLICY must be one of "
                f"{', '.join(p.value for p in ReleasePolicy)}, got {policy_name!r}"
            ) from exc

        log_level = env.get("VESTLOCK_LOG_LEVEL", "INFO").strip().upper()
        if log_level not in LOG_LEVELS:
            raise ConfigurationError(
                f"VESTLOCK_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}"
            )

        log_file = env.get("VESTLOCK_LOG_FILE", "").strip() or None
        environment = env.get("VESTLOCK_ENVIRONMENT", "production").strip() or "production"

        config = cls(
            default_release_policy=policy,
            log_level=log_level,
            log_file=log_file,
            environment=environment,
        )
        logger.debug(
            "Configuration loaded",
            extra={
                "event": "config.loaded",
                "release_policy": policy.value,
                "environment": environment,
            },
        )
        return config


def load_config() -> VestingConfig:
    """Load configuration from the process environment."""
    return VestingConfig.from_env()
