"""
vestlock Core Module

Core functionality for the vestlock release scheduler including:
- Vesting schedules, bookkeeping and the release/revoke engine
- Ledger, clock and access-control collaborators
- Configuration, logging and metrics
"""

__all__ = []
