"""
vestlock - Token Release Scheduler

Locks a fixed token allocation in custody and releases it to a beneficiary
over time, with optional issuer revocation of the unvested remainder.

Main Components:
- Vesting: schedules (continuous and phased), accounts, engine and factory
- Ledger: collaborator protocols and an in-memory multi-asset ledger
- Access control: issuer capability for revocation
- Observability: structured JSON logging and Prometheus metrics
"""

__version__ = "0.1.0"
__author__ = "vestlock Development Team"

__all__ = []
