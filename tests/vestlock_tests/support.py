"""Shared constants and ledger doubles for the vesting tests."""

from vestlock.core.token_ledger import TokenLedger

MINUTE = 60
WEEK = 7 * 24 * 3600
YEAR = 365 * 24 * 3600

GENESIS = 1_700_000_000
OWNER = "0xowner00000000000000000000000000000000001"
BENEFICIARY = "0xbeneficiary000000000000000000000000000005"
STRANGER = "0xstranger0000000000000000000000000000002"
ASSET = "UST"
AMOUNT = 10_000


class RaisingLedger(TokenLedger):
    """Ledger whose transfers blow up after balances are set up."""

    def __init__(self):
        super().__init__()
        self.fail_transfers = False

    def transfer(self, asset, sender, recipient, amount):
        if self.fail_transfers:
            raise RuntimeError("node unreachable")
        return super().transfer(asset, sender, recipient, amount)


class ReentrantLedger(TokenLedger):
    """Ledger that calls back into the engine before moving funds."""

    def __init__(self):
        super().__init__()
        self.engine = None
        self.callback = None
        self.swallow = True
        self.reentry_errors = []

    def transfer(self, asset, sender, recipient, amount):
        if self.engine is not None and sender == self.engine.address and self.callback:
            try:
                self.callback(self.engine, asset)
            except Exception as exc:
                self.reentry_errors.append(exc)
                if not self.swallow:
                    raise
        return super().transfer(asset, sender, recipient, amount)
