"""
Nawiri Persistence - Errors
============================
Raised only at startup. Saving after a mutation is
fire-and-forget and never raises into the ledger.
"""


class PersistenceError(Exception):
    """Base error for blob persistence."""
    pass


class PersistedStateError(PersistenceError):
    """The stored blob exists but cannot be turned back into tables."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Persisted state '{key}' is unreadable: {reason}")
