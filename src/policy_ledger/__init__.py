"""Insurance policies and claims on an append-only, key-addressed ledger."""

__version__ = "1.0.0"
