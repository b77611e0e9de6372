"""Shared helpers used by the ledger apps (not a Django app)."""
