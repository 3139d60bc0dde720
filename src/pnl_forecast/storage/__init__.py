"""Ledger store implementations."""

from .file_store import FileLedgerStore
from .memory_store import InMemoryLedgerStore

__all__ = ["FileLedgerStore", "InMemoryLedgerStore"]
