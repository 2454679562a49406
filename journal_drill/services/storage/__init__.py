"""
Storage Services Package

Provides the abstract progress storage interface and its implementations.
Google Sheets is the shared backend; the in-memory store serves tests
and local runs.
"""

from journal_drill.services.storage.interface import (
    ConnectionError,
    ProgressStorageInterface,
    StorageError,
)
from journal_drill.services.storage.memory import InMemoryProgressStorage
from journal_drill.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsProgressStorage,
)

__all__ = [
    # Interfaces
    "ProgressStorageInterface",
    # Exceptions
    "ConnectionError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsProgressStorage",
    "InMemoryProgressStorage",
]
