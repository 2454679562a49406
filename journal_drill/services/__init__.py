"""Services package."""

from journal_drill.services.storage import (
    ConnectionError,
    GoogleSheetsClient,
    GoogleSheetsProgressStorage,
    InMemoryProgressStorage,
    ProgressStorageInterface,
    StorageError,
)

__all__ = [
    # Storage services
    "ConnectionError",
    "GoogleSheetsClient",
    "GoogleSheetsProgressStorage",
    "InMemoryProgressStorage",
    "ProgressStorageInterface",
    "StorageError",
]
