"""Advisory data stores for crate-advisor."""

from .base import AdvisoryStore, AdvisoryStoreError
from .memory import InMemoryAdvisoryStore
from .offline import AdvisoryDatabaseConfig, OfflineAdvisoryStore

__all__ = [
    "AdvisoryStore",
    "AdvisoryStoreError",
    "InMemoryAdvisoryStore",
    "AdvisoryDatabaseConfig",
    "OfflineAdvisoryStore",
]
