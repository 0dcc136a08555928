"""
Nawiri Persistence - Public API
================================
"""

from core.persistence.blob import BlobStore, InMemoryBlobStore, JsonFileBlobStore
from core.persistence.errors import PersistedStateError, PersistenceError

__all__ = [
    "BlobStore",
    "InMemoryBlobStore",
    "JsonFileBlobStore",
    "PersistenceError",
    "PersistedStateError",
]
