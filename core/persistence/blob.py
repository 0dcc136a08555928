"""
Nawiri Persistence - Blob Stores
=================================
The whole ledger is one named, JSON-serializable blob.
A BlobStore loads it once at startup and overwrites it
after every committed mutation.

No versioning, no migrations, no partial writes: a save
replaces the previous blob in full.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from core.persistence.errors import PersistedStateError

logger = logging.getLogger("nawiri.persistence")


# ══════════════════════════════════════════════════════════════
# PROTOCOL
# ══════════════════════════════════════════════════════════════

class BlobStore(Protocol):
    """Key-value store holding one serialized ledger per key."""

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the stored blob, or None if nothing was saved yet."""
        ...  # pragma: no cover

    def save(self, key: str, blob: Dict[str, Any]) -> None:
        """Replace the stored blob."""
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IN-MEMORY
# ══════════════════════════════════════════════════════════════

class InMemoryBlobStore:
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, Dict[str, Any]]] = None) -> None:
        self._blobs: Dict[str, Dict[str, Any]] = copy.deepcopy(initial or {})
        self.save_count = 0

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        blob = self._blobs.get(key)
        return copy.deepcopy(blob) if blob is not None else None

    def save(self, key: str, blob: Dict[str, Any]) -> None:
        # round-trip through JSON so non-serializable rows fail here too
        self._blobs[key] = json.loads(json.dumps(blob))
        self.save_count += 1

    def keys(self) -> list[str]:
        return sorted(self._blobs)


# ══════════════════════════════════════════════════════════════
# JSON FILE
# ══════════════════════════════════════════════════════════════

class JsonFileBlobStore:
    """
    One `<key>.json` file per blob under `root`.

    Writes go to `<key>.json.tmp` first and are moved into place
    with os.replace, so a crash never leaves a half-written blob.
    """

    def __init__(self, root: Path) -> None:
        self._root = Path(root).expanduser()

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key:
            raise ValueError(f"Invalid blob key '{key}'.")
        return self._root / f"{key}.json"

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        path = self.path_for(key)
        if not path.exists():
            logger.info(f"No persisted state at {path}, starting empty")
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise PersistedStateError(key, str(exc)) from exc
        if not isinstance(data, dict):
            raise PersistedStateError(key, f"expected object, got {type(data).__name__}")
        logger.info(f"Loaded persisted state from {path}")
        return data

    def save(self, key: str, blob: Dict[str, Any]) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(json.dumps(blob, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, path)
