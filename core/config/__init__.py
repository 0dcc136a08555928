"""
Nawiri Core Config - Public API
================================
"""

from core.config.settings import (
    DEFAULT_CURRENCY,
    DEFAULT_STORAGE_KEY,
    LedgerSettings,
)

__all__ = [
    "DEFAULT_CURRENCY",
    "DEFAULT_STORAGE_KEY",
    "LedgerSettings",
]
