"""
Nawiri Core Config - Ledger Settings
=====================================
Runtime configuration for the ledger and its collaborators.
Values come from explicit construction or from NAWIRI_*
environment variables, never from module-level globals.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional


DEFAULT_STORAGE_KEY = "nawiri-bms-storage"
DEFAULT_CURRENCY = "KES"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag, got '{raw}'.")


# ══════════════════════════════════════════════════════════════
# LEDGER SETTINGS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LedgerSettings:
    """
    Configuration shared by the ledger store, persistence and reports.

    Fields:
        storage_key:   Name of the persisted blob.
        data_root:     Directory for JSON blob files, used by
                       LedgerStore.from_settings (None = in-memory only).
        currency:      ISO 4217 code used when formatting amounts.
        log_level:     Level applied to the `nawiri` logger by
                       LedgerStore.from_settings.
        recompute_total_on_sale_update:
                       When True, update_sale also accounts for a changed
                       total_amount. Default keeps the old-total formula.
    """

    storage_key: str = DEFAULT_STORAGE_KEY
    data_root: Optional[Path] = None
    currency: str = DEFAULT_CURRENCY
    log_level: str = "INFO"
    recompute_total_on_sale_update: bool = False

    def __post_init__(self) -> None:
        if not self.storage_key or not isinstance(self.storage_key, str):
            raise ValueError("storage_key must be a non-empty string.")
        if not isinstance(self.currency, str) or len(self.currency) != 3:
            raise ValueError(
                f"currency must be 3-letter ISO 4217 code, got '{self.currency}'."
            )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level '{self.log_level}'.")
        if self.data_root is not None and not isinstance(self.data_root, Path):
            object.__setattr__(self, "data_root", Path(self.data_root))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> LedgerSettings:
        """
        Build settings from environment variables:

            NAWIRI_STORAGE_KEY, NAWIRI_DATA_ROOT, NAWIRI_CURRENCY,
            NAWIRI_LOG_LEVEL, NAWIRI_RECOMPUTE_SALE_TOTAL
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        data_root = env.get("NAWIRI_DATA_ROOT")
        recompute = env.get("NAWIRI_RECOMPUTE_SALE_TOTAL")

        return cls(
            storage_key=env.get("NAWIRI_STORAGE_KEY", defaults.storage_key),
            data_root=Path(data_root).expanduser() if data_root else None,
            currency=env.get("NAWIRI_CURRENCY", defaults.currency).upper(),
            log_level=env.get("NAWIRI_LOG_LEVEL", defaults.log_level).upper(),
            recompute_total_on_sale_update=(
                _parse_bool("NAWIRI_RECOMPUTE_SALE_TOTAL", recompute)
                if recompute is not None
                else defaults.recompute_total_on_sale_update
            ),
        )

    def with_overrides(self, **changes) -> LedgerSettings:
        return replace(self, **changes)
