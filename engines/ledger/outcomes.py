"""
Nawiri Ledger Engine - Mutation Outcomes
=========================================
Every mutation returns exactly one MutationOutcome. Nothing in
the ledger raises for a missing reference; instead:

- applied=False            target id was absent, tables unchanged
- missing_references != () primary record kept, listed side
                           effects were skipped

Callers may ignore the outcome and simply re-read the snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class ReferenceNotFound:
    """
    A side effect skipped because its target row does not exist.

    Fields:
        entity:    Table of the missing row ('product', 'customer').
        entity_id: Id that failed to resolve.
        effect:    Derived field that was left untouched.
    """

    entity: str
    entity_id: str
    effect: str

    def to_dict(self) -> dict:
        return {
            "entity": self.entity,
            "entity_id": self.entity_id,
            "effect": self.effect,
        }


@dataclass(frozen=True)
class MutationOutcome:
    operation: str
    entity_id: Optional[str]
    applied: bool
    missing_references: Tuple[ReferenceNotFound, ...] = ()

    @property
    def is_noop(self) -> bool:
        return not self.applied

    @property
    def fully_applied(self) -> bool:
        return self.applied and not self.missing_references

    @classmethod
    def noop(cls, operation: str, entity_id: Optional[str]) -> MutationOutcome:
        return cls(operation=operation, entity_id=entity_id, applied=False)
