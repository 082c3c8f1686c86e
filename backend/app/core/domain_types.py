"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, ExpenseId wrap UUIDs; never use bare UUID in domain logic
    - ExpenseCategory is the closed category set; nothing outside it is persisted
    - StatsPeriod.parse never fails: unknown keywords resolve to MONTH

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
    - Category values are the Indonesian storage keys so existing
      rows stay valid; the English member names are for readers
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ExpenseId = NewType("ExpenseId", UUID)


# ─── Formats ─────────────────────────────────────────────────────

DATE_FORMAT = "%Y-%m-%d"


# ─── Enums ───────────────────────────────────────────────────────

class ExpenseCategory(str, Enum):
    """Closed category set, maps to expenses.category column."""
    FOOD = "makanan"
    TRANSPORT = "transportasi"
    ENTERTAINMENT = "hiburan"
    SHOPPING = "belanja"
    HEALTH = "kesehatan"
    EDUCATION = "pendidikan"
    OTHER = "lainnya"


VALID_CATEGORIES: frozenset[str] = frozenset(c.value for c in ExpenseCategory)


class StatsPeriod(str, Enum):
    """Aggregation window keywords accepted by the stats endpoint."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @classmethod
    def parse(cls, raw: str | None) -> "StatsPeriod":
        try:
            return cls(raw)
        except ValueError:
            return cls.MONTH
