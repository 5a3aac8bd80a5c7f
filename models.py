"""Canonical value objects shared by ingestion, KPIs and anomaly detection."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TransactionStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"


class Transaction(BaseModel):
    """A transaction after date/amount normalization. Immutable within a batch."""

    model_config = ConfigDict(frozen=True)

    id: str
    date: date
    description: str = ""
    amount: float = Field(0.0, allow_inf_nan=False)
    status: TransactionStatus = TransactionStatus.COMPLETED
    category: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def lower_status(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class KPISummary(BaseModel):
    total_revenue: float = 0.0
    total_expenses: float = 0.0
    net_profit: float = 0.0
    active_accounts: int = 0


class AnomalyReport(BaseModel):
    """Flagged transaction ids for one batch, plus the display label."""

    model_config = ConfigDict(frozen=True)

    ids: frozenset[str] = frozenset()
    z_threshold: float
    mode: Literal["quick", "deep"] = "quick"
    label: str = ""

    @property
    def count(self) -> int:
        return len(self.ids)


@dataclass(frozen=True)
class IngestResult:
    """Outcome of turning raw records into a canonical batch."""

    transactions: Tuple[Transaction, ...] = field(default_factory=tuple)
    supplied: int = 0
    source: str = "records"

    @property
    def accepted(self) -> int:
        return len(self.transactions)

    @property
    def dropped(self) -> int:
        return self.supplied - self.accepted

    @property
    def message(self) -> str:
        msg = f"Loaded {self.accepted} of {self.supplied} transactions"
        if self.dropped:
            msg += f" ({self.dropped} skipped)"
        return msg
