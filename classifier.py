"""
classifier.py
-------------
Keyword rules that label a transaction description as revenue or as one of
the expense categories.

The rules live in an ordered table rather than in branching code. Order is
significant: descriptions often hit several keyword groups ("Client Payment
- Consulting") and the first rule that matches wins, so revenue keywords are
checked before any expense group.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class TransactionType(str, Enum):
    """Direction of money for KPI purposes."""

    REVENUE = "revenue"
    EXPENSE = "expense"


@dataclass(frozen=True)
class Classification:
    type: TransactionType
    category: str


@dataclass(frozen=True)
class ClassificationRule:
    keywords: Tuple[str, ...]
    result: Classification

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)


def _expense(category: str, *keywords: str) -> ClassificationRule:
    return ClassificationRule(keywords, Classification(TransactionType.EXPENSE, category))


REVENUE = Classification(TransactionType.REVENUE, "Revenue")
OTHER_EXPENSE = Classification(TransactionType.EXPENSE, "Other")

RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule(("payment", "invoice", "paid", "income", "deposit", "receipt"), REVENUE),
    _expense("Salaries", "salary", "payroll", "salaries"),
    # "ad" is a bare substring, so "Upload fee" lands here too
    _expense("Marketing", "marketing", "ad", "campaign"),
    _expense("Travel", "travel", "flight", "taxi", "uber"),
    _expense("Operations", "cloud", "services", "hosting", "aws", "azure"),
    _expense("Consulting", "consult", "consulting"),
    _expense("Equipment", "equipment", "purchase", "hardware"),
    _expense("R&D", "r&d", "research"),
)

EXPENSE_CATEGORIES = tuple(rule.result.category for rule in RULES[1:]) + (OTHER_EXPENSE.category,)


def classify(description: Optional[str]) -> Classification:
    """Return the first matching rule's classification, or ``expense/Other``."""
    text = str(description or "").lower()
    for rule in RULES:
        if rule.matches(text):
            return rule.result
    return OTHER_EXPENSE
