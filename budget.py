"""Budget categories, expenses and savings goals.

Pure calculations over budget data the host already holds; nothing here
stores or loads it.
"""

from datetime import date
from typing import Iterable, List

from pydantic import BaseModel, Field, field_validator


class BudgetInputError(ValueError):
    """Rejected budget operation (e.g. a non-positive goal contribution)."""


class BudgetCategory(BaseModel):
    id: str
    name: str = Field(..., min_length=1)
    budget: float = Field(gt=0.0)
    color: str = "#10b981"

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Category name cannot be blank")
        return v


class BudgetExpense(BaseModel):
    id: str
    description: str = Field(..., min_length=1)
    amount: float = Field(gt=0.0)
    category_id: str
    date: date


class SavingsGoal(BaseModel):
    id: str
    name: str = Field(..., min_length=1)
    target: float = Field(gt=0.0)
    current: float = Field(0.0, ge=0.0)
    deadline: date


class BudgetOverview(BaseModel):
    total_budget: float
    total_spent: float
    remaining: float
    spent_pct: float


class CategorySpend(BaseModel):
    category_id: str
    name: str
    budget: float
    spent: float
    pct: float
    progress_pct: float  # pct capped at 100 for progress bars


class GoalProgress(BaseModel):
    goal_id: str
    pct: float
    progress_pct: float
    days_left: int
    deadline_passed: bool


def budget_overview(categories: Iterable[BudgetCategory], expenses: Iterable[BudgetExpense]) -> BudgetOverview:
    """Totals across all categories; ``spent_pct`` is 0 when nothing is budgeted."""
    total_budget = sum(c.budget for c in categories)
    total_spent = sum(e.amount for e in expenses)
    return BudgetOverview(
        total_budget=total_budget,
        total_spent=total_spent,
        remaining=total_budget - total_spent,
        spent_pct=(total_spent / total_budget * 100) if total_budget > 0 else 0.0,
    )


def category_spending(categories: Iterable[BudgetCategory], expenses: Iterable[BudgetExpense]) -> List[CategorySpend]:
    """Spend per category. Expenses pointing at unknown categories are ignored."""
    expenses = list(expenses)
    rows = []
    for cat in categories:
        spent = sum(e.amount for e in expenses if e.category_id == cat.id)
        pct = spent / cat.budget * 100 if cat.budget > 0 else 0.0
        rows.append(
            CategorySpend(
                category_id=cat.id,
                name=cat.name,
                budget=cat.budget,
                spent=spent,
                pct=pct,
                progress_pct=min(pct, 100.0),
            )
        )
    return rows


def goal_progress(goal: SavingsGoal, today: date) -> GoalProgress:
    pct = goal.current / goal.target * 100
    days_left = (goal.deadline - today).days
    return GoalProgress(
        goal_id=goal.id,
        pct=pct,
        progress_pct=min(pct, 100.0),
        days_left=days_left,
        deadline_passed=days_left <= 0,
    )


def contribute_to_goal(goal: SavingsGoal, amount: float) -> SavingsGoal:
    """Return a copy of ``goal`` with ``amount`` added to its balance."""
    if not amount or amount <= 0:
        raise BudgetInputError("Contribution must be greater than zero.")
    return goal.model_copy(update={"current": goal.current + amount})
