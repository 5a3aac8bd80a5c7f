# dashboard.py: KPI totals and the data series behind the dashboard charts

from __future__ import annotations

from typing import Dict, Iterable

import pandas as pd

from classifier import TransactionType, classify
from models import KPISummary, Transaction
from sanitize import sanitize_amount

COLUMNS = ["Id", "Date", "Description", "Amount", "Type", "Category"]


def _prep(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """
    One row per transaction with its sanitized amount and classification.
    """
    rows = []
    for t in transactions:
        cls = classify(t.description)
        rows.append(
            {
                "Id": t.id,
                "Date": pd.Timestamp(t.date),
                "Description": t.description or "",
                # Sign is not authoritative; totals use magnitude only
                "Amount": abs(sanitize_amount(t.amount)),
                "Type": cls.type.value,
                "Category": cls.category,
            }
        )
    if not rows:
        return pd.DataFrame(columns=COLUMNS)
    return pd.DataFrame(rows, columns=COLUMNS)


def account_token(description: str) -> str:
    """Counterparty guess: text after the last hyphen, else the whole description.

    A heuristic, not identity resolution: "Client Payment - Acme Corp" and
    "Invoice - Acme Corp" count as one account.
    """
    description = (description or "").strip()
    if "-" in description:
        return description.split("-")[-1].strip()
    return description


def compute_kpis(transactions: Iterable[Transaction]) -> KPISummary:
    """
    Revenue, expenses, net profit and a distinct-account estimate for a batch.
    """
    txns = list(transactions)
    df = _prep(txns)

    revenue = float(df.loc[df["Type"] == TransactionType.REVENUE.value, "Amount"].sum())
    expenses = float(df.loc[df["Type"] == TransactionType.EXPENSE.value, "Amount"].sum())

    accounts = {account_token(t.description) for t in txns if t.description}
    accounts.discard("")

    return KPISummary(
        total_revenue=revenue,
        total_expenses=expenses,
        net_profit=revenue - expenses,
        active_accounts=len(accounts) or len(txns),
    )


def daily_revenue_expenses(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """
    Revenue and expense totals per calendar day, oldest first.
    """
    df = _prep(transactions)
    if df.empty:
        return pd.DataFrame(columns=["Date", "Revenue", "Expenses"])

    df["Revenue"] = df["Amount"].where(df["Type"] == TransactionType.REVENUE.value, 0.0)
    df["Expenses"] = df["Amount"].where(df["Type"] == TransactionType.EXPENSE.value, 0.0)
    daily = df.groupby("Date")[["Revenue", "Expenses"]].sum().reset_index()
    return daily.sort_values("Date", ignore_index=True)


def spending_by_category(transactions: Iterable[Transaction]) -> Dict[str, float]:
    """
    Expense totals per category, in order of first appearance.
    """
    df = _prep(transactions)
    spend = df[df["Type"] == TransactionType.EXPENSE.value]
    if spend.empty:
        return {}
    by_cat = spend.groupby("Category", sort=False)["Amount"].sum()
    return {str(cat): float(total) for cat, total in by_cat.items()}


def monthly_expenses(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """
    Expense totals per month (``YYYY-MM``), chronological.
    """
    df = _prep(transactions)
    spend = df[df["Type"] == TransactionType.EXPENSE.value].copy()
    if spend.empty:
        return pd.DataFrame(columns=["Month", "Expenses"])

    spend["Month"] = spend["Date"].dt.to_period("M").astype(str)
    monthly = spend.groupby("Month")["Amount"].sum().reset_index()
    monthly.rename(columns={"Amount": "Expenses"}, inplace=True)
    return monthly.sort_values("Month", ignore_index=True)


def format_inr(amount: float) -> str:
    """Rupee amount with Indian digit grouping, e.g. ``₹1,25,000.5``."""
    amount = sanitize_amount(amount)
    sign = "-" if amount < 0 else ""
    whole, _, frac = f"{abs(amount):.2f}".partition(".")
    frac = frac.rstrip("0")

    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])

    return f"{sign}₹{whole}" + (f".{frac}" if frac else "")
