"""
loans.py
--------
Closed-form annuity calculators for loans, mortgages, savings,
investments and retirement, plus a month-by-month amortization schedule.

Rates are annual percentages (6 means 6%); terms are in years. Every
calculator compounds monthly: ``r = rate / 100 / 12`` over ``n = years * 12``
periods. Inputs that fail a guard raise ``CalculatorInputError`` and no
partial result is returned.
"""

from __future__ import annotations

import math
from typing import List, Optional

import pandas as pd
from pydantic import BaseModel

# Annual share of the projected pot assumed to be withdrawn in retirement.
SAFE_WITHDRAWAL_RATE = 0.04


class CalculatorInputError(ValueError):
    """Scenario parameters that cannot produce a meaningful result."""


class LoanResult(BaseModel):
    principal: float
    monthly_payment: float
    total_interest: float
    total_amount: float


class MortgageResult(BaseModel):
    loan_amount: float
    monthly_payment: float
    total_interest: float
    total_cost: float


class SavingsResult(BaseModel):
    total_contributions: float
    interest_earned: float
    final_amount: float
    goal: Optional[float] = None
    goal_reached: Optional[bool] = None


class YearlyValue(BaseModel):
    year: int
    label: str
    value: float


class InvestmentResult(BaseModel):
    total_invested: float
    growth: float
    future_value: float
    series: List[YearlyValue]


class RetirementResult(BaseModel):
    years_until_retirement: float
    projected_savings: float
    monthly_income: float


def monthly_rate(annual_rate: float) -> float:
    return annual_rate / 100.0 / 12.0


def annuity_payment(principal: float, rate_monthly: float, periods: float) -> float:
    """Fixed payment that clears ``principal`` over ``periods`` months."""
    if rate_monthly == 0:
        return principal / periods
    growth = math.pow(1 + rate_monthly, periods)
    return principal * rate_monthly * growth / (growth - 1)


def annuity_future_value(contribution: float, rate_monthly: float, periods: float) -> float:
    """Value of ``periods`` end-of-month contributions."""
    if rate_monthly == 0:
        return contribution * periods
    return contribution * (math.pow(1 + rate_monthly, periods) - 1) / rate_monthly


def calculate_loan(amount: float, annual_rate: float, years: float) -> LoanResult:
    if amount <= 0 or annual_rate <= 0 or years <= 0:
        raise CalculatorInputError("Loan amount, interest rate and term must all be greater than zero.")

    n = years * 12
    payment = annuity_payment(amount, monthly_rate(annual_rate), n)
    total = payment * n
    return LoanResult(principal=amount, monthly_payment=payment, total_interest=total - amount, total_amount=total)


def calculate_mortgage(home_price: float, down_payment: float, annual_rate: float, years: float) -> MortgageResult:
    if home_price <= 0 or annual_rate <= 0 or years <= 0:
        raise CalculatorInputError("Home price, interest rate and term must all be greater than zero.")
    if down_payment >= home_price:
        raise CalculatorInputError("Down payment must be less than the home price.")

    principal = home_price - down_payment
    n = years * 12
    payment = annuity_payment(principal, monthly_rate(annual_rate), n)
    total = payment * n
    return MortgageResult(
        loan_amount=principal,
        monthly_payment=payment,
        total_interest=total - principal,
        total_cost=total,
    )


def calculate_savings(
    monthly_contribution: float,
    annual_rate: float,
    years: float,
    goal: Optional[float] = None,
) -> SavingsResult:
    """Contribution-only savings plan; a zero rate just sums the deposits."""
    if years <= 0 or annual_rate < 0 or monthly_contribution < 0:
        raise CalculatorInputError("Savings term must be positive; rate and contribution cannot be negative.")

    n = years * 12
    contributions = monthly_contribution * n
    final = annuity_future_value(monthly_contribution, monthly_rate(annual_rate), n)
    return SavingsResult(
        total_contributions=contributions,
        interest_earned=final - contributions,
        final_amount=final,
        goal=goal,
        goal_reached=None if goal is None else final >= goal,
    )


def _investment_value(initial: float, monthly: float, rate_monthly: float, months: float) -> float:
    value = initial * math.pow(1 + rate_monthly, months)
    if monthly > 0:
        value += annuity_future_value(monthly, rate_monthly, months)
    return value


def calculate_investment(initial: float, annual_rate: float, years: float, monthly: float = 0.0) -> InvestmentResult:
    """Lump sum plus optional monthly top-ups, with a value for every whole year."""
    if (initial <= 0 and monthly <= 0) or annual_rate <= 0 or years <= 0:
        raise CalculatorInputError(
            "Provide an initial or monthly investment, and a positive return rate and term."
        )

    r = monthly_rate(annual_rate)
    n = years * 12
    future = _investment_value(initial, monthly, r, n)
    invested = initial + (monthly * n if monthly > 0 else 0.0)

    series = [
        YearlyValue(year=year, label=f"Year {year}", value=_investment_value(initial, monthly, r, year * 12))
        for year in range(int(math.floor(years)) + 1)
    ]
    return InvestmentResult(total_invested=invested, growth=future - invested, future_value=future, series=series)


def calculate_retirement(
    current_age: float,
    retirement_age: float,
    current_savings: float,
    monthly_saving: float,
    expected_return: float,
) -> RetirementResult:
    if current_age >= retirement_age:
        raise CalculatorInputError("Retirement age must be greater than current age.")
    if expected_return <= 0:
        raise CalculatorInputError("Expected return must be greater than zero.")

    years = retirement_age - current_age
    n = years * 12
    r = monthly_rate(expected_return)

    projected = current_savings * math.pow(1 + r, n)
    if monthly_saving > 0:
        projected += annuity_future_value(monthly_saving, r, n)

    return RetirementResult(
        years_until_retirement=years,
        projected_savings=projected,
        monthly_income=projected * SAFE_WITHDRAWAL_RATE / 12,
    )


def amortization_schedule(principal: float, annual_rate: float, years: float) -> pd.DataFrame:
    """
    Month-by-month split of a fixed-payment loan.
    Returns a DataFrame with Month, Payment, Interest, Principal, Balance.
    """
    if principal <= 0 or annual_rate <= 0 or years <= 0:
        raise CalculatorInputError("Loan amount, interest rate and term must all be greater than zero.")

    rate = monthly_rate(annual_rate)
    periods = int(round(years * 12))
    payment = annuity_payment(principal, rate, years * 12)

    schedule = []
    balance = principal
    for month in range(1, periods + 1):
        interest = balance * rate
        paid_principal = payment - interest
        # Final month absorbs float drift
        if month == periods or paid_principal > balance:
            paid_principal = balance
        balance -= paid_principal
        schedule.append({
            "Month": month,
            "Payment": interest + paid_principal,
            "Interest": interest,
            "Principal": paid_principal,
            "Balance": max(0.0, balance),
        })

    return pd.DataFrame(schedule)
