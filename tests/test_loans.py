"""Tests for the annuity calculators and amortization schedule."""

import pytest

from loans import (
    SAFE_WITHDRAWAL_RATE,
    CalculatorInputError,
    amortization_schedule,
    calculate_investment,
    calculate_loan,
    calculate_mortgage,
    calculate_retirement,
    calculate_savings,
)


class TestLoan:
    def test_thirty_year_loan(self):
        result = calculate_loan(100000, 6, 30)
        assert result.monthly_payment == pytest.approx(599.55, abs=0.01)
        assert result.total_amount == pytest.approx(result.monthly_payment * 360)
        assert result.total_interest == pytest.approx(result.total_amount - 100000)

    @pytest.mark.parametrize("args", [(0, 6, 30), (100000, 0, 30), (100000, 6, 0), (-5, 6, 30)])
    def test_rejects_non_positive_inputs(self, args):
        with pytest.raises(CalculatorInputError):
            calculate_loan(*args)


class TestMortgage:
    def test_down_payment_reduces_principal(self):
        result = calculate_mortgage(500000, 100000, 6, 30)
        assert result.loan_amount == 400000
        assert result.monthly_payment == pytest.approx(4 * 599.55, abs=0.05)
        assert result.total_cost == pytest.approx(result.loan_amount + result.total_interest)

    def test_down_payment_must_be_below_price(self):
        with pytest.raises(CalculatorInputError, match="Down payment"):
            calculate_mortgage(300000, 300000, 6, 30)

    def test_rejects_zero_rate(self):
        with pytest.raises(CalculatorInputError):
            calculate_mortgage(300000, 0, 0, 30)


class TestSavings:
    def test_compound_growth(self):
        result = calculate_savings(1000, 12, 1)
        assert result.total_contributions == 12000
        assert result.final_amount == pytest.approx(12682.50, abs=0.01)
        assert result.interest_earned == pytest.approx(682.50, abs=0.01)
        assert result.goal is None and result.goal_reached is None

    def test_zero_rate_sums_deposits(self):
        result = calculate_savings(500, 0, 2)
        assert result.final_amount == 12000
        assert result.interest_earned == 0

    def test_goal(self):
        assert calculate_savings(1000, 12, 1, goal=12000).goal_reached is True
        assert calculate_savings(1000, 12, 1, goal=20000).goal_reached is False

    @pytest.mark.parametrize("args", [(1000, 5, 0), (1000, -1, 5), (-10, 5, 5)])
    def test_guards(self, args):
        with pytest.raises(CalculatorInputError):
            calculate_savings(*args)


class TestInvestment:
    def test_lump_sum_series(self):
        result = calculate_investment(10000, 12, 3)
        assert [p.year for p in result.series] == [0, 1, 2, 3]
        assert result.series[0].value == pytest.approx(10000)
        assert result.series[0].label == "Year 0"
        assert result.series[-1].value == pytest.approx(result.future_value)
        assert result.future_value == pytest.approx(10000 * 1.01 ** 36)
        assert result.total_invested == 10000

    def test_monthly_top_ups(self):
        result = calculate_investment(0, 12, 1, monthly=1000)
        assert result.total_invested == 12000
        assert result.future_value == pytest.approx(12682.50, abs=0.01)
        assert result.growth == pytest.approx(result.future_value - 12000)

    def test_fractional_years(self):
        assert len(calculate_investment(5000, 8, 2.5).series) == 3

    def test_needs_some_money(self):
        with pytest.raises(CalculatorInputError):
            calculate_investment(0, 8, 5, monthly=0)


class TestRetirement:
    def test_safe_withdrawal_income(self):
        result = calculate_retirement(30, 60, 100000, 0, 12)
        assert result.years_until_retirement == 30
        assert result.projected_savings == pytest.approx(100000 * 1.01 ** 360)
        assert result.monthly_income == pytest.approx(result.projected_savings * 0.04 / 12)
        assert SAFE_WITHDRAWAL_RATE == 0.04

    def test_monthly_saving_adds_annuity(self):
        without = calculate_retirement(40, 50, 0, 0, 6)
        with_saving = calculate_retirement(40, 50, 0, 1000, 6)
        assert without.projected_savings == 0
        assert with_saving.projected_savings > 120000

    def test_age_order(self):
        with pytest.raises(CalculatorInputError, match="Retirement age"):
            calculate_retirement(60, 60, 1000, 100, 7)

    def test_positive_return(self):
        with pytest.raises(CalculatorInputError):
            calculate_retirement(30, 60, 1000, 100, 0)


class TestAmortizationSchedule:
    def test_schedule_matches_loan_totals(self):
        loan = calculate_loan(100000, 6, 30)
        schedule = amortization_schedule(100000, 6, 30)
        assert list(schedule.columns) == ["Month", "Payment", "Interest", "Principal", "Balance"]
        assert len(schedule) == 360
        assert schedule["Interest"].sum() == pytest.approx(loan.total_interest, rel=1e-6)
        assert schedule["Principal"].sum() == pytest.approx(100000)
        assert schedule["Balance"].iloc[-1] == 0

    def test_interest_share_falls_over_time(self):
        schedule = amortization_schedule(250000, 9, 20)
        assert schedule["Interest"].is_monotonic_decreasing
        assert schedule["Balance"].is_monotonic_decreasing

    def test_guards(self):
        with pytest.raises(CalculatorInputError):
            amortization_schedule(100000, 0, 30)
