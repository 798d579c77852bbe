"""Savings accumulation and retirement drawdown projection."""

from __future__ import annotations

import math
from typing import List

from retirecalc.core.currency import format_money, round_half_up
from retirecalc.schemas.plan import Analysis, PlanInput, ProjectionResult

# 4% rule: sustainable yearly payout as a share of the portfolio
WITHDRAWAL_RATE = 0.04

# Past this the figures stop meaning anything and floats drift toward inf.
MAX_PROJECTED_BALANCE = 1e18
OUT_OF_RANGE_MESSAGE = "These inputs produce balances too large to project."


def annual_contribution(plan: PlanInput) -> float:
    """Employee contributions plus the employer match, per year."""
    employee = plan.monthlyContribution * 12
    employer = plan.annualSalary * ((plan.employerMatch or 0.0) / 100)
    return employee + employer


def savings_rate(plan: PlanInput) -> float:
    """Yearly contributions as a percent of salary (0 with no salary)."""
    if plan.annualSalary <= 0:
        return 0.0
    return annual_contribution(plan) / plan.annualSalary * 100


def calculate_retirement(plan: PlanInput) -> ProjectionResult:
    """
    Project savings up to retirement, then draw them down.

    Accumulation (per age from currentAge to retirementAge inclusive):
      1) Record the balance at the start of the year.
      2) Except for the retirement year itself, apply growth then add
         the year's contributions.

    Drawdown (per year of retirement):
      1) Expenses start at today's expenses inflated to the retirement date
         and keep growing with inflation.
      2) Apply growth, subtract the year's expenses.
      3) Record the balance floored at zero; the next year continues from
         the unfloored value.

    Expects a plan that already passed ``validate_inputs``.
    """
    years_to_retirement = plan.retirementAge - plan.currentAge

    r = plan.annualReturn / 100
    infl = plan.inflationRate / 100
    contribution = annual_contribution(plan)

    ages: List[int] = []
    balances: List[float] = []

    balance = float(plan.currentSavings)
    for i in range(years_to_retirement + 1):
        ages.append(plan.currentAge + i)
        balances.append(balance)

        if i < years_to_retirement:
            balance = balance * (1 + r) + contribution

    total_at_retirement = balance
    annual_income = total_at_retirement * WITHDRAWAL_RATE

    expenses_at_retirement = plan.annualExpenses * (1 + infl) ** years_to_retirement

    retire_ages: List[int] = []
    retire_balances: List[float] = []

    retire_balance = total_at_retirement
    for y in range(1, plan.yearsInRetirement + 1):
        retire_ages.append(plan.retirementAge + y)

        expense_this_year = expenses_at_retirement * (1 + infl) ** (y - 1)
        retire_balance = retire_balance * (1 + r) - expense_this_year

        retire_balances.append(max(0.0, retire_balance))

    return ProjectionResult(
        yearsToRetirement=years_to_retirement,
        annualContribution=contribution,
        totalAtRetirement=total_at_retirement,
        annualIncome=annual_income,
        expensesAtRetirement=expenses_at_retirement,
        ages=ages,
        balances=balances,
        retireAges=retire_ages,
        retireBalances=retire_balances,
    )


def projection_in_range(results: ProjectionResult) -> bool:
    """False when any projected figure is non-finite or absurdly large."""
    figures = [results.totalAtRetirement, results.annualIncome, results.expensesAtRetirement]
    figures += results.balances
    figures += results.retireBalances
    return all(math.isfinite(value) and abs(value) <= MAX_PROJECTED_BALANCE for value in figures)


def build_analysis(plan: PlanInput, results: ProjectionResult) -> Analysis:
    """Two-paragraph plain-language summary of a projection."""
    currency = plan.currency or "USD"
    monthly_income = results.annualIncome / 12

    p1 = (
        f"Based on your current plan, you're projected to have "
        f"{format_money(results.totalAtRetirement, currency)} by age {plan.retirementAge}. "
        f"This would provide approximately {format_money(monthly_income, currency)} "
        f"per month in retirement income using the 4% withdrawal rule."
    )

    p2 = (
        f"With {results.yearsToRetirement} years until retirement and your current savings "
        f"rate of {round_half_up(savings_rate(plan))}%, "
        f"continue to prioritize your financial well-being!"
    )

    return Analysis(p1=p1, p2=p2)


__all__ = [
    "WITHDRAWAL_RATE",
    "annual_contribution",
    "savings_rate",
    "calculate_retirement",
    "projection_in_range",
    "build_analysis",
]
