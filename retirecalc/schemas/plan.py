"""Data contracts for retirement projections."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PlanInput(BaseModel):
    """Everything the form collects for one calculation.

    Only types are enforced here; range rules are checked in order by
    ``core.validation`` so a single readable message can be shown.
    """

    model_config = ConfigDict(frozen=True)

    currentAge: int
    retirementAge: int
    currentSavings: float
    annualSalary: float
    monthlyContribution: float
    employerMatch: Optional[float] = Field(
        default=None,
        description="Percent of salary added by the employer. None when the match is not modelled.",
    )
    annualReturn: float = Field(..., description="Expected annual return in percent (e.g. 7 for 7%).")
    inflationRate: float = Field(..., description="Expected inflation in percent.")
    annualExpenses: float = Field(..., description="Annual retirement expenses in today's money.")
    yearsInRetirement: int
    currency: Optional[str] = Field(
        default=None,
        description="Display currency. None skips the per-country allow-list.",
    )

    firstName: str = ""
    lastName: str = ""
    email: str = ""
    country: str = ""
    phoneCode: str = ""
    phone: str = ""


class ProjectionResult(BaseModel):
    """Year-by-year balances plus the summary figures shown to the user."""

    model_config = ConfigDict(frozen=True)

    yearsToRetirement: int
    annualContribution: float
    totalAtRetirement: float
    annualIncome: float
    expensesAtRetirement: float
    ages: List[int]
    # balance at the start of each age, before that year's growth
    balances: List[float]
    retireAges: List[int]
    retireBalances: List[float]


class Analysis(BaseModel):
    p1: str
    p2: str


class CalculationResponse(BaseModel):
    results: ProjectionResult
    analysis: Analysis
    currency: str


class CurrencyOptions(BaseModel):
    country: str
    currencies: List[str]
    default: str
