"""Payload accepted by the lead relay and the reply it returns."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class LeadData(BaseModel):
    # the browser may send more form fields than the CRM cares about
    model_config = ConfigDict(extra="ignore")

    email: str
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    phoneCode: Optional[str] = None
    currentAge: Optional[float] = None
    retirementAge: Optional[float] = None
    currentSavings: Optional[float] = None
    annualSalary: Optional[float] = None
    monthlyContribution: Optional[float] = None
    employerMatch: Optional[float] = None
    annualReturn: Optional[float] = None
    inflationRate: Optional[float] = None
    annualExpenses: Optional[float] = None
    yearsInRetirement: Optional[float] = None
    currency: Optional[str] = None


class LeadResults(BaseModel):
    model_config = ConfigDict(extra="ignore")

    totalAtRetirement: Optional[float] = None
    annualIncome: Optional[float] = None
    yearsToRetirement: Optional[float] = None


class LeadRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    data: LeadData
    results: LeadResults = LeadResults()


class RelayResult(BaseModel):
    ok: bool
    remoteStatus: int
    remoteBody: str
