"""Affordability calculator for home buyers."""

from __future__ import annotations

import math

from ..errors import InvalidInput
from ..models import (
    AffordabilityLevel,
    AffordabilityParams,
    AffordabilityResult,
    BuyerProfile,
    IncomeBreakdown,
    MonthlyPaymentBreakdown,
    PropertyInput,
    RiskComfort,
)
from .amortization import first_payment_split, percent, round_half_up


def down_payment_fraction(price: float, down_payment: float) -> float:
    """Values below 1 are a fraction of price; anything else is a dollar amount."""
    if price <= 0:
        raise InvalidInput(f"price must be positive, got {price}")
    if down_payment < 0:
        raise InvalidInput(f"down payment must be non-negative, got {down_payment}")
    fraction = down_payment if down_payment < 1 else down_payment / price
    if fraction >= 1:
        raise InvalidInput(f"down payment ${down_payment:,.0f} is not less than price ${price:,.0f}")
    return fraction


def monthly_tax(price: float, params: AffordabilityParams) -> float:
    return price * params.tax_rate_annual / 12


def monthly_insurance(price: float, params: AffordabilityParams) -> float:
    return price * params.insurance_per_dollar


def monthly_pmi(loan_amount: float, fraction: float, include_pmi: bool, params: AffordabilityParams) -> float:
    """PMI only below the threshold fraction and only if the buyer opts in."""
    # 1e-9 tolerance so 20% computed from a dollar amount never slips under the threshold
    if not include_pmi or fraction >= params.pmi_threshold - 1e-9:
        return 0.0
    return loan_amount * params.pmi_rate_annual / 12


def payment_breakdown(
    price: float,
    fraction: float,
    annual_rate: float,
    years: int,
    include_pmi: bool,
    hoa_monthly: float,
    params: AffordabilityParams,
) -> MonthlyPaymentBreakdown:
    loan_amount = price * (1 - fraction)
    principal, interest = first_payment_split(loan_amount, annual_rate, years)
    return MonthlyPaymentBreakdown(
        principal=principal,
        interest=interest,
        tax=monthly_tax(price, params),
        insurance=monthly_insurance(price, params),
        hoa=hoa_monthly,
        pmi=monthly_pmi(loan_amount, fraction, include_pmi, params),
    )


def debt_to_income(monthly_debt: float, housing_payment: float, annual_income: float) -> float | None:
    """(debt + housing) / gross monthly income * 100; None without income."""
    if not annual_income or annual_income <= 0:
        return None
    return percent(monthly_debt + housing_payment, annual_income / 12)


def affordability_score(
    dti: float | None,
    total_payment: float,
    max_budget: float,
    params: AffordabilityParams,
) -> int:
    """
    0-100 score from DTI and budget compliance.
    - DTI <= comfortable: 70..100, full credit at zero debt
    - comfortable < DTI <= max: linear 70 -> 40
    - DTI > max: 40 minus 3 points per DTI point
    Then subtract half the percentage by which the payment exceeds the budget.
    """
    if dti is None:
        return 0
    lo, hi = params.dti_comfortable, params.dti_max
    if dti <= lo:
        score = 70 + (lo - dti) / lo * 30
    elif dti <= hi:
        score = 70 - (dti - lo) / (hi - lo) * 30
    else:
        score = 40 - (dti - hi) * 3

    if max_budget > 0 and total_payment > max_budget:
        overage_pct = (total_payment - max_budget) / max_budget * 100
        score -= overage_pct * 0.5

    return int(round_half_up(min(100.0, max(0.0, score))))


def affordability_level(score: int, risk: RiskComfort, params: AffordabilityParams) -> AffordabilityLevel:
    affordable_min, stretch_min = params.level_thresholds[risk]
    if score >= affordable_min:
        return AffordabilityLevel.AFFORDABLE
    if score >= stretch_min:
        return AffordabilityLevel.STRETCH
    return AffordabilityLevel.TOO_EXPENSIVE


def calculate_affordability(
    prop: PropertyInput,
    buyer: BuyerProfile,
    params: AffordabilityParams,
) -> AffordabilityResult:
    """Monthly payment, DTI and risk-adjusted affordability for a buyer."""
    fraction = down_payment_fraction(prop.price, buyer.down_payment)
    down = prop.price * fraction
    loan_amount = prop.price - down

    payment = payment_breakdown(
        prop.price,
        fraction,
        buyer.interest_rate,
        buyer.loan_term_years,
        buyer.include_pmi,
        prop.hoa_monthly,
        params,
    )
    total = payment.total

    dti = debt_to_income(buyer.monthly_debt, total, buyer.annual_income)
    score = affordability_score(dti, total, buyer.max_monthly_budget, params)
    if dti is None:
        level = AffordabilityLevel.TOO_EXPENSIVE
    else:
        level = affordability_level(score, buyer.risk_comfort, params)

    closing = prop.price * params.closing_cost_rate
    cash_needed = down + closing
    gross = max(buyer.annual_income, 0.0) / 12
    savings_capacity = gross * params.savings_rate
    shortfall = cash_needed - buyer.available_savings
    if shortfall <= 0:
        months_to_save = 0
    elif savings_capacity > 0:
        months_to_save = math.ceil(shortfall / savings_capacity)
    else:
        months_to_save = None

    net = gross * params.net_income_ratio
    income = IncomeBreakdown(
        monthly_gross_income=gross,
        monthly_net_income=net,
        after_housing_income=net - total,
        housing_to_income_ratio=percent(total, gross),
    )

    return AffordabilityResult(
        score=score,
        level=level,
        payment=payment,
        dti_ratio=dti,
        down_payment=down,
        down_payment_fraction=fraction,
        loan_amount=loan_amount,
        closing_costs=closing,
        total_cash_needed=cash_needed,
        months_to_save=months_to_save,
        income=income,
    )
