"""Down-payment scenario sweep."""

from __future__ import annotations

from ..models import (
    AffordabilityParams,
    BuyerProfile,
    DownPaymentScenario,
    PropertyInput,
    ScenarioParams,
    ScenarioSet,
)
from .affordability import payment_breakdown


def _recommendation(percentage: int, amount: float, savings: float) -> str:
    if amount > savings:
        return f"Need ${round(amount - savings):,} more"
    if percentage >= 20:
        return "Recommended - No PMI"
    if percentage == 10:
        return "Good balance"
    return "Lower upfront, higher monthly"


def down_payment_scenarios(
    prop: PropertyInput,
    buyer: BuyerProfile,
    params: ScenarioParams,
    afford_params: AffordabilityParams,
) -> ScenarioSet:
    """Monthly payment and PMI at each standard down-payment percentage, ascending."""
    scenarios = []
    for pct in sorted(params.percentages):
        fraction = pct / 100
        payment = payment_breakdown(
            prop.price,
            fraction,
            buyer.interest_rate,
            buyer.loan_term_years,
            buyer.include_pmi,
            prop.hoa_monthly,
            afford_params,
        )
        amount = prop.price * fraction
        scenarios.append(
            DownPaymentScenario(
                percentage=pct,
                amount=amount,
                monthly_payment=payment.total,
                pmi=payment.pmi,
                recommendation=_recommendation(pct, amount, buyer.available_savings),
            )
        )
    return tuple(scenarios)
