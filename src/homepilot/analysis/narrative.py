"""Advisor message, key insights and warnings built from computed results.

Cutoffs are read from the calculator and risk parameter objects.
"""

from __future__ import annotations

from ..models import (
    AffordabilityLevel,
    AffordabilityParams,
    AffordabilityResult,
    InvestmentParams,
    InvestmentResult,
    LifestyleFit,
    LifestyleParams,
    MarketAnalysis,
    MarketPace,
    MarketParams,
    PriceVerdict,
    RiskAssessment,
    RiskBand,
)


def _dti_text(dti: float | None) -> str:
    return "n/a" if dti is None else f"{dti:.1f}%"


def buyer_advisor_message(
    afford: AffordabilityResult,
    investment: InvestmentResult,
    market: MarketAnalysis,
    params: AffordabilityParams,
) -> str:
    dti = afford.dti_ratio
    total = f"${afford.payment.total:,.0f}"
    if afford.level == AffordabilityLevel.AFFORDABLE:
        comfortable = dti is not None and dti < params.dti_comfortable
        fit = "this home fits comfortably" if comfortable else "this home works well"
        return (
            f"Great news, {fit} within your budget! With a DTI of {_dti_text(dti)}, "
            f"you'll have {'plenty of' if comfortable else 'adequate'} breathing room. "
            f"The property looks {market.verdict.value.lower()} and the rent-vs-buy view shows "
            f"a {investment.cap_rate:.1f}% cap rate."
        )
    if afford.level == AffordabilityLevel.STRETCH:
        return (
            f"This home is a stretch but manageable with careful planning. "
            f"Your DTI of {_dti_text(dti)} is on the higher side. {market.pace_message} "
            f"Build a larger emergency fund (6+ months) before committing, and make sure "
            f"you're comfortable with a monthly payment of {total}."
        )
    return (
        f"I'd recommend looking at more affordable options. With a DTI of {_dti_text(dti)}, "
        f"this home would put significant strain on your finances. A monthly payment of "
        f"{total} exceeds your comfortable budget."
    )


def investor_advisor_message(investment: InvestmentResult, market: MarketAnalysis) -> str:
    if investment.score >= 60:
        verdict = "Buy"
    elif investment.score >= 40:
        verdict = "Negotiate"
    else:
        verdict = "Pass"
    dscr = "n/a" if investment.dscr is None else f"{investment.dscr:.2f}"
    return (
        f"{verdict}: {investment.level} deal at a {investment.cap_rate:.1f}% cap rate with "
        f"${investment.cash_flow_monthly:,.0f}/mo cash flow and a DSCR of {dscr}. "
        f"The listing looks {market.verdict.value.lower()} against its market estimate. "
        f"Five-year total return is projected at ${investment.five_year.total_return:,.0f}."
    )


def key_insights(
    afford: AffordabilityResult | None,
    investment: InvestmentResult,
    market: MarketAnalysis,
    affordability_params: AffordabilityParams,
    investment_params: InvestmentParams,
    market_params: MarketParams,
    lifestyle: LifestyleFit | None = None,
    lifestyle_params: LifestyleParams | None = None,
) -> tuple[str, ...]:
    insights: list[str] = []
    if market.verdict == PriceVerdict.UNDERPRICED:
        insights.append(f"Great value: priced {abs(market.estimate_percentage):.1f}% below market estimate")
    if market.pace == MarketPace.FAST_MOVING:
        insights.append("Hot property: moving faster than average")
    if afford is not None and afford.score >= affordability_params.insight_score:
        insights.append("Excellent affordability match for your budget")
    if investment.cash_on_cash is not None and investment.cash_on_cash > investment_params.strong_return_pct:
        insights.append(f"Strong return potential with {investment.cash_on_cash:.1f}% cash-on-cash")
    if investment.dscr is not None and investment.dscr > market_params.risk_dscr_medium:
        insights.append(f"Rent covers debt service {investment.dscr:.2f}x")
    if lifestyle is not None:
        min_score = (lifestyle_params or LifestyleParams()).spacious_insight_score
        if lifestyle.space_score >= min_score:
            insights.append(f"Spacious living with {lifestyle.area_per_person:,.0f} sqft per person")
    return tuple(insights)


def warnings_for(
    afford: AffordabilityResult | None,
    investment: InvestmentResult,
    market: MarketAnalysis,
    risk: RiskAssessment,
    affordability_params: AffordabilityParams,
    market_params: MarketParams,
) -> tuple[str, ...]:
    warnings: list[str] = []
    if afford is not None:
        if afford.dti_ratio is None:
            warnings.append("No income on file - debt-to-income cannot be assessed")
        elif afford.dti_ratio > market_params.risk_dti_high:
            warnings.append("High debt-to-income ratio may affect loan approval")
        if afford.months_to_save is not None and afford.months_to_save > affordability_params.long_savings_months:
            warnings.append(
                f"Significant savings required - may take over {affordability_params.long_savings_months} months"
            )
    if risk.overall == RiskBand.HIGH:
        warnings.append("High financial risk - consider building more savings")
    if market.competitiveness == "Low":
        warnings.append("Property priced above market average per square foot")
    if market.verdict == PriceVerdict.OVERPRICED:
        warnings.append(f"Listed {market.estimate_percentage:.1f}% above market estimate")
    if investment.cash_flow_monthly < 0:
        warnings.append(f"Negative rental cash flow: ${investment.cash_flow_monthly:,.0f}/mo")
    if investment.dscr is not None and investment.dscr < market_params.risk_dscr_high:
        warnings.append(
            f"DSCR below {market_params.risk_dscr_high:g} ({investment.dscr:.2f}) - rent does not cover the mortgage"
        )
    return tuple(warnings)
