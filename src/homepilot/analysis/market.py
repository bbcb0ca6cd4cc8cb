"""Market verdicts and heuristic risk scoring.

Every threshold here is a configuration constant (``MarketParams``), not a
fitted value.
"""

from __future__ import annotations

from ..models import (
    MarketAnalysis,
    MarketPace,
    MarketParams,
    PriceVerdict,
    PropertyInput,
    RiskAssessment,
    RiskBand,
)
from .amortization import percent

_PACE_MESSAGES = {
    MarketPace.FAST_MOVING: "This property is moving quickly. Consider making an offer soon.",
    MarketPace.NORMAL: "Days on market are typical for the area.",
    MarketPace.SLOW_MOVING: "Property has been on market for a while. Good negotiation opportunity.",
}

_RISK_RECOMMENDATIONS = (
    "Build emergency fund of 6 months expenses",
    "Consider getting pre-approved for mortgage",
)


def price_verdict(prop: PropertyInput, params: MarketParams) -> tuple[float, float, PriceVerdict]:
    """(difference, percentage, verdict) of price against the market estimate."""
    estimate = prop.market_estimate or prop.price
    difference = prop.price - estimate
    pct = percent(difference, estimate) or 0.0
    if pct > params.estimate_threshold_pct:
        verdict = PriceVerdict.OVERPRICED
    elif pct < -params.estimate_threshold_pct:
        verdict = PriceVerdict.UNDERPRICED
    else:
        verdict = PriceVerdict.FAIR
    return difference, pct, verdict


def market_pace(days_on_market: int | None, params: MarketParams) -> MarketPace:
    if days_on_market is None:
        return MarketPace.NORMAL
    if days_on_market < params.fast_days:
        return MarketPace.FAST_MOVING
    if days_on_market > params.slow_days:
        return MarketPace.SLOW_MOVING
    return MarketPace.NORMAL


def price_per_area(prop: PropertyInput) -> float | None:
    if not prop.living_area or prop.living_area <= 0:
        return None
    return prop.price / prop.living_area


def analyze_market(prop: PropertyInput, params: MarketParams) -> MarketAnalysis:
    ppa = price_per_area(prop)
    baseline = params.baseline_price_per_area
    if ppa is None:
        competitiveness = "Medium"
    elif ppa > baseline * params.overpriced_area_ratio:
        competitiveness = "Low"
    elif ppa < baseline * params.underpriced_area_ratio:
        competitiveness = "High"
    else:
        competitiveness = "Medium"

    difference, pct, verdict = price_verdict(prop, params)
    pace = market_pace(prop.days_on_market, params)
    return MarketAnalysis(
        price_per_area=ppa,
        baseline_price_per_area=baseline,
        competitiveness=competitiveness,
        estimate_difference=difference,
        estimate_percentage=pct,
        verdict=verdict,
        pace=pace,
        pace_message=_PACE_MESSAGES[pace],
    )


def financial_risk_from_dti(dti: float | None, params: MarketParams) -> float:
    """Buyer financial risk. Unknown DTI (no income) is treated as the worst case."""
    if dti is None or dti > params.risk_dti_high:
        return params.financial_risk_high
    if dti > params.risk_dti_medium:
        return params.financial_risk_medium
    return params.financial_risk_low


def financial_risk_from_dscr(dscr: float | None, params: MarketParams) -> float:
    """Investor financial risk from debt coverage. All-cash deals (no DSCR) carry no debt risk."""
    if dscr is None:
        return params.financial_risk_low
    if dscr < params.risk_dscr_high:
        return params.financial_risk_high
    if dscr < params.risk_dscr_medium:
        return params.financial_risk_medium
    return params.financial_risk_low


def assess_risk(
    market: MarketAnalysis,
    financial_score: float,
    params: MarketParams,
    factors: tuple[str, ...] = (),
) -> RiskAssessment:
    ppa = market.price_per_area
    if ppa is not None and ppa > market.baseline_price_per_area * params.overpriced_area_ratio:
        market_score = params.market_risk_high
    else:
        market_score = params.market_risk_low

    if market.pace == MarketPace.FAST_MOVING:
        liquidity_score, days_to_sell = params.liquidity_fast, params.fast_days
    elif market.pace == MarketPace.SLOW_MOVING:
        liquidity_score, days_to_sell = params.liquidity_slow, params.slow_days + 30
    else:
        liquidity_score, days_to_sell = params.liquidity_normal, 45

    if financial_score > params.band_high_above:
        overall = RiskBand.HIGH
    elif financial_score > params.band_medium_above:
        overall = RiskBand.MEDIUM
    else:
        overall = RiskBand.LOW

    weights = params.weight_financial + params.weight_market + params.weight_liquidity
    composite = (
        financial_score * params.weight_financial
        + market_score * params.weight_market
        + liquidity_score * params.weight_liquidity
    ) / (weights or 1.0)

    return RiskAssessment(
        overall=overall,
        financial_score=financial_score,
        market_score=market_score,
        liquidity_score=liquidity_score,
        composite_score=composite,
        estimated_days_to_sell=days_to_sell,
        factors=factors,
        recommendations=_RISK_RECOMMENDATIONS,
    )
