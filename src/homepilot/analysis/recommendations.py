"""Rule-based offer and negotiation recommendations."""

from __future__ import annotations

from ..models import (
    BuyerProfile,
    FinancingOption,
    MarketAnalysis,
    MarketPace,
    PriceVerdict,
    PropertyInput,
    RecommendationParams,
    Recommendations,
)
from .affordability import down_payment_fraction

_BASE_TACTICS = (
    "Request seller concessions for closing costs",
    "Ask for home warranty",
    "Negotiate based on inspection findings",
)

_SLOW_MARKET_TACTICS = (
    "Property has been on market a while - open below asking and cite days on market",
    "Ask the seller to cover part of the buyer's closing costs",
)

_FAST_MARKET_TACTICS = (
    "Act quickly - competing offers are likely on fast-moving listings",
    "Submit a clean offer with a short inspection window",
)


def financing_options(
    prop: PropertyInput,
    buyer: BuyerProfile,
    params: RecommendationParams,
) -> tuple[FinancingOption, ...]:
    """Conventional fixed vs FHA at the buyer's rate. FHA is recommended on thin down payments."""
    fha_first = down_payment_fraction(prop.price, buyer.down_payment) < params.fha_recommend_below
    conventional = FinancingOption(
        loan_type=f"Conventional {buyer.loan_term_years}-year fixed",
        rate=buyer.interest_rate,
        pros=("Predictable payments", "Lower interest over time"),
        cons=("Higher monthly payment than ARM",),
        recommended=not fha_first,
    )
    fha = FinancingOption(
        loan_type="FHA Loan",
        rate=max(buyer.interest_rate - params.fha_rate_discount, 0.0),
        pros=(f"Lower down payment ({params.fha_min_down:.1%})", "Easier qualification"),
        cons=("Mortgage insurance required",),
        recommended=fha_first,
    )
    return conventional, fha


def generate_recommendations(
    prop: PropertyInput,
    market: MarketAnalysis,
    params: RecommendationParams,
    financing: tuple[FinancingOption, ...] = (),
) -> Recommendations:
    if market.verdict == PriceVerdict.OVERPRICED:
        offer = prop.price * params.overpriced_offer_ratio
        reasoning = (
            f"Listed {market.estimate_percentage:.1f}% above market estimate; "
            f"open at {params.overpriced_offer_ratio:.0%} of asking"
        )
    else:
        offer = prop.price * params.default_offer_ratio
        reasoning = f"Priced near market; open at {params.default_offer_ratio:.0%} of asking"

    tactics = list(_BASE_TACTICS)
    if market.pace == MarketPace.SLOW_MOVING:
        tactics.extend(_SLOW_MARKET_TACTICS)
        urgency = "Low"
    elif market.pace == MarketPace.FAST_MOVING:
        tactics.extend(_FAST_MARKET_TACTICS)
        urgency = "High"
    else:
        urgency = "Medium"

    return Recommendations(
        suggested_offer=offer,
        reasoning=reasoning,
        tactics=tuple(tactics),
        urgency=urgency,
        timeline_reasoning=market.pace_message,
        financing_options=financing,
    )
