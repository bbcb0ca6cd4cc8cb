"""Analysis engine: runs the calculators for one property + profile."""

from __future__ import annotations

from typing import Any, List

from ..config import (
    get_affordability_params,
    get_investment_params,
    get_lifestyle_params,
    get_market_params,
    get_projection_params,
    get_recommendation_params,
    get_scenario_params,
    load_config,
)
from ..inputs import parse_request
from ..logging_utils import get_logger
from ..models import (
    AffordabilityParams,
    AnalysisResult,
    BuyerProfile,
    InvestmentParams,
    InvestorProfile,
    MarketParams,
    PropertyInput,
    UserFinancialProfile,
)
from .affordability import calculate_affordability
from .investment import calculate_investment, investor_view, score_investment
from .lifestyle import analyze_lifestyle
from .market import analyze_market, assess_risk, financial_risk_from_dscr, financial_risk_from_dti
from .narrative import buyer_advisor_message, investor_advisor_message, key_insights, warnings_for
from .projections import ownership_costs
from .recommendations import financing_options, generate_recommendations
from .scenarios import down_payment_scenarios

logger = get_logger(__name__)


class AnalysisEngine:
    """
    Deterministic property analysis.
    Buyer profiles get affordability, down-payment scenarios, ownership costs,
    lifestyle fit and a rent-vs-buy investment view; investor profiles get investment metrics.
    Both get market, risk and negotiation output.
    """

    def __init__(
        self,
        affordability: AffordabilityParams | None = None,
        investment: InvestmentParams | None = None,
        market: MarketParams | None = None,
        config: dict | None = None,
    ) -> None:
        cfg = config if config is not None else load_config()
        self._config = cfg
        self.affordability_params = affordability or get_affordability_params(cfg)
        self.investment_params = investment or get_investment_params(cfg)
        self.market_params = market or get_market_params(cfg)
        self.scenario_params = get_scenario_params(cfg)
        self.projection_params = get_projection_params(cfg)
        self.recommendation_params = get_recommendation_params(cfg)
        self.lifestyle_params = get_lifestyle_params(cfg)

    def analyze(self, prop: PropertyInput, profile: UserFinancialProfile) -> AnalysisResult:
        """Run full analysis. The profile variant selects which calculators run."""
        if isinstance(profile, BuyerProfile):
            result = self._analyze_buyer(prop, profile)
        elif isinstance(profile, InvestorProfile):
            result = self._analyze_investor(prop, profile)
        else:
            raise TypeError(f"unsupported profile type: {type(profile).__name__}")
        logger.info(
            "analysis complete",
            extra={
                "context": {
                    "mode": result.mode,
                    "zipcode": prop.zipcode,
                    "price": prop.price,
                    "risk": result.risk.overall.value,
                }
            },
        )
        return result

    def analyze_request(self, payload: dict[str, Any]) -> AnalysisResult:
        """Analyze an inbound ``{"propertyInput": ..., "userProfile": ...}`` payload."""
        prop, profile = parse_request(payload)
        return self.analyze(prop, profile)

    def analyze_many(self, requests: List[dict[str, Any]]) -> List[AnalysisResult]:
        return [self.analyze_request(r) for r in requests]

    def _analyze_buyer(self, prop: PropertyInput, buyer: BuyerProfile) -> AnalysisResult:
        afford = calculate_affordability(prop, buyer, self.affordability_params)
        scenarios = down_payment_scenarios(prop, buyer, self.scenario_params, self.affordability_params)
        costs = ownership_costs(prop, self.affordability_params, self.projection_params)
        view = investor_view(buyer, prop.price, self.investment_params)
        investment = calculate_investment(prop, view, self.investment_params)
        market = analyze_market(prop, self.market_params)

        factors = ()
        if afford.dti_ratio is None or afford.dti_ratio > self.market_params.risk_dti_high:
            factors = ("High debt-to-income ratio",)
        risk = assess_risk(
            market,
            financial_risk_from_dti(afford.dti_ratio, self.market_params),
            self.market_params,
            factors,
        )
        investment = score_investment(investment, view, risk.overall, self.investment_params)
        lifestyle = analyze_lifestyle(prop, buyer, self.lifestyle_params)
        recs = generate_recommendations(
            prop,
            market,
            self.recommendation_params,
            financing=financing_options(prop, buyer, self.recommendation_params),
        )

        return AnalysisResult(
            mode="buyer",
            property=prop,
            affordability=afford,
            scenarios=scenarios,
            ownership_costs=costs,
            lifestyle=lifestyle,
            investment=investment,
            market=market,
            risk=risk,
            recommendations=recs,
            advisor_message=buyer_advisor_message(afford, investment, market, self.affordability_params),
            insights=key_insights(
                afford,
                investment,
                market,
                self.affordability_params,
                self.investment_params,
                self.market_params,
                lifestyle=lifestyle,
                lifestyle_params=self.lifestyle_params,
            ),
            warnings=warnings_for(afford, investment, market, risk, self.affordability_params, self.market_params),
        )

    def _analyze_investor(self, prop: PropertyInput, investor: InvestorProfile) -> AnalysisResult:
        investment = calculate_investment(prop, investor, self.investment_params)
        market = analyze_market(prop, self.market_params)

        factors = ()
        if investment.dscr is not None and investment.dscr < self.market_params.risk_dscr_high:
            factors = ("Rent does not cover debt service",)
        risk = assess_risk(
            market,
            financial_risk_from_dscr(investment.dscr, self.market_params),
            self.market_params,
            factors,
        )
        investment = score_investment(investment, investor, risk.overall, self.investment_params)
        recs = generate_recommendations(prop, market, self.recommendation_params)

        return AnalysisResult(
            mode="investor",
            property=prop,
            investment=investment,
            market=market,
            risk=risk,
            recommendations=recs,
            advisor_message=investor_advisor_message(investment, market),
            insights=key_insights(
                None, investment, market, self.affordability_params, self.investment_params, self.market_params
            ),
            warnings=warnings_for(None, investment, market, risk, self.affordability_params, self.market_params),
        )
