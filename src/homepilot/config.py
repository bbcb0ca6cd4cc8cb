"""Configuration loader."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .models import (
    AffordabilityParams,
    GenerationParams,
    InvestmentParams,
    LifestyleParams,
    MarketParams,
    ProjectionParams,
    RecommendationParams,
    RiskComfort,
    ScenarioParams,
)


def load_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """Load config from YAML file."""
    path = Path(config_path) if config_path else Path(__file__).parent.parent.parent / "config.yaml"
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _level_thresholds(raw: dict[str, Any]) -> dict[RiskComfort, tuple[float, float]]:
    defaults = AffordabilityParams().level_thresholds
    out = dict(defaults)
    for band, values in (raw or {}).items():
        if not isinstance(values, dict):
            continue
        key = RiskComfort.parse(band)
        affordable_min, stretch_min = defaults[key]
        out[key] = (
            float(values.get("affordable", affordable_min)),
            float(values.get("stretch", stretch_min)),
        )
    return out


def get_affordability_params(config: dict[str, Any]) -> AffordabilityParams:
    """Extract affordability assumptions from config."""
    af = config.get("affordability", {})
    d = AffordabilityParams()
    return AffordabilityParams(
        tax_rate_annual=float(af.get("tax_rate_annual", d.tax_rate_annual)),
        insurance_reference_price=float(af.get("insurance_reference_price", d.insurance_reference_price)),
        insurance_reference_monthly=float(af.get("insurance_reference_monthly", d.insurance_reference_monthly)),
        pmi_rate_annual=float(af.get("pmi_rate_annual", d.pmi_rate_annual)),
        pmi_threshold=float(af.get("pmi_threshold", d.pmi_threshold)),
        dti_comfortable=float(af.get("dti_comfortable", d.dti_comfortable)),
        dti_max=float(af.get("dti_max", d.dti_max)),
        closing_cost_rate=float(af.get("closing_cost_rate", d.closing_cost_rate)),
        net_income_ratio=float(af.get("net_income_ratio", d.net_income_ratio)),
        savings_rate=float(af.get("savings_rate", d.savings_rate)),
        insight_score=float(af.get("insight_score", d.insight_score)),
        long_savings_months=int(af.get("long_savings_months", d.long_savings_months)),
        level_thresholds=_level_thresholds(af.get("level_thresholds", {})),
    )


def get_scenario_params(config: dict[str, Any]) -> ScenarioParams:
    """Extract down-payment sweep percentages from config."""
    sc = config.get("scenarios", {})
    pcts = sc.get("percentages") or ScenarioParams().percentages
    return ScenarioParams(percentages=tuple(sorted(int(p) for p in pcts)))


def get_projection_params(config: dict[str, Any]) -> ProjectionParams:
    """Extract ownership cost growth rates from config."""
    pr = config.get("projections", {})
    d = ProjectionParams()
    return ProjectionParams(
        years=int(pr.get("years", d.years)),
        insurance_growth=float(pr.get("insurance_growth", d.insurance_growth)),
        tax_growth=float(pr.get("tax_growth", d.tax_growth)),
        hoa_growth=float(pr.get("hoa_growth", d.hoa_growth)),
        maintenance_rate=float(pr.get("maintenance_rate", d.maintenance_rate)),
        maintenance_growth=float(pr.get("maintenance_growth", d.maintenance_growth)),
    )


def get_investment_params(config: dict[str, Any]) -> InvestmentParams:
    """Extract investment assumptions from config."""
    inv = config.get("investment", {})
    d = InvestmentParams()
    return InvestmentParams(
        rent_floor_rate=float(inv.get("rent_floor_rate", d.rent_floor_rate)),
        tax_rate_annual=float(inv.get("tax_rate_annual", d.tax_rate_annual)),
        insurance_rate_annual=float(inv.get("insurance_rate_annual", d.insurance_rate_annual)),
        management_rate=float(inv.get("management_rate", d.management_rate)),
        closing_cost_rate=float(inv.get("closing_cost_rate", d.closing_cost_rate)),
        rent_growth=float(inv.get("rent_growth", d.rent_growth)),
        appreciation_rate=float(inv.get("appreciation_rate", d.appreciation_rate)),
        horizon_years=int(inv.get("horizon_years", d.horizon_years)),
        buyer_vacancy_rate=float(inv.get("buyer_vacancy_rate", d.buyer_vacancy_rate)),
        buyer_maintenance_rate=float(inv.get("buyer_maintenance_rate", d.buyer_maintenance_rate)),
        score_cash_flow_floor=float(inv.get("score_cash_flow_floor", d.score_cash_flow_floor)),
        score_min_dscr=float(inv.get("score_min_dscr", d.score_min_dscr)),
        score_min_cap_rate=float(inv.get("score_min_cap_rate", d.score_min_cap_rate)),
        strong_return_pct=float(inv.get("strong_return_pct", d.strong_return_pct)),
    )


def get_market_params(config: dict[str, Any]) -> MarketParams:
    """Extract market and risk thresholds from config."""
    mk = config.get("market", {})
    rk = config.get("risk", {})
    d = MarketParams()
    weights = rk.get("weights", {})
    return MarketParams(
        estimate_threshold_pct=float(mk.get("estimate_threshold_pct", d.estimate_threshold_pct)),
        fast_days=int(mk.get("fast_days", d.fast_days)),
        slow_days=int(mk.get("slow_days", d.slow_days)),
        baseline_price_per_area=float(mk.get("baseline_price_per_area", d.baseline_price_per_area)),
        overpriced_area_ratio=float(mk.get("overpriced_area_ratio", d.overpriced_area_ratio)),
        underpriced_area_ratio=float(mk.get("underpriced_area_ratio", d.underpriced_area_ratio)),
        risk_dti_high=float(rk.get("dti_high", d.risk_dti_high)),
        risk_dti_medium=float(rk.get("dti_medium", d.risk_dti_medium)),
        risk_dscr_high=float(rk.get("dscr_high", d.risk_dscr_high)),
        risk_dscr_medium=float(rk.get("dscr_medium", d.risk_dscr_medium)),
        financial_risk_high=float(rk.get("financial_high", d.financial_risk_high)),
        financial_risk_medium=float(rk.get("financial_medium", d.financial_risk_medium)),
        financial_risk_low=float(rk.get("financial_low", d.financial_risk_low)),
        market_risk_high=float(rk.get("market_high", d.market_risk_high)),
        market_risk_low=float(rk.get("market_low", d.market_risk_low)),
        liquidity_fast=float(rk.get("liquidity_fast", d.liquidity_fast)),
        liquidity_normal=float(rk.get("liquidity_normal", d.liquidity_normal)),
        liquidity_slow=float(rk.get("liquidity_slow", d.liquidity_slow)),
        band_high_above=float(rk.get("band_high_above", d.band_high_above)),
        band_medium_above=float(rk.get("band_medium_above", d.band_medium_above)),
        weight_financial=float(weights.get("financial", d.weight_financial)),
        weight_market=float(weights.get("market", d.weight_market)),
        weight_liquidity=float(weights.get("liquidity", d.weight_liquidity)),
    )


def get_recommendation_params(config: dict[str, Any]) -> RecommendationParams:
    """Extract offer ratios from config."""
    rc = config.get("recommendations", {})
    d = RecommendationParams()
    return RecommendationParams(
        overpriced_offer_ratio=float(rc.get("overpriced_offer_ratio", d.overpriced_offer_ratio)),
        default_offer_ratio=float(rc.get("default_offer_ratio", d.default_offer_ratio)),
        fha_rate_discount=float(rc.get("fha_rate_discount", d.fha_rate_discount)),
        fha_min_down=float(rc.get("fha_min_down", d.fha_min_down)),
        fha_recommend_below=float(rc.get("fha_recommend_below", d.fha_recommend_below)),
    )


def get_lifestyle_params(config: dict[str, Any]) -> LifestyleParams:
    """Extract space-per-person bands and household rules from config."""
    ls = config.get("lifestyle", {})
    d = LifestyleParams()
    home_types = ls.get("aging_in_place_types") or d.aging_in_place_types
    return LifestyleParams(
        default_family_size=int(ls.get("default_family_size", d.default_family_size)),
        spacious_area_per_person=float(ls.get("spacious_area_per_person", d.spacious_area_per_person)),
        adequate_area_per_person=float(ls.get("adequate_area_per_person", d.adequate_area_per_person)),
        spacious_score=int(ls.get("spacious_score", d.spacious_score)),
        adequate_score=int(ls.get("adequate_score", d.adequate_score)),
        tight_score=int(ls.get("tight_score", d.tight_score)),
        growing_family_below=int(ls.get("growing_family_below", d.growing_family_below)),
        growing_family_min_bedrooms=float(ls.get("growing_family_min_bedrooms", d.growing_family_min_bedrooms)),
        aging_in_place_types=tuple(str(t).strip().upper() for t in home_types),
        match_score=int(ls.get("match_score", d.match_score)),
        spacious_insight_score=int(ls.get("spacious_insight_score", d.spacious_insight_score)),
    )


def get_generation_params(config: dict[str, Any]) -> GenerationParams:
    """Extract text generator endpoint settings from config."""
    gen = config.get("generation", {})
    d = GenerationParams()
    return GenerationParams(
        base_url=str(gen.get("base_url", d.base_url)),
        model=str(gen.get("model", d.model)),
        temperature=float(gen.get("temperature", d.temperature)),
        max_tokens=int(gen.get("max_tokens", d.max_tokens)),
        timeout_seconds=float(gen.get("timeout_seconds", d.timeout_seconds)),
        api_key_env=str(gen.get("api_key_env", d.api_key_env)),
    )
