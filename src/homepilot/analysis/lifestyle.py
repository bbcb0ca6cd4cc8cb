"""Lifestyle fit for home buyers: living area per person and future-needs flags."""

from __future__ import annotations

from ..models import BuyerProfile, LifestyleFit, LifestyleParams, PropertyInput

_FUTURE_NEEDS = ("Consider future space needs", "Check school districts")


def space_adequacy(area_per_person: float, params: LifestyleParams) -> tuple[int, str]:
    if area_per_person > params.spacious_area_per_person:
        return params.spacious_score, "Spacious"
    if area_per_person > params.adequate_area_per_person:
        return params.adequate_score, "Adequate"
    return params.tight_score, "Tight"


def _normalize_home_type(value: str) -> str:
    return value.strip().upper().replace("-", "_").replace(" ", "_")


def analyze_lifestyle(prop: PropertyInput, buyer: BuyerProfile, params: LifestyleParams) -> LifestyleFit:
    """
    Household fit for ``buyer``.
    A missing or non-positive family size falls back to ``default_family_size``.
    """
    family = buyer.family_size if buyer.family_size and buyer.family_size > 0 else params.default_family_size
    per_person = prop.living_area / family
    score, verdict = space_adequacy(per_person, params)

    recommendations = list(_FUTURE_NEEDS)
    if verdict == "Tight":
        recommendations.insert(0, "Living space is tight for your household size")

    return LifestyleFit(
        family_size=family,
        area_per_person=per_person,
        space_score=score,
        verdict=verdict,
        growing_family=family < params.growing_family_below and prop.bedrooms >= params.growing_family_min_bedrooms,
        aging_in_place=_normalize_home_type(prop.home_type) in params.aging_in_place_types,
        recommendations=tuple(recommendations),
        match_score=params.match_score,
    )
