"""Parse inbound analysis requests into engine types.

The request shape is ``{"propertyInput": {...}, "userProfile": {...}}``.
Listing and profile payloads use the camelCase names of the web app; a few
listing-site aliases (``beds``, ``zestimate``, ``daysOnZillow``) are accepted.
"""

from __future__ import annotations

from typing import Any

from .errors import IncompleteProfile, InvalidInput
from .models import BuyerProfile, InvestorProfile, PropertyInput, RiskComfort, UserFinancialProfile

_PROPERTY_FIELDS: dict[str, tuple[str, ...]] = {
    "price": ("price",),
    "bedrooms": ("bedrooms", "beds"),
    "bathrooms": ("bathrooms", "baths"),
    "living_area": ("livingArea", "area", "sqft"),
    "lot_size": ("lotSize", "lotAreaValue"),
    "market_estimate": ("marketEstimate", "zestimate"),
    "rent_estimate": ("rentEstimate", "rentZestimate"),
    "tax_assessed_value": ("taxAssessedValue",),
    "days_on_market": ("daysOnMarket", "daysOnZillow"),
    "hoa_monthly": ("hoaMonthly", "hoaFee", "monthlyHoaFee"),
    "zipcode": ("zipcode", "zipCode", "addressZipcode"),
    "address": ("address",),
    "home_type": ("homeType", "propertyType"),
}

_REQUIRED_PROPERTY = ("price", "bedrooms", "bathrooms", "living_area")

_BUYER_FIELDS: dict[str, tuple[str, ...]] = {
    "annual_income": ("annualIncome",),
    "monthly_debt": ("monthlyDebt",),
    "available_savings": ("availableSavings",),
    "max_monthly_budget": ("maxMonthlyBudget",),
    "down_payment": ("downPayment",),
    "interest_rate": ("interestRate",),
    "loan_term_years": ("loanTerm",),
}

_INVESTOR_FIELDS: dict[str, tuple[str, ...]] = {
    "available_capital": ("availableCapital",),
    "down_payment_percent": ("downPaymentPercent",),
    "interest_rate": ("estimatedInterestRate", "interestRate"),
    "loan_term_years": ("targetLoanTerm", "loanTerm"),
}


def _lookup(data: dict[str, Any], names: tuple[str, ...]) -> Any:
    for name in names:
        value = data.get(name)
        if value is not None and value != "":
            return value
    return None


def _number(value: Any, field: str) -> float:
    if isinstance(value, str):
        value = value.strip().replace("$", "").replace(",", "").replace("%", "")
    try:
        return float(value)
    except (TypeError, ValueError) as err:
        raise InvalidInput(f"{field} must be numeric, got {value!r}") from err


def _optional_number(value: Any, field: str) -> float | None:
    return None if value is None else _number(value, field)


def to_fraction(value: Any, field: str) -> float:
    """Rates given as 7 or "7%" mean 7%; values below 1 are already fractions."""
    f = _number(value, field)
    if f < 0:
        raise InvalidInput(f"{field} must be non-negative")
    if f >= 1.0:
        f = f / 100.0
    return f


def _flag(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "y", "1"}
    return bool(value)


def property_from_dict(data: dict[str, Any]) -> PropertyInput:
    raw = {field: _lookup(data, names) for field, names in _PROPERTY_FIELDS.items()}
    missing = [f for f in _REQUIRED_PROPERTY if raw[f] is None]
    if missing:
        raise InvalidInput(f"property missing fields: {', '.join(missing)}")

    price = _number(raw["price"], "price")
    if price <= 0:
        raise InvalidInput(f"price must be positive, got {price}")
    dom = _optional_number(raw["days_on_market"], "days_on_market")

    return PropertyInput(
        price=price,
        bedrooms=_number(raw["bedrooms"], "bedrooms"),
        bathrooms=_number(raw["bathrooms"], "bathrooms"),
        living_area=_number(raw["living_area"], "living_area"),
        zipcode=str(raw["zipcode"] or ""),
        address=str(raw["address"] or ""),
        lot_size=_optional_number(raw["lot_size"], "lot_size"),
        market_estimate=_optional_number(raw["market_estimate"], "market_estimate"),
        rent_estimate=_optional_number(raw["rent_estimate"], "rent_estimate"),
        tax_assessed_value=_optional_number(raw["tax_assessed_value"], "tax_assessed_value"),
        days_on_market=None if dom is None else int(dom),
        hoa_monthly=_optional_number(raw["hoa_monthly"], "hoa_monthly") or 0.0,
        home_type=str(raw["home_type"] or ""),
    )


def _require(data: dict[str, Any], fields: dict[str, tuple[str, ...]], variant: str) -> dict[str, Any]:
    raw = {field: _lookup(data, names) for field, names in fields.items()}
    missing = {names[0] for field, names in fields.items() if raw[field] is None}
    if missing:
        raise IncompleteProfile(variant, missing)
    return raw


def _family_size(value: Any) -> int | None:
    if value is None or value == "":
        return None
    size = int(_number(value, "familySize"))
    if size <= 0:
        raise InvalidInput(f"familySize must be positive, got {value!r}")
    return size


def buyer_from_dict(data: dict[str, Any]) -> BuyerProfile:
    raw = _require(data, _BUYER_FIELDS, "buyer")
    return BuyerProfile(
        annual_income=_number(raw["annual_income"], "annualIncome"),
        monthly_debt=_number(raw["monthly_debt"], "monthlyDebt"),
        available_savings=_number(raw["available_savings"], "availableSavings"),
        max_monthly_budget=_number(raw["max_monthly_budget"], "maxMonthlyBudget"),
        down_payment=_number(raw["down_payment"], "downPayment"),
        interest_rate=to_fraction(raw["interest_rate"], "interestRate"),
        loan_term_years=int(_number(raw["loan_term_years"], "loanTerm")),
        include_pmi=_flag(data.get("includePMI"), True),
        credit_score=str(data.get("creditScore") or "good"),
        risk_comfort=RiskComfort.parse(data.get("riskComfort")),
        time_horizon=str(data.get("timeHorizon") or "5-10"),
        family_size=_family_size(data.get("familySize")),
        name=str(data.get("displayName") or ""),
    )


def investor_from_dict(data: dict[str, Any]) -> InvestorProfile:
    raw = _require(data, _INVESTOR_FIELDS, "investor")
    target_cf = _optional_number(data.get("targetCashFlow"), "targetCashFlow")
    target_roi = _optional_number(data.get("targetROI"), "targetROI")
    vacancy = data.get("vacancyRate")
    maintenance = data.get("maintenancePercent")
    down_fraction = to_fraction(raw["down_payment_percent"], "downPaymentPercent")
    if down_fraction >= 1:
        raise InvalidInput(f"downPaymentPercent must be below 100%, got {raw['down_payment_percent']!r}")
    return InvestorProfile(
        available_capital=_number(raw["available_capital"], "availableCapital"),
        down_payment_percent=down_fraction,
        interest_rate=to_fraction(raw["interest_rate"], "interestRate"),
        loan_term_years=int(_number(raw["loan_term_years"], "loanTerm")),
        target_cash_flow=target_cf,
        target_roi=target_roi,
        hold_period_years=int(_number(data.get("holdPeriod") or 5, "holdPeriod")),
        risk_tolerance=RiskComfort.parse(data.get("riskTolerance")),
        vacancy_rate=0.07 if vacancy is None else to_fraction(vacancy, "vacancyRate"),
        maintenance_percent=0.01 if maintenance is None else to_fraction(maintenance, "maintenancePercent"),
        name=str(data.get("displayName") or ""),
    )


def profile_from_dict(data: dict[str, Any]) -> UserFinancialProfile:
    """Select the profile variant from ``mode`` (``homebuyer`` or ``investor``)."""
    mode = str(data.get("mode") or "homebuyer").strip().lower()
    if mode == "investor":
        return investor_from_dict(data)
    if mode in {"homebuyer", "buyer"}:
        return buyer_from_dict(data)
    raise InvalidInput(f"unknown profile mode: {mode!r}")


def parse_request(payload: dict[str, Any]) -> tuple[PropertyInput, UserFinancialProfile]:
    if not isinstance(payload, dict):
        raise InvalidInput("request must be an object")
    prop = payload.get("propertyInput") or payload.get("propertyData")
    profile = payload.get("userProfile") or payload.get("userData")
    if not isinstance(prop, dict):
        raise InvalidInput("request missing propertyInput")
    if not isinstance(profile, dict):
        raise InvalidInput("request missing userProfile")
    return property_from_dict(prop), profile_from_dict(profile)
