"""Five-year ownership cost projections (insurance, tax, HOA, maintenance)."""

from __future__ import annotations

from ..models import (
    AffordabilityParams,
    CostProjection,
    OwnershipCosts,
    ProjectionParams,
    PropertyInput,
)
from .affordability import monthly_insurance, monthly_tax


def project_cost(first_year: float, growth: float, years: int, notes: str = "") -> CostProjection:
    """Compound ``first_year`` by ``growth`` for ``years`` years."""
    return CostProjection(
        yearly=tuple(first_year * (1 + growth) ** i for i in range(years)),
        notes=notes,
    )


def ownership_costs(
    prop: PropertyInput,
    afford_params: AffordabilityParams,
    params: ProjectionParams,
) -> OwnershipCosts:
    insurance = project_cost(
        monthly_insurance(prop.price, afford_params) * 12,
        params.insurance_growth,
        params.years,
        f"Scaled from price; {params.insurance_growth:.1%} annual increase",
    )
    tax = project_cost(
        monthly_tax(prop.price, afford_params) * 12,
        params.tax_growth,
        params.years,
        f"{afford_params.tax_rate_annual:.2%} effective rate"
        + (f" for {prop.zipcode}" if prop.zipcode else ""),
    )
    if prop.hoa_monthly > 0:
        hoa = project_cost(
            prop.hoa_monthly * 12,
            params.hoa_growth,
            params.years,
            f"${prop.hoa_monthly:,.0f}/mo with {params.hoa_growth:.1%} annual increase",
        )
    else:
        hoa = CostProjection(yearly=(0.0,) * params.years, notes="No HOA fees")
    maintenance = project_cost(
        prop.price * params.maintenance_rate,
        params.maintenance_growth,
        params.years,
        f"{params.maintenance_rate:.1%} of value per year (HVAC, roof, appliances)",
    )
    return OwnershipCosts(insurance=insurance, property_tax=tax, hoa=hoa, maintenance=maintenance)
