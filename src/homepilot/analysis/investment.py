"""Rental investment metrics: NOI, cap rate, cash-on-cash, DSCR, five-year totals."""

from __future__ import annotations

from dataclasses import replace

from ..errors import InvalidInput
from ..models import (
    BuyerProfile,
    FiveYearSummary,
    InvestmentParams,
    InvestmentResult,
    InvestorProfile,
    PropertyInput,
    RiskBand,
)
from .affordability import down_payment_fraction
from .amortization import monthly_payment, percent, principal_paid


def investor_down_payment_fraction(fraction: float) -> float:
    """Investors give the down payment as a fraction of price; all-cash is not underwritten."""
    if fraction < 0 or fraction >= 1:
        raise InvalidInput(f"down payment fraction must be in [0, 1), got {fraction}")
    return fraction


def gross_rent(prop: PropertyInput, params: InvestmentParams) -> float:
    """Market rent estimate if known, else the 1%-of-price rule."""
    if prop.rent_estimate:
        return prop.rent_estimate
    return prop.price * params.rent_floor_rate


def _fixed_expenses_monthly(prop: PropertyInput, investor: InvestorProfile, params: InvestmentParams) -> float:
    """
    Operating expenses that do not move with rent:
    taxes, insurance, HOA, maintenance reserve.
    """
    tax_base = prop.tax_assessed_value or prop.price
    taxes = tax_base * params.tax_rate_annual / 12
    insurance = prop.price * params.insurance_rate_annual / 12
    maintenance = prop.price * investor.maintenance_percent / 12
    return taxes + insurance + prop.hoa_monthly + maintenance


def investment_level(score: int) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Marginal"
    return "Poor"


def investment_score(
    result: InvestmentResult,
    investor: InvestorProfile,
    risk_band: RiskBand | None,
    params: InvestmentParams,
) -> int:
    score = 0
    cash_flow_floor = investor.target_cash_flow or params.score_cash_flow_floor
    if result.cash_flow_monthly > cash_flow_floor:
        score += 30
    if (
        investor.target_roi is not None
        and result.cash_on_cash is not None
        and result.cash_on_cash > investor.target_roi
    ):
        score += 25
    if result.dscr is not None and result.dscr > params.score_min_dscr:
        score += 20
    if result.cap_rate > params.score_min_cap_rate:
        score += 15
    if risk_band == RiskBand.LOW:
        score += 10
    return score


def calculate_investment(
    prop: PropertyInput,
    investor: InvestorProfile,
    params: InvestmentParams,
) -> InvestmentResult:
    """
    Core rental underwriting.
    Scores are left at zero; ``score_investment`` fills them once risk is known.
    """
    price = prop.price
    fraction = investor_down_payment_fraction(investor.down_payment_percent)
    down = price * fraction
    loan_amount = price - down

    rent = gross_rent(prop, params)
    fixed = _fixed_expenses_monthly(prop, investor, params)

    def noi_for(rent_monthly: float) -> tuple[float, float, float]:
        effective = rent_monthly * (1 - investor.vacancy_rate)
        opex = fixed + rent_monthly * params.management_rate
        return effective, opex, effective - opex

    effective, opex, noi = noi_for(rent)
    amortizing = loan_amount > 0 and investor.loan_term_years > 0
    if amortizing:
        debt_service = monthly_payment(loan_amount, investor.interest_rate, investor.loan_term_years)
    else:
        debt_service = 0.0
    cash_flow = noi - debt_service

    annual_noi = noi * 12
    annual_debt = debt_service * 12
    total_cash = down + price * params.closing_cost_rate

    cap_rate = annual_noi / price * 100
    coc = percent(cash_flow * 12, total_cash)
    dscr = annual_noi / annual_debt if annual_debt > 0 else None

    # --- five-year aggregates (totals only) ---
    years = params.horizon_years
    total_cash_flow = 0.0
    for year in range(years):
        _, _, noi_y = noi_for(rent * (1 + params.rent_growth) ** year)
        total_cash_flow += (noi_y - debt_service) * 12
    appreciation = price * ((1 + params.appreciation_rate) ** years - 1)
    if amortizing:
        equity = principal_paid(loan_amount, investor.interest_rate, investor.loan_term_years, years * 12)
    else:
        equity = 0.0
    total_return = total_cash_flow + appreciation + equity
    annual_return_pct = percent(total_return, total_cash)
    avg_annual_return = None if annual_return_pct is None else annual_return_pct / years

    return InvestmentResult(
        gross_rent_monthly=rent,
        effective_income_monthly=effective,
        operating_expenses_monthly=opex,
        noi_monthly=noi,
        debt_service_monthly=debt_service,
        cash_flow_monthly=cash_flow,
        cap_rate=cap_rate,
        cash_on_cash=coc,
        dscr=dscr,
        total_cash_invested=total_cash,
        five_year=FiveYearSummary(
            total_cash_flow=total_cash_flow,
            total_appreciation=appreciation,
            total_equity=equity,
            total_return=total_return,
            avg_annual_return=avg_annual_return,
        ),
    )


def score_investment(
    result: InvestmentResult,
    investor: InvestorProfile,
    risk_band: RiskBand | None,
    params: InvestmentParams,
) -> InvestmentResult:
    """Return a copy of ``result`` with investment score and level filled in."""
    score = investment_score(result, investor, risk_band, params)
    return replace(result, score=score, level=investment_level(score))


def investor_view(buyer: BuyerProfile, price: float, params: InvestmentParams) -> InvestorProfile:
    """Rent-vs-buy lens on a buyer: same financing, default vacancy and maintenance."""
    return InvestorProfile(
        available_capital=buyer.available_savings,
        down_payment_percent=down_payment_fraction(price, buyer.down_payment),
        interest_rate=buyer.interest_rate,
        loan_term_years=buyer.loan_term_years,
        hold_period_years=params.horizon_years,
        risk_tolerance=buyer.risk_comfort,
        vacancy_rate=params.buyer_vacancy_rate,
        maintenance_percent=params.buyer_maintenance_rate,
        name=buyer.name,
    )
