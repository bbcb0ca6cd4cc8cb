"""Data models for property analysis inputs and results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class RiskComfort(str, Enum):
    CONSERVATIVE = "conservative"
    BALANCED = "balanced"
    AGGRESSIVE = "aggressive"

    @classmethod
    def parse(cls, value: str | None) -> RiskComfort:
        """Parse a risk band label. ``moderate`` is the investor-side name for balanced."""
        key = (value or "").strip().lower()
        if key == "moderate":
            return cls.BALANCED
        for member in cls:
            if member.value == key:
                return member
        return cls.BALANCED


class AffordabilityLevel(str, Enum):
    AFFORDABLE = "Affordable"
    STRETCH = "Stretch"
    TOO_EXPENSIVE = "Too Expensive"


class PriceVerdict(str, Enum):
    OVERPRICED = "Overpriced"
    FAIR = "Fair"
    UNDERPRICED = "Underpriced"


class MarketPace(str, Enum):
    FAST_MOVING = "Fast Moving"
    NORMAL = "Normal"
    SLOW_MOVING = "Slow Moving"


class RiskBand(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


@dataclass(frozen=True)
class PropertyInput:
    """A listing as seen by the engine (source-agnostic)."""

    price: float
    bedrooms: float
    bathrooms: float
    living_area: float
    zipcode: str = ""
    address: str = ""
    lot_size: float | None = None
    market_estimate: float | None = None
    rent_estimate: float | None = None
    tax_assessed_value: float | None = None
    days_on_market: int | None = None
    hoa_monthly: float = 0.0
    home_type: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "price": self.price,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "livingArea": self.living_area,
            "zipcode": self.zipcode,
            "address": self.address,
            "lotSize": self.lot_size,
            "marketEstimate": self.market_estimate,
            "rentEstimate": self.rent_estimate,
            "taxAssessedValue": self.tax_assessed_value,
            "daysOnMarket": self.days_on_market,
            "hoaMonthly": self.hoa_monthly,
            "homeType": self.home_type,
        }


@dataclass(frozen=True)
class BuyerProfile:
    """Home buyer financial profile."""

    annual_income: float
    monthly_debt: float
    available_savings: float
    max_monthly_budget: float
    down_payment: float  # < 1 is a fraction of price, otherwise a dollar amount
    interest_rate: float  # annual, e.g. 0.07
    loan_term_years: int
    include_pmi: bool = True
    credit_score: str = "good"
    risk_comfort: RiskComfort = RiskComfort.BALANCED
    time_horizon: str = "5-10"
    family_size: int | None = None
    name: str = ""


@dataclass(frozen=True)
class InvestorProfile:
    """Rental investor financial profile."""

    available_capital: float
    down_payment_percent: float  # fraction, e.g. 0.25
    interest_rate: float
    loan_term_years: int
    target_cash_flow: float | None = None
    target_roi: float | None = None  # percent, e.g. 8.0
    hold_period_years: int = 5
    risk_tolerance: RiskComfort = RiskComfort.BALANCED
    vacancy_rate: float = 0.07
    maintenance_percent: float = 0.01
    name: str = ""


UserFinancialProfile = Union[BuyerProfile, InvestorProfile]


# -----------------------------
# Parameters (from config.yaml)
# -----------------------------
@dataclass(frozen=True)
class AffordabilityParams:
    """Affordability assumptions and score thresholds."""

    tax_rate_annual: float = 0.015
    insurance_reference_price: float = 450_000
    insurance_reference_monthly: float = 125
    pmi_rate_annual: float = 0.005
    pmi_threshold: float = 0.20
    dti_comfortable: float = 36.0
    dti_max: float = 43.0
    closing_cost_rate: float = 0.03
    net_income_ratio: float = 0.75
    savings_rate: float = 0.20
    insight_score: float = 80
    long_savings_months: int = 12
    # risk band -> (affordable_min, stretch_min)
    level_thresholds: dict[RiskComfort, tuple[float, float]] = field(
        default_factory=lambda: {
            RiskComfort.CONSERVATIVE: (80, 50),
            RiskComfort.BALANCED: (70, 40),
            RiskComfort.AGGRESSIVE: (60, 35),
        }
    )

    @property
    def insurance_per_dollar(self) -> float:
        """Monthly insurance per dollar of price (linear model from one reference point)."""
        return self.insurance_reference_monthly / self.insurance_reference_price


@dataclass(frozen=True)
class ScenarioParams:
    percentages: tuple[int, ...] = (5, 10, 20)


@dataclass(frozen=True)
class ProjectionParams:
    """Annual growth rates for five-year ownership cost projections."""

    years: int = 5
    insurance_growth: float = 0.04
    tax_growth: float = 0.025
    hoa_growth: float = 0.025
    maintenance_rate: float = 0.01
    maintenance_growth: float = 0.035


@dataclass(frozen=True)
class InvestmentParams:
    rent_floor_rate: float = 0.01
    tax_rate_annual: float = 0.015
    insurance_rate_annual: float = 0.007
    management_rate: float = 0.08
    closing_cost_rate: float = 0.03
    rent_growth: float = 0.03
    appreciation_rate: float = 0.03
    horizon_years: int = 5
    buyer_vacancy_rate: float = 0.07
    buyer_maintenance_rate: float = 0.01
    score_cash_flow_floor: float = 200
    score_min_dscr: float = 1.25
    score_min_cap_rate: float = 6.0
    strong_return_pct: float = 8.0


@dataclass(frozen=True)
class MarketParams:
    """Heuristic market and risk thresholds (configuration, not derived values)."""

    estimate_threshold_pct: float = 5.0
    fast_days: int = 14
    slow_days: int = 60
    baseline_price_per_area: float = 150
    overpriced_area_ratio: float = 1.10
    underpriced_area_ratio: float = 0.90
    risk_dti_high: float = 43.0
    risk_dti_medium: float = 36.0
    risk_dscr_high: float = 1.0
    risk_dscr_medium: float = 1.25
    financial_risk_high: float = 80
    financial_risk_medium: float = 50
    financial_risk_low: float = 20
    market_risk_high: float = 60
    market_risk_low: float = 30
    liquidity_fast: float = 20
    liquidity_normal: float = 30
    liquidity_slow: float = 60
    band_high_above: float = 60
    band_medium_above: float = 40
    weight_financial: float = 0.5
    weight_market: float = 0.3
    weight_liquidity: float = 0.2


@dataclass(frozen=True)
class RecommendationParams:
    overpriced_offer_ratio: float = 0.95
    default_offer_ratio: float = 0.98
    fha_rate_discount: float = 0.005
    fha_min_down: float = 0.035
    fha_recommend_below: float = 0.10


@dataclass(frozen=True)
class LifestyleParams:
    """Space-per-person bands and household fit rules."""

    default_family_size: int = 2
    spacious_area_per_person: float = 600
    adequate_area_per_person: float = 400
    spacious_score: int = 90
    adequate_score: int = 70
    tight_score: int = 50
    growing_family_below: int = 4
    growing_family_min_bedrooms: float = 3
    aging_in_place_types: tuple[str, ...] = ("SINGLE_FAMILY",)
    match_score: int = 75
    spacious_insight_score: int = 80


@dataclass(frozen=True)
class GenerationParams:
    """OpenAI-compatible chat completions endpoint settings."""

    base_url: str = "https://api.featherless.ai/v1"
    model: str = "deepseek-ai/DeepSeek-V3-0324"
    temperature: float = 0.7
    max_tokens: int = 2000
    timeout_seconds: float = 60
    api_key_env: str = "FEATHERLESS_API_KEY"


# -----------------------------
# Results
# -----------------------------
@dataclass(frozen=True)
class MonthlyPaymentBreakdown:
    principal: float
    interest: float
    tax: float
    insurance: float
    hoa: float
    pmi: float

    @property
    def principal_and_interest(self) -> float:
        return self.principal + self.interest

    @property
    def total(self) -> float:
        return self.principal + self.interest + self.tax + self.insurance + self.hoa + self.pmi

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": round(self.total),
            "principal": round(self.principal),
            "interest": round(self.interest),
            "tax": round(self.tax),
            "insurance": round(self.insurance),
            "hoa": round(self.hoa),
            "pmi": round(self.pmi),
        }


@dataclass(frozen=True)
class IncomeBreakdown:
    monthly_gross_income: float
    monthly_net_income: float
    after_housing_income: float
    housing_to_income_ratio: float | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "monthlyGrossIncome": round(self.monthly_gross_income),
            "monthlyNetIncome": round(self.monthly_net_income),
            "afterHousingIncome": round(self.after_housing_income),
            "housingToIncomeRatio": (
                None if self.housing_to_income_ratio is None else round(self.housing_to_income_ratio, 1)
            ),
        }


@dataclass(frozen=True)
class AffordabilityResult:
    score: int
    level: AffordabilityLevel
    payment: MonthlyPaymentBreakdown
    dti_ratio: float | None
    down_payment: float
    down_payment_fraction: float
    loan_amount: float
    closing_costs: float
    total_cash_needed: float
    months_to_save: int | None  # None: no savings capacity
    income: IncomeBreakdown

    def to_dict(self) -> dict[str, Any]:
        return {
            "affordabilityScore": self.score,
            "affordabilityLevel": self.level.value,
            "monthlyPayment": round(self.payment.total),
            "paymentBreakdown": self.payment.to_dict(),
            "dtiRatio": None if self.dti_ratio is None else round(self.dti_ratio, 1),
            "financialBreakdown": {
                "downPaymentNeeded": round(self.down_payment),
                "closingCosts": round(self.closing_costs),
                "totalCashNeeded": round(self.total_cash_needed),
                "monthsToSave": self.months_to_save,
            },
            "incomeBreakdown": self.income.to_dict(),
        }


@dataclass(frozen=True)
class DownPaymentScenario:
    percentage: int
    amount: float
    monthly_payment: float
    pmi: float
    recommendation: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "percentage": self.percentage,
            "amount": round(self.amount),
            "monthlyPayment": round(self.monthly_payment),
            "pmi": round(self.pmi),
            "recommendation": self.recommendation,
        }


ScenarioSet = tuple[DownPaymentScenario, ...]


@dataclass(frozen=True)
class CostProjection:
    """Five-year projection of a recurring ownership cost."""

    yearly: tuple[float, ...]
    notes: str = ""

    @property
    def total(self) -> float:
        return sum(self.yearly)

    @property
    def average_monthly(self) -> float:
        return self.total / (len(self.yearly) * 12) if self.yearly else 0.0

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {f"year{i}": round(v) for i, v in enumerate(self.yearly, 1)}
        out["total5Years"] = round(self.total)
        out["averageMonthly"] = round(self.average_monthly)
        out["notes"] = self.notes
        return out


@dataclass(frozen=True)
class OwnershipCosts:
    insurance: CostProjection
    property_tax: CostProjection
    hoa: CostProjection
    maintenance: CostProjection

    def to_dict(self) -> dict[str, Any]:
        return {
            "insuranceBreakdown": self.insurance.to_dict(),
            "propertyTaxBreakdown": self.property_tax.to_dict(),
            "hoaFeesBreakdown": self.hoa.to_dict(),
            "maintenanceBreakdown": self.maintenance.to_dict(),
        }


@dataclass(frozen=True)
class FiveYearSummary:
    """Aggregate totals over the projection horizon (no year-by-year series)."""

    total_cash_flow: float
    total_appreciation: float
    total_equity: float
    total_return: float
    avg_annual_return: float | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalCashFlow": round(self.total_cash_flow),
            "totalAppreciation": round(self.total_appreciation),
            "totalEquity": round(self.total_equity),
            "totalReturn": round(self.total_return),
            "avgAnnualReturn": None if self.avg_annual_return is None else round(self.avg_annual_return, 1),
        }


@dataclass(frozen=True)
class InvestmentResult:
    gross_rent_monthly: float
    effective_income_monthly: float
    operating_expenses_monthly: float
    noi_monthly: float
    debt_service_monthly: float
    cash_flow_monthly: float
    cap_rate: float
    cash_on_cash: float | None
    dscr: float | None
    total_cash_invested: float
    five_year: FiveYearSummary
    score: int = 0
    level: str = "Poor"

    @property
    def noi_annual(self) -> float:
        return self.noi_monthly * 12

    @property
    def cash_flow_annual(self) -> float:
        return self.cash_flow_monthly * 12

    def to_dict(self) -> dict[str, Any]:
        return {
            "investmentScore": self.score,
            "investmentLevel": self.level,
            "monthlyCashFlow": round(self.cash_flow_monthly),
            "annualCashFlow": round(self.cash_flow_annual),
            "monthlyNOI": round(self.noi_monthly),
            "monthlyDebtService": round(self.debt_service_monthly),
            "cashOnCashReturn": None if self.cash_on_cash is None else round(self.cash_on_cash, 1),
            "capRate": round(self.cap_rate, 1),
            "dscr": None if self.dscr is None else round(self.dscr, 2),
            "totalCashRequired": round(self.total_cash_invested),
            "fiveYearSummary": self.five_year.to_dict(),
            "operatingExpenses": {
                "monthly": round(self.operating_expenses_monthly),
                "annual": round(self.operating_expenses_monthly * 12),
            },
        }


@dataclass(frozen=True)
class MarketAnalysis:
    price_per_area: float | None
    baseline_price_per_area: float
    competitiveness: str
    estimate_difference: float
    estimate_percentage: float
    verdict: PriceVerdict
    pace: MarketPace
    pace_message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "pricePerSqft": None if self.price_per_area is None else round(self.price_per_area),
            "marketAvgPricePerSqft": self.baseline_price_per_area,
            "competitiveness": self.competitiveness,
            "daysOnMarketInsight": {"status": self.pace.value, "message": self.pace_message},
            "priceVsZestimate": {
                "difference": round(self.estimate_difference),
                "percentage": round(self.estimate_percentage, 1),
                "verdict": self.verdict.value,
            },
        }


@dataclass(frozen=True)
class RiskAssessment:
    overall: RiskBand
    financial_score: float
    market_score: float
    liquidity_score: float
    composite_score: float
    estimated_days_to_sell: int
    factors: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "overallRisk": self.overall.value,
            "financialRisk": {"score": self.financial_score, "factors": list(self.factors)},
            "marketRisk": {"score": self.market_score},
            "liquidityRisk": {
                "score": self.liquidity_score,
                "estimatedTimeToSell": self.estimated_days_to_sell,
            },
            "compositeScore": round(self.composite_score, 1),
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class FinancingOption:
    loan_type: str
    rate: float  # annual, e.g. 0.07
    pros: tuple[str, ...]
    cons: tuple[str, ...]
    recommended: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.loan_type,
            "rate": round(self.rate * 100, 2),
            "pros": list(self.pros),
            "cons": list(self.cons),
            "recommended": self.recommended,
        }


@dataclass(frozen=True)
class Recommendations:
    suggested_offer: float
    reasoning: str
    tactics: tuple[str, ...]
    urgency: str
    timeline_reasoning: str
    financing_options: tuple[FinancingOption, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "negotiationStrategy": {
                "suggestedOffer": round(self.suggested_offer),
                "reasoning": self.reasoning,
                "tactics": list(self.tactics),
            },
            "timeline": {"urgency": self.urgency, "reasoning": self.timeline_reasoning},
        }
        if self.financing_options:
            out["financingOptions"] = [o.to_dict() for o in self.financing_options]
        return out


@dataclass(frozen=True)
class LifestyleFit:
    """How the home fits the buyer's household."""

    family_size: int
    area_per_person: float
    space_score: int
    verdict: str  # "Spacious" | "Adequate" | "Tight"
    growing_family: bool
    aging_in_place: bool
    recommendations: tuple[str, ...]
    match_score: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "spaceAdequacy": {
                "score": self.space_score,
                "sqftPerPerson": round(self.area_per_person),
                "verdict": self.verdict,
            },
            "futureNeeds": {
                "growingFamily": self.growing_family,
                "agingInPlace": self.aging_in_place,
                "recommendations": list(self.recommendations),
            },
            "lifestyleMatchScore": self.match_score,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Full analysis envelope for one property + profile."""

    mode: str  # "buyer" | "investor"
    property: PropertyInput
    investment: InvestmentResult
    market: MarketAnalysis
    risk: RiskAssessment
    recommendations: Recommendations
    advisor_message: str
    insights: tuple[str, ...]
    warnings: tuple[str, ...]
    affordability: AffordabilityResult | None = None
    scenarios: ScenarioSet = ()
    ownership_costs: OwnershipCosts | None = None
    lifestyle: LifestyleFit | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"mode": self.mode, "property": self.property.to_dict()}
        if self.affordability is not None:
            out.update(self.affordability.to_dict())
            out["downPaymentOptions"] = [s.to_dict() for s in self.scenarios]
        if self.ownership_costs is not None:
            out.update(self.ownership_costs.to_dict())
        if self.lifestyle is not None:
            out["lifestyleFit"] = self.lifestyle.to_dict()
        out["investment"] = self.investment.to_dict()
        out["market"] = self.market.to_dict()
        out["risk"] = self.risk.to_dict()
        out["recommendations"] = self.recommendations.to_dict()
        out["advisorMessage"] = self.advisor_message
        out["keyInsights"] = list(self.insights)
        out["warnings"] = list(self.warnings)
        return out


@dataclass(frozen=True)
class GeneratedAnalysis:
    """A record produced by the external text generator, after recovery.

    ``record`` holds the recovered document untouched; the typed fields are
    read from it with shape guarantees on the free-text arrays.
    """

    record: dict[str, Any]
    score: int | None
    level: str | None
    monthly_payment: float | None
    dti_ratio: float | None
    insights: tuple[str, ...]
    warnings: tuple[str, ...]
    advisor_message: str
    breakdowns: dict[str, dict[str, Any]] = field(default_factory=dict)
    five_year_summary: dict[str, Any] | None = None
    repaired: bool = False

    def to_dict(self) -> dict[str, Any]:
        return dict(self.record)
