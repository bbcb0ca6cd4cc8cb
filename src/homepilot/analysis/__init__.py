"""Deterministic financial analysis."""

from .affordability import affordability_score, calculate_affordability, debt_to_income
from .amortization import monthly_payment, principal_paid
from .engine import AnalysisEngine
from .investment import calculate_investment
from .lifestyle import analyze_lifestyle
from .market import analyze_market, assess_risk
from .recommendations import financing_options, generate_recommendations
from .scenarios import down_payment_scenarios

__all__ = [
    "AnalysisEngine",
    "affordability_score",
    "calculate_affordability",
    "debt_to_income",
    "monthly_payment",
    "principal_paid",
    "calculate_investment",
    "analyze_lifestyle",
    "analyze_market",
    "assess_risk",
    "generate_recommendations",
    "financing_options",
    "down_payment_scenarios",
]
