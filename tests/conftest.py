"""Pytest fixtures."""

from pathlib import Path

import pytest

from homepilot.analysis import AnalysisEngine
from homepilot.config import load_config
from homepilot.models import BuyerProfile, InvestorProfile, PropertyInput

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


@pytest.fixture
def config() -> dict:
    """Repository config.yaml."""
    return load_config(CONFIG_PATH)


@pytest.fixture
def engine(config: dict) -> AnalysisEngine:
    return AnalysisEngine(config=config)


@pytest.fixture
def mock_property() -> PropertyInput:
    """Fairly priced single-family listing."""
    return PropertyInput(
        price=300000,
        bedrooms=3,
        bathrooms=2,
        living_area=2000,
        zipcode="77002",
        address="123 Main St, Houston, TX",
        market_estimate=300000,
        rent_estimate=2400,
        days_on_market=30,
    )


@pytest.fixture
def buyer() -> BuyerProfile:
    return BuyerProfile(
        annual_income=90000,
        monthly_debt=500,
        available_savings=80000,
        max_monthly_budget=2500,
        down_payment=0.20,
        interest_rate=0.07,
        loan_term_years=30,
    )


@pytest.fixture
def investor() -> InvestorProfile:
    return InvestorProfile(
        available_capital=100000,
        down_payment_percent=0.25,
        interest_rate=0.07,
        loan_term_years=30,
    )


@pytest.fixture
def buyer_request() -> dict:
    """Inbound request as sent by the web app."""
    return {
        "propertyInput": {
            "price": 300000,
            "bedrooms": 3,
            "bathrooms": 2,
            "livingArea": 2000,
            "zipcode": "77002",
            "address": "123 Main St, Houston, TX",
            "zestimate": 300000,
            "rentZestimate": 2400,
            "daysOnZillow": 30,
        },
        "userProfile": {
            "mode": "homebuyer",
            "annualIncome": 90000,
            "monthlyDebt": 500,
            "availableSavings": 80000,
            "maxMonthlyBudget": 2500,
            "downPayment": 0.2,
            "interestRate": 7,
            "loanTerm": 30,
            "riskComfort": "balanced",
        },
    }


@pytest.fixture
def investor_request(buyer_request: dict) -> dict:
    return {
        "propertyInput": buyer_request["propertyInput"],
        "userProfile": {
            "mode": "investor",
            "availableCapital": 100000,
            "downPaymentPercent": 25,
            "estimatedInterestRate": 7,
            "targetLoanTerm": 30,
            "riskTolerance": "moderate",
        },
    }
