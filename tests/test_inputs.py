"""Tests for inbound request parsing."""

import pytest

from homepilot.errors import IncompleteProfile, InvalidInput
from homepilot.inputs import parse_request, profile_from_dict, property_from_dict, to_fraction
from homepilot.models import BuyerProfile, InvestorProfile, RiskComfort


class TestProperty:
    def test_listing_aliases(self, buyer_request: dict) -> None:
        prop = property_from_dict(buyer_request["propertyInput"])
        assert prop.price == 300000
        assert prop.living_area == 2000
        assert prop.market_estimate == 300000
        assert prop.rent_estimate == 2400
        assert prop.days_on_market == 30
        assert prop.hoa_monthly == 0.0

    def test_short_aliases_and_formatted_numbers(self) -> None:
        prop = property_from_dict(
            {"price": "$425,000", "beds": 4, "baths": 2.5, "sqft": "2,100", "hoaFee": 150}
        )
        assert prop.price == 425000
        assert prop.bedrooms == 4
        assert prop.living_area == 2100
        assert prop.hoa_monthly == 150

    def test_missing_required_fields(self) -> None:
        with pytest.raises(InvalidInput, match="living_area"):
            property_from_dict({"price": 300000, "bedrooms": 3, "bathrooms": 2})

    def test_non_positive_price(self) -> None:
        with pytest.raises(InvalidInput):
            property_from_dict({"price": 0, "bedrooms": 3, "bathrooms": 2, "livingArea": 1500})

    def test_non_numeric_value(self) -> None:
        with pytest.raises(InvalidInput):
            property_from_dict({"price": "call agent", "bedrooms": 3, "bathrooms": 2, "livingArea": 1500})


class TestProfiles:
    def test_buyer_profile(self, buyer_request: dict) -> None:
        profile = profile_from_dict(buyer_request["userProfile"])
        assert isinstance(profile, BuyerProfile)
        assert profile.interest_rate == pytest.approx(0.07)
        assert profile.down_payment == 0.2
        assert profile.loan_term_years == 30
        assert profile.include_pmi is True

    def test_investor_profile(self, investor_request: dict) -> None:
        profile = profile_from_dict(investor_request["userProfile"])
        assert isinstance(profile, InvestorProfile)
        assert profile.down_payment_percent == pytest.approx(0.25)
        assert profile.interest_rate == pytest.approx(0.07)
        assert profile.risk_tolerance == RiskComfort.BALANCED
        assert profile.vacancy_rate == pytest.approx(0.07)

    def test_mode_defaults_to_homebuyer(self, buyer_request: dict) -> None:
        data = dict(buyer_request["userProfile"])
        del data["mode"]
        assert isinstance(profile_from_dict(data), BuyerProfile)

    def test_unknown_mode(self) -> None:
        with pytest.raises(InvalidInput):
            profile_from_dict({"mode": "landlord"})

    def test_missing_buyer_fields_named(self) -> None:
        with pytest.raises(IncompleteProfile) as exc:
            profile_from_dict({"mode": "homebuyer", "annualIncome": 90000, "monthlyDebt": 500})
        assert exc.value.variant == "buyer"
        assert exc.value.missing == frozenset(
            {"availableSavings", "maxMonthlyBudget", "downPayment", "interestRate", "loanTerm"}
        )

    def test_missing_investor_fields_named(self) -> None:
        with pytest.raises(IncompleteProfile) as exc:
            profile_from_dict({"mode": "investor", "availableCapital": 50000})
        assert exc.value.missing == frozenset({"downPaymentPercent", "estimatedInterestRate", "targetLoanTerm"})

    def test_include_pmi_flag(self, buyer_request: dict) -> None:
        data = dict(buyer_request["userProfile"], includePMI="no")
        assert profile_from_dict(data).include_pmi is False


class TestRequest:
    def test_parse_request(self, buyer_request: dict) -> None:
        prop, profile = parse_request(buyer_request)
        assert prop.zipcode == "77002"
        assert isinstance(profile, BuyerProfile)

    def test_missing_sections(self, buyer_request: dict) -> None:
        with pytest.raises(InvalidInput):
            parse_request({"userProfile": buyer_request["userProfile"]})
        with pytest.raises(InvalidInput):
            parse_request({"propertyInput": buyer_request["propertyInput"]})
        with pytest.raises(InvalidInput):
            parse_request([buyer_request])

    def test_rates_as_percent_or_fraction(self) -> None:
        assert to_fraction(7, "rate") == pytest.approx(0.07)
        assert to_fraction("6.5%", "rate") == pytest.approx(0.065)
        assert to_fraction(0.065, "rate") == pytest.approx(0.065)
        with pytest.raises(InvalidInput):
            to_fraction(-1, "rate")

    @pytest.mark.parametrize("percent", [100, 150, "100%"])
    def test_investor_down_payment_at_or_above_price(self, investor_request: dict, percent) -> None:
        data = dict(investor_request["userProfile"], downPaymentPercent=percent)
        with pytest.raises(InvalidInput, match="downPaymentPercent"):
            profile_from_dict(data)

    def test_family_size_and_home_type(self, buyer_request: dict) -> None:
        prop, profile = parse_request(
            {
                "propertyInput": dict(buyer_request["propertyInput"], homeType="SINGLE_FAMILY"),
                "userProfile": dict(buyer_request["userProfile"], familySize="4"),
            }
        )
        assert prop.home_type == "SINGLE_FAMILY"
        assert profile.family_size == 4

    def test_family_size_must_be_positive(self, buyer_request: dict) -> None:
        with pytest.raises(InvalidInput, match="familySize"):
            profile_from_dict(dict(buyer_request["userProfile"], familySize=0))
