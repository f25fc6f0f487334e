"""Canonical test fixtures used across engine, store and API tests.

Fixture: 5,000,000 apartment, 1,000,000 down payment including 500,000
maternity capital, 20 years at 8.5%.
"""

import fakeredis
import pytest
from decimal import Decimal

from mortgage_calc.models.loan import LoanInput, PropertyType


@pytest.fixture
def redis_client():
    """In-memory Redis, fresh per test."""
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def canonical_loan() -> LoanInput:
    return LoanInput(
        property_price=Decimal("5000000"),
        down_payment_amount=Decimal("1000000"),
        subsidy_amount=Decimal("500000"),
        subsidy_included_in_down_payment=True,
        loan_term_years=20,
        annual_interest_rate_percent=Decimal("8.5"),
    )


@pytest.fixture
def zero_rate_loan() -> LoanInput:
    """1,000,000 borrowed over 10 years with no interest."""
    return LoanInput(
        property_price=Decimal("1500000"),
        down_payment_amount=Decimal("500000"),
        loan_term_years=10,
        annual_interest_rate_percent=Decimal("0"),
    )


@pytest.fixture
def canonical_profile_fields() -> dict:
    return {
        "property_price": Decimal("5000000"),
        "property_type": PropertyType.APARTMENT_IN_NEW_BUILDING,
        "down_payment_amount": Decimal("1000000"),
        "subsidy_amount": Decimal("500000"),
        "subsidy_included_in_down_payment": True,
        "loan_term_years": 20,
        "annual_interest_rate_percent": Decimal("8.5"),
    }
