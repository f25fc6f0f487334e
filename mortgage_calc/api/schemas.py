"""Pydantic schemas for API request/response models.

Fields are exposed in camelCase on the wire; snake_case names are accepted
on input as well.
"""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from mortgage_calc.models.loan import (
    AMOUNT_DIGITS,
    AMOUNT_PLACES,
    RATE_DIGITS,
    RATE_PLACES,
    PropertyType,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---- Request schemas ----

class MortgageProfileCreate(CamelModel):
    # Bounds match the profile columns so stored values are the calculated ones
    property_price: Decimal = Field(..., gt=0, max_digits=AMOUNT_DIGITS, decimal_places=AMOUNT_PLACES)
    property_type: PropertyType
    down_payment_amount: Decimal = Field(
        ..., ge=0, max_digits=AMOUNT_DIGITS, decimal_places=AMOUNT_PLACES
    )
    subsidy_amount: Decimal | None = Field(
        None, ge=0, max_digits=AMOUNT_DIGITS, decimal_places=AMOUNT_PLACES,
        description="Maternity capital",
    )
    subsidy_included_in_down_payment: bool = False
    loan_term_years: int = Field(..., ge=1, le=30)
    annual_interest_rate_percent: Decimal = Field(
        ..., ge=0, le=100, max_digits=RATE_DIGITS, decimal_places=RATE_PLACES
    )

    @model_validator(mode="after")
    def down_payment_below_price(self):
        if self.down_payment_amount >= self.property_price:
            raise ValueError("Down payment must be less than the property price")
        return self


class SessionReplyRequest(CamelModel):
    text: str = Field(..., max_length=100)


# ---- Response schemas ----

class PaymentEntryResponse(CamelModel):
    total_payment: Decimal
    principal_portion: Decimal
    interest_portion: Decimal
    remaining_balance: Decimal


class MortgageProfileResponse(CamelModel):
    id: UUID
    property_price: Decimal
    property_type: PropertyType
    down_payment_amount: Decimal
    subsidy_amount: Decimal | None = None
    subsidy_included_in_down_payment: bool
    loan_term_years: int
    annual_interest_rate_percent: Decimal


class MortgageCalculationResponse(CamelModel):
    id: UUID
    profile_id: UUID
    monthly_payment: Decimal
    total_payment: Decimal
    total_overpayment_amount: Decimal
    possible_tax_deduction: Decimal
    subsidy_savings: Decimal
    recommended_income: Decimal
    # {year: {month_in_year: entry}}, both keys as strings starting at "1"
    schedule: dict[str, dict[str, PaymentEntryResponse]]


class SessionResponse(CamelModel):
    step: str
    prompt: str
    accepted: bool = True
    calculation: MortgageCalculationResponse | None = None
