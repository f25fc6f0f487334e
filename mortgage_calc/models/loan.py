from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum

from mortgage_calc.engine.errors import InvalidInputError


# Column precision of stored amounts and rates: NUMERIC(digits, places)
AMOUNT_DIGITS = 15
AMOUNT_PLACES = 2
RATE_DIGITS = 5
RATE_PLACES = 2


class PropertyType(Enum):
    APARTMENT_IN_NEW_BUILDING = "apartment_in_new_building"
    APARTMENT_IN_SECONDARY_BUILDING = "apartment_in_secondary_building"
    HOUSE = "house"
    HOUSE_WITH_LAND_PLOT = "house_with_land_plot"
    LAND_PLOT = "land_plot"
    OTHER = "other"


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def fits_scale(value: Decimal, max_digits: int, places: int) -> bool:
    """True if ``value`` is storable in a NUMERIC(max_digits, places) column without rounding."""
    if not value.is_finite():
        return False
    if abs(value) >= Decimal(10) ** (max_digits - places):
        return False
    return value == value.quantize(Decimal(1).scaleb(-places))


@dataclass(frozen=True)
class LoanInput:
    property_price: Decimal
    down_payment_amount: Decimal  # Already includes the subsidy when it is marked included
    loan_term_years: int
    annual_interest_rate_percent: Decimal  # e.g. Decimal("8.5") for 8.5%
    subsidy_amount: Decimal | None = None
    subsidy_included_in_down_payment: bool = False

    def __post_init__(self):
        # Accept int/float/str amounts from callers using the engine as a library
        for name in ("property_price", "down_payment_amount", "annual_interest_rate_percent", "subsidy_amount"):
            value = getattr(self, name)
            if value is None and name == "subsidy_amount":
                continue
            try:
                object.__setattr__(self, name, to_decimal(value))
            except (InvalidOperation, TypeError, ValueError) as e:
                raise InvalidInputError(f"{name} is not a number: {value!r}") from e

    @property
    def loan_amount(self) -> Decimal:
        return self.property_price - self.down_payment_amount

    @property
    def periods(self) -> int:
        return self.loan_term_years * 12

    @property
    def periodic_rate(self) -> Decimal:
        return self.annual_interest_rate_percent / 12 / 100
