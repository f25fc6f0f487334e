"""Step-by-step collection of mortgage profile answers.

A ProfileSession is an immutable value: each answer produces a new session
(either advanced to the next step or left on the same step with an error
prompt). Storage of in-progress sessions belongs to the caller.

Steps:
    property_price → property_type → down_payment → subsidy_included
    → [subsidy_amount] → loan_term → interest_rate → complete
"""

from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from enum import Enum

from mortgage_calc.models.loan import (
    AMOUNT_DIGITS,
    AMOUNT_PLACES,
    RATE_DIGITS,
    RATE_PLACES,
    LoanInput,
    PropertyType,
    fits_scale,
)


class Step(Enum):
    PROPERTY_PRICE = "property_price"
    PROPERTY_TYPE = "property_type"
    DOWN_PAYMENT = "down_payment"
    SUBSIDY_INCLUDED = "subsidy_included"
    SUBSIDY_AMOUNT = "subsidy_amount"
    LOAN_TERM = "loan_term"
    INTEREST_RATE = "interest_rate"
    COMPLETE = "complete"


PROPERTY_TYPE_LABELS = {
    PropertyType.APARTMENT_IN_NEW_BUILDING: "Apartment in a new building",
    PropertyType.APARTMENT_IN_SECONDARY_BUILDING: "Apartment on the secondary market",
    PropertyType.HOUSE: "House",
    PropertyType.HOUSE_WITH_LAND_PLOT: "House with land plot",
    PropertyType.LAND_PLOT: "Land plot",
    PropertyType.OTHER: "Other",
}

_PROPERTY_TYPE_CHOICES = "\n".join(
    f"{i}. {label}" for i, label in enumerate(PROPERTY_TYPE_LABELS.values(), start=1)
)

PROMPTS = {
    Step.PROPERTY_PRICE: "Enter the property price:",
    Step.PROPERTY_TYPE: f"Choose the property type:\n{_PROPERTY_TYPE_CHOICES}",
    Step.DOWN_PAYMENT: "Enter the down payment amount:",
    Step.SUBSIDY_INCLUDED: "Will you use maternity capital? (yes/no)",
    Step.SUBSIDY_AMOUNT: "Enter the maternity capital amount:",
    Step.LOAN_TERM: "Enter the loan term in years (1 to 30):",
    Step.INTEREST_RATE: "Enter the annual interest rate (e.g. 8.5 for 8.5%):",
    Step.COMPLETE: "All answers collected.",
}

ERRORS = {
    Step.PROPERTY_PRICE: "Please enter a valid property price (a positive number):",
    Step.PROPERTY_TYPE: f"Please choose one of the listed property types:\n{_PROPERTY_TYPE_CHOICES}",
    Step.DOWN_PAYMENT: "Please enter a valid down payment (a non-negative number):",
    Step.SUBSIDY_INCLUDED: "Please answer yes or no:",
    Step.SUBSIDY_AMOUNT: "Please enter a valid maternity capital amount (a non-negative number):",
    Step.LOAN_TERM: "Please enter a valid loan term (1 to 30 years):",
    Step.INTEREST_RATE: "Please enter a valid interest rate (0 to 100, at most two decimals):",
}

DOWN_PAYMENT_TOO_LARGE = (
    "The down payment cannot be greater than or equal to the property price. "
    "Enter a valid amount:"
)

YES = {"yes", "y", "true", "да"}
NO = {"no", "n", "false", "нет"}


@dataclass(frozen=True)
class ProfileSession:
    user_id: str
    step: Step = Step.PROPERTY_PRICE
    property_price: Decimal | None = None
    property_type: PropertyType | None = None
    down_payment_amount: Decimal | None = None
    subsidy_included: bool | None = None
    subsidy_amount: Decimal | None = None
    loan_term_years: int | None = None
    annual_interest_rate_percent: Decimal | None = None

    @property
    def is_complete(self) -> bool:
        return self.step is Step.COMPLETE

    @property
    def prompt(self) -> str:
        return PROMPTS[self.step]

    def profile_fields(self) -> dict:
        """Collected answers keyed like the profile creation schema."""
        if not self.is_complete:
            raise ValueError(f"Session for {self.user_id} is not complete (step: {self.step.value})")
        return {
            "property_price": self.property_price,
            "property_type": self.property_type,
            "down_payment_amount": self.down_payment_amount,
            "subsidy_amount": self.subsidy_amount if self.subsidy_included else None,
            "subsidy_included_in_down_payment": bool(self.subsidy_included),
            "loan_term_years": self.loan_term_years,
            "annual_interest_rate_percent": self.annual_interest_rate_percent,
        }

    def to_loan_input(self) -> LoanInput:
        fields = self.profile_fields()
        fields.pop("property_type")
        return LoanInput(**fields)

    def to_dict(self) -> dict:
        """JSON-safe form: enums by value, Decimals as strings."""
        return {
            "user_id": self.user_id,
            "step": self.step.value,
            "property_price": _str_or_none(self.property_price),
            "property_type": self.property_type.value if self.property_type else None,
            "down_payment_amount": _str_or_none(self.down_payment_amount),
            "subsidy_included": self.subsidy_included,
            "subsidy_amount": _str_or_none(self.subsidy_amount),
            "loan_term_years": self.loan_term_years,
            "annual_interest_rate_percent": _str_or_none(self.annual_interest_rate_percent),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProfileSession":
        return cls(
            user_id=data["user_id"],
            step=Step(data["step"]),
            property_price=_decimal_or_none(data.get("property_price")),
            property_type=PropertyType(data["property_type"]) if data.get("property_type") else None,
            down_payment_amount=_decimal_or_none(data.get("down_payment_amount")),
            subsidy_included=data.get("subsidy_included"),
            subsidy_amount=_decimal_or_none(data.get("subsidy_amount")),
            loan_term_years=data.get("loan_term_years"),
            annual_interest_rate_percent=_decimal_or_none(data.get("annual_interest_rate_percent")),
        )


def _str_or_none(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


def _decimal_or_none(value: str | None) -> Decimal | None:
    return None if value is None else Decimal(value)


@dataclass(frozen=True)
class StepOutcome:
    session: ProfileSession
    prompt: str
    accepted: bool


def parse_amount(
    text: str,
    max_digits: int = AMOUNT_DIGITS,
    places: int = AMOUNT_PLACES,
) -> Decimal | None:
    """Parse "1 500 000", "1500000.50" or "8,5" into a Decimal.

    Returns None if the text is not a number or would not fit a
    NUMERIC(max_digits, places) column as written.
    """
    cleaned = text.strip().replace("\u00a0", "").replace(" ", "").replace(",", ".")
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not fits_scale(value, max_digits, places):
        return None
    return value


def parse_int(text: str) -> int | None:
    try:
        return int(text.strip())
    except ValueError:
        return None


def parse_property_type(text: str) -> PropertyType | None:
    answer = text.strip().lower()
    choices = list(PROPERTY_TYPE_LABELS)
    index = parse_int(answer)
    if index is not None:
        return choices[index - 1] if 1 <= index <= len(choices) else None
    for ptype, label in PROPERTY_TYPE_LABELS.items():
        if answer in (ptype.value, label.lower()):
            return ptype
    return None


def start(user_id: str) -> StepOutcome:
    session = ProfileSession(user_id=user_id)
    return StepOutcome(session=session, prompt=session.prompt, accepted=True)


def _accept(session: ProfileSession, **changes) -> StepOutcome:
    nxt = replace(session, **changes)
    return StepOutcome(session=nxt, prompt=nxt.prompt, accepted=True)


def _reject(session: ProfileSession, message: str | None = None) -> StepOutcome:
    return StepOutcome(session=session, prompt=message or ERRORS[session.step], accepted=False)


def _property_price(session: ProfileSession, answer: str) -> StepOutcome:
    price = parse_amount(answer)
    if price is None or price <= 0:
        return _reject(session)
    return _accept(session, property_price=price, step=Step.PROPERTY_TYPE)


def _property_type(session: ProfileSession, answer: str) -> StepOutcome:
    ptype = parse_property_type(answer)
    if ptype is None:
        return _reject(session)
    return _accept(session, property_type=ptype, step=Step.DOWN_PAYMENT)


def _down_payment(session: ProfileSession, answer: str) -> StepOutcome:
    amount = parse_amount(answer)
    if amount is None or amount < 0:
        return _reject(session)
    if amount >= session.property_price:
        return _reject(session, DOWN_PAYMENT_TOO_LARGE)
    return _accept(session, down_payment_amount=amount, step=Step.SUBSIDY_INCLUDED)


def _subsidy_included(session: ProfileSession, answer: str) -> StepOutcome:
    answer = answer.strip().lower()
    if answer in YES:
        return _accept(session, subsidy_included=True, step=Step.SUBSIDY_AMOUNT)
    if answer in NO:
        return _accept(session, subsidy_included=False, subsidy_amount=None, step=Step.LOAN_TERM)
    return _reject(session)


def _subsidy_amount(session: ProfileSession, answer: str) -> StepOutcome:
    amount = parse_amount(answer)
    if amount is None or amount < 0:
        return _reject(session)
    # From here on the down payment includes the subsidy
    down_payment = session.down_payment_amount + amount
    if down_payment >= session.property_price:
        return _reject(session, DOWN_PAYMENT_TOO_LARGE)
    return _accept(
        session,
        subsidy_amount=amount,
        down_payment_amount=down_payment,
        step=Step.LOAN_TERM,
    )


def _loan_term(session: ProfileSession, answer: str) -> StepOutcome:
    years = parse_int(answer)
    if years is None or not 1 <= years <= 30:
        return _reject(session)
    return _accept(session, loan_term_years=years, step=Step.INTEREST_RATE)


def _interest_rate(session: ProfileSession, answer: str) -> StepOutcome:
    rate = parse_amount(answer, RATE_DIGITS, RATE_PLACES)
    if rate is None or not 0 <= rate <= 100:
        return _reject(session)
    return _accept(session, annual_interest_rate_percent=rate, step=Step.COMPLETE)


_HANDLERS = {
    Step.PROPERTY_PRICE: _property_price,
    Step.PROPERTY_TYPE: _property_type,
    Step.DOWN_PAYMENT: _down_payment,
    Step.SUBSIDY_INCLUDED: _subsidy_included,
    Step.SUBSIDY_AMOUNT: _subsidy_amount,
    Step.LOAN_TERM: _loan_term,
    Step.INTEREST_RATE: _interest_rate,
}


def advance(session: ProfileSession, answer: str) -> StepOutcome:
    """Apply one answer to the current step."""
    if session.is_complete:
        raise ValueError(f"Session for {session.user_id} is already complete")
    return _HANDLERS[session.step](session, answer)
