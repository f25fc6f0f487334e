"""Fixed-rate mortgage calculation.

Orchestrates: validate input → level payment → amortization schedule →
overpayment, tax deduction and affordability figures.

Pure functions: dataclasses in, dataclasses out. No I/O.
"""

from decimal import Decimal

from mortgage_calc.engine.deduction import estimate_tax_deduction
from mortgage_calc.engine.errors import InvalidInputError, InvalidLoanAmountError
from mortgage_calc.engine.payment import monthly_payment
from mortgage_calc.engine.schedule import build_schedule
from mortgage_calc.models.loan import LoanInput
from mortgage_calc.models.results import CalculationResult

MIN_TERM_YEARS = 1
MAX_TERM_YEARS = 30
MIN_RATE_PERCENT = Decimal("0")
MAX_RATE_PERCENT = Decimal("100")

# Lenders expect the payment to be at most 40% of monthly income
INCOME_MULTIPLIER = Decimal("2.5")


def validate(loan: LoanInput) -> None:
    """Raise if ``loan`` is outside what the engine can compute."""
    amounts = {
        "property price": loan.property_price,
        "down payment": loan.down_payment_amount,
        "interest rate": loan.annual_interest_rate_percent,
    }
    if loan.subsidy_amount is not None:
        amounts["subsidy amount"] = loan.subsidy_amount
    for name, value in amounts.items():
        if not value.is_finite():
            raise InvalidInputError(f"The {name} must be a finite number, got {value}")
    if loan.subsidy_amount is not None and loan.subsidy_amount < 0:
        raise InvalidInputError(f"Subsidy amount cannot be negative, got {loan.subsidy_amount}")

    if loan.loan_amount <= 0:
        raise InvalidLoanAmountError(
            f"Down payment {loan.down_payment_amount} must be less than "
            f"property price {loan.property_price}"
        )
    term = loan.loan_term_years
    if isinstance(term, bool) or not isinstance(term, int):
        raise InvalidInputError(f"Loan term must be a whole number of years, got {term!r}")
    if not MIN_TERM_YEARS <= term <= MAX_TERM_YEARS:
        raise InvalidInputError(
            f"Loan term must be {MIN_TERM_YEARS}-{MAX_TERM_YEARS} years, got {term}"
        )
    if not MIN_RATE_PERCENT <= loan.annual_interest_rate_percent <= MAX_RATE_PERCENT:
        raise InvalidInputError(
            f"Interest rate must be {MIN_RATE_PERCENT}-{MAX_RATE_PERCENT}%, "
            f"got {loan.annual_interest_rate_percent}"
        )


def calculate(loan: LoanInput) -> CalculationResult:
    """Compute payment, totals, tax deduction and the full schedule for a loan."""
    validate(loan)

    loan_amount = loan.loan_amount
    rate = loan.periodic_rate
    pmt = monthly_payment(loan_amount, rate, loan.periods)
    schedule = build_schedule(loan_amount, pmt, rate, loan.periods)

    total_payment = sum((e.total_payment for e in schedule), Decimal("0"))
    total_overpayment = total_payment - loan_amount

    # The subsidy is already part of the down payment; it is reported, not subtracted again
    if loan.subsidy_included_in_down_payment and loan.subsidy_amount:
        subsidy_savings = loan.subsidy_amount
    else:
        subsidy_savings = Decimal("0")

    return CalculationResult(
        monthly_payment=pmt,
        total_payment=total_payment,
        total_overpayment_amount=total_overpayment,
        possible_tax_deduction=estimate_tax_deduction(loan.property_price, total_overpayment),
        subsidy_savings=subsidy_savings,
        recommended_income=pmt * INCOME_MULTIPLIER,
        schedule=schedule,
    )


def loan_input_from_profile(profile) -> LoanInput:
    """Map a stored mortgage profile (ORM record or any object with the same
    attributes) to engine input."""
    return LoanInput(
        property_price=profile.property_price,
        down_payment_amount=profile.down_payment_amount,
        subsidy_amount=profile.subsidy_amount,
        subsidy_included_in_down_payment=profile.subsidy_included_in_down_payment,
        loan_term_years=profile.loan_term_years,
        annual_interest_rate_percent=profile.annual_interest_rate_percent,
    )


def calculate_from_profile(profile) -> CalculationResult:
    return calculate(loan_input_from_profile(profile))
