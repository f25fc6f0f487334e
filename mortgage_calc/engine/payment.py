"""Level monthly payment for a fixed-rate loan.

Pure functions: Decimal in, Decimal out. No I/O.
"""

from decimal import Decimal, Overflow

from mortgage_calc.engine.errors import InvalidInputError, NumericOverflowError
from mortgage_calc.models.loan import to_decimal


def compounding_factor(periodic_rate: Decimal, periods: int) -> Decimal:
    """Return (1 + r)^n, raising NumericOverflowError if it is not finite."""
    periodic_rate = to_decimal(periodic_rate)
    try:
        factor = (1 + periodic_rate) ** periods
    except Overflow as e:
        raise NumericOverflowError(
            f"Compounding factor overflows for rate {periodic_rate} over {periods} periods"
        ) from e
    if not factor.is_finite():
        raise NumericOverflowError(
            f"Compounding factor is not finite for rate {periodic_rate} over {periods} periods"
        )
    return factor


def monthly_payment(loan_amount: Decimal, periodic_rate: Decimal, periods: int) -> Decimal:
    """Calculate the fixed monthly payment that repays ``loan_amount`` in ``periods``.

    Args:
        loan_amount: Principal borrowed, must be positive
        periodic_rate: Monthly rate as a fraction (e.g. 0.01 for 1% a month)
        periods: Number of monthly payments
    """
    loan_amount = to_decimal(loan_amount)
    periodic_rate = to_decimal(periodic_rate)
    if loan_amount <= 0:
        raise InvalidInputError(f"Loan amount must be positive, got {loan_amount}")
    if periods <= 0:
        raise InvalidInputError(f"Number of periods must be positive, got {periods}")
    if periodic_rate < 0:
        raise InvalidInputError(f"Periodic rate cannot be negative, got {periodic_rate}")

    if periodic_rate == 0:
        return loan_amount / periods

    # M = P * [r(1+r)^n] / [(1+r)^n - 1]
    factor = compounding_factor(periodic_rate, periods)
    return loan_amount * periodic_rate * factor / (factor - 1)
