"""Month-by-month amortization schedule.

Pure functions: Decimal in, dataclass out. No I/O.
"""

from decimal import Decimal

from mortgage_calc.engine.errors import InvalidInputError
from mortgage_calc.models.loan import to_decimal
from mortgage_calc.models.results import PaymentEntry

ZERO = Decimal("0")


def build_schedule(
    loan_amount: Decimal,
    payment: Decimal,
    periodic_rate: Decimal,
    periods: int,
) -> tuple[PaymentEntry, ...]:
    """Split each payment into interest and principal until the balance is zero.

    The final entry pays off exactly the remaining balance, so its total can
    differ slightly from ``payment``. If the balance is cleared early the
    schedule is shorter than ``periods``.
    """
    if periods <= 0:
        raise InvalidInputError(f"Number of periods must be positive, got {periods}")

    payment = to_decimal(payment)
    periodic_rate = to_decimal(periodic_rate)
    entries: list[PaymentEntry] = []
    balance = to_decimal(loan_amount)

    for period in range(1, periods + 1):
        interest = balance * periodic_rate
        principal = payment - interest

        # Final payment adjustment
        if principal >= balance or period == periods:
            entries.append(PaymentEntry(
                total_payment=balance + interest,
                principal_portion=balance,
                interest_portion=interest,
                remaining_balance=ZERO,
            ))
            break

        balance -= principal
        entries.append(PaymentEntry(
            total_payment=payment,
            principal_portion=principal,
            interest_portion=interest,
            remaining_balance=max(ZERO, balance),
        ))

    return tuple(entries)


def schedule_position(index: int) -> tuple[int, int]:
    """Map a 0-based schedule index to (year, month_in_year), both 1-based."""
    return index // 12 + 1, index % 12 + 1


def yearly_summary(schedule: tuple[PaymentEntry, ...]) -> list[dict[str, Decimal]]:
    """Aggregate the schedule by loan year.

    Returns list of dicts with keys: year, principal, interest, total_payment, ending_balance
    """
    yearly: list[dict[str, Decimal]] = []
    year_principal = ZERO
    year_interest = ZERO
    year_total = ZERO

    for index, entry in enumerate(schedule):
        year_principal += entry.principal_portion
        year_interest += entry.interest_portion
        year_total += entry.total_payment

        year, month = schedule_position(index)
        if month == 12 or index == len(schedule) - 1:
            yearly.append({
                "year": Decimal(year),
                "principal": year_principal,
                "interest": year_interest,
                "total_payment": year_total,
                "ending_balance": entry.remaining_balance,
            })
            year_principal = ZERO
            year_interest = ZERO
            year_total = ZERO

    return yearly
