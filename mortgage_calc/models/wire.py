"""Persisted/wire form of calculation results.

The schedule is nested by year then month, both keyed by their number as a
string ("1".."12" for months). Amounts are rounded to the cent here and only here.
"""

import json
from decimal import Decimal, ROUND_HALF_UP

from mortgage_calc.engine.schedule import schedule_position
from mortgage_calc.models.results import CalculationResult, PaymentEntry

TWO_PLACES = Decimal("0.01")


def cents(value: Decimal) -> Decimal:
    rounded = value.quantize(TWO_PLACES, ROUND_HALF_UP)
    # Sub-cent negative noise would otherwise render as "-0.00"
    return rounded if rounded else abs(rounded)


def entry_to_wire(entry: PaymentEntry) -> dict[str, str]:
    return {
        "totalPayment": str(cents(entry.total_payment)),
        "principalPortion": str(cents(entry.principal_portion)),
        "interestPortion": str(cents(entry.interest_portion)),
        "remainingBalance": str(cents(entry.remaining_balance)),
    }


def schedule_to_wire(schedule: tuple[PaymentEntry, ...]) -> dict[str, dict[str, dict[str, str]]]:
    wire: dict[str, dict[str, dict[str, str]]] = {}
    for index, entry in enumerate(schedule):
        year, month = schedule_position(index)
        wire.setdefault(str(year), {})[str(month)] = entry_to_wire(entry)
    return wire


def schedule_to_json(schedule: tuple[PaymentEntry, ...]) -> str:
    return json.dumps(schedule_to_wire(schedule))


def result_to_wire(result: CalculationResult) -> dict:
    """Rounded aggregates plus the nested schedule, ready for JSON."""
    return {
        "monthlyPayment": str(cents(result.monthly_payment)),
        "totalPayment": str(cents(result.total_payment)),
        "totalOverpaymentAmount": str(cents(result.total_overpayment_amount)),
        "possibleTaxDeduction": str(cents(result.possible_tax_deduction)),
        "subsidySavings": str(cents(result.subsidy_savings)),
        "recommendedIncome": str(cents(result.recommended_income)),
        "schedule": schedule_to_wire(result.schedule),
    }
