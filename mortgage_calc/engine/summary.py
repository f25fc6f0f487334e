"""Plain-text summary of a completed calculation for conversational clients.

Amounts are shown in whole rubles; the exact figures stay in the API
response and the stored calculation.
"""

from decimal import Decimal, ROUND_HALF_UP

from mortgage_calc.engine.collector import PROPERTY_TYPE_LABELS
from mortgage_calc.engine.schedule import yearly_summary
from mortgage_calc.models.loan import PropertyType, to_decimal
from mortgage_calc.models.results import CalculationResult


def format_currency(amount) -> str:
    """Whole rubles with space-separated thousands, e.g. "4 000 000 ₽"."""
    whole = to_decimal(amount).quantize(Decimal(1), ROUND_HALF_UP)
    if whole == 0:
        whole = Decimal(0)
    return f"{whole:,}".replace(",", " ") + " ₽"


def format_years(years: int) -> str:
    return "1 year" if years == 1 else f"{years} years"


def format_summary(fields: dict, result: CalculationResult) -> str:
    """Recap of the profile answers followed by the calculated figures.

    Args:
        fields: Profile fields keyed like the profile creation schema
        result: Calculation for those fields
    """
    property_type = PropertyType(fields["property_type"])
    lines = [
        "Mortgage calculation results",
        "",
        "Inputs:",
        f"Property price: {format_currency(fields['property_price'])}",
        f"Property type: {PROPERTY_TYPE_LABELS[property_type]}",
        f"Down payment: {format_currency(fields['down_payment_amount'])}",
    ]
    if fields.get("subsidy_included_in_down_payment") and fields.get("subsidy_amount"):
        lines.append(
            f"Maternity capital: {format_currency(fields['subsidy_amount'])} "
            "(included in the down payment)"
        )
    lines += [
        f"Loan term: {format_years(fields['loan_term_years'])}",
        f"Interest rate: {fields['annual_interest_rate_percent']}%",
        "",
        "Results:",
        f"Monthly payment: {format_currency(result.monthly_payment)}",
        f"Total payments: {format_currency(result.total_payment)}",
        f"Overpayment: {format_currency(result.total_overpayment_amount)}",
        f"Possible tax deduction: {format_currency(result.possible_tax_deduction)}",
    ]
    if result.subsidy_savings > 0:
        lines.append(f"Savings from maternity capital: {format_currency(result.subsidy_savings)}")
    lines.append(f"Recommended income: {format_currency(result.recommended_income)}")

    first_year = yearly_summary(result.schedule)[0]
    lines += [
        "",
        f"First year: {format_currency(first_year['principal'])} principal, "
        f"{format_currency(first_year['interest'])} interest",
    ]
    return "\n".join(lines)
