"""Property tax deduction estimate.

Two independent deductions at the 13% personal income tax rate, each with
its own statutory base cap:
- purchase of the property, base capped at 2,000,000 (max 260,000)
- mortgage interest paid, base capped at 3,000,000 (max 390,000)
"""

from decimal import Decimal

TAX_RATE = Decimal("0.13")
PURCHASE_BASE_CAP = Decimal("2000000")
INTEREST_BASE_CAP = Decimal("3000000")


def purchase_deduction(property_price: Decimal) -> Decimal:
    return min(property_price, PURCHASE_BASE_CAP) * TAX_RATE


def interest_deduction(total_overpayment_amount: Decimal) -> Decimal:
    return min(total_overpayment_amount, INTEREST_BASE_CAP) * TAX_RATE


def estimate_tax_deduction(property_price: Decimal, total_overpayment_amount: Decimal) -> Decimal:
    """Total possible deduction for the purchase plus interest paid."""
    return purchase_deduction(property_price) + interest_deduction(total_overpayment_amount)
