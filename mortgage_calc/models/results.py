from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PaymentEntry:
    total_payment: Decimal
    principal_portion: Decimal
    interest_portion: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True)
class CalculationResult:
    monthly_payment: Decimal
    total_payment: Decimal
    total_overpayment_amount: Decimal
    possible_tax_deduction: Decimal
    subsidy_savings: Decimal
    recommended_income: Decimal
    schedule: tuple[PaymentEntry, ...]

    @property
    def months(self) -> int:
        return len(self.schedule)

    @property
    def total_interest(self) -> Decimal:
        return sum((e.interest_portion for e in self.schedule), Decimal("0"))

    @property
    def total_principal(self) -> Decimal:
        return sum((e.principal_portion for e in self.schedule), Decimal("0"))
