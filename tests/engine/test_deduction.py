from decimal import Decimal

from mortgage_calc.engine.deduction import (
    estimate_tax_deduction,
    interest_deduction,
    purchase_deduction,
)


class TestEstimateTaxDeduction:
    def test_uncapped(self):
        result = estimate_tax_deduction(Decimal("1500000"), Decimal("500000"))
        assert result == Decimal("260000")  # 195,000 + 65,000

    def test_purchase_cap(self):
        result = estimate_tax_deduction(Decimal("5000000"), Decimal("1000000"))
        assert result == Decimal("390000")  # 260,000 + 130,000

    def test_interest_cap(self):
        result = estimate_tax_deduction(Decimal("1000000"), Decimal("5000000"))
        assert result == Decimal("520000")  # 130,000 + 390,000

    def test_both_caps(self):
        result = estimate_tax_deduction(Decimal("10000000"), Decimal("10000000"))
        assert result == Decimal("650000")


class TestDeductionParts:
    def test_purchase_max(self):
        assert purchase_deduction(Decimal("2000000")) == Decimal("260000")
        assert purchase_deduction(Decimal("2000001")) == Decimal("260000")

    def test_interest_max(self):
        assert interest_deduction(Decimal("3000000")) == Decimal("390000")

    def test_no_interest(self):
        assert interest_deduction(Decimal("0")) == 0
