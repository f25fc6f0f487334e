"""Errors raised by the mortgage calculation engine.

All derive from ValueError so callers that only know about bad input can
catch them generically.
"""


class MortgageCalculationError(ValueError):
    pass


class InvalidLoanAmountError(MortgageCalculationError):
    """Down payment covers the whole property price."""


class InvalidInputError(MortgageCalculationError):
    """Term, rate or period count outside the supported domain."""


class NumericOverflowError(MortgageCalculationError):
    """Compounding factor is not a finite number."""
