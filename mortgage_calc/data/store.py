"""SQLAlchemy-backed persistence for mortgage profiles and calculations.

A profile is always flushed (and so has its id) before the calculation that
references it is written. Lookups are scoped to the owning user.
"""

import logging
import uuid
from decimal import Decimal, InvalidOperation

from sqlalchemy import select
from sqlalchemy.orm import Session

from mortgage_calc.engine.calculator import calculate_from_profile
from mortgage_calc.engine.errors import InvalidInputError, MortgageCalculationError
from mortgage_calc.models.db import MortgageCalculationRecord, MortgageProfileRecord
from mortgage_calc.models.loan import (
    AMOUNT_DIGITS,
    AMOUNT_PLACES,
    RATE_DIGITS,
    RATE_PLACES,
    PropertyType,
    fits_scale,
    to_decimal,
)
from mortgage_calc.models.results import CalculationResult
from mortgage_calc.models.wire import cents, schedule_to_json

logger = logging.getLogger(__name__)


def _column_value(name: str, value, max_digits: int = AMOUNT_DIGITS, places: int = AMOUNT_PLACES) -> Decimal:
    try:
        value = to_decimal(value)
    except InvalidOperation as e:
        raise InvalidInputError(f"{name} is not a number: {value!r}") from e
    if not fits_scale(value, max_digits, places):
        raise InvalidInputError(
            f"{name} must be finite with at most {max_digits - places} integer digits "
            f"and {places} decimal places, got {value}"
        )
    return value


def _term_value(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"loan_term_years must be a whole number of years, got {value!r}")
    return value


class MortgageStore:
    def __init__(self, session: Session):
        self.session = session

    def create_profile(self, user_id: str, fields: dict) -> MortgageProfileRecord:
        """Persist a profile built from input fields.

        Values the columns would have to round are rejected, so a calculation
        run on the returned record matches one run on the input and on the
        record reloaded later.
        """
        included = bool(fields["subsidy_included_in_down_payment"])
        subsidy = fields.get("subsidy_amount")
        property_type = fields["property_type"]
        if isinstance(property_type, PropertyType):
            property_type = property_type.value

        record = MortgageProfileRecord(
            user_id=user_id,
            property_price=_column_value("property_price", fields["property_price"]),
            property_type=property_type,
            down_payment_amount=_column_value("down_payment_amount", fields["down_payment_amount"]),
            # The subsidy amount is only meaningful when it is part of the down payment
            subsidy_amount=(
                _column_value("subsidy_amount", subsidy) if included and subsidy is not None else None
            ),
            subsidy_included_in_down_payment=included,
            loan_term_years=_term_value(fields["loan_term_years"]),
            annual_interest_rate_percent=_column_value(
                "annual_interest_rate_percent",
                fields["annual_interest_rate_percent"],
                RATE_DIGITS,
                RATE_PLACES,
            ),
        )
        self.session.add(record)
        self.session.flush()
        logger.info("Saved mortgage profile %s for user %s", record.id, user_id)
        return record

    def create_calculation(
        self,
        user_id: str,
        profile_id: uuid.UUID,
        result: CalculationResult,
    ) -> MortgageCalculationRecord:
        record = MortgageCalculationRecord(
            user_id=user_id,
            profile_id=profile_id,
            monthly_payment=cents(result.monthly_payment),
            total_payment=cents(result.total_payment),
            total_overpayment_amount=cents(result.total_overpayment_amount),
            possible_tax_deduction=cents(result.possible_tax_deduction),
            subsidy_savings=cents(result.subsidy_savings),
            recommended_income=cents(result.recommended_income),
            payment_schedule=schedule_to_json(result.schedule),
        )
        self.session.add(record)
        self.session.flush()
        logger.info(
            "Saved mortgage calculation %s (%d months) for profile %s",
            record.id, len(result.schedule), profile_id,
        )
        return record

    def get_profile(self, profile_id: uuid.UUID, user_id: str) -> MortgageProfileRecord | None:
        return self.session.execute(
            select(MortgageProfileRecord)
            .where(MortgageProfileRecord.id == profile_id)
            .where(MortgageProfileRecord.user_id == user_id)
        ).scalar_one_or_none()

    def get_calculation_by_profile(
        self, profile_id: uuid.UUID, user_id: str
    ) -> MortgageCalculationRecord | None:
        """Most recent calculation for a profile, or None."""
        return self.session.execute(
            select(MortgageCalculationRecord)
            .where(MortgageCalculationRecord.profile_id == profile_id)
            .where(MortgageCalculationRecord.user_id == user_id)
            .order_by(MortgageCalculationRecord.created_at.desc())
            .limit(1)
        ).scalar_one_or_none()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


def create_mortgage_calculation(
    store: MortgageStore,
    user_id: str,
    fields: dict,
) -> tuple[MortgageProfileRecord, MortgageCalculationRecord, CalculationResult]:
    """Persist the profile, calculate from it, persist the calculation.

    Nothing is committed if the profile is rejected, either for values the
    columns cannot hold or by the engine.
    """
    try:
        profile = store.create_profile(user_id, fields)
        result = calculate_from_profile(profile)
    except MortgageCalculationError:
        store.rollback()
        raise
    calculation = store.create_calculation(user_id, profile.id, result)
    store.commit()
    return profile, calculation, result
