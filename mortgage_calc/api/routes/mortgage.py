"""Mortgage profile and calculation routes."""

import json
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from mortgage_calc.api.deps import get_store, get_user_id
from mortgage_calc.api.schemas import (
    MortgageCalculationResponse,
    MortgageProfileCreate,
    MortgageProfileResponse,
)
from mortgage_calc.data.store import MortgageStore, create_mortgage_calculation
from mortgage_calc.engine.errors import MortgageCalculationError
from mortgage_calc.models.db import MortgageCalculationRecord, MortgageProfileRecord
from mortgage_calc.models.results import CalculationResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/mortgage-profiles", tags=["mortgage"])


def profile_to_response(record: MortgageProfileRecord) -> MortgageProfileResponse:
    return MortgageProfileResponse(
        id=record.id,
        property_price=record.property_price,
        property_type=record.property_type,
        down_payment_amount=record.down_payment_amount,
        subsidy_amount=record.subsidy_amount,
        subsidy_included_in_down_payment=record.subsidy_included_in_down_payment,
        loan_term_years=record.loan_term_years,
        annual_interest_rate_percent=record.annual_interest_rate_percent,
    )


def calculation_to_response(record: MortgageCalculationRecord) -> MortgageCalculationResponse:
    return MortgageCalculationResponse(
        id=record.id,
        profile_id=record.profile_id,
        monthly_payment=record.monthly_payment,
        total_payment=record.total_payment,
        total_overpayment_amount=record.total_overpayment_amount,
        possible_tax_deduction=record.possible_tax_deduction,
        subsidy_savings=record.subsidy_savings,
        recommended_income=record.recommended_income,
        schedule=json.loads(record.payment_schedule),
    )


def persist_calculation(
    store: MortgageStore, user_id: str, fields: dict
) -> tuple[MortgageCalculationRecord, CalculationResult]:
    """Persist + calculate, translating rejections into HTTP 400."""
    try:
        _, calculation, result = create_mortgage_calculation(store, user_id, fields)
    except MortgageCalculationError as e:
        logger.info("Rejected mortgage calculation for user %s: %s", user_id, e)
        raise HTTPException(status_code=400, detail=str(e))
    return calculation, result


def run_calculation(store: MortgageStore, user_id: str, fields: dict) -> MortgageCalculationResponse:
    calculation, _ = persist_calculation(store, user_id, fields)
    return calculation_to_response(calculation)


@router.post("", response_model=MortgageCalculationResponse, status_code=status.HTTP_201_CREATED)
def create_profile(
    req: MortgageProfileCreate,
    user_id: str = Depends(get_user_id),
    store: MortgageStore = Depends(get_store),
):
    """Save a mortgage profile and return its calculation."""
    return run_calculation(store, user_id, req.model_dump())


@router.get("/{profile_id}", response_model=MortgageProfileResponse)
def get_profile(
    profile_id: UUID,
    user_id: str = Depends(get_user_id),
    store: MortgageStore = Depends(get_store),
):
    record = store.get_profile(profile_id, user_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Mortgage profile not found")
    return profile_to_response(record)


@router.get("/{profile_id}/calculation", response_model=MortgageCalculationResponse)
def get_calculation(
    profile_id: UUID,
    user_id: str = Depends(get_user_id),
    store: MortgageStore = Depends(get_store),
):
    record = store.get_calculation_by_profile(profile_id, user_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Mortgage calculation not found")
    return calculation_to_response(record)
