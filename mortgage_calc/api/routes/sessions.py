"""Conversational profile collection routes.

One answer per request; the final answer triggers the same persist-and-
calculate flow as a direct profile submission and replies with a text
summary of the result.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from mortgage_calc.api.deps import get_session_store, get_store, get_user_id
from mortgage_calc.api.routes.mortgage import calculation_to_response, persist_calculation
from mortgage_calc.api.schemas import SessionReplyRequest, SessionResponse
from mortgage_calc.data.sessions import SessionConflictError, SessionStore
from mortgage_calc.data.store import MortgageStore
from mortgage_calc.engine import collector
from mortgage_calc.engine.summary import format_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/mortgage-sessions", tags=["sessions"])


@router.post("", response_model=SessionResponse)
def start_session(
    user_id: str = Depends(get_user_id),
    sessions: SessionStore = Depends(get_session_store),
):
    """Start a new collection session, discarding any unfinished one."""
    if sessions.discard(user_id):
        logger.info("Cleared existing session for user %s", user_id)
    outcome = collector.start(user_id)
    sessions.put(outcome.session)
    logger.info("Started mortgage session for user %s", user_id)
    return SessionResponse(step=outcome.session.step.value, prompt=outcome.prompt)


@router.post("/reply", response_model=SessionResponse)
def reply(
    req: SessionReplyRequest,
    user_id: str = Depends(get_user_id),
    sessions: SessionStore = Depends(get_session_store),
    store: MortgageStore = Depends(get_store),
):
    try:
        outcome = sessions.advance(user_id, req.text)
    except SessionConflictError:
        raise HTTPException(status_code=409, detail="The mortgage session was updated by another request")
    if outcome is None:
        raise HTTPException(status_code=404, detail="No active mortgage session")

    session = outcome.session
    if not session.is_complete:
        return SessionResponse(
            step=session.step.value,
            prompt=outcome.prompt,
            accepted=outcome.accepted,
        )

    fields = session.profile_fields()
    calculation, result = persist_calculation(store, user_id, fields)
    return SessionResponse(
        step=session.step.value,
        prompt=format_summary(fields, result),
        calculation=calculation_to_response(calculation),
    )


@router.delete("", status_code=204)
def cancel_session(
    user_id: str = Depends(get_user_id),
    sessions: SessionStore = Depends(get_session_store),
):
    if not sessions.discard(user_id):
        raise HTTPException(status_code=404, detail="No active mortgage session")
