import json
from decimal import Decimal

import pytest

from mortgage_calc.engine import collector
from mortgage_calc.engine.collector import ProfileSession, Step, advance, parse_amount
from mortgage_calc.models.loan import PropertyType


def _answer_all(answers: list[str]) -> ProfileSession:
    session = collector.start("user-1").session
    for answer in answers:
        outcome = advance(session, answer)
        assert outcome.accepted, f"{answer!r} rejected at {session.step}"
        session = outcome.session
    return session


class TestParsing:
    @pytest.mark.parametrize("text,expected", [
        ("5000000", Decimal("5000000")),
        ("5 000 000", Decimal("5000000")),
        ("5\u00a0000\u00a0000", Decimal("5000000")),
        ("8,5", Decimal("8.5")),
        (" 12.25 ", Decimal("12.25")),
    ])
    def test_valid_amounts(self, text, expected):
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", [
        "", "abc", "NaN", "Infinity", "1,000,000", "1E+30", "10000000000000", "5000000.005",
    ])
    def test_invalid_amounts(self, text):
        assert parse_amount(text) is None

    def test_largest_storable_amount(self):
        assert parse_amount("9999999999999.99") == Decimal("9999999999999.99")

    def test_rate_scale(self):
        assert parse_amount("8.12", 5, 2) == Decimal("8.12")
        assert parse_amount("8.125", 5, 2) is None
        assert parse_amount("1000", 5, 2) is None


class TestCollectorFlow:
    def test_start(self):
        outcome = collector.start("user-1")
        assert outcome.session.step is Step.PROPERTY_PRICE
        assert outcome.prompt == collector.PROMPTS[Step.PROPERTY_PRICE]

    def test_full_flow_with_subsidy(self):
        session = _answer_all(["5000000", "1", "500000", "yes", "500000", "20", "8.5"])
        assert session.is_complete
        assert session.property_type is PropertyType.APARTMENT_IN_NEW_BUILDING
        # Subsidy is folded into the down payment
        assert session.down_payment_amount == Decimal("1000000")
        assert session.subsidy_amount == Decimal("500000")

        loan = session.to_loan_input()
        assert loan.loan_amount == Decimal("4000000")
        assert loan.subsidy_included_in_down_payment is True
        assert loan.periods == 240

    def test_full_flow_without_subsidy_skips_amount(self):
        session = collector.start("user-1").session
        for answer in ["3000000", "house", "600000"]:
            session = advance(session, answer).session
        outcome = advance(session, "no")
        assert outcome.session.step is Step.LOAN_TERM
        session = _answer_all(["3000000", "house", "600000", "no", "15", "10"])
        fields = session.profile_fields()
        assert fields["subsidy_amount"] is None
        assert fields["subsidy_included_in_down_payment"] is False
        assert fields["property_type"] is PropertyType.HOUSE

    def test_prompt_follows_step(self):
        outcome = advance(collector.start("user-1").session, "5000000")
        assert outcome.session.step is Step.PROPERTY_TYPE
        assert "Land plot" in outcome.prompt


class TestCollectorValidation:
    @pytest.mark.parametrize("answers,bad", [
        ([], "0"),
        ([], "-100"),
        ([], "lots"),
        (["5000000"], "7"),
        (["5000000"], "castle"),
        (["5000000", "2"], "-1"),
        (["5000000", "2", "100000"], "maybe"),
        (["5000000", "2", "100000", "yes"], "-5"),
        (["5000000", "2", "100000", "no"], "0"),
        (["5000000", "2", "100000", "no"], "31"),
        (["5000000", "2", "100000", "no"], "12.5"),
        (["5000000", "2", "100000", "no", "20"], "100.5"),
        (["5000000", "2", "100000", "no", "20"], "8.125"),
        ([], "1E+30"),
        (["5000000", "2"], "0.001"),
    ])
    def test_invalid_answer_keeps_step(self, answers, bad):
        session = _answer_all(answers)
        outcome = advance(session, bad)
        assert not outcome.accepted
        assert outcome.session == session
        assert outcome.prompt == collector.ERRORS[session.step]

    def test_down_payment_must_be_below_price(self):
        session = _answer_all(["5000000", "2"])
        outcome = advance(session, "5000000")
        assert not outcome.accepted
        assert outcome.prompt == collector.DOWN_PAYMENT_TOO_LARGE

    def test_subsidy_cannot_cover_remaining_price(self):
        session = _answer_all(["5000000", "2", "4000000", "yes"])
        outcome = advance(session, "1000000")
        assert not outcome.accepted
        assert outcome.session.down_payment_amount == Decimal("4000000")

    def test_zero_rate_accepted(self):
        session = _answer_all(["5000000", "2", "1000000", "no", "20", "0"])
        assert session.annual_interest_rate_percent == 0

    def test_complete_session_rejects_more_answers(self):
        session = _answer_all(["5000000", "2", "1000000", "no", "20", "8"])
        with pytest.raises(ValueError):
            advance(session, "1")

    def test_incomplete_session_has_no_profile(self):
        with pytest.raises(ValueError):
            collector.start("user-1").session.profile_fields()


class TestSessionSerialization:
    def test_dict_form_is_json_safe(self):
        session = _answer_all(["5000000", "2", "1000000", "yes", "500000"])
        data = session.to_dict()
        assert data["step"] == "loan_term"
        assert data["property_type"] == "apartment_in_secondary_building"
        assert data["down_payment_amount"] == "1500000"
        assert json.loads(json.dumps(data)) == data

    def test_restored_session_continues(self):
        session = _answer_all(["5000000", "2", "1000000", "no", "20"])
        restored = ProfileSession.from_dict(session.to_dict())
        assert restored == session
        assert advance(restored, "8.5").session.is_complete
