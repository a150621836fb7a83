# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
import pytest

from intake.engine import Action, ActionType, Attachment, IntakeError, StepValidationError, reduce, submit
from intake.wizards import APPLICATION, QUOTE


def act(type_, **kw):
    return Action(type=type_, **kw)


def set_fields(session, defn, **fields):
    for name, value in fields.items():
        session = reduce(defn, session, act(ActionType.SET_FIELD, field=name, value=value))
    return session


PERSONAL = dict(firstName="Amina", lastName="Njeri", email="amina@example.com", phone="+254700000002")
PROJECT = dict(projectType="residential", projectLocation="Karen, Nairobi")


def filled_quote():
    s = set_fields(QUOTE.new_session(), QUOTE, **PERSONAL, **PROJECT, description="Four-bedroom house")
    return reduce(QUOTE, s, act(ActionType.TOGGLE_SELECTION, option="Roofing"))


def test_new_session_defaults():
    s = QUOTE.new_session()
    assert s.step == 1
    assert s.submitted is False
    assert s.fields["preferredContact"] == "email"
    assert s.fields["preferredTime"] == "morning"
    assert s.selections == [] and s.attachments == []


def test_next_step_blocked_until_step_valid():
    s = QUOTE.new_session()
    with pytest.raises(StepValidationError) as exc:
        reduce(QUOTE, s, act(ActionType.NEXT_STEP))
    assert exc.value.step == 1
    assert exc.value.missing == ["firstName", "lastName", "email", "phone"]
    assert s.step == 1

    s = set_fields(s, QUOTE, **PERSONAL)
    s = reduce(QUOTE, s, act(ActionType.NEXT_STEP))
    assert s.step == 2


def test_whitespace_does_not_satisfy_required_field():
    s = set_fields(QUOTE.new_session(), QUOTE, **{**PERSONAL, "phone": "   "})
    with pytest.raises(StepValidationError) as exc:
        reduce(QUOTE, s, act(ActionType.NEXT_STEP))
    assert exc.value.missing == ["phone"]


def test_services_step_needs_a_selection():
    s = set_fields(QUOTE.new_session(), QUOTE, **PERSONAL, **PROJECT)
    s = reduce(QUOTE, s, act(ActionType.NEXT_STEP))
    s = reduce(QUOTE, s, act(ActionType.NEXT_STEP))
    assert s.step == 3
    with pytest.raises(StepValidationError):
        reduce(QUOTE, s, act(ActionType.NEXT_STEP))


def test_prev_step_clamped_and_unvalidated():
    s = QUOTE.new_session()
    assert reduce(QUOTE, s, act(ActionType.PREV_STEP)).step == 1
    s = s.model_copy(update={"step": 3})
    assert reduce(QUOTE, s, act(ActionType.PREV_STEP)).step == 2


def test_next_step_capped_at_confirmation():
    s = filled_quote()
    for _ in range(10):
        s = reduce(QUOTE, s, act(ActionType.NEXT_STEP))
    assert s.step == QUOTE.final_step == 5


def test_toggle_is_membership_based():
    s = QUOTE.new_session()
    s = reduce(QUOTE, s, act(ActionType.TOGGLE_SELECTION, option="Roofing"))
    s = reduce(QUOTE, s, act(ActionType.TOGGLE_SELECTION, option="Plumbing"))
    assert s.selections == ["Roofing", "Plumbing"]
    s = reduce(QUOTE, s, act(ActionType.TOGGLE_SELECTION, option="Roofing"))
    assert s.selections == ["Plumbing"]

    with pytest.raises(IntakeError):
        reduce(QUOTE, s, act(ActionType.TOGGLE_SELECTION, option="Teleportation"))


def test_attachments_accumulate_and_remove_by_index():
    s = QUOTE.new_session()
    s = reduce(QUOTE, s, act(ActionType.ADD_ATTACHMENTS, attachments=[Attachment(name="a.pdf", size=10)]))
    s = reduce(QUOTE, s, act(ActionType.ADD_ATTACHMENTS, attachments=[
        Attachment(name="b.pdf", size=20), Attachment(name="c.pdf", size=30),
    ]))
    assert [a.name for a in s.attachments] == ["a.pdf", "b.pdf", "c.pdf"]

    s = reduce(QUOTE, s, act(ActionType.REMOVE_ATTACHMENT, index=1))
    assert [a.name for a in s.attachments] == ["a.pdf", "c.pdf"]

    with pytest.raises(IntakeError):
        reduce(QUOTE, s, act(ActionType.REMOVE_ATTACHMENT, index=5))


def test_unknown_field_rejected():
    with pytest.raises(IntakeError):
        reduce(QUOTE, QUOTE.new_session(), act(ActionType.SET_FIELD, field="isAdmin", value=True))


def test_reduce_does_not_mutate_input():
    s = QUOTE.new_session()
    reduce(QUOTE, s, act(ActionType.SET_FIELD, field="firstName", value="Amina"))
    assert s.fields["firstName"] == ""


def test_submit_validates_every_step():
    s = set_fields(QUOTE.new_session(), QUOTE, **PERSONAL, **PROJECT, description="House")
    with pytest.raises(StepValidationError) as exc:
        reduce(QUOTE, s, act(ActionType.SUBMIT))
    assert exc.value.step == 3


def test_submit_clears_fields_and_returns_record():
    s = filled_quote()
    s = s.model_copy(update={"attachments": [Attachment(name="plan.pdf", size=100)]})
    done, record = submit(QUOTE, s)

    assert done.submitted is True
    assert done.step == QUOTE.final_step
    assert done.fields == QUOTE.defaults
    assert done.selections == [] and done.attachments == []

    assert record["firstName"] == "Amina"
    assert record["selections"] == ["Roofing"]
    assert record["attachments"][0]["name"] == "plan.pdf"


def test_submitted_session_only_accepts_reset():
    done = reduce(QUOTE, filled_quote(), act(ActionType.SUBMIT))
    with pytest.raises(IntakeError):
        reduce(QUOTE, done, act(ActionType.SET_FIELD, field="firstName", value="Again"))
    with pytest.raises(IntakeError):
        reduce(QUOTE, done, act(ActionType.SUBMIT))

    fresh = reduce(QUOTE, done, act(ActionType.RESET))
    assert fresh.step == 1 and fresh.submitted is False


def test_application_wizard():
    s = APPLICATION.new_session()
    with pytest.raises(StepValidationError):
        reduce(APPLICATION, s, act(ActionType.NEXT_STEP))
    s = set_fields(s, APPLICATION, fullName="Peter Kamau", email="peter@example.com", phone="0712345678")
    s = reduce(APPLICATION, s, act(ActionType.NEXT_STEP))
    s = set_fields(s, APPLICATION, position="Site Supervisor")
    s = reduce(APPLICATION, s, act(ActionType.NEXT_STEP))
    assert s.step == 3
    # Documents are optional
    s = reduce(APPLICATION, s, act(ActionType.NEXT_STEP))
    assert s.step == APPLICATION.final_step == 4


def test_session_kind_must_match_wizard():
    with pytest.raises(IntakeError):
        reduce(APPLICATION, QUOTE.new_session(), act(ActionType.RESET))


@pytest.mark.parametrize("step", [0, -1, 6, 9])
def test_step_outside_wizard_rejected(step):
    s = filled_quote().model_copy(update={"step": step})
    with pytest.raises(IntakeError):
        reduce(QUOTE, s, act(ActionType.NEXT_STEP))
    with pytest.raises(IntakeError):
        submit(QUOTE, s)


def test_next_step_revalidates_earlier_steps():
    # A client that edits its step forward still has to fill step 1
    s = QUOTE.new_session().model_copy(update={"step": 4})
    with pytest.raises(StepValidationError) as exc:
        reduce(QUOTE, s, act(ActionType.NEXT_STEP))
    assert exc.value.step == 1

    s = set_fields(QUOTE.new_session(), QUOTE, **PERSONAL).model_copy(update={"step": 3})
    with pytest.raises(StepValidationError) as exc:
        reduce(QUOTE, s, act(ActionType.NEXT_STEP))
    assert exc.value.step == 2
