# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Multi-step intake engine.

A wizard is a fixed list of steps followed by a terminal confirmation
step.  The in-progress form is an :class:`IntakeSession`, a plain
serializable record that the client holds and posts back with every
action; :func:`reduce` computes the next session from the current one and
an :class:`Action` without touching the database.

Rules
-----
* ``next_step`` only leaves a step when it and every step before it have
  their required fields filled; otherwise :class:`StepValidationError` is
  raised for the first incomplete step and nothing changes.
* A session whose step lies outside ``1..final_step`` is rejected.
* ``prev_step`` never validates and stops at step 1.
* ``toggle_selection`` removes an option that is present, else appends it,
  so a selection list never holds duplicates.
* Attachments accumulate across uploads and are removed only by index.
* ``submit`` re-validates every step, then lands on the confirmation step
  with ``submitted = True`` and every field cleared.  A submitted session
  only accepts ``reset``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from pydantic import Field

from core.schemas import ApiModel

STEP_ERROR = "Please fill in all required fields"


class IntakeError(ValueError):
    """An action that does not apply to the session as it stands."""


class StepValidationError(IntakeError):
    def __init__(self, step: int, missing: list[str]):
        super().__init__(STEP_ERROR)
        self.step = step
        self.missing = missing


class ActionType(str, Enum):
    SET_FIELD = "set_field"
    TOGGLE_SELECTION = "toggle_selection"
    ADD_ATTACHMENTS = "add_attachments"
    REMOVE_ATTACHMENT = "remove_attachment"
    NEXT_STEP = "next_step"
    PREV_STEP = "prev_step"
    SUBMIT = "submit"
    RESET = "reset"


class Attachment(ApiModel):
    # Metadata only; the wizard never carries file contents
    name: str
    size: int = 0
    content_type: Optional[str] = None


class IntakeSession(ApiModel):
    kind: str
    step: int = Field(1, ge=1)
    fields: dict[str, Any] = {}
    selections: list[str] = []
    attachments: list[Attachment] = []
    submitted: bool = False


class Action(ApiModel):
    type: ActionType
    field: Optional[str] = None
    value: Any = None
    option: Optional[str] = None
    attachments: list[Attachment] = []
    index: Optional[int] = None


@dataclass(frozen=True)
class Step:
    name: str
    required: tuple[str, ...] = ()
    min_selections: int = 0


@dataclass(frozen=True)
class WizardDefinition:
    kind: str
    steps: tuple[Step, ...]
    # Every field the form carries, with its initial value
    defaults: dict = field(default_factory=dict)
    # Allowed values for toggle_selection; None accepts any option
    options: Optional[tuple[str, ...]] = None

    @property
    def final_step(self) -> int:
        """The confirmation step, one past the last input step."""
        return len(self.steps) + 1

    def new_session(self) -> IntakeSession:
        return IntakeSession(kind=self.kind, fields=dict(self.defaults))

    def missing(self, session: IntakeSession, step_no: int) -> list[str]:
        """Required fields of *step_no* that are still empty."""
        if step_no > len(self.steps):
            return []
        step = self.steps[step_no - 1]
        out = [name for name in step.required if _is_blank(session.fields.get(name))]
        if len(session.selections) < step.min_selections:
            out.append("selections")
        return out


def _is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _validate_all(defn: WizardDefinition, session: IntakeSession) -> None:
    for step_no in range(1, len(defn.steps) + 1):
        missing = defn.missing(session, step_no)
        if missing:
            raise StepValidationError(step_no, missing)


def finalize(defn: WizardDefinition, session: IntakeSession) -> dict:
    """
    Validate every step and return the consolidated record: all fields plus
    the selection list and attachment metadata.
    """
    _validate_all(defn, session)
    record = dict(session.fields)
    record["selections"] = list(session.selections)
    record["attachments"] = [a.model_dump(by_alias=True) for a in session.attachments]
    return record


def check_session(defn: WizardDefinition, session: IntakeSession) -> None:
    if session.kind != defn.kind:
        raise IntakeError(f"Session belongs to the {session.kind!r} form")
    if not 1 <= session.step <= defn.final_step:
        raise IntakeError(f"Step {session.step} is out of range")


def submit(defn: WizardDefinition, session: IntakeSession) -> tuple[IntakeSession, dict]:
    """Return the cleared terminal session and the record it submitted."""
    check_session(defn, session)
    if session.submitted:
        raise IntakeError("Form already submitted")
    record = finalize(defn, session)
    done = defn.new_session()
    done.step = defn.final_step
    done.submitted = True
    return done, record


def reduce(defn: WizardDefinition, session: IntakeSession, action: Action) -> IntakeSession:
    """Apply *action* to *session* and return the new session."""
    check_session(defn, session)

    if action.type is ActionType.RESET:
        return defn.new_session()
    if session.submitted:
        raise IntakeError("Form already submitted; reset to start again")

    nxt = session.model_copy(deep=True)

    if action.type is ActionType.SET_FIELD:
        if action.field not in defn.defaults:
            raise IntakeError(f"Unknown field: {action.field}")
        nxt.fields[action.field] = action.value

    elif action.type is ActionType.TOGGLE_SELECTION:
        if not action.option:
            raise IntakeError("An option is required")
        if defn.options is not None and action.option not in defn.options:
            raise IntakeError(f"Unknown option: {action.option}")
        if action.option in nxt.selections:
            nxt.selections.remove(action.option)
        else:
            nxt.selections.append(action.option)

    elif action.type is ActionType.ADD_ATTACHMENTS:
        nxt.attachments.extend(action.attachments)

    elif action.type is ActionType.REMOVE_ATTACHMENT:
        if action.index is None or not 0 <= action.index < len(nxt.attachments):
            raise IntakeError("Attachment index out of range")
        del nxt.attachments[action.index]

    elif action.type is ActionType.NEXT_STEP:
        for step_no in range(1, session.step + 1):
            missing = defn.missing(session, step_no)
            if missing:
                raise StepValidationError(step_no, missing)
        nxt.step = min(session.step + 1, defn.final_step)

    elif action.type is ActionType.PREV_STEP:
        nxt.step = max(session.step - 1, 1)

    elif action.type is ActionType.SUBMIT:
        nxt, _ = submit(defn, session)

    return nxt
