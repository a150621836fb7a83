# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Intake endpoints – the quote / application wizards, the contact form and
the admin view of what prospects submitted.

The wizard endpoints keep no server-side state: the client posts the
session it holds together with the next action and gets the new session
back.  Only ``submit`` writes, producing one contact_submissions row.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from core.audit import audit
from core.errors import ApiError
from core.logger import logger
from core.schemas import ok
from core.security import get_client_ip, require_admin
from database import get_db
from intake import engine
from intake.schemas import (
    ContactRequest,
    IntakeActionRequest,
    IntakeSubmitData,
    SubmissionListData,
    SubmissionRow,
    SubmissionStatusRequest,
)
from intake.wizards import WIZARDS
from models.site import SUBMISSION_STATUSES, SUBMISSION_TYPES, ContactSubmission
from models.user import User

router = APIRouter(tags=["intake"])

SUBMIT_FAILED = "Submission failed. Please try again."

# "contacted" and "responded" share a stage; a status may only move forward
_STATUS_RANK = {"new": 0, "contacted": 1, "responded": 1, "closed": 2}


def _wizard(kind: str) -> engine.WizardDefinition:
    defn = WIZARDS.get(kind)
    if not defn:
        raise ApiError(status.HTTP_404_NOT_FOUND, f"Unknown intake form: {kind}")
    return defn


def _submission_from_record(kind: str, record: dict, ip: Optional[str]) -> ContactSubmission:
    """Map a consolidated wizard record onto a contact_submissions row."""
    if kind == "quote":
        name = f"{record['firstName']} {record['lastName']}".strip()
        subject = f"Quote request: {record['projectType']}"
        message = record["description"]
        service_type = record["projectType"]
    else:
        name = record["fullName"]
        subject = f"Job application: {record['position']}"
        message = record.get("coverLetter") or f"Application for {record['position']}"
        service_type = None
    return ContactSubmission(
        submission_type=kind,
        name=name,
        email=record["email"],
        phone=str(record.get("phone") or "")[:20] or None,
        company=record.get("company") or None,
        subject=subject[:200],
        message=message,
        service_type=service_type,
        project_budget=record.get("budget") or None,
        timeline=record.get("timeline") or None,
        payload=record,
        status="new",
        source="website",
        ip_address=ip,
    )


# ---------------------------------------------------------------------------
# Wizard
# ---------------------------------------------------------------------------


@router.post("/intake/{kind}/sessions", status_code=status.HTTP_201_CREATED)
def start_session(kind: str):
    """A fresh session at step 1 with the form's default values."""
    return ok("Session started", _wizard(kind).new_session())


@router.post("/intake/{kind}/actions")
def apply_action(
    kind: str,
    body: IntakeActionRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    defn = _wizard(kind)
    try:
        if body.action.type is not engine.ActionType.SUBMIT:
            return ok("Session updated", engine.reduce(defn, body.session, body.action))
        done, record = engine.submit(defn, body.session)
    except engine.StepValidationError as exc:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            engine.STEP_ERROR,
            errors=[{"field": name, "message": "This field is required"} for name in exc.missing],
            step=exc.step,
        )
    except engine.IntakeError as exc:
        raise ApiError(status.HTTP_400_BAD_REQUEST, str(exc))

    try:
        row = _submission_from_record(kind, record, get_client_ip(request))
        db.add(row)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("intake: %s submission could not be stored", kind)
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, SUBMIT_FAILED)

    logger.info("intake: %s submission id=%s", kind, row.id)
    return ok(
        "Thank you! We will contact you within 24 hours.",
        IntakeSubmitData(session=done, submission_id=row.id),
    )


# ---------------------------------------------------------------------------
# POST /contact
# ---------------------------------------------------------------------------


@router.post("/contact", status_code=status.HTTP_201_CREATED)
def submit_contact(body: ContactRequest, request: Request, db: Session = Depends(get_db)):
    row = ContactSubmission(
        submission_type="contact",
        name=body.name,
        email=body.email,
        phone=body.phone,
        company=body.company,
        subject=body.subject or f"New contact from {body.name}",
        message=body.message,
        status="new",
        source="website",
        ip_address=get_client_ip(request),
    )
    try:
        db.add(row)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("contact: submission could not be stored")
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, SUBMIT_FAILED)
    return ok("Thank you for your message! We will get back to you soon.", {"id": row.id})


# ---------------------------------------------------------------------------
# Admin: /admin/submissions
# ---------------------------------------------------------------------------


@router.get("/admin/submissions")
def list_submissions(
    submission_type: Optional[str] = Query(None, alias="type"),
    status_filter: Optional[str] = Query(None, alias="status"),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    q = db.query(ContactSubmission)
    if submission_type:
        if submission_type not in SUBMISSION_TYPES:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Invalid submission type")
        q = q.filter(ContactSubmission.submission_type == submission_type)
    if status_filter:
        if status_filter not in SUBMISSION_STATUSES:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Invalid status filter")
        q = q.filter(ContactSubmission.status == status_filter)
    rows = q.order_by(ContactSubmission.created_at.desc(), ContactSubmission.id.desc()).all()
    return ok(
        "Submissions retrieved",
        SubmissionListData(submissions=[SubmissionRow.model_validate(r) for r in rows], total=len(rows)),
    )


@router.get("/admin/submissions/{submission_id}")
def get_submission(
    submission_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    row = db.query(ContactSubmission).filter(ContactSubmission.id == submission_id).first()
    if not row:
        raise ApiError(status.HTTP_404_NOT_FOUND, "Submission not found")
    return ok("Submission retrieved", SubmissionRow.model_validate(row))


@router.put("/admin/submissions/{submission_id}/status")
def update_submission_status(
    submission_id: int,
    body: SubmissionStatusRequest,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    row = db.query(ContactSubmission).filter(ContactSubmission.id == submission_id).first()
    if not row:
        raise ApiError(status.HTTP_404_NOT_FOUND, "Submission not found")
    if _STATUS_RANK[body.status] <= _STATUS_RANK[row.status]:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            f"Cannot move a submission from {row.status} to {body.status}",
        )

    previous = row.status
    row.status = body.status
    if body.notes:
        row.notes = body.notes
    audit(db, request, admin.id, "update_submission_status", "contact_submissions", row.id,
          {"previousStatus": previous, "newStatus": body.status})
    db.commit()
    return ok("Submission updated", SubmissionRow.model_validate(row))
