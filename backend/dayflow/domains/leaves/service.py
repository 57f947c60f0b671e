from __future__ import annotations

from datetime import date, datetime

from sqlalchemy.orm import Query, Session

from dayflow.core.errors import ConflictError, NotFoundError, ValidationError
from dayflow.core.logging import get_logger
from dayflow.models import Leave

logger = get_logger(__name__)

ACTIVE_STATUSES = ("pending", "approved")
DECISIONS = {"approve": "approved", "reject": "rejected"}


def count_leave_days(start: date, end: date) -> int:
    """Calendar days covered by the leave, both ends included."""
    return abs((end - start).days) + 1


def apply_leave(
    db: Session,
    employee_id: int,
    leave_type: str,
    start: date,
    end: date,
    reason: str,
    today: date | None = None,
) -> Leave:
    today = today or datetime.utcnow().date()
    if start > end:
        raise ValidationError("Start date must be before or equal to end date")
    if start < today:
        raise ValidationError("Start date cannot be in the past")

    overlapping = (
        db.query(Leave)
        .filter(
            Leave.employee_id == employee_id,
            Leave.status.in_(ACTIVE_STATUSES),
            Leave.start_date <= end,
            Leave.end_date >= start,
        )
        .first()
    )
    if overlapping is not None:
        raise ConflictError("You already have a leave request for this period")

    leave = Leave(
        employee_id=employee_id,
        leave_type=leave_type,
        start_date=start,
        end_date=end,
        total_days=count_leave_days(start, end),
        reason=reason.strip(),
        status="pending",
    )
    db.add(leave)
    db.commit()
    db.refresh(leave)
    logger.info("leave_applied", employee_id=employee_id, leave_id=leave.id, total_days=leave.total_days)
    return leave


def list_leaves(
    db: Session,
    employee_id: int | None = None,
    status: str | None = None,
    leave_type: str | None = None,
) -> Query:
    query = db.query(Leave)
    if employee_id is not None:
        query = query.filter(Leave.employee_id == employee_id)
    if status:
        query = query.filter(Leave.status == status)
    if leave_type:
        query = query.filter(Leave.leave_type == leave_type)
    return query.order_by(Leave.applied_on.desc(), Leave.id.desc())


def review_leave(
    db: Session,
    leave_id: int,
    decision: str,
    reviewer_id: int,
    comments: str | None = None,
    now: datetime | None = None,
) -> Leave:
    leave = db.get(Leave, leave_id)
    if leave is None:
        raise NotFoundError("Leave request not found")
    if leave.status != "pending":
        raise ConflictError("Leave request has already been reviewed")

    leave.status = DECISIONS[decision]
    leave.reviewed_by = reviewer_id
    leave.reviewed_on = now or datetime.utcnow()
    leave.review_comments = comments
    db.commit()
    db.refresh(leave)
    logger.info("leave_reviewed", leave_id=leave.id, status=leave.status, reviewer_id=reviewer_id)
    return leave


def cancel_leave(db: Session, leave_id: int, employee_id: int) -> None:
    leave = (
        db.query(Leave)
        .filter(Leave.id == leave_id, Leave.employee_id == employee_id)
        .one_or_none()
    )
    if leave is None:
        raise NotFoundError("Leave request not found")
    if leave.status != "pending":
        raise ConflictError("Cannot cancel a leave that has been reviewed")
    db.delete(leave)
    db.commit()
    logger.info("leave_cancelled", leave_id=leave_id, employee_id=employee_id)
