from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from dayflow.core.errors import ConflictError, NotFoundError
from dayflow.core.logging import get_logger
from dayflow.db.session import commit_or_conflict
from dayflow.models import Attendance, Employee

logger = get_logger(__name__)


def compute_work_hours(check_in: datetime | None, check_out: datetime | None) -> float:
    if check_in is None or check_out is None:
        return 0.0
    return round(max((check_out - check_in).total_seconds(), 0) / 3600, 2)


def _for_day(db: Session, employee_id: int, day: date) -> Attendance | None:
    return (
        db.query(Attendance)
        .filter(Attendance.employee_id == employee_id, Attendance.work_date == day)
        .one_or_none()
    )


def check_in(db: Session, employee_id: int, now: datetime | None = None) -> Attendance:
    now = now or datetime.utcnow()
    record = _for_day(db, employee_id, now.date())
    if record is not None and record.check_in is not None:
        raise ConflictError("Already checked in today")

    if record is None:
        record = Attendance(employee_id=employee_id, work_date=now.date(), status="present")
        db.add(record)
    record.check_in = now
    record.status = "present"
    record.work_hours = compute_work_hours(record.check_in, record.check_out)
    commit_or_conflict(db, "Already checked in today")
    db.refresh(record)
    logger.info("checked_in", employee_id=employee_id, attendance_id=record.id)
    return record


def check_out(db: Session, employee_id: int, now: datetime | None = None) -> Attendance:
    now = now or datetime.utcnow()
    record = _for_day(db, employee_id, now.date())
    if record is None or record.check_in is None:
        raise NotFoundError("No check-in record found for today")
    if record.check_out is not None:
        raise ConflictError("Already checked out today")

    record.check_out = now
    record.work_hours = compute_work_hours(record.check_in, record.check_out)
    db.commit()
    db.refresh(record)
    logger.info("checked_out", employee_id=employee_id, attendance_id=record.id, work_hours=record.work_hours)
    return record


def today(db: Session, employee_id: int, now: datetime | None = None) -> Attendance | None:
    return _for_day(db, employee_id, (now or datetime.utcnow()).date())


def list_attendance(
    db: Session,
    employee_id: int | None = None,
    on: date | None = None,
    start: date | None = None,
    end: date | None = None,
) -> Query:
    query = db.query(Attendance)
    if employee_id is not None:
        query = query.filter(Attendance.employee_id == employee_id)
    if on is not None:
        query = query.filter(Attendance.work_date == on)
    else:
        if start is not None:
            query = query.filter(Attendance.work_date >= start)
        if end is not None:
            query = query.filter(Attendance.work_date <= end)
    return query.order_by(Attendance.work_date.desc(), Attendance.id.desc())


def summary(db: Session, start: date | None = None, end: date | None = None) -> list[tuple[str, int]]:
    query = db.query(Attendance.status, func.count(Attendance.id))
    if start is not None:
        query = query.filter(Attendance.work_date >= start)
    if end is not None:
        query = query.filter(Attendance.work_date <= end)
    return [(status, count) for status, count in query.group_by(Attendance.status).order_by(Attendance.status)]


def mark_attendance(
    db: Session,
    employee_id: int,
    work_date: date,
    status: str,
    remarks: str | None = None,
) -> tuple[Attendance, bool]:
    if db.get(Employee, employee_id) is None:
        raise NotFoundError("Employee not found")

    record = _for_day(db, employee_id, work_date)
    created = record is None
    if created:
        record = Attendance(employee_id=employee_id, work_date=work_date)
        db.add(record)
    record.status = status
    record.remarks = remarks
    record.work_hours = compute_work_hours(record.check_in, record.check_out)
    commit_or_conflict(db, "Attendance for this day was recorded concurrently")
    db.refresh(record)
    logger.info("attendance_marked", employee_id=employee_id, work_date=str(work_date), status=status)
    return record, created
