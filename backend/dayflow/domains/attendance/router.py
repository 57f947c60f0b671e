from datetime import date, datetime
from typing import Literal

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from dayflow.core.pagination import Page, PageParams, page_params, paginate
from dayflow.core.permissions import ELEVATED_ROLES
from dayflow.core.security import Principal, get_principal, require_roles
from dayflow.db.session import get_session
from dayflow.domains.attendance import service
from dayflow.models.attendance import Attendance

router = APIRouter(prefix="/attendance", tags=["attendance"])

AttendanceStatus = Literal["present", "absent", "half-day", "leave"]


class AttendanceOut(BaseModel):
    id: int
    employee_id: int
    work_date: date
    check_in: datetime | None = None
    check_out: datetime | None = None
    status: AttendanceStatus
    work_hours: float
    remarks: str | None = None


class AttendanceMark(BaseModel):
    employee_id: int
    work_date: date
    status: AttendanceStatus
    remarks: str | None = None


class StatusCount(BaseModel):
    status: str
    count: int


def attendance_out(row: Attendance) -> AttendanceOut:
    return AttendanceOut(
        id=row.id,
        employee_id=row.employee_id,
        work_date=row.work_date,
        check_in=row.check_in,
        check_out=row.check_out,
        status=row.status,
        work_hours=float(row.work_hours or 0),
        remarks=row.remarks,
    )


@router.post("/check-in", response_model=AttendanceOut, status_code=status.HTTP_201_CREATED)
def check_in(
    db: Session = Depends(get_session),
    principal: Principal = Depends(get_principal),
) -> AttendanceOut:
    return attendance_out(service.check_in(db, principal.require_employee()))


@router.post("/check-out", response_model=AttendanceOut)
def check_out(
    db: Session = Depends(get_session),
    principal: Principal = Depends(get_principal),
) -> AttendanceOut:
    return attendance_out(service.check_out(db, principal.require_employee()))


@router.get("/today", response_model=AttendanceOut | None)
def get_today(
    db: Session = Depends(get_session),
    principal: Principal = Depends(get_principal),
):
    record = service.today(db, principal.require_employee())
    return attendance_out(record) if record else None


@router.get("/me", response_model=Page[AttendanceOut])
def my_attendance(
    start_date: date | None = None,
    end_date: date | None = None,
    params: PageParams = Depends(page_params),
    db: Session = Depends(get_session),
    principal: Principal = Depends(get_principal),
):
    query = service.list_attendance(db, employee_id=principal.require_employee(), start=start_date, end=end_date)
    return paginate(query, params, attendance_out)


@router.get("/summary", response_model=list[StatusCount])
def attendance_summary(
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ELEVATED_ROLES)),
) -> list[StatusCount]:
    return [StatusCount(status=s, count=c) for s, c in service.summary(db, start_date, end_date)]


@router.get("/employee/{employee_id}", response_model=Page[AttendanceOut])
def employee_attendance(
    employee_id: int,
    start_date: date | None = None,
    end_date: date | None = None,
    params: PageParams = Depends(page_params),
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ELEVATED_ROLES)),
):
    query = service.list_attendance(db, employee_id=employee_id, start=start_date, end=end_date)
    return paginate(query, params, attendance_out)


@router.get("", response_model=Page[AttendanceOut])
def all_attendance(
    on: date | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    params: PageParams = Depends(page_params),
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ELEVATED_ROLES)),
):
    query = service.list_attendance(db, on=on, start=start_date, end=end_date)
    return paginate(query, params, attendance_out)


@router.post("/mark", response_model=AttendanceOut, responses={201: {"model": AttendanceOut}})
def mark_attendance(
    payload: AttendanceMark,
    response: Response,
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ELEVATED_ROLES)),
) -> AttendanceOut:
    record, created = service.mark_attendance(
        db, payload.employee_id, payload.work_date, payload.status, payload.remarks
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return attendance_out(record)
