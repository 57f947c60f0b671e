from datetime import date, datetime
from typing import Literal

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from dayflow.core.pagination import Page, PageParams, page_params, paginate
from dayflow.core.permissions import ELEVATED_ROLES
from dayflow.core.security import Principal, get_principal, require_roles
from dayflow.db.session import get_session
from dayflow.domains.leaves import service
from dayflow.models.leave import Leave

router = APIRouter(prefix="/leaves", tags=["leaves"])

LeaveType = Literal["paid", "sick", "unpaid", "casual"]
LeaveStatus = Literal["pending", "approved", "rejected"]


class LeaveApply(BaseModel):
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str = Field(..., min_length=1, max_length=2000)


class LeaveReview(BaseModel):
    review_comments: str | None = None


class LeaveOut(BaseModel):
    id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: int
    reason: str
    status: LeaveStatus
    applied_on: datetime | None = None
    reviewed_by: int | None = None
    reviewed_on: datetime | None = None
    review_comments: str | None = None


def leave_out(row: Leave) -> LeaveOut:
    return LeaveOut(
        id=row.id,
        employee_id=row.employee_id,
        leave_type=row.leave_type,
        start_date=row.start_date,
        end_date=row.end_date,
        total_days=row.total_days,
        reason=row.reason,
        status=row.status,
        applied_on=row.applied_on,
        reviewed_by=row.reviewed_by,
        reviewed_on=row.reviewed_on,
        review_comments=row.review_comments,
    )


@router.post("", response_model=LeaveOut, status_code=status.HTTP_201_CREATED)
def apply_leave(
    payload: LeaveApply,
    db: Session = Depends(get_session),
    principal: Principal = Depends(get_principal),
) -> LeaveOut:
    leave = service.apply_leave(
        db,
        principal.require_employee(),
        payload.leave_type,
        payload.start_date,
        payload.end_date,
        payload.reason,
    )
    return leave_out(leave)


@router.get("/me", response_model=Page[LeaveOut])
def my_leaves(
    status: LeaveStatus | None = None,
    params: PageParams = Depends(page_params),
    db: Session = Depends(get_session),
    principal: Principal = Depends(get_principal),
):
    query = service.list_leaves(db, employee_id=principal.require_employee(), status=status)
    return paginate(query, params, leave_out)


@router.get("", response_model=Page[LeaveOut])
def all_leaves(
    status: LeaveStatus | None = None,
    leave_type: LeaveType | None = None,
    params: PageParams = Depends(page_params),
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ELEVATED_ROLES)),
):
    return paginate(service.list_leaves(db, status=status, leave_type=leave_type), params, leave_out)


@router.patch("/{leave_id}/approve", response_model=LeaveOut)
def approve_leave(
    leave_id: int,
    payload: LeaveReview | None = None,
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ELEVATED_ROLES)),
) -> LeaveOut:
    comments = payload.review_comments if payload else None
    return leave_out(service.review_leave(db, leave_id, "approve", principal.user_id, comments))


@router.patch("/{leave_id}/reject", response_model=LeaveOut)
def reject_leave(
    leave_id: int,
    payload: LeaveReview | None = None,
    db: Session = Depends(get_session),
    principal: Principal = Depends(require_roles(*ELEVATED_ROLES)),
) -> LeaveOut:
    comments = payload.review_comments if payload else None
    return leave_out(service.review_leave(db, leave_id, "reject", principal.user_id, comments))


@router.delete("/{leave_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_leave(
    leave_id: int,
    db: Session = Depends(get_session),
    principal: Principal = Depends(get_principal),
):
    service.cancel_leave(db, leave_id, principal.require_employee())
    return None
