"""
Shift submissions.

Employees file shifts for their own record; HR confirms or rejects them.
Confirming materialises a manual daily record.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from shiftledger.api.v1.deps import (get_current_active_user, get_db,
                                     require_hr)
from shiftledger.core.security import HR_ROLES
from shiftledger.models.submission import ShiftSubmission
from shiftledger.models.user import User
from shiftledger.schemas.records import (ConfirmResponse, DailyRecordRead,
                                         RejectRequest, ShiftSubmissionCreate,
                                         ShiftSubmissionRead)
from shiftledger.services.submissions import (confirm_submission,
                                              list_submissions,
                                              reject_submission, submit_shift)

router = APIRouter(prefix="/shift-submissions", tags=["submissions"])


def _target_employee(user: User, requested: int | None) -> int:
    """HR may file for anyone; everybody else only for their own employee."""
    if user.role in HR_ROLES:
        if requested is None:
            raise HTTPException(status_code=400, detail="employee_id is required")
        return requested
    if user.employee_id is None or (requested is not None and requested != user.employee_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only submit shifts for yourself",
        )
    return user.employee_id


@router.post("", response_model=ShiftSubmissionRead, status_code=201)
async def create_submission(
    body: ShiftSubmissionCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_active_user),
) -> ShiftSubmission:
    employee_id = _target_employee(user, body.employee_id)
    submission = await submit_shift(
        db,
        employee_id,
        body.working_day,
        body.shift_type,
        custom_start=body.custom_start,
        custom_end=body.custom_end,
        notes=body.notes,
        submitted_by=user.id,
    )
    await db.commit()
    return submission


@router.get("", response_model=list[ShiftSubmissionRead])
async def get_submissions(
    status_filter: str | None = None,
    employee_id: int | None = None,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_active_user),
) -> list[ShiftSubmission]:
    if user.role not in HR_ROLES:
        employee_id = _target_employee(user, employee_id)
    return await list_submissions(db, status=status_filter, employee_id=employee_id)


@router.post("/{submission_id}/confirm", response_model=ConfirmResponse)
async def confirm(
    submission_id: int,
    db: AsyncSession = Depends(get_db),
    hr: User = Depends(require_hr),
) -> ConfirmResponse:
    submission, record = await confirm_submission(db, submission_id, decided_by=hr.id)
    await db.commit()
    return ConfirmResponse(
        success=True,
        submission=ShiftSubmissionRead.model_validate(submission),
        record=DailyRecordRead.model_validate(record),
    )


@router.post("/{submission_id}/reject", response_model=ShiftSubmissionRead)
async def reject(
    submission_id: int,
    body: RejectRequest | None = None,
    db: AsyncSession = Depends(get_db),
    hr: User = Depends(require_hr),
) -> ShiftSubmission:
    submission = await reject_submission(
        db, submission_id, reason=body.reason if body else None, decided_by=hr.id
    )
    await db.commit()
    return submission
