from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.orm import Session

from school_admin.core.exceptions import InvalidInputError, NotFoundError
from school_admin.core.time_provider import TimeProvider, default_time_provider
from school_admin.models import Fee, FeeStatus, Student


logger = logging.getLogger(__name__)


def create_fee(
    db: Session,
    *,
    student_id: int,
    amount: float,
    period: str,
    due_date: date,
    status: str = FeeStatus.PENDING.value,
    time_provider: TimeProvider = default_time_provider,
) -> Fee:
    if not db.query(Student.id).filter(Student.id == student_id).first():
        raise InvalidInputError(f'Student {student_id} does not exist', field='studentId')
    fee = Fee(student_id=student_id, amount=amount, period=period, due_date=due_date, status=status)
    if status == FeeStatus.CLEARED.value:
        fee.paid_date = time_provider.naive_now()
    db.add(fee)
    db.commit()
    db.refresh(fee)
    logger.info('fee_created fee_id=%s student_id=%s amount=%.2f status=%s', fee.id, student_id, amount, status)
    return fee


def list_fees(db: Session) -> list[Fee]:
    return db.query(Fee).order_by(Fee.due_date.asc(), Fee.id.asc()).all()


def list_student_fees(db: Session, student_id: int) -> list[Fee]:
    return db.query(Fee).filter(Fee.student_id == student_id).order_by(Fee.due_date.asc(), Fee.id.asc()).all()


def mark_fee_paid(db: Session, fee_id: int, *, time_provider: TimeProvider = default_time_provider) -> Fee:
    fee = db.query(Fee).filter(Fee.id == fee_id).first()
    if not fee:
        raise NotFoundError('Fee record not found')
    if fee.status == FeeStatus.CLEARED.value and fee.paid_date is not None:
        return fee

    fee.status = FeeStatus.CLEARED.value
    fee.paid_date = time_provider.naive_now()
    db.commit()
    db.refresh(fee)
    logger.info('fee_paid fee_id=%s student_id=%s amount=%.2f', fee.id, fee.student_id, fee.amount)
    return fee
