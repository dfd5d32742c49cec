from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from school_admin.core.router_guard import require_roles
from school_admin.db import get_db
from school_admin.route_logging import EndpointNameRoute
from school_admin.schemas import (
    SalaryPaymentOut,
    SalaryPaymentRequest,
    TeacherCreate,
    TeacherOut,
    TeacherProfileOut,
    TeacherProfileUpdate,
)
from school_admin.services import teacher_service


router = APIRouter(
    prefix='/api/teachers',
    tags=['Teachers'],
    route_class=EndpointNameRoute,
    dependencies=[Depends(require_roles('admin'))],
)


@router.get('', response_model=list[TeacherOut])
def list_teachers(db: Session = Depends(get_db)):
    return teacher_service.list_teachers(db)


@router.post('', response_model=TeacherOut, status_code=status.HTTP_201_CREATED)
def create_teacher(payload: TeacherCreate, db: Session = Depends(get_db)):
    return teacher_service.create_teacher(db, payload.model_dump())


@router.patch('/{user_id}', response_model=TeacherProfileOut)
def update_teacher(user_id: int, payload: TeacherProfileUpdate, db: Session = Depends(get_db)):
    return teacher_service.update_teacher_profile(db, user_id, payload.model_dump(exclude_unset=True))


@router.post('/{user_id}/pay-salary', response_model=TeacherProfileOut)
def pay_salary(user_id: int, payload: SalaryPaymentRequest, db: Session = Depends(get_db)):
    return teacher_service.pay_salary(db, user_id, month=payload.month, amount=payload.amount)


@router.get('/{user_id}/salary-history', response_model=list[SalaryPaymentOut])
def salary_history(user_id: int, db: Session = Depends(get_db)):
    return teacher_service.salary_history(db, user_id)
