from datetime import date

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from school_admin.core.router_guard import require_auth_user, require_roles
from school_admin.db import get_db
from school_admin.route_logging import EndpointNameRoute
from school_admin.schemas import AttendanceOut, FeeOut, StudentCreate, StudentOut, StudentUpdate, SubmissionOut
from school_admin.services import assignment_service, attendance_service, fee_service, student_service


router = APIRouter(
    prefix='/api/students',
    tags=['Students'],
    route_class=EndpointNameRoute,
    dependencies=[Depends(require_auth_user)],
)

admin_only = [Depends(require_roles('admin'))]


@router.get('', response_model=list[StudentOut])
def list_students(db: Session = Depends(get_db)):
    return student_service.list_students(db)


# Declared ahead of '/{student_id}' so 'me' is not parsed as an id.
@router.get('/me', response_model=StudentOut)
def my_student_record(user: dict = Depends(require_roles('student')), db: Session = Depends(get_db)):
    return student_service.get_student_for_user(db, user['user_id'])


@router.get('/{student_id}', response_model=StudentOut)
def get_student(student_id: int, db: Session = Depends(get_db)):
    return student_service.get_student(db, student_id)


@router.get('/{student_id}/attendance', response_model=list[AttendanceOut])
def student_attendance(
    student_id: int,
    start_date: date | None = Query(default=None, alias='startDate'),
    end_date: date | None = Query(default=None, alias='endDate'),
    db: Session = Depends(get_db),
):
    student_service.get_student(db, student_id)
    return attendance_service.list_student_attendance(db, student_id, start_date=start_date, end_date=end_date)


@router.get('/{student_id}/fees', response_model=list[FeeOut])
def student_fees(student_id: int, db: Session = Depends(get_db)):
    student_service.get_student(db, student_id)
    return fee_service.list_student_fees(db, student_id)


@router.get('/{student_id}/submissions', response_model=list[SubmissionOut])
def student_submissions(student_id: int, db: Session = Depends(get_db)):
    student_service.get_student(db, student_id)
    return assignment_service.list_submissions_for_student(db, student_id)


@router.post('', response_model=StudentOut, status_code=status.HTTP_201_CREATED, dependencies=admin_only)
def create_student(payload: StudentCreate, db: Session = Depends(get_db)):
    return student_service.create_student(db, payload.model_dump())


@router.patch('/{student_id}', response_model=StudentOut, dependencies=admin_only)
def update_student(student_id: int, payload: StudentUpdate, db: Session = Depends(get_db)):
    return student_service.update_student(db, student_id, payload.model_dump(exclude_unset=True))


@router.delete('/{student_id}', status_code=status.HTTP_204_NO_CONTENT, dependencies=admin_only)
def delete_student(student_id: int, db: Session = Depends(get_db)):
    student_service.delete_student(db, student_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
