from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from school_admin.core.exceptions import ForbiddenError
from school_admin.core.router_guard import require_auth_user, require_roles
from school_admin.db import get_db
from school_admin.route_logging import EndpointNameRoute
from school_admin.schemas import (
    AssignmentCreate,
    AssignmentOut,
    AssignmentUpdate,
    GradeSubmissionRequest,
    SubmissionCreate,
    SubmissionOut,
)
from school_admin.services import assignment_service, student_service


router = APIRouter(
    prefix='/api/assignments',
    tags=['Assignments'],
    route_class=EndpointNameRoute,
    dependencies=[Depends(require_auth_user)],
)
submissions_router = APIRouter(
    prefix='/api/submissions',
    tags=['Assignments'],
    route_class=EndpointNameRoute,
    dependencies=[Depends(require_auth_user)],
)

staff_only = [Depends(require_roles('admin', 'teacher'))]


@router.get('', response_model=list[AssignmentOut])
def list_assignments(
    teacher_id: int | None = Query(default=None, alias='teacherId'),
    class_id: int | None = Query(default=None, alias='classId'),
    section_id: int | None = Query(default=None, alias='sectionId'),
    db: Session = Depends(get_db),
):
    return assignment_service.list_assignments(db, teacher_id=teacher_id, class_id=class_id, section_id=section_id)


@router.get('/{assignment_id}', response_model=AssignmentOut)
def get_assignment(assignment_id: int, db: Session = Depends(get_db)):
    return assignment_service.get_assignment(db, assignment_id)


@router.get('/{assignment_id}/submissions', response_model=list[SubmissionOut], dependencies=staff_only)
def list_assignment_submissions(assignment_id: int, db: Session = Depends(get_db)):
    return assignment_service.list_submissions_for_assignment(db, assignment_id)


@router.post('', response_model=AssignmentOut, status_code=status.HTTP_201_CREATED, dependencies=staff_only)
def create_assignment(payload: AssignmentCreate, db: Session = Depends(get_db)):
    return assignment_service.create_assignment(db, **payload.model_dump())


@router.patch('/{assignment_id}', response_model=AssignmentOut, dependencies=staff_only)
def update_assignment(assignment_id: int, payload: AssignmentUpdate, db: Session = Depends(get_db)):
    return assignment_service.update_assignment(db, assignment_id, payload.model_dump(exclude_unset=True))


@router.delete('/{assignment_id}', status_code=status.HTTP_204_NO_CONTENT, dependencies=staff_only)
def delete_assignment(assignment_id: int, db: Session = Depends(get_db)):
    assignment_service.delete_assignment(db, assignment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@submissions_router.post('', response_model=SubmissionOut, status_code=status.HTTP_201_CREATED)
def create_submission(
    payload: SubmissionCreate,
    user: dict = Depends(require_roles('student')),
    db: Session = Depends(get_db),
):
    student = student_service.get_student_for_user(db, user['user_id'])
    if student.id != payload.student_id:
        raise ForbiddenError('Students can only submit their own work')
    return assignment_service.create_submission(
        db,
        assignment_id=payload.assignment_id,
        student_id=payload.student_id,
        link=str(payload.link),
    )


@submissions_router.patch('/{submission_id}/grade', response_model=SubmissionOut, dependencies=staff_only)
def grade_submission(submission_id: int, payload: GradeSubmissionRequest, db: Session = Depends(get_db)):
    return assignment_service.grade_submission(db, submission_id, grade=payload.grade, feedback=payload.feedback)
