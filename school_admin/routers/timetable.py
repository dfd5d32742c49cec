from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from school_admin.core.router_guard import require_auth_user, require_roles
from school_admin.db import get_db
from school_admin.route_logging import EndpointNameRoute
from school_admin.schemas import TimetableCreate, TimetableOut, UserOut
from school_admin.services import timetable_service


router = APIRouter(
    prefix='/api/timetable',
    tags=['Timetable'],
    route_class=EndpointNameRoute,
    dependencies=[Depends(require_auth_user)],
)

admin_only = [Depends(require_roles('admin'))]


@router.post('', response_model=TimetableOut, status_code=status.HTTP_201_CREATED, dependencies=admin_only)
def create_entry(payload: TimetableCreate, db: Session = Depends(get_db)):
    return timetable_service.create_timetable_entry(db, payload.model_dump())


@router.get('/substitutes', response_model=list[UserOut], dependencies=[Depends(require_roles('admin', 'teacher'))])
def find_substitutes(
    day_of_week: int = Query(alias='dayOfWeek', ge=1, le=6),
    period_number: int = Query(alias='periodNumber', ge=1, le=8),
    exclude_teacher_id: int = Query(alias='excludeTeacherId'),
    subject: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    return timetable_service.find_substitutes(
        db,
        day_of_week=day_of_week,
        period_number=period_number,
        excluded_teacher_id=exclude_teacher_id,
        subject=subject,
    )


@router.get('/class/{class_id}', response_model=list[TimetableOut])
def class_timetable(class_id: int, db: Session = Depends(get_db)):
    return timetable_service.list_for_class(db, class_id)


@router.get('/class/{class_id}/section/{section_id}', response_model=list[TimetableOut])
def section_timetable(class_id: int, section_id: int, db: Session = Depends(get_db)):
    return timetable_service.list_for_class(db, class_id, section_id)


@router.get('/teacher/{teacher_id}', response_model=list[TimetableOut])
def teacher_timetable(teacher_id: int, db: Session = Depends(get_db)):
    return timetable_service.list_for_teacher(db, teacher_id)


@router.delete('/{entry_id}', status_code=status.HTTP_204_NO_CONTENT, dependencies=admin_only)
def delete_entry(entry_id: int, db: Session = Depends(get_db)):
    timetable_service.delete_timetable_entry(db, entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
