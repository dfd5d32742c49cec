from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from school_admin.core.router_guard import require_auth_user, require_roles
from school_admin.db import get_db
from school_admin.route_logging import EndpointNameRoute
from school_admin.schemas import (
    AttendanceCreate,
    AttendanceOut,
    AttendanceStatusUpdate,
    BulkAttendanceRequest,
    BulkAttendanceResponse,
)
from school_admin.services import attendance_service


router = APIRouter(
    prefix='/api/attendance',
    tags=['Attendance'],
    route_class=EndpointNameRoute,
    dependencies=[Depends(require_auth_user)],
)

staff_only = [Depends(require_roles('admin', 'teacher'))]


@router.get('', response_model=list[AttendanceOut])
def list_attendance(
    attendance_date: date = Query(alias='date'),
    class_id: int = Query(alias='classId'),
    section_id: int = Query(alias='sectionId'),
    db: Session = Depends(get_db),
):
    return attendance_service.list_attendance(
        db,
        attendance_date=attendance_date,
        class_id=class_id,
        section_id=section_id,
    )


@router.post('', response_model=AttendanceOut, status_code=status.HTTP_201_CREATED, dependencies=staff_only)
def create_attendance(payload: AttendanceCreate, db: Session = Depends(get_db)):
    return attendance_service.create_attendance(
        db,
        attendance_date=payload.date,
        student_id=payload.student_id,
        class_id=payload.class_id,
        section_id=payload.section_id,
        status=payload.status,
    )


@router.post('/bulk', response_model=BulkAttendanceResponse, status_code=status.HTTP_201_CREATED, dependencies=staff_only)
def bulk_mark_attendance(payload: BulkAttendanceRequest, db: Session = Depends(get_db)):
    rows = attendance_service.bulk_mark(
        db,
        attendance_date=payload.date,
        class_id=payload.class_id,
        section_id=payload.section_id,
        records=[item.model_dump() for item in payload.records],
    )
    return {'count': len(rows), 'records': rows}


@router.patch('/{attendance_id}', response_model=AttendanceOut, dependencies=staff_only)
def update_attendance(attendance_id: int, payload: AttendanceStatusUpdate, db: Session = Depends(get_db)):
    return attendance_service.update_attendance_status(db, attendance_id, payload.status)
