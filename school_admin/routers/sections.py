from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from school_admin.core.router_guard import require_auth_user, require_roles
from school_admin.db import get_db
from school_admin.route_logging import EndpointNameRoute
from school_admin.schemas import SectionCreate, SectionOut, SectionUpdate, StudentOut
from school_admin.services import class_service, student_service


router = APIRouter(
    prefix='/api/sections',
    tags=['Sections'],
    route_class=EndpointNameRoute,
    dependencies=[Depends(require_auth_user)],
)

admin_only = [Depends(require_roles('admin'))]


@router.get('', response_model=list[SectionOut])
def list_sections(class_id: int | None = Query(default=None, alias='classId'), db: Session = Depends(get_db)):
    return class_service.list_sections(db, class_id)


@router.get('/{section_id}', response_model=SectionOut)
def get_section(section_id: int, db: Session = Depends(get_db)):
    return class_service.get_section(db, section_id)


@router.get('/{section_id}/students', response_model=list[StudentOut])
def list_section_students(
    section_id: int,
    class_id: int | None = Query(default=None, alias='classId'),
    db: Session = Depends(get_db),
):
    section = class_service.get_section(db, section_id)
    return student_service.list_students_by_section(db, class_id or section.class_id, section_id)


@router.post('', response_model=SectionOut, status_code=status.HTTP_201_CREATED, dependencies=admin_only)
def create_section(payload: SectionCreate, db: Session = Depends(get_db)):
    return class_service.create_section(db, **payload.model_dump())


@router.patch('/{section_id}', response_model=SectionOut, dependencies=admin_only)
def update_section(section_id: int, payload: SectionUpdate, db: Session = Depends(get_db)):
    return class_service.update_section(db, section_id, payload.model_dump(exclude_unset=True))


@router.delete('/{section_id}', status_code=status.HTTP_204_NO_CONTENT, dependencies=admin_only)
def delete_section(section_id: int, db: Session = Depends(get_db)):
    class_service.delete_section(db, section_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
