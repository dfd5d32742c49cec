from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from school_admin.core.router_guard import require_auth_user, require_roles
from school_admin.db import get_db
from school_admin.route_logging import EndpointNameRoute
from school_admin.schemas import ClassCreate, ClassOut, ClassUpdate, SectionOut
from school_admin.services import class_service


router = APIRouter(
    prefix='/api/classes',
    tags=['Classes'],
    route_class=EndpointNameRoute,
    dependencies=[Depends(require_auth_user)],
)

admin_only = [Depends(require_roles('admin'))]


@router.get('', response_model=list[ClassOut])
def list_classes(db: Session = Depends(get_db)):
    return class_service.list_classes(db)


@router.get('/{class_id}', response_model=ClassOut)
def get_class(class_id: int, db: Session = Depends(get_db)):
    return class_service.get_class(db, class_id)


@router.get('/{class_id}/sections', response_model=list[SectionOut])
def list_class_sections(class_id: int, db: Session = Depends(get_db)):
    class_service.get_class(db, class_id)
    return class_service.list_sections(db, class_id)


@router.post('', response_model=ClassOut, status_code=status.HTTP_201_CREATED, dependencies=admin_only)
def create_class(payload: ClassCreate, db: Session = Depends(get_db)):
    return class_service.create_class(db, name=payload.name, subjects=payload.subjects)


@router.patch('/{class_id}', response_model=ClassOut, dependencies=admin_only)
def update_class(class_id: int, payload: ClassUpdate, db: Session = Depends(get_db)):
    return class_service.update_class(db, class_id, payload.model_dump(exclude_unset=True))


@router.delete('/{class_id}', status_code=status.HTTP_204_NO_CONTENT, dependencies=admin_only)
def delete_class(class_id: int, db: Session = Depends(get_db)):
    class_service.delete_class(db, class_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
