from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from school_admin.core.router_guard import require_roles
from school_admin.db import get_db
from school_admin.route_logging import EndpointNameRoute
from school_admin.schemas import UserOut
from school_admin.services import user_service


router = APIRouter(
    prefix='/api/users',
    tags=['Users'],
    route_class=EndpointNameRoute,
    dependencies=[Depends(require_roles('admin'))],
)


@router.get('', response_model=list[UserOut])
def list_users(db: Session = Depends(get_db)):
    return user_service.list_users(db)


@router.get('/role/{role}', response_model=list[UserOut])
def list_users_by_role(role: str, db: Session = Depends(get_db)):
    return user_service.list_users_by_role(db, role)


@router.delete('/{user_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    user_service.delete_user(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
