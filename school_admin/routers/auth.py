from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from school_admin.core.router_guard import require_auth_user
from school_admin.db import get_db
from school_admin.route_logging import EndpointNameRoute
from school_admin.schemas import AuthResponse, LoginRequest, UserCreate, UserOut
from school_admin.services import auth_service


router = APIRouter(prefix='/api/auth', tags=['Auth'], route_class=EndpointNameRoute)


@router.post('/register', response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    return auth_service.register(db, **payload.model_dump())


@router.post('/login', response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    return auth_service.login(db, payload.username, payload.password)


@router.get('/me', response_model=UserOut)
def me(user: dict = Depends(require_auth_user), db: Session = Depends(get_db)):
    return auth_service.get_user(db, user['user_id'])
