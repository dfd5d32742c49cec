from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from school_admin.core.router_guard import require_roles
from school_admin.db import get_db
from school_admin.route_logging import EndpointNameRoute
from school_admin.schemas import FeeCreate, FeeOut
from school_admin.services import fee_service


router = APIRouter(
    prefix='/api/fees',
    tags=['Fees'],
    route_class=EndpointNameRoute,
    dependencies=[Depends(require_roles('admin'))],
)


@router.get('', response_model=list[FeeOut])
def list_fees(db: Session = Depends(get_db)):
    return fee_service.list_fees(db)


@router.post('', response_model=FeeOut, status_code=status.HTTP_201_CREATED)
def create_fee(payload: FeeCreate, db: Session = Depends(get_db)):
    return fee_service.create_fee(db, **payload.model_dump())


@router.patch('/{fee_id}/pay', response_model=FeeOut)
def mark_fee_paid(fee_id: int, db: Session = Depends(get_db)):
    return fee_service.mark_fee_paid(db, fee_id)
