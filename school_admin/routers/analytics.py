from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from school_admin.core.router_guard import require_roles
from school_admin.db import get_db
from school_admin.route_logging import EndpointNameRoute
from school_admin.schemas import DashboardOut
from school_admin.services.analytics_service import compute_dashboard


router = APIRouter(
    prefix='/api/analytics',
    tags=['Analytics'],
    route_class=EndpointNameRoute,
    dependencies=[Depends(require_roles('admin'))],
)


@router.get('/dashboard', response_model=DashboardOut)
def dashboard(db: Session = Depends(get_db)):
    return compute_dashboard(db)
