from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from school_admin import __version__
from school_admin.config import settings
from school_admin.core.exceptions import register_error_handlers
from school_admin.db import Base, SessionLocal, engine
from school_admin.route_logging import EndpointNameRoute
from school_admin.routers import (
    analytics,
    assignments,
    attendance,
    auth,
    classes,
    fees,
    sections,
    students,
    teachers,
    timetable,
    users,
)
from school_admin.services.bootstrap_service import run_bootstrap

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s %(levelname)s %(name)s %(message)s',
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        run_bootstrap(db)
    finally:
        db.close()
    yield


app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)
app.router.route_class = EndpointNameRoute
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=['*'],
    allow_headers=['*'],
)
register_error_handlers(app)


@app.middleware('http')
async def slow_request_logger(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - started) * 1000.0
    if duration_ms >= settings.metrics_slow_ms:
        logging.getLogger('school_admin.request').info(
            'request_slow path=%s method=%s status_code=%s duration_ms=%.2f',
            request.url.path,
            request.method,
            response.status_code,
            duration_ms,
        )
    return response


app.include_router(auth.router)
app.include_router(users.router)
app.include_router(classes.router)
app.include_router(sections.router)
app.include_router(students.router)
app.include_router(attendance.router)
app.include_router(assignments.router)
app.include_router(assignments.submissions_router)
app.include_router(fees.router)
app.include_router(teachers.router)
app.include_router(timetable.router)
app.include_router(analytics.router)


@app.get('/')
def health():
    return {'app': settings.app_name, 'status': 'ok'}


@app.get('/health')
def healthcheck():
    return {'status': 'ok'}
