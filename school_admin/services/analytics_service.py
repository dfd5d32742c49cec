from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from school_admin.core.time_provider import TimeProvider, default_time_provider, month_start, shift_month
from school_admin.models import AttendanceRecord, AttendanceStatus, Fee, FeeStatus, Role, Student, User


logger = logging.getLogger(__name__)

REVENUE_TREND_MONTHS = 6
ATTENDANCE_TREND_DAYS = 7


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return int(round(100 * part / whole))


def _cleared_revenue_between(db: Session, start: date, end: date) -> float:
    total = (
        db.query(func.coalesce(func.sum(Fee.amount), 0.0))
        .filter(
            Fee.status == FeeStatus.CLEARED.value,
            Fee.paid_date >= datetime.combine(start, time.min),
            Fee.paid_date < datetime.combine(end, time.min),
        )
        .scalar()
    )
    return float(total or 0.0)


def _present_counts(db: Session, start: date, end: date) -> dict[date, int]:
    rows = (
        db.query(AttendanceRecord.date, func.count(AttendanceRecord.id))
        .filter(
            AttendanceRecord.status == AttendanceStatus.PRESENT.value,
            AttendanceRecord.date >= start,
            AttendanceRecord.date <= end,
        )
        .group_by(AttendanceRecord.date)
        .all()
    )
    return {row_date: int(count) for row_date, count in rows}


def compute_dashboard(db: Session, *, time_provider: TimeProvider = default_time_provider) -> dict:
    """Headline numbers for the admin dashboard, recomputed on every call."""
    today = time_provider.today()
    total_students = int(db.query(func.count(Student.id)).scalar() or 0)
    total_teachers = int(db.query(func.count(User.id)).filter(User.role == Role.TEACHER.value).scalar() or 0)

    this_month = month_start(today)
    monthly_revenue = _cleared_revenue_between(db, this_month, shift_month(today, 1))

    revenue_trend = []
    for offset in range(REVENUE_TREND_MONTHS - 1, -1, -1):
        start = shift_month(today, -offset)
        revenue_trend.append(
            {
                'month': start.strftime('%Y-%m'),
                'amount': _cleared_revenue_between(db, start, shift_month(start, 1)),
            }
        )

    first_day = today - timedelta(days=ATTENDANCE_TREND_DAYS - 1)
    present = _present_counts(db, first_day, today)
    attendance_trend = []
    for offset in range(ATTENDANCE_TREND_DAYS):
        day = first_day + timedelta(days=offset)
        attendance_trend.append({'date': day, 'percent': _percent(present.get(day, 0), total_students)})

    logger.debug('dashboard_computed students=%s teachers=%s revenue=%.2f', total_students, total_teachers, monthly_revenue)
    return {
        'total_students': total_students,
        'total_teachers': total_teachers,
        'monthly_revenue': monthly_revenue,
        'today_attendance_percent': _percent(present.get(today, 0), total_students),
        'trends': {'revenue': revenue_trend, 'attendance': attendance_trend},
    }
