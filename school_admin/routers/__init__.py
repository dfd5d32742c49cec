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

__all__ = [
    'analytics',
    'assignments',
    'attendance',
    'auth',
    'classes',
    'fees',
    'sections',
    'students',
    'teachers',
    'timetable',
    'users',
]
