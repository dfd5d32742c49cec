from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from school_admin.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from school_admin.models import AttendanceRecord, Student
from school_admin.services.class_service import require_class, require_section


logger = logging.getLogger(__name__)


def _require_student_in_section(db: Session, student_id: int, class_id: int, section_id: int) -> Student:
    student = db.query(Student).filter(Student.id == student_id).first()
    if not student:
        raise InvalidInputError(f'Student {student_id} does not exist', field='studentId')
    if student.class_id != class_id or student.section_id != section_id:
        raise InvalidInputError(f'Student {student_id} is not enrolled in this class section', field='studentId')
    return student


def create_attendance(
    db: Session,
    *,
    attendance_date: date,
    student_id: int,
    class_id: int,
    section_id: int,
    status: str,
) -> AttendanceRecord:
    require_class(db, class_id)
    require_section(db, class_id, section_id)
    _require_student_in_section(db, student_id, class_id, section_id)
    row = AttendanceRecord(
        date=attendance_date,
        student_id=student_id,
        class_id=class_id,
        section_id=section_id,
        status=status,
    )
    db.add(row)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(f'Attendance for student {student_id} on {attendance_date.isoformat()} already exists') from exc
    db.refresh(row)
    return row


def bulk_mark(
    db: Session,
    *,
    attendance_date: date,
    class_id: int,
    section_id: int,
    records: list[dict],
) -> list[AttendanceRecord]:
    """Record one status per student for a day; re-marking a day overwrites it.

    The whole batch is one transaction: either every row is written or none.
    """
    require_class(db, class_id)
    require_section(db, class_id, section_id)

    statuses: dict[int, str] = {}
    for record in records:
        statuses[int(record['student_id'])] = record['status']
    if not statuses:
        return []

    students = (
        db.query(Student)
        .filter(Student.id.in_(list(statuses)), Student.class_id == class_id, Student.section_id == section_id)
        .all()
    )
    unknown = sorted(set(statuses) - {student.id for student in students})
    if unknown:
        raise InvalidInputError(
            f'Students not enrolled in this class section: {", ".join(str(sid) for sid in unknown)}',
            field='records',
        )

    existing = {
        row.student_id: row
        for row in db.query(AttendanceRecord)
        .filter(AttendanceRecord.date == attendance_date, AttendanceRecord.student_id.in_(list(statuses)))
        .all()
    }
    written: list[AttendanceRecord] = []
    inserted = 0
    for student_id, status in statuses.items():
        row = existing.get(student_id)
        if row is None:
            row = AttendanceRecord(date=attendance_date, student_id=student_id)
            db.add(row)
            inserted += 1
        row.class_id = class_id
        row.section_id = section_id
        row.status = status
        written.append(row)

    try:
        db.commit()
    except IntegrityError as exc:
        # Another request marked the same day concurrently.
        db.rollback()
        raise ConflictError('Attendance for this day was changed concurrently, please resubmit') from exc
    for row in written:
        db.refresh(row)
    logger.info(
        'attendance_bulk_marked date=%s class_id=%s section_id=%s inserted=%s updated=%s',
        attendance_date.isoformat(),
        class_id,
        section_id,
        inserted,
        len(written) - inserted,
    )
    return written


def list_attendance(db: Session, *, attendance_date: date, class_id: int, section_id: int) -> list[AttendanceRecord]:
    return (
        db.query(AttendanceRecord)
        .filter(
            AttendanceRecord.date == attendance_date,
            AttendanceRecord.class_id == class_id,
            AttendanceRecord.section_id == section_id,
        )
        .order_by(AttendanceRecord.student_id.asc())
        .all()
    )


def list_student_attendance(
    db: Session,
    student_id: int,
    *,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[AttendanceRecord]:
    query = db.query(AttendanceRecord).filter(AttendanceRecord.student_id == student_id)
    if start_date is not None:
        query = query.filter(AttendanceRecord.date >= start_date)
    if end_date is not None:
        query = query.filter(AttendanceRecord.date <= end_date)
    return query.order_by(AttendanceRecord.date.asc()).all()


def update_attendance_status(db: Session, attendance_id: int, status: str) -> AttendanceRecord:
    row = db.query(AttendanceRecord).filter(AttendanceRecord.id == attendance_id).first()
    if not row:
        raise NotFoundError('Attendance record not found')
    row.status = status
    db.commit()
    db.refresh(row)
    return row
