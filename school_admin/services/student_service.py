from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from school_admin.core.exceptions import ConflictError, NotFoundError
from school_admin.models import Role, Student
from school_admin.services.class_service import require_class, require_section
from school_admin.services.user_service import require_user_with_role


logger = logging.getLogger(__name__)


def list_students(db: Session) -> list[Student]:
    return db.query(Student).order_by(Student.id.asc()).all()


def list_students_by_section(db: Session, class_id: int, section_id: int) -> list[Student]:
    return (
        db.query(Student)
        .filter(Student.class_id == class_id, Student.section_id == section_id)
        .order_by(Student.roll_number.asc(), Student.id.asc())
        .all()
    )


def get_student(db: Session, student_id: int) -> Student:
    row = db.query(Student).filter(Student.id == student_id).first()
    if not row:
        raise NotFoundError('Student not found')
    return row


def get_student_for_user(db: Session, user_id: int) -> Student:
    row = db.query(Student).filter(Student.user_id == user_id).first()
    if not row:
        raise NotFoundError('Student record not found')
    return row


def _commit_or_conflict(db: Session, admission_number: str | None) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(f'Admission number {admission_number} is already in use') from exc


def create_student(db: Session, data: dict) -> Student:
    require_user_with_role(db, data['user_id'], Role.STUDENT, field='userId')
    if db.query(Student.id).filter(Student.user_id == data['user_id']).first():
        raise ConflictError('User is already enrolled as a student')
    if db.query(Student.id).filter(Student.admission_number == data['admission_number']).first():
        raise ConflictError(f'Admission number {data["admission_number"]} is already in use')
    require_class(db, data['class_id'])
    require_section(db, data['class_id'], data['section_id'])

    row = Student(**data)
    db.add(row)
    _commit_or_conflict(db, data['admission_number'])
    db.refresh(row)
    logger.info('student_enrolled student_id=%s class_id=%s section_id=%s', row.id, row.class_id, row.section_id)
    return row


def update_student(db: Session, student_id: int, changes: dict) -> Student:
    row = get_student(db, student_id)
    class_id = changes.get('class_id') or row.class_id
    section_id = changes.get('section_id') or row.section_id
    if class_id != row.class_id or section_id != row.section_id:
        require_class(db, class_id)
        require_section(db, class_id, section_id)
    admission_number = changes.get('admission_number')
    if admission_number and admission_number != row.admission_number:
        taken = db.query(Student.id).filter(Student.admission_number == admission_number, Student.id != student_id).first()
        if taken:
            raise ConflictError(f'Admission number {admission_number} is already in use')

    for field, value in changes.items():
        if value is None and field != 'guardian_email':
            continue
        setattr(row, field, value)
    _commit_or_conflict(db, admission_number)
    db.refresh(row)
    return row


def delete_student(db: Session, student_id: int) -> None:
    row = get_student(db, student_id)
    # Attendance, fees and submissions go with the student (ORM cascade).
    db.delete(row)
    db.commit()
    logger.info('student_deleted student_id=%s', student_id)
