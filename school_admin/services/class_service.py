from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from school_admin.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from school_admin.models import Assignment, AttendanceRecord, Role, SchoolClass, Section, Student, TimetableEntry
from school_admin.services.user_service import require_user_with_role


logger = logging.getLogger(__name__)


def clean_subjects(subjects: list[str], *, field: str = 'subjects') -> list[str]:
    """Trim and de-duplicate subject names; an empty result is rejected against `field`."""
    cleaned = []
    for subject in subjects:
        value = (subject or '').strip()
        if value and value not in cleaned:
            cleaned.append(value)
    if not cleaned:
        raise InvalidInputError('At least one subject is required', field=field)
    return cleaned


# --- Classes ---

def list_classes(db: Session) -> list[SchoolClass]:
    return db.query(SchoolClass).order_by(SchoolClass.id.asc()).all()


def get_class(db: Session, class_id: int) -> SchoolClass:
    row = db.query(SchoolClass).filter(SchoolClass.id == class_id).first()
    if not row:
        raise NotFoundError('Class not found')
    return row


def require_class(db: Session, class_id: int, *, field: str = 'classId') -> SchoolClass:
    row = db.query(SchoolClass).filter(SchoolClass.id == class_id).first()
    if not row:
        raise InvalidInputError(f'Class {class_id} does not exist', field=field)
    return row


def create_class(db: Session, *, name: str, subjects: list[str]) -> SchoolClass:
    row = SchoolClass(name=name.strip(), subjects=clean_subjects(subjects))
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info('class_created class_id=%s name=%s', row.id, row.name)
    return row


def update_class(db: Session, class_id: int, changes: dict) -> SchoolClass:
    row = get_class(db, class_id)
    if changes.get('name') is not None:
        row.name = changes['name'].strip()
    if changes.get('subjects') is not None:
        row.subjects = clean_subjects(changes['subjects'])
    db.commit()
    db.refresh(row)
    return row


def delete_class(db: Session, class_id: int) -> None:
    row = get_class(db, class_id)
    dependents = (
        ('sections', db.query(Section.id).filter(Section.class_id == class_id)),
        ('students', db.query(Student.id).filter(Student.class_id == class_id)),
        ('timetable entries', db.query(TimetableEntry.id).filter(TimetableEntry.class_id == class_id)),
        ('assignments', db.query(Assignment.id).filter(Assignment.class_id == class_id)),
        ('attendance records', db.query(AttendanceRecord.id).filter(AttendanceRecord.class_id == class_id)),
    )
    blocking = [label for label, query in dependents if query.first() is not None]
    if blocking:
        raise ConflictError(f'Class still has {", ".join(blocking)}')
    db.delete(row)
    db.commit()
    logger.info('class_deleted class_id=%s', class_id)


# --- Sections ---

def list_sections(db: Session, class_id: int | None = None) -> list[Section]:
    query = db.query(Section)
    if class_id is not None:
        query = query.filter(Section.class_id == class_id)
    return query.order_by(Section.class_id.asc(), Section.name.asc()).all()


def get_section(db: Session, section_id: int) -> Section:
    row = db.query(Section).filter(Section.id == section_id).first()
    if not row:
        raise NotFoundError('Section not found')
    return row


def require_section(db: Session, class_id: int, section_id: int, *, field: str = 'sectionId') -> Section:
    """Resolve a section and check it belongs to the given class."""
    row = db.query(Section).filter(Section.id == section_id).first()
    if not row:
        raise InvalidInputError(f'Section {section_id} does not exist', field=field)
    if row.class_id != class_id:
        raise InvalidInputError(f'Section {section_id} does not belong to class {class_id}', field=field)
    return row


def create_section(
    db: Session,
    *,
    name: str,
    class_id: int,
    room_number: str | None = None,
    class_teacher_id: int | None = None,
) -> Section:
    require_class(db, class_id)
    if class_teacher_id is not None:
        require_user_with_role(db, class_teacher_id, Role.TEACHER, field='classTeacherId')
    row = Section(name=name.strip(), class_id=class_id, room_number=room_number, class_teacher_id=class_teacher_id)
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info('section_created section_id=%s class_id=%s', row.id, row.class_id)
    return row


def _section_dependents(db: Session, section_id: int) -> list[str]:
    dependents = (
        ('students', db.query(Student.id).filter(Student.section_id == section_id)),
        ('timetable entries', db.query(TimetableEntry.id).filter(TimetableEntry.section_id == section_id)),
        ('assignments', db.query(Assignment.id).filter(Assignment.section_id == section_id)),
        ('attendance records', db.query(AttendanceRecord.id).filter(AttendanceRecord.section_id == section_id)),
    )
    return [label for label, query in dependents if query.first() is not None]


def update_section(db: Session, section_id: int, changes: dict) -> Section:
    row = get_section(db, section_id)
    new_class_id = changes.get('class_id')
    if new_class_id is not None and new_class_id != row.class_id:
        require_class(db, new_class_id)
        # Dependent rows carry class_id too; moving would split them from their section.
        blocking = _section_dependents(db, section_id)
        if blocking:
            raise ConflictError(f'Cannot move a section that still has {", ".join(blocking)}')
        row.class_id = new_class_id
    if 'class_teacher_id' in changes:
        if changes['class_teacher_id'] is not None:
            require_user_with_role(db, changes['class_teacher_id'], Role.TEACHER, field='classTeacherId')
        row.class_teacher_id = changes['class_teacher_id']
    if changes.get('name') is not None:
        row.name = changes['name'].strip()
    if 'room_number' in changes:
        row.room_number = changes['room_number']
    db.commit()
    db.refresh(row)
    return row


def delete_section(db: Session, section_id: int) -> None:
    row = get_section(db, section_id)
    blocking = _section_dependents(db, section_id)
    if blocking:
        raise ConflictError(f'Section still has {", ".join(blocking)}')
    db.delete(row)
    db.commit()
    logger.info('section_deleted section_id=%s', section_id)
