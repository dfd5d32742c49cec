from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from school_admin.core.exceptions import ConflictError, NotFoundError
from school_admin.models import Role, TeacherProfile, TimetableEntry, User
from school_admin.services.class_service import require_class, require_section
from school_admin.services.user_service import require_user_with_role


logger = logging.getLogger(__name__)

TEACHER_SLOT_TAKEN = 'Teacher is already scheduled for this period'
SECTION_SLOT_TAKEN = 'This class section already has a period scheduled in this slot'


def _conflict_message(db: Session, data: dict) -> str:
    teacher_busy = (
        db.query(TimetableEntry.id)
        .filter(
            TimetableEntry.teacher_id == data['teacher_id'],
            TimetableEntry.day_of_week == data['day_of_week'],
            TimetableEntry.period_number == data['period_number'],
        )
        .first()
    )
    return TEACHER_SLOT_TAKEN if teacher_busy else SECTION_SLOT_TAKEN


def create_timetable_entry(db: Session, data: dict) -> TimetableEntry:
    """Insert a period; the unique slot constraints decide whether it conflicts."""
    require_class(db, data['class_id'])
    require_section(db, data['class_id'], data['section_id'])
    require_user_with_role(db, data['teacher_id'], Role.TEACHER, field='teacherId')

    row = TimetableEntry(**data)
    db.add(row)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        message = _conflict_message(db, data)
        logger.info(
            'timetable_conflict teacher_id=%s class_id=%s section_id=%s day=%s period=%s',
            data['teacher_id'],
            data['class_id'],
            data['section_id'],
            data['day_of_week'],
            data['period_number'],
        )
        raise ConflictError(message) from exc
    db.refresh(row)
    logger.info('timetable_entry_created entry_id=%s teacher_id=%s', row.id, row.teacher_id)
    return row


def list_for_class(db: Session, class_id: int, section_id: int | None = None) -> list[TimetableEntry]:
    query = db.query(TimetableEntry).filter(TimetableEntry.class_id == class_id)
    if section_id is not None:
        query = query.filter(TimetableEntry.section_id == section_id)
    return query.order_by(TimetableEntry.day_of_week.asc(), TimetableEntry.period_number.asc()).all()


def list_for_teacher(db: Session, teacher_id: int) -> list[TimetableEntry]:
    return (
        db.query(TimetableEntry)
        .filter(TimetableEntry.teacher_id == teacher_id)
        .order_by(TimetableEntry.day_of_week.asc(), TimetableEntry.period_number.asc())
        .all()
    )


def delete_timetable_entry(db: Session, entry_id: int) -> None:
    row = db.query(TimetableEntry).filter(TimetableEntry.id == entry_id).first()
    if not row:
        raise NotFoundError('Timetable entry not found')
    db.delete(row)
    db.commit()
    logger.info('timetable_entry_deleted entry_id=%s', entry_id)


def find_substitutes(
    db: Session,
    *,
    day_of_week: int,
    period_number: int,
    excluded_teacher_id: int,
    subject: str | None = None,
) -> list[User]:
    """Teachers free at the given slot, other than the one being replaced.

    With a subject, only teachers specialised in it (case-insensitive) remain.
    """
    busy_ids = {
        teacher_id
        for (teacher_id,) in db.query(TimetableEntry.teacher_id).filter(
            TimetableEntry.day_of_week == day_of_week,
            TimetableEntry.period_number == period_number,
        )
    }
    busy_ids.add(excluded_teacher_id)

    candidates = (
        db.query(User)
        .filter(User.role == Role.TEACHER.value, User.id.notin_(list(busy_ids)))
        .order_by(User.name.asc(), User.id.asc())
        .all()
    )
    wanted = (subject or '').strip().lower()
    if not wanted:
        return candidates

    specialised = set()
    profiles = db.query(TeacherProfile).filter(TeacherProfile.user_id.in_([user.id for user in candidates])).all()
    for profile in profiles:
        if wanted in {str(item).strip().lower() for item in profile.subject_specialization or []}:
            specialised.add(profile.user_id)
    return [user for user in candidates if user.id in specialised]
