from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from school_admin.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from school_admin.models import Assignment, Role, Section, Student, TeacherProfile, TimetableEntry, User


logger = logging.getLogger(__name__)

_VALID_ROLES = {role.value for role in Role}


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.id.asc()).all()


def list_users_by_role(db: Session, role: str) -> list[User]:
    role_value = (role or '').strip().lower()
    if role_value not in _VALID_ROLES:
        raise InvalidInputError(f'Role must be one of: {", ".join(sorted(_VALID_ROLES))}', field='role')
    return db.query(User).filter(User.role == role_value).order_by(User.id.asc()).all()


def require_user_with_role(db: Session, user_id: int, role: Role, *, field: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise InvalidInputError(f'User {user_id} does not exist', field=field)
    if user.role != role.value:
        raise InvalidInputError(f'User {user_id} is not a {role.value}', field=field)
    return user


def _references(db: Session, user_id: int) -> list[str]:
    checks = (
        ('student record', db.query(Student.id).filter(Student.user_id == user_id)),
        ('teacher profile', db.query(TeacherProfile.id).filter(TeacherProfile.user_id == user_id)),
        ('section', db.query(Section.id).filter(Section.class_teacher_id == user_id)),
        ('assignment', db.query(Assignment.id).filter(Assignment.teacher_id == user_id)),
        ('timetable entry', db.query(TimetableEntry.id).filter(TimetableEntry.teacher_id == user_id)),
    )
    return [label for label, query in checks if query.first() is not None]


def delete_user(db: Session, user_id: int) -> None:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError('User not found')
    references = _references(db, user_id)
    if references:
        raise ConflictError(f'User is still referenced by: {", ".join(references)}')
    db.delete(user)
    db.commit()
    logger.info('user_deleted user_id=%s role=%s', user_id, user.role)
