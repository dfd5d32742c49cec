from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from school_admin.core.exceptions import ConflictError, NotFoundError
from school_admin.core.time_provider import TimeProvider, default_time_provider
from school_admin.models import Role, SalaryPayment, TeacherProfile, User
from school_admin.services.auth_service import build_user, ensure_identity_available
from school_admin.services.class_service import clean_subjects


logger = logging.getLogger(__name__)

_PROFILE_FIELDS = ('salary', 'subject_specialization', 'qualification', 'designation')


def create_teacher(db: Session, data: dict, *, time_provider: TimeProvider = default_time_provider) -> User:
    """Create the teacher login and its profile as a single unit."""
    email = str(data['email'])
    ensure_identity_available(db, username=data['username'], email=email)
    if db.query(TeacherProfile.id).filter(TeacherProfile.employee_id == data['employee_id']).first():
        raise ConflictError(f'Employee ID {data["employee_id"]} is already in use')
    subjects = clean_subjects(data['subject_specialization'], field='subjectSpecialization')

    user = build_user(
        username=data['username'],
        password=data['password'],
        role=Role.TEACHER.value,
        name=data['name'],
        email=email,
        contact=data.get('contact'),
        time_provider=time_provider,
    )
    user.teacher_profile = TeacherProfile(
        employee_id=data['employee_id'],
        salary=data['salary'],
        pan_number=data['pan_number'],
        aadhaar_number=data['aadhaar_number'],
        qualification=data['qualification'],
        subject_specialization=subjects,
        join_date=data['join_date'],
        designation=data['designation'],
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError('Username, email or employee ID already in use') from exc
    db.refresh(user)
    logger.info('teacher_created user_id=%s employee_id=%s', user.id, data['employee_id'])
    return user


def list_teachers(db: Session) -> list[User]:
    return (
        db.query(User)
        .options(selectinload(User.teacher_profile).selectinload(TeacherProfile.salary_payments))
        .filter(User.role == Role.TEACHER.value)
        .order_by(User.id.asc())
        .all()
    )


def get_teacher_profile(db: Session, user_id: int) -> TeacherProfile:
    profile = db.query(TeacherProfile).filter(TeacherProfile.user_id == user_id).first()
    if not profile:
        raise NotFoundError('Teacher profile not found')
    return profile


def update_teacher_profile(db: Session, user_id: int, changes: dict) -> TeacherProfile:
    profile = get_teacher_profile(db, user_id)
    for field in _PROFILE_FIELDS:
        value = changes.get(field)
        if value is None:
            continue
        if field == 'subject_specialization':
            value = clean_subjects(value, field='subjectSpecialization')
        setattr(profile, field, value)
    db.commit()
    db.refresh(profile)
    return profile


def pay_salary(
    db: Session,
    user_id: int,
    *,
    month: str,
    amount: float,
    time_provider: TimeProvider = default_time_provider,
) -> TeacherProfile:
    profile = get_teacher_profile(db, user_id)
    # Paying a month twice records two payouts; history is never rewritten.
    profile.salary_payments.append(
        SalaryPayment(month=month.strip(), amount=amount, paid_at=time_provider.naive_now())
    )
    db.commit()
    db.refresh(profile)
    logger.info('salary_paid user_id=%s month=%s amount=%.2f', user_id, month, amount)
    return profile


def salary_history(db: Session, user_id: int) -> list[SalaryPayment]:
    profile = get_teacher_profile(db, user_id)
    return list(profile.salary_payments)
