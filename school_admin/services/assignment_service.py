from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import or_
from sqlalchemy.orm import Session

from school_admin.core.exceptions import InvalidInputError, NotFoundError
from school_admin.core.time_provider import TimeProvider, default_time_provider
from school_admin.models import Assignment, Role, Student, Submission
from school_admin.services.class_service import require_class, require_section
from school_admin.services.user_service import require_user_with_role


logger = logging.getLogger(__name__)


# --- Assignments ---

def get_assignment(db: Session, assignment_id: int) -> Assignment:
    row = db.query(Assignment).filter(Assignment.id == assignment_id).first()
    if not row:
        raise NotFoundError('Assignment not found')
    return row


def create_assignment(
    db: Session,
    *,
    title: str,
    description: str,
    class_id: int,
    section_id: int | None,
    subject: str,
    deadline: date,
    teacher_id: int,
) -> Assignment:
    require_class(db, class_id)
    if section_id is not None:
        require_section(db, class_id, section_id)
    require_user_with_role(db, teacher_id, Role.TEACHER, field='teacherId')

    row = Assignment(
        title=title.strip(),
        description=description,
        class_id=class_id,
        section_id=section_id,
        subject=subject.strip(),
        deadline=deadline,
        teacher_id=teacher_id,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info('assignment_created assignment_id=%s class_id=%s teacher_id=%s', row.id, class_id, teacher_id)
    return row


def list_assignments(
    db: Session,
    *,
    teacher_id: int | None = None,
    class_id: int | None = None,
    section_id: int | None = None,
) -> list[Assignment]:
    """Assignments for a teacher, or for a class.

    With a section, class-wide assignments (no section) are included since they
    apply to every section of the class.
    """
    if teacher_id is None and class_id is None:
        raise InvalidInputError('Either teacherId or classId is required', field='classId')

    query = db.query(Assignment)
    if teacher_id is not None:
        query = query.filter(Assignment.teacher_id == teacher_id)
    if class_id is not None:
        query = query.filter(Assignment.class_id == class_id)
        if section_id is not None:
            query = query.filter(or_(Assignment.section_id == section_id, Assignment.section_id.is_(None)))
    return query.order_by(Assignment.deadline.asc(), Assignment.id.asc()).all()


def update_assignment(db: Session, assignment_id: int, changes: dict) -> Assignment:
    row = get_assignment(db, assignment_id)
    if changes.get('section_id') is not None:
        require_section(db, row.class_id, changes['section_id'])
        row.section_id = changes['section_id']
    if changes.get('title') is not None:
        row.title = changes['title'].strip()
    if changes.get('description') is not None:
        row.description = changes['description']
    if changes.get('subject') is not None:
        row.subject = changes['subject'].strip()
    if changes.get('deadline') is not None:
        row.deadline = changes['deadline']
    db.commit()
    db.refresh(row)
    return row


def delete_assignment(db: Session, assignment_id: int) -> None:
    row = get_assignment(db, assignment_id)
    db.delete(row)
    db.commit()
    logger.info('assignment_deleted assignment_id=%s', assignment_id)


# --- Submissions ---

def create_submission(
    db: Session,
    *,
    assignment_id: int,
    student_id: int,
    link: str,
    time_provider: TimeProvider = default_time_provider,
) -> Submission:
    assignment = db.query(Assignment).filter(Assignment.id == assignment_id).first()
    if not assignment:
        raise InvalidInputError(f'Assignment {assignment_id} does not exist', field='assignmentId')
    student = db.query(Student).filter(Student.id == student_id).first()
    if not student:
        raise InvalidInputError(f'Student {student_id} does not exist', field='studentId')
    if student.class_id != assignment.class_id:
        raise InvalidInputError('Assignment is not set for this student\'s class', field='assignmentId')

    row = Submission(
        assignment_id=assignment_id,
        student_id=student_id,
        link=str(link),
        submitted_at=time_provider.naive_now(),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info('submission_created submission_id=%s assignment_id=%s student_id=%s', row.id, assignment_id, student_id)
    return row


def list_submissions_for_assignment(db: Session, assignment_id: int) -> list[Submission]:
    get_assignment(db, assignment_id)
    return (
        db.query(Submission)
        .filter(Submission.assignment_id == assignment_id)
        .order_by(Submission.submitted_at.asc(), Submission.id.asc())
        .all()
    )


def list_submissions_for_student(db: Session, student_id: int) -> list[Submission]:
    return (
        db.query(Submission)
        .filter(Submission.student_id == student_id)
        .order_by(Submission.submitted_at.desc(), Submission.id.desc())
        .all()
    )


def grade_submission(
    db: Session,
    submission_id: int,
    *,
    grade: str,
    feedback: str | None = None,
    time_provider: TimeProvider = default_time_provider,
) -> Submission:
    row = db.query(Submission).filter(Submission.id == submission_id).first()
    if not row:
        raise NotFoundError('Submission not found')
    row.grade = grade.strip()
    row.feedback = feedback
    row.graded_at = time_provider.naive_now()
    db.commit()
    db.refresh(row)
    logger.info('submission_graded submission_id=%s grade=%s', row.id, row.grade)
    return row
