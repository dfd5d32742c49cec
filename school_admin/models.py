from datetime import date, datetime
from enum import Enum

from sqlalchemy import JSON, Date, DateTime, Float, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_admin.db import Base


class Role(str, Enum):
    ADMIN = 'admin'
    TEACHER = 'teacher'
    STUDENT = 'student'
    PARENT = 'parent'


class AttendanceStatus(str, Enum):
    PRESENT = 'Present'
    ABSENT = 'Absent'
    LATE = 'Late'


class FeeStatus(str, Enum):
    PENDING = 'Pending'
    CLEARED = 'Cleared'


class User(Base):
    __tablename__ = 'users'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    username: Mapped[str] = mapped_column(String(80), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    role: Mapped[str] = mapped_column(String(20), index=True)
    name: Mapped[str] = mapped_column(String(160))
    contact: Mapped[str | None] = mapped_column(String(40), nullable=True)
    profile_picture: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime)

    teacher_profile: Mapped['TeacherProfile | None'] = relationship('TeacherProfile', back_populates='user', uselist=False)


class SchoolClass(Base):
    __tablename__ = 'classes'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(120), index=True)
    subjects: Mapped[list[str]] = mapped_column(JSON, default=list)

    sections: Mapped[list['Section']] = relationship('Section', back_populates='school_class')


class Section(Base):
    __tablename__ = 'sections'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(60))
    class_id: Mapped[int] = mapped_column(ForeignKey('classes.id'), index=True)
    room_number: Mapped[str | None] = mapped_column(String(40), nullable=True)
    class_teacher_id: Mapped[int | None] = mapped_column(ForeignKey('users.id'), nullable=True, index=True)

    school_class: Mapped['SchoolClass'] = relationship('SchoolClass', back_populates='sections')


class Student(Base):
    __tablename__ = 'students'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey('users.id'), unique=True, index=True)
    admission_number: Mapped[str] = mapped_column(String(60), unique=True, index=True)
    roll_number: Mapped[str] = mapped_column(String(30))
    class_id: Mapped[int] = mapped_column(ForeignKey('classes.id'), index=True)
    section_id: Mapped[int] = mapped_column(ForeignKey('sections.id'), index=True)
    guardian_name: Mapped[str] = mapped_column(String(160))
    guardian_contact: Mapped[str] = mapped_column(String(40))
    guardian_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    attendance_records: Mapped[list['AttendanceRecord']] = relationship(
        'AttendanceRecord', back_populates='student', cascade='all, delete-orphan'
    )
    fees: Mapped[list['Fee']] = relationship('Fee', back_populates='student', cascade='all, delete-orphan')
    submissions: Mapped[list['Submission']] = relationship('Submission', back_populates='student', cascade='all, delete-orphan')


class AttendanceRecord(Base):
    __tablename__ = 'attendance_records'
    __table_args__ = (
        UniqueConstraint('student_id', 'date', name='uq_attendance_student_date'),
        Index('ix_attendance_date_class_section', 'date', 'class_id', 'section_id'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    date: Mapped[date] = mapped_column(Date, index=True)
    student_id: Mapped[int] = mapped_column(ForeignKey('students.id'), index=True)
    class_id: Mapped[int] = mapped_column(ForeignKey('classes.id'))
    section_id: Mapped[int] = mapped_column(ForeignKey('sections.id'))
    status: Mapped[str] = mapped_column(String(10), index=True)

    student: Mapped['Student'] = relationship('Student', back_populates='attendance_records')


class Assignment(Base):
    __tablename__ = 'assignments'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text, default='')
    class_id: Mapped[int] = mapped_column(ForeignKey('classes.id'), index=True)
    section_id: Mapped[int | None] = mapped_column(ForeignKey('sections.id'), nullable=True, index=True)
    subject: Mapped[str] = mapped_column(String(120))
    deadline: Mapped[date] = mapped_column(Date)
    teacher_id: Mapped[int] = mapped_column(ForeignKey('users.id'), index=True)

    submissions: Mapped[list['Submission']] = relationship('Submission', back_populates='assignment', cascade='all, delete-orphan')


class Submission(Base):
    __tablename__ = 'submissions'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    assignment_id: Mapped[int] = mapped_column(ForeignKey('assignments.id'), index=True)
    student_id: Mapped[int] = mapped_column(ForeignKey('students.id'), index=True)
    link: Mapped[str] = mapped_column(String(1000))
    submitted_at: Mapped[datetime] = mapped_column(DateTime)
    grade: Mapped[str | None] = mapped_column(String(20), nullable=True)
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    graded_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    assignment: Mapped['Assignment'] = relationship('Assignment', back_populates='submissions')
    student: Mapped['Student'] = relationship('Student', back_populates='submissions')


class Fee(Base):
    __tablename__ = 'fees'
    __table_args__ = (
        Index('ix_fees_status_paid_date', 'status', 'paid_date'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    student_id: Mapped[int] = mapped_column(ForeignKey('students.id'), index=True)
    amount: Mapped[float] = mapped_column(Float)
    period: Mapped[str] = mapped_column(String(60))
    due_date: Mapped[date] = mapped_column(Date)
    status: Mapped[str] = mapped_column(String(10), default=FeeStatus.PENDING.value, index=True)
    paid_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    student: Mapped['Student'] = relationship('Student', back_populates='fees')


class TeacherProfile(Base):
    __tablename__ = 'teacher_profiles'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey('users.id'), unique=True, index=True)
    employee_id: Mapped[str] = mapped_column(String(60), unique=True, index=True)
    salary: Mapped[float] = mapped_column(Float)
    pan_number: Mapped[str] = mapped_column(String(20))
    aadhaar_number: Mapped[str] = mapped_column(String(20))
    qualification: Mapped[str] = mapped_column(String(200))
    subject_specialization: Mapped[list[str]] = mapped_column(JSON, default=list)
    join_date: Mapped[date] = mapped_column(Date)
    designation: Mapped[str] = mapped_column(String(120))

    user: Mapped['User'] = relationship('User', back_populates='teacher_profile')
    salary_payments: Mapped[list['SalaryPayment']] = relationship(
        'SalaryPayment',
        back_populates='teacher_profile',
        order_by='SalaryPayment.id',
        cascade='all, delete-orphan',
    )

    @property
    def salary_history(self) -> list['SalaryPayment']:
        return list(self.salary_payments)


class SalaryPayment(Base):
    """One salary payout. Rows are only ever appended."""

    __tablename__ = 'salary_payments'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    teacher_profile_id: Mapped[int] = mapped_column(ForeignKey('teacher_profiles.id'), index=True)
    month: Mapped[str] = mapped_column(String(40))
    amount: Mapped[float] = mapped_column(Float)
    paid_at: Mapped[datetime] = mapped_column(DateTime)

    teacher_profile: Mapped['TeacherProfile'] = relationship('TeacherProfile', back_populates='salary_payments')


class TimetableEntry(Base):
    __tablename__ = 'timetable_entries'
    __table_args__ = (
        UniqueConstraint('teacher_id', 'day_of_week', 'period_number', name='uq_timetable_teacher_slot'),
        UniqueConstraint('class_id', 'section_id', 'day_of_week', 'period_number', name='uq_timetable_section_slot'),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    class_id: Mapped[int] = mapped_column(ForeignKey('classes.id'), index=True)
    section_id: Mapped[int] = mapped_column(ForeignKey('sections.id'), index=True)
    teacher_id: Mapped[int] = mapped_column(ForeignKey('users.id'), index=True)
    subject: Mapped[str] = mapped_column(String(120))
    day_of_week: Mapped[int] = mapped_column(Integer)
    period_number: Mapped[int] = mapped_column(Integer)
    start_time: Mapped[str] = mapped_column(String(5))
    end_time: Mapped[str] = mapped_column(String(5))
