import re
from datetime import date, datetime
from typing import Literal

from pydantic import AliasChoices, AnyHttpUrl, BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


RoleName = Literal['admin', 'teacher', 'student', 'parent']
AttendanceStatusName = Literal['Present', 'Absent', 'Late']
FeeStatusName = Literal['Pending', 'Cleared']

_TIME_PATTERN = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# --- Users / auth ---

class UserCreate(ApiModel):
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)
    role: RoleName
    name: str = Field(min_length=2)
    email: EmailStr
    contact: str | None = None
    profile_picture: str | None = None


class LoginRequest(ApiModel):
    username: str
    password: str


class UserOut(ApiModel):
    id: int
    username: str
    role: str
    name: str
    email: str
    contact: str | None = None
    profile_picture: str | None = None
    created_at: datetime | None = None


class AuthResponse(ApiModel):
    token: str
    user: UserOut


# --- Classes / sections ---

class ClassCreate(ApiModel):
    name: str = Field(min_length=1)
    subjects: list[str] = Field(min_length=1)


class ClassUpdate(ApiModel):
    name: str | None = Field(default=None, min_length=1)
    subjects: list[str] | None = Field(default=None, min_length=1)


class ClassOut(ApiModel):
    id: int
    name: str
    subjects: list[str]


class SectionCreate(ApiModel):
    name: str = Field(min_length=1)
    class_id: int
    room_number: str | None = None
    class_teacher_id: int | None = None


class SectionUpdate(ApiModel):
    name: str | None = Field(default=None, min_length=1)
    class_id: int | None = None
    room_number: str | None = None
    class_teacher_id: int | None = None


class SectionOut(ApiModel):
    id: int
    name: str
    class_id: int
    room_number: str | None = None
    class_teacher_id: int | None = None


# --- Students ---

class StudentCreate(ApiModel):
    user_id: int
    admission_number: str = Field(min_length=1)
    roll_number: str = Field(min_length=1)
    class_id: int
    section_id: int
    guardian_name: str = Field(min_length=1)
    guardian_contact: str = Field(min_length=1)
    guardian_email: EmailStr | None = None


class StudentUpdate(ApiModel):
    admission_number: str | None = Field(default=None, min_length=1)
    roll_number: str | None = Field(default=None, min_length=1)
    class_id: int | None = None
    section_id: int | None = None
    guardian_name: str | None = Field(default=None, min_length=1)
    guardian_contact: str | None = Field(default=None, min_length=1)
    guardian_email: EmailStr | None = None


class StudentOut(ApiModel):
    id: int
    user_id: int
    admission_number: str
    roll_number: str
    class_id: int
    section_id: int
    guardian_name: str
    guardian_contact: str
    guardian_email: str | None = None


# --- Attendance ---

class AttendanceCreate(ApiModel):
    date: date
    student_id: int
    class_id: int
    section_id: int
    status: AttendanceStatusName


class BulkAttendanceItem(ApiModel):
    student_id: int
    status: AttendanceStatusName


class BulkAttendanceRequest(ApiModel):
    date: date
    class_id: int
    section_id: int
    records: list[BulkAttendanceItem]


class AttendanceStatusUpdate(ApiModel):
    status: AttendanceStatusName


class AttendanceOut(ApiModel):
    id: int
    date: date
    student_id: int
    class_id: int
    section_id: int
    status: str


class BulkAttendanceResponse(ApiModel):
    count: int
    records: list[AttendanceOut]


# --- Assignments / submissions ---

class AssignmentCreate(ApiModel):
    title: str = Field(min_length=3)
    description: str
    class_id: int
    section_id: int | None = None
    subject: str = Field(min_length=1)
    deadline: date
    teacher_id: int


class AssignmentUpdate(ApiModel):
    title: str | None = Field(default=None, min_length=3)
    description: str | None = None
    section_id: int | None = None
    subject: str | None = Field(default=None, min_length=1)
    deadline: date | None = None


class AssignmentOut(ApiModel):
    id: int
    title: str
    description: str
    class_id: int
    section_id: int | None = None
    subject: str
    deadline: date
    teacher_id: int


class SubmissionCreate(ApiModel):
    assignment_id: int
    student_id: int
    link: AnyHttpUrl


class GradeSubmissionRequest(ApiModel):
    grade: str = Field(min_length=1)
    feedback: str | None = None


class SubmissionOut(ApiModel):
    id: int
    assignment_id: int
    student_id: int
    link: str
    submitted_at: datetime
    grade: str | None = None
    feedback: str | None = None
    graded_at: datetime | None = None


# --- Fees ---

class FeeCreate(ApiModel):
    student_id: int
    amount: float = Field(gt=0)
    period: str = Field(min_length=1)
    due_date: date
    status: FeeStatusName = 'Pending'


class FeeOut(ApiModel):
    id: int
    student_id: int
    amount: float
    period: str
    due_date: date
    status: str
    paid_date: datetime | None = None


# --- Teachers ---

class TeacherCreate(ApiModel):
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)
    name: str = Field(min_length=2)
    email: EmailStr
    contact: str | None = None
    salary: float = Field(ge=0)
    pan_number: str = Field(min_length=1)
    aadhaar_number: str = Field(min_length=1)
    qualification: str = Field(min_length=1)
    subject_specialization: list[str] = Field(min_length=1)
    join_date: date
    designation: str = Field(min_length=1)
    employee_id: str = Field(min_length=1)


class TeacherProfileUpdate(ApiModel):
    salary: float | None = Field(default=None, ge=0)
    subject_specialization: list[str] | None = Field(default=None, min_length=1)
    qualification: str | None = Field(default=None, min_length=1)
    designation: str | None = Field(default=None, min_length=1)


class SalaryPaymentRequest(ApiModel):
    month: str = Field(min_length=1)
    amount: float = Field(gt=0)


class SalaryPaymentOut(ApiModel):
    month: str
    amount: float
    paid_at: datetime


class TeacherProfileOut(ApiModel):
    id: int
    user_id: int
    employee_id: str
    salary: float
    pan_number: str
    aadhaar_number: str
    qualification: str
    subject_specialization: list[str]
    join_date: date
    designation: str
    salary_history: list[SalaryPaymentOut] = Field(default_factory=list)


class TeacherOut(UserOut):
    profile: TeacherProfileOut | None = Field(default=None, validation_alias=AliasChoices('profile', 'teacher_profile'))


# --- Timetable ---

class TimetableCreate(ApiModel):
    class_id: int
    section_id: int
    teacher_id: int
    subject: str = Field(min_length=1)
    day_of_week: int = Field(ge=1, le=6)
    period_number: int = Field(ge=1, le=8)
    start_time: str
    end_time: str

    @field_validator('start_time', 'end_time')
    @classmethod
    def _check_time(cls, value: str) -> str:
        if not _TIME_PATTERN.match(value):
            raise ValueError('Time must be HH:MM')
        return value

    @model_validator(mode='after')
    def _check_range(self):
        if self.end_time <= self.start_time:
            raise ValueError('endTime must be after startTime')
        return self


class TimetableOut(ApiModel):
    id: int
    class_id: int
    section_id: int
    teacher_id: int
    subject: str
    day_of_week: int
    period_number: int
    start_time: str
    end_time: str


# --- Analytics ---

class RevenuePoint(ApiModel):
    month: str
    amount: float


class AttendancePoint(ApiModel):
    date: date
    percent: int


class DashboardTrends(ApiModel):
    revenue: list[RevenuePoint]
    attendance: list[AttendancePoint]


class DashboardOut(ApiModel):
    total_students: int
    total_teachers: int
    monthly_revenue: float
    today_attendance_percent: int
    trends: DashboardTrends
