from datetime import timedelta
from pathlib import Path
import sys


# Ensure imports work when running this file directly: `python scripts/init_db.py`.
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from school_admin.core.time_provider import default_time_provider
from school_admin.db import Base, SessionLocal, engine
from school_admin.models import Role, SchoolClass
from school_admin.services.auth_service import register
from school_admin.services.class_service import create_class, create_section
from school_admin.services.fee_service import create_fee
from school_admin.services.student_service import create_student
from school_admin.services.teacher_service import create_teacher
from school_admin.services.timetable_service import create_timetable_entry


Base.metadata.create_all(bind=engine)

today = default_time_provider.today()
db = SessionLocal()
try:
    if not db.query(SchoolClass).first():
        teacher = create_teacher(
            db,
            {
                'username': 'meera',
                'password': 'teacher123',
                'name': 'Meera Iyer',
                'email': 'meera@example.com',
                'salary': 42000,
                'pan_number': 'ABCDE1234F',
                'aadhaar_number': '123412341234',
                'qualification': 'M.Sc Mathematics',
                'subject_specialization': ['Mathematics', 'Physics'],
                'join_date': today - timedelta(days=400),
                'designation': 'Senior Teacher',
                'employee_id': 'EMP-001',
            },
        )
        grade = create_class(db, name='Grade 5', subjects=['Mathematics', 'English', 'Science'])
        section = create_section(db, name='A', class_id=grade.id, room_number='101', class_teacher_id=teacher.id)

        for index, name in enumerate(['Aarav Shah', 'Diya Rao', 'Ishaan Nair'], start=1):
            login = register(
                db,
                username=f'student{index}',
                password='student123',
                role=Role.STUDENT.value,
                name=name,
                email=f'student{index}@example.com',
            )
            student = create_student(
                db,
                {
                    'user_id': login['user'].id,
                    'admission_number': f'ADM-{index:03d}',
                    'roll_number': str(index),
                    'class_id': grade.id,
                    'section_id': section.id,
                    'guardian_name': f'Guardian of {name}',
                    'guardian_contact': f'99999900{index:02d}',
                },
            )
            create_fee(
                db,
                student_id=student.id,
                amount=2500,
                period='Term 1',
                due_date=today + timedelta(days=5),
            )

        for period, subject in enumerate(['Mathematics', 'Science'], start=1):
            create_timetable_entry(
                db,
                {
                    'class_id': grade.id,
                    'section_id': section.id,
                    'teacher_id': teacher.id,
                    'subject': subject,
                    'day_of_week': 1,
                    'period_number': period,
                    'start_time': f'{8 + period:02d}:00',
                    'end_time': f'{8 + period:02d}:45',
                },
            )
finally:
    db.close()

print('DB initialized with sample data.')
