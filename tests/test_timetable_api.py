import unittest
from datetime import date

from api_case import ApiTestCase
from school_admin.models import TeacherProfile, TimetableEntry


class TimetableApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        _, self.admin = self.make_user('admin')
        self.teacher_a, self.teacher_a_headers = self.make_user('teacher', name='Anita')
        self.teacher_b, _ = self.make_user('teacher', name='Bharat')
        self.teacher_c, _ = self.make_user('teacher', name='Chitra')
        self.class_id = self.client.post(
            '/api/classes', headers=self.admin, json={'name': 'Grade 7', 'subjects': ['Maths', 'Science']}
        ).json()['id']
        self.section_a = self.client.post('/api/sections', headers=self.admin, json={'name': 'A', 'classId': self.class_id}).json()['id']
        self.section_b = self.client.post('/api/sections', headers=self.admin, json={'name': 'B', 'classId': self.class_id}).json()['id']

    def _schedule(self, teacher_id: int, section_id: int, day: int = 1, period: int = 1, subject: str = 'Maths'):
        return self.client.post(
            '/api/timetable',
            headers=self.admin,
            json={
                'classId': self.class_id,
                'sectionId': section_id,
                'teacherId': teacher_id,
                'subject': subject,
                'dayOfWeek': day,
                'periodNumber': period,
                'startTime': '09:00',
                'endTime': '09:45',
            },
        )

    def _entry_count(self) -> int:
        db = self._session_factory()
        try:
            return db.query(TimetableEntry).count()
        finally:
            db.close()

    def _set_specialization(self, user_id: int, subjects: list[str], employee_id: str):
        db = self._session_factory()
        try:
            db.add(
                TeacherProfile(
                    user_id=user_id,
                    employee_id=employee_id,
                    salary=30000,
                    pan_number='PAN',
                    aadhaar_number='AADHAAR',
                    qualification='B.Ed',
                    subject_specialization=subjects,
                    join_date=date(2024, 6, 1),
                    designation='Teacher',
                )
            )
            db.commit()
        finally:
            db.close()

    def test_teacher_double_booking_is_rejected(self):
        self.assertEqual(self._schedule(self.teacher_a, self.section_a).status_code, 201)
        clash = self._schedule(self.teacher_a, self.section_b)
        self.assertEqual(clash.status_code, 409)
        self.assertEqual(clash.json()['detail'], 'Teacher is already scheduled for this period')
        self.assertEqual(self._entry_count(), 1)

    def test_section_slot_taken_by_another_teacher_is_rejected(self):
        self.assertEqual(self._schedule(self.teacher_a, self.section_a).status_code, 201)
        clash = self._schedule(self.teacher_b, self.section_a)
        self.assertEqual(clash.status_code, 409)
        self.assertEqual(clash.json()['detail'], 'This class section already has a period scheduled in this slot')

    def test_non_conflicting_periods_are_accepted_and_listed_in_order(self):
        self.assertEqual(self._schedule(self.teacher_a, self.section_a, day=2, period=3).status_code, 201)
        self.assertEqual(self._schedule(self.teacher_a, self.section_a, day=1, period=4).status_code, 201)
        self.assertEqual(self._schedule(self.teacher_b, self.section_b, day=1, period=4).status_code, 201)

        mine = self.client.get(f'/api/timetable/teacher/{self.teacher_a}', headers=self.teacher_a_headers).json()
        self.assertEqual([(row['dayOfWeek'], row['periodNumber']) for row in mine], [(1, 4), (2, 3)])

        whole_class = self.client.get(f'/api/timetable/class/{self.class_id}', headers=self.admin).json()
        self.assertEqual(len(whole_class), 3)
        section_only = self.client.get(
            f'/api/timetable/class/{self.class_id}/section/{self.section_b}', headers=self.admin
        ).json()
        self.assertEqual([row['teacherId'] for row in section_only], [self.teacher_b])

    def test_invalid_slot_values_are_rejected(self):
        res = self.client.post(
            '/api/timetable',
            headers=self.admin,
            json={
                'classId': self.class_id,
                'sectionId': self.section_a,
                'teacherId': self.teacher_a,
                'subject': 'Maths',
                'dayOfWeek': 7,
                'periodNumber': 9,
                'startTime': '9am',
                'endTime': '09:45',
            },
        )
        self.assertEqual(res.status_code, 400)
        fields = {err['field'] for err in res.json()['errors']}
        self.assertTrue({'dayOfWeek', 'periodNumber', 'startTime'} <= fields)

        student_id, _ = self.make_user('student')
        res = self._schedule(student_id, self.section_a)
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()['field'], 'teacherId')

    def test_delete_frees_the_slot(self):
        entry = self._schedule(self.teacher_a, self.section_a).json()
        self.assertEqual(self.client.delete(f"/api/timetable/{entry['id']}", headers=self.admin).status_code, 204)
        self.assertEqual(self._schedule(self.teacher_a, self.section_b).status_code, 201)
        self.assertEqual(self.client.delete('/api/timetable/999', headers=self.admin).status_code, 404)

    def test_substitutes_exclude_absent_and_busy_teachers(self):
        self._schedule(self.teacher_a, self.section_a, day=3, period=2)
        self._schedule(self.teacher_b, self.section_b, day=3, period=2)
        res = self.client.get(
            '/api/timetable/substitutes',
            headers=self.teacher_a_headers,
            params={'dayOfWeek': 3, 'periodNumber': 2, 'excludeTeacherId': self.teacher_a},
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual([row['id'] for row in res.json()], [self.teacher_c])

        free_period = self.client.get(
            '/api/timetable/substitutes',
            headers=self.admin,
            params={'dayOfWeek': 3, 'periodNumber': 5, 'excludeTeacherId': self.teacher_a},
        ).json()
        self.assertEqual({row['id'] for row in free_period}, {self.teacher_b, self.teacher_c})

    def test_substitute_subject_filter_uses_specialization(self):
        self._set_specialization(self.teacher_b, ['Science'], 'EMP-B')
        self._set_specialization(self.teacher_c, ['maths', 'Physics'], 'EMP-C')
        res = self.client.get(
            '/api/timetable/substitutes',
            headers=self.admin,
            params={'dayOfWeek': 1, 'periodNumber': 1, 'excludeTeacherId': self.teacher_a, 'subject': 'Maths'},
        )
        self.assertEqual([row['id'] for row in res.json()], [self.teacher_c])

    def test_students_cannot_look_up_substitutes(self):
        _, student = self.make_user('student')
        res = self.client.get(
            '/api/timetable/substitutes',
            headers=student,
            params={'dayOfWeek': 1, 'periodNumber': 1, 'excludeTeacherId': self.teacher_a},
        )
        self.assertEqual(res.status_code, 403)


if __name__ == '__main__':
    unittest.main()
