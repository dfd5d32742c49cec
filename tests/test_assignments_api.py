import unittest

from api_case import ApiTestCase


class AssignmentsApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        _, self.admin = self.make_user('admin')
        self.teacher_id, self.teacher = self.make_user('teacher')
        self.class_id = self.client.post(
            '/api/classes', headers=self.admin, json={'name': 'Grade 8', 'subjects': ['Science']}
        ).json()['id']
        self.section_a = self.client.post('/api/sections', headers=self.admin, json={'name': 'A', 'classId': self.class_id}).json()['id']
        self.section_b = self.client.post('/api/sections', headers=self.admin, json={'name': 'B', 'classId': self.class_id}).json()['id']

        student_user_id, self.student_headers = self.make_user('student')
        self.student_id = self.client.post(
            '/api/students',
            headers=self.admin,
            json={
                'userId': student_user_id,
                'admissionNumber': 'ADM-1',
                'rollNumber': '1',
                'classId': self.class_id,
                'sectionId': self.section_a,
                'guardianName': 'Guardian',
                'guardianContact': '9000000000',
            },
        ).json()['id']

    def _assignment(self, title: str, section_id: int | None = None) -> dict:
        payload = {
            'title': title,
            'description': 'Read chapter 4',
            'classId': self.class_id,
            'subject': 'Science',
            'deadline': '2026-06-01',
            'teacherId': self.teacher_id,
        }
        if section_id is not None:
            payload['sectionId'] = section_id
        res = self.client.post('/api/assignments', headers=self.teacher, json=payload)
        self.assertEqual(res.status_code, 201, res.text)
        return res.json()

    def test_class_wide_assignments_show_up_for_every_section(self):
        whole_class = self._assignment('Plants worksheet')
        only_a = self._assignment('Lab report A', section_id=self.section_a)
        only_b = self._assignment('Lab report B', section_id=self.section_b)

        rows = self.client.get(
            '/api/assignments',
            headers=self.student_headers,
            params={'classId': self.class_id, 'sectionId': self.section_a},
        ).json()
        self.assertEqual({row['id'] for row in rows}, {whole_class['id'], only_a['id']})

        by_teacher = self.client.get('/api/assignments', headers=self.teacher, params={'teacherId': self.teacher_id}).json()
        self.assertEqual({row['id'] for row in by_teacher}, {whole_class['id'], only_a['id'], only_b['id']})

    def test_listing_without_filter_is_rejected(self):
        res = self.client.get('/api/assignments', headers=self.teacher)
        self.assertEqual(res.status_code, 400)

    def test_students_cannot_create_assignments(self):
        res = self.client.post(
            '/api/assignments',
            headers=self.student_headers,
            json={
                'title': 'Sneaky',
                'description': '',
                'classId': self.class_id,
                'subject': 'Science',
                'deadline': '2026-06-01',
                'teacherId': self.teacher_id,
            },
        )
        self.assertEqual(res.status_code, 403)

    def test_submit_then_grade(self):
        assignment = self._assignment('Essay')
        submitted = self.client.post(
            '/api/submissions',
            headers=self.student_headers,
            json={'assignmentId': assignment['id'], 'studentId': self.student_id, 'link': 'https://docs.example.com/essay'},
        )
        self.assertEqual(submitted.status_code, 201, submitted.text)
        self.assertIsNone(submitted.json()['grade'])

        graded = self.client.patch(
            f"/api/submissions/{submitted.json()['id']}/grade",
            headers=self.teacher,
            json={'grade': 'A', 'feedback': 'Well argued'},
        )
        self.assertEqual(graded.status_code, 200)
        self.assertEqual(graded.json()['grade'], 'A')
        self.assertIsNotNone(graded.json()['gradedAt'])

        listed = self.client.get(f"/api/assignments/{assignment['id']}/submissions", headers=self.teacher).json()
        self.assertEqual(len(listed), 1)
        mine = self.client.get(f'/api/students/{self.student_id}/submissions', headers=self.student_headers).json()
        self.assertEqual(mine[0]['feedback'], 'Well argued')

    def test_submission_rules(self):
        assignment = self._assignment('Essay')
        bad_link = self.client.post(
            '/api/submissions',
            headers=self.student_headers,
            json={'assignmentId': assignment['id'], 'studentId': self.student_id, 'link': 'not a url'},
        )
        self.assertEqual(bad_link.status_code, 400)

        as_teacher = self.client.post(
            '/api/submissions',
            headers=self.teacher,
            json={'assignmentId': assignment['id'], 'studentId': self.student_id, 'link': 'https://example.com/x'},
        )
        self.assertEqual(as_teacher.status_code, 403)

        missing = self.client.post(
            '/api/submissions',
            headers=self.student_headers,
            json={'assignmentId': 999, 'studentId': self.student_id, 'link': 'https://example.com/x'},
        )
        self.assertEqual(missing.status_code, 400)
        self.assertEqual(missing.json()['field'], 'assignmentId')

    def test_update_and_delete_assignment(self):
        assignment = self._assignment('Draft title')
        res = self.client.patch(
            f"/api/assignments/{assignment['id']}",
            headers=self.teacher,
            json={'title': 'Final title', 'deadline': '2026-06-15'},
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()['title'], 'Final title')
        self.assertEqual(res.json()['deadline'], '2026-06-15')

        self.assertEqual(self.client.delete(f"/api/assignments/{assignment['id']}", headers=self.teacher).status_code, 204)
        self.assertEqual(self.client.get(f"/api/assignments/{assignment['id']}", headers=self.teacher).status_code, 404)


if __name__ == '__main__':
    unittest.main()
