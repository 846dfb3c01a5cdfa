"""
Tests for the grade book
"""
from core import services as core_services
from core.exceptions import InputError, NotFoundError, UnauthorizedError
from core.models import User
from core.testing import PASSWORD, TenantTestCase, execute, make_school, reload
from grades import services
from grades.models import StudentGrade
from grades.utils import average_score, success_rate


class GradeBookTest(TenantTestCase):

    def setUp(self):
        super().setUp()
        self.science = core_services.create_subject(self.admin, 'Science')
        core_services.assign_subject(self.admin, self.classroom.id, self.science.id)
        self.math_grade = StudentGrade.objects.get(student=self.student, subject=self.subject)
        self.science_grade = StudentGrade.objects.get(student=self.student, subject=self.science)

    def test_add_grade(self):
        grade = services.add_grade(self.admin, self.student.id, self.subject.id, 80, type='QUIZ')
        self.assertEqual(grade.classroom, self.classroom)
        self.assertEqual(grade.type, 'QUIZ')
        self.assertEqual(StudentGrade.objects.filter(student=self.student).count(), 3)

    def test_add_grade_validation(self):
        with self.assertRaises(InputError):
            services.add_grade(self.admin, self.student.id, self.subject.id, 101)
        with self.assertRaises(InputError):
            services.add_grade(self.admin, self.student.id, self.subject.id, 50, type='HOMEWORK')

        art = core_services.create_subject(self.admin, 'Art')
        with self.assertRaisesMessage(NotFoundError, "Subject not found"):
            services.add_grade(self.admin, self.student.id, art.id, 50)

    def test_add_grade_needs_enrollment(self):
        loner = core_services.create_user(
            self.admin,
            user_name='Loner',
            email='loner@greenwood.test',
            role=User.STUDENT,
            password=PASSWORD,
        )
        with self.assertRaisesMessage(InputError, "Student is not enrolled in a class"):
            services.add_grade(self.admin, loner.id, self.subject.id, 50)

    def test_teacher_bulk_update_is_limited_to_taught_subjects(self):
        updated = services.update_bulk_grades(self.teacher, [
            (self.math_grade.id, 75),
            (self.science_grade.id, 90),
            (999999, 10),
        ])

        self.assertEqual([g.id for g in updated], [self.math_grade.id])
        self.math_grade.refresh_from_db()
        self.science_grade.refresh_from_db()
        self.assertEqual(self.math_grade.score, 75)
        self.assertEqual(self.science_grade.score, 0)

    def test_admin_bulk_update(self):
        updated = services.update_bulk_grades(self.admin, [
            (self.math_grade.id, 75),
            (self.science_grade.id, 90),
        ])
        self.assertEqual(len(updated), 2)

    def test_invalid_score_rejects_whole_batch(self):
        with self.assertRaises(InputError):
            services.update_bulk_grades(self.admin, [
                (self.math_grade.id, 75),
                (self.science_grade.id, 150),
            ])
        self.math_grade.refresh_from_db()
        self.assertEqual(self.math_grade.score, 0)

    def test_other_school_cannot_touch_grades(self):
        _, rival_admin = make_school('Rival Academy', 'admin@rival.test')
        self.assertEqual(services.update_bulk_grades(rival_admin, [(self.math_grade.id, 100)]), [])
        with self.assertRaisesMessage(NotFoundError, "Grade not found"):
            services.update_grade(rival_admin, self.math_grade.id, 100)
        with self.assertRaises(NotFoundError):
            services.student_grades(rival_admin, self.student.id)

    def test_teacher_cannot_update_untaught_grade(self):
        with self.assertRaises(NotFoundError):
            services.update_grade(self.teacher, self.science_grade.id, 40)
        grade = services.update_grade(self.teacher, self.math_grade.id, 40)
        self.assertEqual(grade.score, 40)

    def test_only_admins_delete(self):
        with self.assertRaises(UnauthorizedError):
            services.delete_grade(self.teacher, self.math_grade.id)
        services.delete_grade(self.admin, self.math_grade.id)
        self.assertFalse(StudentGrade.objects.filter(id=self.math_grade.id).exists())

    def test_student_reads_only_own_grades(self):
        self.assertEqual(len(services.student_grades(self.student, self.student.id)), 2)

        classmate = core_services.create_user(
            self.admin,
            user_name='Wanda',
            email='wanda@greenwood.test',
            role=User.STUDENT,
            password=PASSWORD,
            class_id=self.classroom.id,
        )
        with self.assertRaises(UnauthorizedError):
            services.student_grades(reload(classmate), self.student.id)

        self.assertEqual(len(services.student_grades(self.teacher, self.student.id)), 2)

    def test_bulk_update_mutation(self):
        mutation = """
            mutation ($grades: [GradeUpdateInput!]!) {
                updateBulkGrades(grades: $grades) { id score }
            }
        """
        result = execute(mutation, user=self.teacher, variables={'grades': [
            {'id': str(self.math_grade.id), 'score': 65},
            {'id': str(self.science_grade.id), 'score': 65},
        ]})
        self.assertIsNone(result.errors)
        self.assertEqual(result.data['updateBulkGrades'], [{'id': self.math_grade.id, 'score': 65}])


class StatisticsTest(TenantTestCase):

    def setUp(self):
        super().setUp()
        self.wanda = self._student('Wanda', [90])
        self.keesha = self._student('Keesha', [100, 80])
        self.loner = core_services.create_user(
            self.admin,
            user_name='Loner',
            email='loner@greenwood.test',
            role=User.STUDENT,
            password=PASSWORD,
        )

    def _student(self, name, scores):
        student = core_services.create_user(
            self.admin,
            user_name=name,
            email=f'{name.lower()}@greenwood.test',
            role=User.STUDENT,
            password=PASSWORD,
            class_id=self.classroom.id,
        )
        for score in scores:
            services.add_grade(self.admin, student.id, self.subject.id, score, type='QUIZ')
        return student

    def test_average_and_success_rate(self):
        grades = StudentGrade.objects.filter(student=self.keesha)
        self.assertEqual(average_score(grades), 60.0)
        self.assertAlmostEqual(success_rate(grades), 200 / 3)

        empty = StudentGrade.objects.filter(student=self.loner)
        self.assertEqual(average_score(empty), 0.0)
        self.assertEqual(success_rate(empty), 0.0)

    def test_top_students(self):
        ranked = list(services.top_students(self.admin, limit=3))
        self.assertEqual([s.user_name for s in ranked], ['Keesha', 'Wanda', 'Arnold'])
        self.assertEqual(ranked[0].avg_score, 60.0)

        everyone = list(services.top_students(self.admin, limit=10))
        self.assertEqual(everyone[-1].user_name, 'Loner')
        self.assertEqual(everyone[-1].avg_score, 0.0)

    def test_top_students_limit(self):
        with self.assertRaises(InputError):
            services.top_students(self.admin, limit=0)

    def test_top_students_query(self):
        result = execute('{ topStudents(limit: 2) { userName averageScore } }', user=self.admin)
        self.assertIsNone(result.errors)
        self.assertEqual(result.data['topStudents'], [
            {'userName': 'Keesha', 'averageScore': 60.0},
            {'userName': 'Wanda', 'averageScore': 45.0},
        ])

    def test_subject_success_rate(self):
        result = execute(
            'query ($id: Int!) { subject(id: $id) { name successRate } }',
            user=self.admin,
            variables={'id': self.subject.id}
        )
        self.assertIsNone(result.errors)
        # Three seeded zeros plus 90, 100 and 80
        self.assertAlmostEqual(result.data['subject']['successRate'], 3 / 6 * 100)


class GradeRestTest(TenantTestCase):

    def test_grade_endpoints(self):
        response = self.api('post', 'grades', user=self.admin, data={
            'studentId': self.student.id,
            'subjectId': self.subject.id,
            'score': 88,
            'type': 'FINAL',
        })
        self.assertEqual(response.status_code, 201)
        grade_id = response.json()['id']

        response = self.api('patch', f'grades/{grade_id}', user=self.teacher, data={'score': 91})
        self.assertEqual(response.json()['score'], 91)

        response = self.api('get', f'grades?studentId={self.student.id}', user=self.student)
        self.assertEqual(sorted(g['score'] for g in response.json()['grades']), [0, 91])

        response = self.api('get', 'grades/top-students', user=self.admin)
        self.assertEqual(response.json()['students'][0]['averageScore'], 45.5)

        response = self.api('delete', f'grades/{grade_id}', user=self.admin)
        self.assertEqual(response.json(), {'success': True})

    def test_student_id_required(self):
        response = self.api('get', 'grades', user=self.admin)
        self.assertEqual(response.status_code, 400)
