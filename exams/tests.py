"""
Tests for the Exam System
"""
from unittest.mock import patch

from django.test import SimpleTestCase

from core import services as core_services
from core.exceptions import ConflictError, InputError, NotFoundError, UnauthorizedError
from core.models import User
from core.testing import PASSWORD, TenantTestCase, execute, make_school, reload
from exams import services
from exams.models import Exam, ExamSubmission, Question
from exams.utils import score_answers
from exams.validators import ExamValidator
from grades.models import StudentGrade


QUESTIONS = [
    {
        'question_text': 'What is 2 + 2?',
        'options': ['3', '4', '5'],
        'correct_answer_index': 1,
        'points': 2,
    },
    {
        'question_text': 'Which number is prime?',
        'options': ['7', '8'],
        'correct_answer_index': 0,
        'points': 3,
    },
]


class ExamValidatorTest(SimpleTestCase):

    def test_valid_questions(self):
        self.assertEqual(ExamValidator.validate_questions(QUESTIONS), (True, ""))

    def test_question_rules(self):
        base = dict(QUESTIONS[0])
        cases = [
            dict(base, question_text='   '),
            dict(base, options=['only one']),
            dict(base, options=['yes', '']),
            dict(base, correct_answer_index=3),
            dict(base, correct_answer_index=True),
            dict(base, points=-1),
        ]
        for question in cases:
            is_valid, _ = ExamValidator.validate_question(question)
            self.assertFalse(is_valid, question)

    def test_questions_need_content(self):
        self.assertFalse(ExamValidator.validate_questions([])[0])
        is_valid, message = ExamValidator.validate_questions([QUESTIONS[0], dict(QUESTIONS[1], options=[])])
        self.assertFalse(is_valid)
        self.assertTrue(message.startswith("Question 2:"))

    def test_answer_rules(self):
        self.assertTrue(ExamValidator.validate_answers([])[0])
        self.assertTrue(ExamValidator.validate_answers([{'question_id': 1, 'selected_index': -1}])[0])
        self.assertFalse(ExamValidator.validate_answers([{'question_id': None, 'selected_index': 0}])[0])
        self.assertFalse(ExamValidator.validate_answers([
            {'question_id': 1, 'selected_index': 0},
            {'question_id': 1, 'selected_index': 1},
        ])[0])


class ExamTestCase(TenantTestCase):
    """Adds a second classroom taught by a second teacher, and one exam"""

    def setUp(self):
        super().setUp()
        self.other_teacher = core_services.create_user(
            self.admin,
            user_name='Mr Ratburn',
            email='ratburn@greenwood.test',
            role=User.TEACHER,
            password=PASSWORD,
        )
        self.other_classroom = core_services.create_classroom(self.admin, 'Grade 5B')
        core_services.assign_subject(
            self.admin,
            self.other_classroom.id,
            self.subject.id,
            teacher_id=self.other_teacher.id,
        )
        self.other_student = reload(core_services.create_user(
            self.admin,
            user_name='Phoebe',
            email='phoebe@greenwood.test',
            role=User.STUDENT,
            password=PASSWORD,
            class_id=self.other_classroom.id,
        ))
        self.exam = self.create_exam(self.teacher)
        self.q1, self.q2 = self.exam.questions.all()

    def create_exam(self, user, title='Arithmetic Quiz', class_id=None, questions=None):
        return services.create_exam(
            user,
            title=title,
            type='QUIZ',
            duration_in_minutes=30,
            subject_id=self.subject.id,
            class_id=class_id or self.classroom.id,
            questions=QUESTIONS if questions is None else questions,
        )


class ExamCreationTest(ExamTestCase):

    def test_teacher_creates_exam_with_questions(self):
        self.assertEqual(self.exam.teacher, self.teacher)
        self.assertEqual(self.exam.total_points, 5)
        self.assertEqual([q.order for q in (self.q1, self.q2)], [0, 1])
        self.assertEqual(self.q1.options, ['3', '4', '5'])

    def test_admin_creates_exam_for_assigned_teacher(self):
        exam = self.create_exam(self.admin, title='Midterm Prep')
        self.assertEqual(exam.teacher, self.teacher)

    def test_admin_needs_a_teacher_on_the_subject(self):
        core_services.set_subject_teacher(self.admin, self.assignment.id, None)
        with self.assertRaises(InputError):
            self.create_exam(self.admin, title='Orphan Quiz')

    def test_teacher_must_teach_the_class(self):
        with self.assertRaises(UnauthorizedError):
            self.create_exam(self.other_teacher, title='Not Mine')
        with self.assertRaises(UnauthorizedError):
            self.create_exam(self.student, title='Student Quiz')

    def test_duplicate_exam(self):
        with self.assertRaisesMessage(ConflictError, services.DUPLICATE_EXAM):
            self.create_exam(self.teacher)

        # Same title in another class is a different exam
        self.create_exam(self.other_teacher, class_id=self.other_classroom.id)

    def test_invalid_question_creates_nothing(self):
        broken = [QUESTIONS[0], dict(QUESTIONS[1], correct_answer_index=5)]
        with self.assertRaises(InputError):
            self.create_exam(self.teacher, title='Broken Quiz', questions=broken)
        self.assertFalse(Exam.objects.filter(title='Broken Quiz').exists())

    def test_failed_question_insert_rolls_back_exam(self):
        with patch.object(Question.objects, 'bulk_create', side_effect=RuntimeError('disk full')):
            with self.assertRaises(RuntimeError):
                self.create_exam(self.teacher, title='Doomed Quiz')
        self.assertFalse(Exam.objects.filter(title='Doomed Quiz').exists())

    def test_other_school_cannot_target_classroom(self):
        _, rival_admin = make_school('Rival Academy', 'admin@rival.test')
        with self.assertRaisesMessage(NotFoundError, "Classroom not found"):
            self.create_exam(rival_admin, title='Raid')

    def test_delete_is_owner_or_admin(self):
        with self.assertRaises(UnauthorizedError):
            services.delete_exam(self.other_teacher, self.exam.id)
        services.delete_exam(self.teacher, self.exam.id)
        self.assertFalse(Question.objects.exists())


class ExamAccessTest(ExamTestCase):

    def test_available_exams_per_role(self):
        other_exam = self.create_exam(self.other_teacher, title='5B Quiz', class_id=self.other_classroom.id)

        self.assertEqual(list(services.available_exams(self.student)), [self.exam])
        self.assertEqual(list(services.available_exams(self.other_student)), [other_exam])
        self.assertEqual(list(services.available_exams(self.teacher)), [self.exam])
        self.assertEqual(set(services.available_exams(self.admin)), {self.exam, other_exam})

        _, rival_admin = make_school('Rival Academy', 'admin@rival.test')
        self.assertEqual(list(services.available_exams(rival_admin)), [])

    def test_exam_for_taking_is_class_only(self):
        self.assertEqual(services.exam_for_taking(self.student, self.exam.id), self.exam)
        with self.assertRaisesMessage(NotFoundError, "not assigned to your class"):
            services.exam_for_taking(self.other_student, self.exam.id)
        with self.assertRaises(UnauthorizedError):
            services.exam_for_taking(self.teacher, self.exam.id)

    def test_get_exam_rules(self):
        self.assertEqual(services.get_exam(self.admin, self.exam.id), self.exam)
        with self.assertRaises(UnauthorizedError):
            services.get_exam(self.other_student, self.exam.id)
        with self.assertRaises(UnauthorizedError):
            services.get_exam(self.other_teacher, self.exam.id)

        _, rival_admin = make_school('Rival Academy', 'admin@rival.test')
        with self.assertRaises(NotFoundError):
            services.get_exam(rival_admin, self.exam.id)

    def test_student_never_sees_correct_answers(self):
        query = 'query ($id: Int!) { examForTaking(id: $id) { title totalPoints questions { questionText correctAnswerIndex } } }'
        result = execute(query, user=self.student, variables={'id': self.exam.id})
        self.assertIsNone(result.errors)
        exam = result.data['examForTaking']
        self.assertEqual(exam['totalPoints'], 5)
        self.assertEqual([q['correctAnswerIndex'] for q in exam['questions']], [None, None])

    def test_teacher_sees_correct_answers(self):
        query = 'query ($id: Int!) { exam(id: $id) { questions { correctAnswerIndex } } }'
        result = execute(query, user=self.teacher, variables={'id': self.exam.id})
        self.assertIsNone(result.errors)
        self.assertEqual([q['correctAnswerIndex'] for q in result.data['exam']['questions']], [1, 0])

    def test_reports(self):
        services.submit_exam(self.student, self.exam.id, [])
        self.assertEqual(len(services.exam_reports(self.teacher, self.exam.id)), 1)
        self.assertEqual(len(services.exam_reports(self.admin, self.exam.id)), 1)
        with self.assertRaisesMessage(UnauthorizedError, "only view reports for your own exams"):
            services.exam_reports(self.other_teacher, self.exam.id)
        with self.assertRaises(UnauthorizedError):
            services.exam_reports(self.student, self.exam.id)


class ExamSubmissionTest(ExamTestCase):

    def answer(self, question, index):
        return {'question_id': question.id, 'selected_index': index}

    def test_score_answers(self):
        questions = [self.q1, self.q2]
        self.assertEqual(score_answers(questions, [self.answer(self.q1, 1), self.answer(self.q2, 0)]), 5)
        self.assertEqual(score_answers(questions, [self.answer(self.q1, 0)]), 0)
        self.assertEqual(score_answers(questions, [{'question_id': 999999, 'selected_index': 0}]), 0)

    def test_score_answers_sums_points_of_correct_answers(self):
        questions = [
            Question(id=1, points=10, correct_answer_index=0),
            Question(id=2, points=20, correct_answer_index=1),
        ]
        all_right = [{'question_id': 1, 'selected_index': 0}, {'question_id': 2, 'selected_index': 1}]
        one_wrong = [{'question_id': 1, 'selected_index': 1}, {'question_id': 2, 'selected_index': 1}]
        self.assertEqual(score_answers(questions, all_right), 30)
        self.assertEqual(score_answers(questions, one_wrong), 20)

    def test_submission_is_scored_and_graded(self):
        submission = services.submit_exam(self.student, self.exam.id, [
            self.answer(self.q1, 1),
            self.answer(self.q2, 1),
        ])
        self.assertEqual(submission.total_score, 2)
        self.assertEqual(submission.answers, [
            {'questionId': self.q1.id, 'selectedIndex': 1},
            {'questionId': self.q2.id, 'selectedIndex': 1},
        ])

        grade = StudentGrade.objects.get(student=self.student, type='QUIZ')
        self.assertEqual(grade.score, 2)
        self.assertEqual(grade.subject, self.subject)
        self.assertEqual(grade.classroom, self.classroom)

    def test_questions_of_other_exams_score_nothing(self):
        other_exam = self.create_exam(self.teacher, title='Second Quiz')
        foreign = other_exam.questions.first()
        submission = services.submit_exam(self.student, self.exam.id, [self.answer(foreign, 1)])
        self.assertEqual(submission.total_score, 0)

    def test_retakes_are_kept(self):
        services.submit_exam(self.student, self.exam.id, [self.answer(self.q1, 1)])
        services.submit_exam(self.student, self.exam.id, [self.answer(self.q1, 1), self.answer(self.q2, 0)])

        scores = sorted(ExamSubmission.objects.filter(student=self.student).values_list('total_score', flat=True))
        self.assertEqual(scores, [2, 5])
        self.assertEqual(StudentGrade.objects.filter(student=self.student, type='QUIZ').count(), 2)

    def test_out_of_range_index_scores_zero(self):
        submission = services.submit_exam(self.student, self.exam.id, [self.answer(self.q1, -1)])
        self.assertEqual(submission.total_score, 0)
        self.assertTrue(ExamSubmission.objects.filter(id=submission.id, student=self.student).exists())
        self.assertEqual(StudentGrade.objects.get(student=self.student, type='QUIZ').score, 0)

    def test_duplicate_answers_rejected(self):
        with self.assertRaises(InputError):
            services.submit_exam(self.student, self.exam.id, [self.answer(self.q1, 1), self.answer(self.q1, 0)])
        self.assertFalse(ExamSubmission.objects.exists())

    def test_only_students_of_the_class_submit(self):
        with self.assertRaisesMessage(UnauthorizedError, "This exam is not for your class"):
            services.submit_exam(self.other_student, self.exam.id, [])
        with self.assertRaises(UnauthorizedError):
            services.submit_exam(self.teacher, self.exam.id, [])
        with self.assertRaises(NotFoundError):
            services.submit_exam(self.student, 999999, [])

    def test_failed_grade_write_rolls_back_submission(self):
        with patch.object(StudentGrade.objects, 'create', side_effect=RuntimeError('disk full')):
            with self.assertRaises(RuntimeError):
                services.submit_exam(self.student, self.exam.id, [self.answer(self.q1, 1)])
        self.assertFalse(ExamSubmission.objects.exists())

    def test_submit_mutation(self):
        mutation = """
            mutation ($examId: Int!, $answers: [StudentAnswerInput!]!) {
                submitExamResponse(examId: $examId, answers: $answers) { totalScore answers }
            }
        """
        result = execute(mutation, user=self.student, variables={
            'examId': self.exam.id,
            'answers': [
                {'questionId': self.q1.id, 'selectedIndex': 1},
                {'questionId': self.q2.id, 'selectedIndex': 0},
            ],
        })
        self.assertIsNone(result.errors)
        self.assertEqual(result.data['submitExamResponse']['totalScore'], 5)

    def test_student_sees_only_own_submissions(self):
        services.submit_exam(self.student, self.exam.id, [])
        classmate = reload(core_services.create_user(
            self.admin,
            user_name='Wanda',
            email='wanda@greenwood.test',
            role=User.STUDENT,
            password=PASSWORD,
            class_id=self.classroom.id,
        ))
        query = 'query ($id: Int!) { exam(id: $id) { hasSubmitted submissions { studentId } } }'

        result = execute(query, user=classmate, variables={'id': self.exam.id})
        self.assertEqual(result.data['exam'], {'hasSubmitted': False, 'submissions': []})

        result = execute(query, user=self.student, variables={'id': self.exam.id})
        self.assertEqual(result.data['exam'], {
            'hasSubmitted': True,
            'submissions': [{'studentId': self.student.id}],
        })


class ExamRestTest(ExamTestCase):

    def test_create_take_and_report(self):
        response = self.api('post', 'exams', user=self.teacher, data={
            'title': 'Final Exam',
            'type': 'FINAL',
            'durationInMinutes': 90,
            'subjectId': self.subject.id,
            'classId': self.classroom.id,
            'questions': [
                {'questionText': 'Capital of France?', 'options': ['Paris', 'Rome'], 'correctAnswerIndex': 0, 'points': 4},
            ],
        })
        self.assertEqual(response.status_code, 201)
        exam = response.json()
        self.assertEqual(exam['questions'][0]['correctAnswerIndex'], 0)

        response = self.api('get', f"exams/{exam['id']}", user=self.student)
        self.assertIsNone(response.json()['questions'][0]['correctAnswerIndex'])

        question_id = exam['questions'][0]['id']
        response = self.api('post', f"exams/{exam['id']}/submissions", user=self.student, data={
            'answers': [{'questionId': question_id, 'selectedIndex': 0}],
        })
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['totalScore'], 4)

        response = self.api('get', f"exams/{exam['id']}/submissions", user=self.teacher)
        self.assertEqual([s['totalScore'] for s in response.json()['submissions']], [4])

    def test_malformed_questions(self):
        response = self.api('post', 'exams', user=self.teacher, data={
            'title': 'Broken',
            'type': 'QUIZ',
            'durationInMinutes': 10,
            'subjectId': self.subject.id,
            'classId': self.classroom.id,
            'questions': 'none',
        })
        self.assertEqual(response.status_code, 400)

    def test_wrong_class_is_forbidden(self):
        response = self.api('post', f'exams/{self.exam.id}/submissions', user=self.other_student, data={'answers': []})
        self.assertEqual(response.status_code, 403)
