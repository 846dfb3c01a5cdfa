"""
REST endpoints for the Exam System
"""
from django.http import JsonResponse

from core.permissions import is_student
from core.views import JsonView
from exams import services


def serialize_question(question, user):
    return {
        'id': question.id,
        'examId': question.exam_id,
        'questionText': question.question_text,
        'options': question.options,
        'correctAnswerIndex': None if is_student(user) else question.correct_answer_index,
        'points': question.points,
    }


def serialize_exam(exam, user, with_questions=False):
    data = {
        'id': exam.id,
        'title': exam.title,
        'type': exam.type,
        'description': exam.description,
        'durationInMinutes': exam.duration_in_minutes,
        'subjectId': exam.subject_id,
        'classId': exam.classroom_id,
        'teacherId': exam.teacher_id,
        'createdAt': exam.created_at.isoformat(),
    }
    if with_questions:
        data['questions'] = [serialize_question(q, user) for q in exam.questions.all()]
    return data


def serialize_submission(submission):
    return {
        'id': submission.id,
        'studentId': submission.student_id,
        'examId': submission.exam_id,
        'totalScore': submission.total_score,
        'answers': submission.answers,
        'submittedAt': submission.submitted_at.isoformat(),
    }


def _questions(data):
    questions = data.get('questions')
    if not isinstance(questions, list):
        return questions
    return [
        {
            'question_text': q.get('questionText'),
            'options': q.get('options'),
            'correct_answer_index': q.get('correctAnswerIndex'),
            'points': q.get('points', 1),
        } if isinstance(q, dict) else q
        for q in questions
    ]


def _answers(data):
    answers = data.get('answers')
    if not isinstance(answers, list):
        return answers
    return [
        {'question_id': a.get('questionId'), 'selected_index': a.get('selectedIndex')} if isinstance(a, dict) else a
        for a in answers
    ]


class ExamListView(JsonView):
    def get(self, request):
        user = self.user(request)
        exams = services.available_exams(user)
        return JsonResponse({'exams': [serialize_exam(e, user) for e in exams]})

    def post(self, request):
        user = self.user(request)
        data = self.payload(request)
        exam = services.create_exam(
            user,
            title=data.get('title'),
            type=data.get('type'),
            description=data.get('description'),
            duration_in_minutes=data.get('durationInMinutes'),
            subject_id=data.get('subjectId'),
            class_id=data.get('classId'),
            questions=_questions(data),
        )
        return JsonResponse(serialize_exam(exam, user, with_questions=True), status=201)


class ExamDetailView(JsonView):
    def get(self, request, exam_id):
        user = self.user(request)
        exam = services.get_exam(user, exam_id)
        return JsonResponse(serialize_exam(exam, user, with_questions=True))

    def delete(self, request, exam_id):
        services.delete_exam(self.user(request), exam_id)
        return JsonResponse({'success': True})


class ExamSubmissionListView(JsonView):
    def get(self, request, exam_id):
        submissions = services.exam_reports(self.user(request), exam_id)
        return JsonResponse({'submissions': [serialize_submission(s) for s in submissions]})

    def post(self, request, exam_id):
        data = self.payload(request)
        submission = services.submit_exam(self.user(request), exam_id, _answers(data))
        return JsonResponse(serialize_submission(submission), status=201)
