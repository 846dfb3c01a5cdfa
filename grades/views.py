"""
REST endpoints for the grade book
"""
from django.http import JsonResponse

from core.exceptions import InputError
from core.views import JsonView
from grades import services
from grades.models import StudentGrade


def serialize_grade(grade):
    return {
        'id': grade.id,
        'studentId': grade.student_id,
        'subjectId': grade.subject_id,
        'classId': grade.classroom_id,
        'score': grade.score,
        'type': grade.type,
        'dateRecorded': grade.date_recorded.isoformat(),
    }


class GradeListView(JsonView):
    def get(self, request):
        student_id = self.int_param(request, 'studentId')
        if student_id is None:
            raise InputError("studentId is required")
        grades = services.student_grades(self.user(request), student_id)
        return JsonResponse({'grades': [serialize_grade(g) for g in grades]})

    def post(self, request):
        data = self.payload(request)
        grade = services.add_grade(
            self.user(request),
            data.get('studentId'),
            data.get('subjectId'),
            data.get('score'),
            type=data.get('type') or StudentGrade.REGULAR,
        )
        return JsonResponse(serialize_grade(grade), status=201)


class GradeDetailView(JsonView):
    def patch(self, request, grade_id):
        data = self.payload(request)
        grade = services.update_grade(self.user(request), grade_id, data.get('score'))
        return JsonResponse(serialize_grade(grade))

    def delete(self, request, grade_id):
        services.delete_grade(self.user(request), grade_id)
        return JsonResponse({'success': True})


class TopStudentsView(JsonView):
    def get(self, request):
        limit = self.int_param(request, 'limit') or 5
        students = services.top_students(self.user(request), limit=limit)
        return JsonResponse({
            'students': [
                {'id': s.id, 'userName': s.user_name, 'email': s.email, 'averageScore': s.avg_score}
                for s in students
            ]
        })
