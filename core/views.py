"""
REST endpoints for accounts, schools, classrooms, subjects and enrollment.
They share ``core.services`` with the GraphQL resolvers.
"""
import json

from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from core import services
from core.exceptions import InputError, SchoolAdminError
from core.permissions import ensure_authenticated
from core.serializers import (
    serialize_class_subject,
    serialize_classroom,
    serialize_enrollment,
    serialize_school,
    serialize_subject,
    serialize_user,
)
from core.utils import bearer_token


# ==================================================
# BASE VIEW
# ==================================================

@method_decorator(csrf_exempt, name='dispatch')
class JsonView(View):
    """
    JSON in, JSON out. Domain errors become ``{"error", "code"}`` bodies
    with the matching HTTP status.
    """

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except SchoolAdminError as e:
            return JsonResponse({'error': e.message, 'code': e.code}, status=e.status_code)

    @staticmethod
    def payload(request):
        if not request.body:
            return {}
        try:
            data = json.loads(request.body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise InputError("Request body must be valid JSON")
        if not isinstance(data, dict):
            raise InputError("Request body must be a JSON object")
        return data

    @staticmethod
    def user(request):
        return ensure_authenticated(getattr(request, 'user', None), getattr(request, 'jwt_error', None))

    @staticmethod
    def int_param(request, name):
        value = request.GET.get(name)
        if value in (None, ''):
            return None
        try:
            return int(value)
        except ValueError:
            raise InputError(f"{name} must be an integer")


# ==================================================
# AUTH
# ==================================================

class SignupView(JsonView):
    def post(self, request):
        data = self.payload(request)
        user = services.signup(data.get('email'), data.get('password'), data.get('userName'))
        return JsonResponse(serialize_user(user), status=201)


class CreateAdminView(JsonView):
    def post(self, request):
        data = self.payload(request)
        user = services.create_admin(data.get('email'), data.get('password'), data.get('userName'))
        return JsonResponse(serialize_user(user), status=201)


class LoginView(JsonView):
    def post(self, request):
        data = self.payload(request)
        user, access_token, refresh_token = services.login(data.get('email'), data.get('password'))
        return JsonResponse({
            'user': serialize_user(user),
            'accessToken': access_token,
            'refreshToken': refresh_token,
        })


class RefreshTokenView(JsonView):
    def post(self, request):
        data = self.payload(request)
        user, access_token = services.refresh_access_token(data.get('refreshToken'))
        return JsonResponse({'user': serialize_user(user), 'accessToken': access_token})


class LogoutView(JsonView):
    def post(self, request):
        data = self.payload(request)
        message = services.logout(data.get('accessToken') or bearer_token(request))
        return JsonResponse({'success': True, 'message': message})


class MeView(JsonView):
    def get(self, request):
        return JsonResponse(serialize_user(self.user(request)))


# ==================================================
# SCHOOLS
# ==================================================

class SchoolListView(JsonView):
    def post(self, request):
        data = self.payload(request)
        school = services.create_school(self.user(request), data.get('name'))
        return JsonResponse(serialize_school(school), status=201)


class MySchoolView(JsonView):
    def get(self, request):
        school = services.my_school(self.user(request))
        return JsonResponse({'school': serialize_school(school) if school else None})


class DashboardStatsView(JsonView):
    def get(self, request):
        stats = services.dashboard_stats(self.user(request))
        return JsonResponse({
            'totalStudents': stats['total_students'],
            'totalTeachers': stats['total_teachers'],
            'totalClassRooms': stats['total_class_rooms'],
        })


# ==================================================
# USERS
# ==================================================

class UserListView(JsonView):
    def get(self, request):
        user = self.user(request)
        role = request.GET.get('role', 'STUDENT').upper()
        if role == 'TEACHER':
            users = services.list_teachers(user)
        elif role == 'STUDENT':
            users = services.list_students(
                user,
                limit=self.int_param(request, 'limit'),
                offset=self.int_param(request, 'offset'),
                search=request.GET.get('search'),
            )
        else:
            raise InputError("role must be TEACHER or STUDENT")
        return JsonResponse({'users': [serialize_user(u) for u in users]})

    def post(self, request):
        data = self.payload(request)
        created = services.create_user(
            self.user(request),
            user_name=data.get('userName'),
            email=data.get('email'),
            role=data.get('role'),
            password=data.get('password'),
            class_id=data.get('classId'),
        )
        return JsonResponse(serialize_user(created), status=201)


class UserDetailView(JsonView):
    def delete(self, request, user_id):
        services.delete_user(self.user(request), user_id)
        return JsonResponse({'success': True})


# ==================================================
# CLASSROOMS
# ==================================================

class ClassRoomListView(JsonView):
    def get(self, request):
        classrooms = services.list_classrooms(self.user(request))
        return JsonResponse({'classRooms': [serialize_classroom(c) for c in classrooms]})

    def post(self, request):
        data = self.payload(request)
        classroom = services.create_classroom(self.user(request), data.get('name'))
        return JsonResponse(serialize_classroom(classroom), status=201)


class ClassRoomDetailView(JsonView):
    def get(self, request, classroom_id):
        classroom = services.get_classroom(self.user(request), classroom_id)
        return JsonResponse(serialize_classroom(classroom))

    def patch(self, request, classroom_id):
        data = self.payload(request)
        classroom = services.update_classroom(self.user(request), classroom_id, data.get('name'))
        return JsonResponse(serialize_classroom(classroom))

    def delete(self, request, classroom_id):
        services.delete_classroom(self.user(request), classroom_id)
        return JsonResponse({'success': True})


# ==================================================
# SUBJECTS, ASSIGNMENTS, ENROLLMENT
# ==================================================

class SubjectListView(JsonView):
    def get(self, request):
        subjects = services.list_subjects(self.user(request))
        return JsonResponse({'subjects': [serialize_subject(s) for s in subjects]})

    def post(self, request):
        data = self.payload(request)
        subject = services.create_subject(self.user(request), data.get('name'))
        return JsonResponse(serialize_subject(subject), status=201)


class SubjectDetailView(JsonView):
    def get(self, request, subject_id):
        subject = services.get_subject(self.user(request), subject_id)
        return JsonResponse(serialize_subject(subject))

    def patch(self, request, subject_id):
        data = self.payload(request)
        subject = services.update_subject(self.user(request), subject_id, data.get('name'))
        return JsonResponse(serialize_subject(subject))

    def delete(self, request, subject_id):
        services.delete_subject(self.user(request), subject_id)
        return JsonResponse({'success': True})


class ClassSubjectListView(JsonView):
    def post(self, request):
        data = self.payload(request)
        assignment = services.assign_subject(
            self.user(request),
            data.get('classId'),
            data.get('subjectId'),
            data.get('teacherId'),
        )
        return JsonResponse(serialize_class_subject(assignment), status=201)


class ClassSubjectDetailView(JsonView):
    def patch(self, request, assignment_id):
        data = self.payload(request)
        assignment = services.set_subject_teacher(self.user(request), assignment_id, data.get('teacherId'))
        return JsonResponse(serialize_class_subject(assignment))

    def delete(self, request, assignment_id):
        services.unassign_subject(self.user(request), assignment_id)
        return JsonResponse({'success': True})


class EnrollmentListView(JsonView):
    def post(self, request):
        data = self.payload(request)
        enrollment = services.enroll_student(self.user(request), data.get('studentId'), data.get('classId'))
        return JsonResponse(serialize_enrollment(enrollment), status=201)
