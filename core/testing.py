"""
Shared fixtures for the test suites of every app
"""
import json

from django.contrib.auth.models import AnonymousUser
from django.core.cache import cache
from django.test import RequestFactory, TestCase
from strawberry.django.context import StrawberryDjangoContext

from core import services
from core.graphql.schema import schema
from core.models import User
from core.utils import generate_access_token

PASSWORD = 'secret123'


def reload(user):
    """Fresh copy of ``user`` the way the JWT middleware loads it"""
    return User.objects.select_related('school', 'enrollment').get(pk=user.pk)


def execute(query, user=None, variables=None):
    """Run a GraphQL operation in-process as ``user``"""
    request = RequestFactory().post('/graphql/')
    request.user = reload(user) if user is not None else AnonymousUser()
    context = StrawberryDjangoContext(request=request, response=None)
    return schema.execute_sync(query, variable_values=variables, context_value=context)


def make_admin(email, user_name='Principal'):
    return User.objects.create_user(email=email, password=PASSWORD, user_name=user_name, role=User.ADMIN)


def make_school(name, admin_email):
    """School with its admin; returns (school, admin)"""
    admin = make_admin(admin_email)
    school = services.create_school(admin, name)
    return school, reload(admin)


class TenantTestCase(TestCase):
    """
    One school with a classroom, a subject taught there by a teacher,
    and an enrolled student.
    """

    def setUp(self):
        cache.clear()
        self.school, self.admin = make_school('Greenwood High', 'admin@greenwood.test')
        self.classroom = services.create_classroom(self.admin, 'Grade 5A')
        self.subject = services.create_subject(self.admin, 'Mathematics')
        self.teacher = services.create_user(
            self.admin,
            user_name='Ms Frizzle',
            email='frizzle@greenwood.test',
            role=User.TEACHER,
            password=PASSWORD,
        )
        self.assignment = services.assign_subject(
            self.admin,
            self.classroom.id,
            self.subject.id,
            teacher_id=self.teacher.id,
        )
        self.student = services.create_user(
            self.admin,
            user_name='Arnold',
            email='arnold@greenwood.test',
            role=User.STUDENT,
            password=PASSWORD,
            class_id=self.classroom.id,
        )
        self.teacher = reload(self.teacher)
        self.student = reload(self.student)

    def auth_header(self, user):
        return {'HTTP_AUTHORIZATION': f'Bearer {generate_access_token(user)}'}

    def graphql(self, query, user=None, variables=None, **headers):
        """POST through the full middleware stack"""
        if user is not None:
            headers.update(self.auth_header(user))
        return self.client.post(
            '/graphql/',
            data=json.dumps({'query': query, 'variables': variables or {}}),
            content_type='application/json',
            **headers
        )

    def api(self, method, path, user=None, data=None, **headers):
        """Call a REST endpoint under /api/"""
        if user is not None:
            headers.update(self.auth_header(user))
        call = getattr(self.client, method)
        if data is None:
            return call(f'/api/{path}', **headers)
        return call(f'/api/{path}', data=json.dumps(data), content_type='application/json', **headers)
