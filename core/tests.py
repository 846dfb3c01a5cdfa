"""
Tests for accounts, tenancy, classrooms, subjects and the HTTP surfaces
"""
from datetime import timedelta
from io import StringIO

import jwt
from django.conf import settings
from django.core.cache import cache
from django.core.management import call_command
from django.test import override_settings
from django.utils import timezone
from strawberry.extensions import QueryDepthLimiter, SchemaExtension

from core import services
from core.exceptions import (
    AuthenticationError,
    ConflictError,
    InputError,
    NotFoundError,
    UnauthorizedError,
)
from core.graphql.schema import schema
from core.models import ClassRoom, Enrollment, School, TokenBlacklist, User
from core.permissions import get_scoped, in_scope, school_id_of, scoped
from core.testing import PASSWORD, TenantTestCase, execute, make_admin, make_school, reload
from core.utils import decode_token, generate_access_token, generate_refresh_token
from grades.models import StudentGrade


class AuthServiceTest(TenantTestCase):
    """Signup, login, refresh and logout"""

    def test_signup_creates_student_without_school(self):
        user = services.signup('newbie@example.com', 'secret1', 'Newbie')
        self.assertEqual(user.role, User.STUDENT)
        self.assertIsNone(user.school_id)
        self.assertTrue(user.check_password('secret1'))

    def test_signup_rejects_taken_email(self):
        with self.assertRaises(ConflictError):
            services.signup('ARNOLD@greenwood.test', 'secret1', 'Copycat')

    def test_signup_rejects_short_password(self):
        with self.assertRaises(InputError):
            services.signup('short@example.com', '123', 'Shorty')

    def test_create_admin(self):
        admin = services.create_admin('boss@example.com', 'secret1', 'Boss')
        self.assertEqual(admin.role, User.ADMIN)
        with self.assertRaisesMessage(ConflictError, "Admin email already exists."):
            services.create_admin('boss@example.com', 'secret1', 'Boss')

    def test_login_returns_token_pair(self):
        user, access_token, refresh_token = services.login('frizzle@greenwood.test', PASSWORD)
        self.assertEqual(user, self.teacher)

        payload = decode_token(access_token)
        self.assertEqual(payload['type'], 'access')
        self.assertEqual(payload['user_id'], self.teacher.id)
        self.assertEqual(payload['school_id'], self.school.id)
        self.assertEqual(decode_token(refresh_token)['type'], 'refresh')

    def test_login_wrong_password(self):
        with self.assertRaisesMessage(AuthenticationError, "Invalid credentials"):
            services.login('frizzle@greenwood.test', 'wrong-password')

    def test_login_inactive_user(self):
        self.teacher.is_active = False
        self.teacher.save()
        with self.assertRaisesMessage(AuthenticationError, "User account is inactive"):
            services.login('frizzle@greenwood.test', PASSWORD)

    def test_refresh_issues_access_token(self):
        user, access_token = services.refresh_access_token(generate_refresh_token(self.student))
        self.assertEqual(user, self.student)
        self.assertEqual(decode_token(access_token)['type'], 'access')

    def test_refresh_rejects_access_token(self):
        with self.assertRaisesMessage(AuthenticationError, "Invalid token type"):
            services.refresh_access_token(generate_access_token(self.student))

    def test_refresh_rejects_garbage(self):
        with self.assertRaisesMessage(AuthenticationError, "Invalid refresh token"):
            services.refresh_access_token('not-a-token')

    def test_logout_blacklists_access_token(self):
        token = generate_access_token(self.admin)
        services.logout(token)
        self.assertTrue(TokenBlacklist.is_blacklisted(token))

    def test_logout_requires_token(self):
        with self.assertRaisesMessage(InputError, "No token provided for logout"):
            services.logout(None)

    def test_logout_rejects_refresh_token(self):
        with self.assertRaisesMessage(InputError, "Can only logout access tokens"):
            services.logout(generate_refresh_token(self.admin))

    def test_logout_expired_token_succeeds(self):
        expired = jwt.encode(
            {
                'user_id': self.admin.id,
                'type': 'access',
                'exp': timezone.now() - timedelta(hours=1),
            },
            settings.SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM
        )
        self.assertEqual(services.logout(expired), "Token already expired. Logout successful.")
        self.assertFalse(TokenBlacklist.objects.exists())


class SchoolServiceTest(TenantTestCase):

    def test_admin_owns_one_school(self):
        self.assertEqual(self.admin.school, self.school)
        self.assertEqual(self.school.admin, self.admin)
        with self.assertRaisesMessage(ConflictError, "You already own a school."):
            services.create_school(self.admin, 'Second Campus')

    def test_only_admins_create_schools(self):
        with self.assertRaises(UnauthorizedError):
            services.create_school(self.teacher, 'Rogue Academy')

    def test_admin_without_school_is_refused(self):
        admin = make_admin('fresh@example.com')
        with self.assertRaisesMessage(UnauthorizedError, "Create a school first"):
            services.create_classroom(admin, 'Lonely Room')

    def test_school_details_of_another_school(self):
        other_school, _ = make_school('Rival Academy', 'admin@rival.test')
        self.assertEqual(services.school_details(self.admin, self.school.id), self.school)
        with self.assertRaises(UnauthorizedError):
            services.school_details(self.admin, other_school.id)

    def test_my_school_is_none_before_creation(self):
        self.assertIsNone(services.my_school(make_admin('fresh@example.com')))


class UserManagementTest(TenantTestCase):

    def test_created_student_is_enrolled_with_seeded_grade(self):
        self.assertEqual(self.student.school, self.school)
        self.assertEqual(self.student.classroom_id, self.classroom.id)

        grade = StudentGrade.objects.get(student=self.student)
        self.assertEqual(grade.subject, self.subject)
        self.assertEqual(grade.score, 0)
        self.assertEqual(grade.type, StudentGrade.REGULAR)

    def test_duplicate_email(self):
        with self.assertRaisesMessage(ConflictError, "Identity Conflict: Email already exists."):
            services.create_user(
                self.admin,
                user_name='Arnold Two',
                email='arnold@greenwood.test',
                role=User.STUDENT,
                password=PASSWORD,
            )

    def test_cannot_create_admin_accounts(self):
        with self.assertRaises(UnauthorizedError):
            services.create_user(
                self.admin,
                user_name='Deputy',
                email='deputy@greenwood.test',
                role=User.ADMIN,
                password=PASSWORD,
            )

    def test_only_students_get_a_class(self):
        with self.assertRaises(InputError):
            services.create_user(
                self.admin,
                user_name='Mr Ratburn',
                email='ratburn@greenwood.test',
                role=User.TEACHER,
                password=PASSWORD,
                class_id=self.classroom.id,
            )

    def test_teachers_cannot_create_users(self):
        with self.assertRaises(UnauthorizedError):
            services.create_user(
                self.teacher,
                user_name='Sneaky',
                email='sneaky@greenwood.test',
                role=User.STUDENT,
                password=PASSWORD,
            )

    def test_admin_accounts_cannot_be_deleted(self):
        with self.assertRaisesMessage(UnauthorizedError, "Admin accounts cannot be deleted"):
            services.delete_user(self.admin, self.admin.id)

    def test_delete_student(self):
        services.delete_user(self.admin, self.student.id)
        self.assertFalse(User.objects.filter(id=self.student.id).exists())
        self.assertFalse(StudentGrade.objects.filter(student_id=self.student.id).exists())

    def test_list_students_paginates_and_searches(self):
        for name in ['Wanda', 'Keesha', 'Ralphie']:
            services.create_user(
                self.admin,
                user_name=name,
                email=f'{name.lower()}@greenwood.test',
                role=User.STUDENT,
                password=PASSWORD,
            )

        names = [s.user_name for s in services.list_students(self.admin, limit=2, offset=1)]
        self.assertEqual(names, ['Wanda', 'Keesha'])

        names = [s.user_name for s in services.list_students(self.admin, search='ees')]
        self.assertEqual(names, ['Keesha'])

        self.assertEqual(services.count_students(self.admin), 4)

        with self.assertRaises(InputError):
            services.list_students(self.admin, limit=-1)

    def test_dashboard_stats(self):
        self.assertEqual(
            services.dashboard_stats(self.admin),
            {'total_students': 1, 'total_teachers': 1, 'total_class_rooms': 1}
        )

    def test_teacher_cannot_list_teachers(self):
        with self.assertRaises(UnauthorizedError):
            services.list_teachers(self.teacher)

    def test_teacher_can_read_school_student(self):
        self.assertEqual(services.get_student(self.teacher, self.student.id), self.student)


class ClassroomSubjectTest(TenantTestCase):

    def test_classroom_names_are_unique_per_school(self):
        with self.assertRaisesMessage(ConflictError, "Classroom already exists in your school."):
            services.create_classroom(self.admin, 'Grade 5A')

        other = services.create_classroom(self.admin, 'Grade 5B')
        with self.assertRaises(ConflictError):
            services.update_classroom(self.admin, other.id, 'Grade 5A')

        # Same name in another school is fine
        _, rival_admin = make_school('Rival Academy', 'admin@rival.test')
        services.create_classroom(rival_admin, 'Grade 5A')

    def test_rename_subject(self):
        subject = services.update_subject(self.admin, self.subject.id, 'Algebra')
        self.assertEqual(subject.name, 'Algebra')

    def test_blank_name_rejected(self):
        with self.assertRaises(InputError):
            services.create_subject(self.admin, '')

    def test_assign_subject_twice(self):
        with self.assertRaisesMessage(ConflictError, "Subject already assigned to this classroom."):
            services.assign_subject(self.admin, self.classroom.id, self.subject.id)

    def test_assigning_subject_seeds_grades_for_enrolled_students(self):
        science = services.create_subject(self.admin, 'Science')
        assignment = services.assign_subject(self.admin, self.classroom.id, science.id)

        self.assertIsNone(assignment.teacher)
        self.assertTrue(
            StudentGrade.objects.filter(student=self.student, subject=science, score=0).exists()
        )
        self.assertEqual(StudentGrade.objects.filter(student=self.student).count(), 2)

    def test_set_and_clear_subject_teacher(self):
        assignment = services.set_subject_teacher(self.admin, self.assignment.id, None)
        self.assertIsNone(assignment.teacher_id)
        assignment = services.set_subject_teacher(self.admin, self.assignment.id, self.teacher.id)
        self.assertEqual(assignment.teacher_id, self.teacher.id)

    def test_unassign_subject_removes_its_schedule(self):
        from timetable.models import Schedule
        from timetable.services import create_schedule

        create_schedule(self.admin, self.classroom.id, self.subject.id, 'Monday', '09:00', '10:00')
        services.unassign_subject(self.admin, self.assignment.id)

        self.assertFalse(Schedule.objects.exists())
        self.assertEqual(list(self.classroom.class_subjects.all()), [])

    def test_teacher_sees_only_taught_subjects(self):
        services.create_subject(self.admin, 'Art')
        self.assertEqual([s.name for s in services.list_subjects(self.teacher)], ['Mathematics'])
        self.assertEqual([s.name for s in services.list_subjects(self.admin)], ['Art', 'Mathematics'])

    def test_students_cannot_list_classrooms(self):
        with self.assertRaises(UnauthorizedError):
            services.list_classrooms(self.student)

    def test_enroll_student_moves_between_classrooms(self):
        other = services.create_classroom(self.admin, 'Grade 5B')
        enrollment = services.enroll_student(self.admin, self.student.id, other.id)

        self.assertEqual(enrollment.classroom, other)
        self.assertEqual(Enrollment.objects.filter(student=self.student).count(), 1)

    def test_only_students_can_be_enrolled(self):
        with self.assertRaisesMessage(NotFoundError, "Student not found"):
            services.enroll_student(self.admin, self.teacher.id, self.classroom.id)


class TenantIsolationTest(TenantTestCase):
    """Nothing of one school is reachable from another"""

    def setUp(self):
        super().setUp()
        self.rival_school, self.rival_admin = make_school('Rival Academy', 'admin@rival.test')
        self.rival_teacher = services.create_user(
            self.rival_admin,
            user_name='Mr Rival',
            email='teacher@rival.test',
            role=User.TEACHER,
            password=PASSWORD,
        )

    def test_school_of_nested_entities(self):
        self.assertEqual(school_id_of(self.classroom), self.school.id)
        self.assertEqual(school_id_of(self.assignment), self.school.id)
        self.assertTrue(in_scope(self.admin, self.classroom))
        self.assertFalse(in_scope(self.rival_admin, self.classroom))

    def test_scoped_querysets(self):
        self.assertEqual(list(scoped(ClassRoom.objects.all(), self.rival_admin)), [])
        self.assertEqual(list(scoped(School.objects.all(), self.admin)), [self.school])

    def test_foreign_lookups_look_missing(self):
        with self.assertRaisesMessage(NotFoundError, "Classroom not found"):
            get_scoped(ClassRoom, self.rival_admin, self.classroom.id, label="Classroom")
        with self.assertRaises(NotFoundError):
            services.get_classroom(self.rival_admin, self.classroom.id)
        with self.assertRaises(NotFoundError):
            services.update_subject(self.rival_admin, self.subject.id, 'Stolen')
        with self.assertRaises(NotFoundError):
            services.delete_user(self.rival_admin, self.student.id)

    def test_cannot_mix_entities_of_two_schools(self):
        rival_subject = services.create_subject(self.rival_admin, 'Chemistry')
        with self.assertRaises(NotFoundError):
            services.assign_subject(self.admin, self.classroom.id, rival_subject.id)
        with self.assertRaisesMessage(NotFoundError, "Teacher not found"):
            services.set_subject_teacher(self.admin, self.assignment.id, self.rival_teacher.id)
        with self.assertRaises(NotFoundError):
            services.enroll_student(self.rival_admin, self.student.id, self.classroom.id)

    def test_listings_are_per_school(self):
        self.assertEqual(list(services.list_classrooms(self.rival_admin)), [])
        self.assertEqual([t.email for t in services.list_teachers(self.rival_admin)], ['teacher@rival.test'])
        self.assertEqual(services.count_students(self.rival_admin), 0)

    def test_graphql_lookup_in_other_school(self):
        result = execute(
            'query ($id: Int!) { classRoom(id: $id) { name } }',
            user=self.rival_admin,
            variables={'id': self.classroom.id}
        )
        self.assertEqual(result.errors[0].message, "Classroom not found")
        self.assertEqual(result.errors[0].extensions['code'], 'NOT_FOUND')


class GraphQLSchemaTest(TenantTestCase):
    """Resolvers executed in-process"""

    def test_extensions_are_built_per_request(self):
        self.assertFalse(any(isinstance(ext, SchemaExtension) for ext in schema.extensions))
        first = schema.get_extensions()
        second = schema.get_extensions()
        self.assertTrue(any(isinstance(ext, QueryDepthLimiter) for ext in first))
        self.assertTrue(all(a is not b for a, b in zip(first, second)))

    def test_me_is_null_when_anonymous(self):
        result = execute('{ me { id } }')
        self.assertIsNone(result.errors)
        self.assertEqual(result.data, {'me': None})

    def test_me_for_enrolled_student(self):
        result = execute('{ me { email role classId classRoom { name } } }', user=self.student)
        self.assertIsNone(result.errors)
        self.assertEqual(result.data['me'], {
            'email': 'arnold@greenwood.test',
            'role': 'STUDENT',
            'classId': self.classroom.id,
            'classRoom': {'name': 'Grade 5A'},
        })

    def test_my_school_with_classrooms(self):
        result = execute('{ mySchool { name classRooms { name } } }', user=self.admin)
        self.assertIsNone(result.errors)
        self.assertEqual(result.data['mySchool'], {
            'name': 'Greenwood High',
            'classRooms': [{'name': 'Grade 5A'}],
        })

    def test_admin_dashboard_stats(self):
        result = execute('{ adminDashboardStats { totalStudents totalTeachers totalClassRooms } }', user=self.admin)
        self.assertIsNone(result.errors)
        self.assertEqual(
            result.data['adminDashboardStats'],
            {'totalStudents': 1, 'totalTeachers': 1, 'totalClassRooms': 1}
        )

    def test_create_user_mutation(self):
        mutation = """
            mutation ($classId: Int) {
                createUser(
                    userName: "Wanda"
                    email: "wanda@greenwood.test"
                    role: "STUDENT"
                    password: "secret123"
                    classId: $classId
                ) { email role classId }
            }
        """
        result = execute(mutation, user=self.admin, variables={'classId': self.classroom.id})
        self.assertIsNone(result.errors)
        self.assertEqual(result.data['createUser'], {
            'email': 'wanda@greenwood.test',
            'role': 'STUDENT',
            'classId': self.classroom.id,
        })

    def test_delete_admin_is_forbidden(self):
        result = execute(
            'mutation ($id: Int!) { deleteUser(id: $id) { success } }',
            user=self.admin,
            variables={'id': self.admin.id}
        )
        self.assertEqual(result.errors[0].extensions['code'], 'FORBIDDEN')
        self.assertTrue(User.objects.filter(id=self.admin.id).exists())

    def test_classroom_with_assignments(self):
        result = execute(
            'query ($id: Int!) { classRoom(id: $id) { name students { userName } assignments { subject { name } teacherId } } }',
            user=self.teacher,
            variables={'id': self.classroom.id}
        )
        self.assertIsNone(result.errors)
        self.assertEqual(result.data['classRoom'], {
            'name': 'Grade 5A',
            'students': [{'userName': 'Arnold'}],
            'assignments': [{'subject': {'name': 'Mathematics'}, 'teacherId': self.teacher.id}],
        })


class GraphQLHttpTest(TenantTestCase):
    """Status codes returned by the /graphql/ endpoint"""

    def test_login_then_me(self):
        response = self.graphql(
            'mutation { login(email: "frizzle@greenwood.test", password: "secret123") { accessToken user { role } } }'
        )
        self.assertEqual(response.status_code, 200)
        login = response.json()['data']['login']
        self.assertEqual(login['user']['role'], 'TEACHER')

        response = self.client.post(
            '/graphql/',
            data={'query': '{ me { email } }'},
            content_type='application/json',
            HTTP_AUTHORIZATION=f"Bearer {login['accessToken']}"
        )
        self.assertEqual(response.json()['data']['me'], {'email': 'frizzle@greenwood.test'})

    def test_unauthenticated(self):
        response = self.graphql('{ myTeachers { id } }')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['errors'][0]['extensions']['code'], 'UNAUTHENTICATED')

    def test_forbidden(self):
        response = self.graphql('{ adminDashboardStats { totalStudents } }', user=self.teacher)
        self.assertEqual(response.status_code, 403)

    def test_not_found(self):
        response = self.graphql('{ classRoom(id: 999999) { name } }', user=self.admin)
        self.assertEqual(response.status_code, 404)

    def test_conflict(self):
        response = self.graphql('mutation { createClassRoom(name: "Grade 5A") { id } }', user=self.admin)
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['errors'][0]['extensions']['code'], 'CONFLICT')

    def test_bad_input(self):
        response = self.graphql('mutation { createClassRoom(name: "") { id } }', user=self.admin)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['errors'][0]['extensions']['code'], 'BAD_USER_INPUT')

    def test_query_depth_is_limited(self):
        query = '{ me { classRoom { assignments { classRoom { assignments { classRoom { name } } } } } } }'
        response = self.graphql(query, user=self.student)
        self.assertEqual(response.status_code, 400)
        self.assertIn('depth', response.json()['errors'][0]['message'])

    def test_logged_out_token_is_rejected(self):
        token = generate_access_token(self.admin)
        headers = {'HTTP_AUTHORIZATION': f'Bearer {token}'}

        response = self.client.post(
            '/graphql/',
            data={'query': 'mutation { logout { success } }'},
            content_type='application/json',
            **headers
        )
        self.assertTrue(response.json()['data']['logout']['success'])

        response = self.client.post(
            '/graphql/',
            data={'query': '{ myTeachers { id } }'},
            content_type='application/json',
            **headers
        )
        self.assertEqual(response.status_code, 401)
        self.assertIn('Token has been logged out', response.json()['errors'][0]['message'])

    def test_refresh_token_cannot_call_api(self):
        response = self.graphql(
            '{ myTeachers { id } }',
            HTTP_AUTHORIZATION=f'Bearer {generate_refresh_token(self.admin)}'
        )
        self.assertEqual(response.status_code, 401)
        self.assertIn('Invalid token type', response.json()['errors'][0]['message'])


class RateLimitTest(TenantTestCase):

    @override_settings(RATE_LIMIT_REQUESTS=2)
    def test_requests_over_the_limit_are_rejected(self):
        cache.clear()
        for _ in range(2):
            self.assertEqual(self.api('get', 'auth/me').status_code, 401)

        response = self.api('get', 'auth/me')
        self.assertEqual(response.status_code, 429)
        self.assertEqual(response.json(), {'error': 'Too Many Requests - Rate limit exceeded'})

        # Counters are per client address
        response = self.api('get', 'auth/me', HTTP_X_FORWARDED_FOR='10.0.0.7')
        self.assertEqual(response.status_code, 401)

    @override_settings(RATE_LIMIT_ENABLED=False, RATE_LIMIT_REQUESTS=1)
    def test_limit_can_be_disabled(self):
        for _ in range(3):
            self.assertEqual(self.api('get', 'auth/me').status_code, 401)


class RestApiTest(TenantTestCase):

    def test_login_and_me(self):
        response = self.api('post', 'auth/login', data={'email': 'admin@greenwood.test', 'password': PASSWORD})
        self.assertEqual(response.status_code, 200)
        token = response.json()['accessToken']

        response = self.client.get('/api/auth/me', HTTP_AUTHORIZATION=f'Bearer {token}')
        self.assertEqual(response.json()['role'], 'ADMIN')
        self.assertEqual(response.json()['schoolId'], self.school.id)

    def test_wrong_password(self):
        response = self.api('post', 'auth/login', data={'email': 'admin@greenwood.test', 'password': 'nope'})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {'error': 'Invalid credentials', 'code': 'UNAUTHENTICATED'})

    def test_logout_then_me(self):
        token = generate_access_token(self.teacher)
        headers = {'HTTP_AUTHORIZATION': f'Bearer {token}'}
        self.assertEqual(self.client.post('/api/auth/logout', **headers).status_code, 200)
        self.assertEqual(self.client.get('/api/auth/me', **headers).status_code, 401)

    def test_classroom_crud(self):
        response = self.api('post', 'classrooms', user=self.admin, data={'name': 'Grade 6A'})
        self.assertEqual(response.status_code, 201)
        classroom_id = response.json()['id']

        response = self.api('patch', f'classrooms/{classroom_id}', user=self.admin, data={'name': 'Grade 6B'})
        self.assertEqual(response.json()['name'], 'Grade 6B')

        response = self.api('get', 'classrooms', user=self.teacher)
        self.assertEqual([c['name'] for c in response.json()['classRooms']], ['Grade 5A', 'Grade 6B'])

        response = self.api('delete', f'classrooms/{classroom_id}', user=self.admin)
        self.assertEqual(response.json(), {'success': True})

    def test_list_users_by_role(self):
        response = self.api('get', 'users?role=TEACHER', user=self.admin)
        self.assertEqual([u['email'] for u in response.json()['users']], ['frizzle@greenwood.test'])

        response = self.api('get', 'users?role=student&search=arn', user=self.admin)
        self.assertEqual([u['classId'] for u in response.json()['users']], [self.classroom.id])

        response = self.api('get', 'users?role=PARENT', user=self.admin)
        self.assertEqual(response.status_code, 400)

        response = self.api('get', 'users?limit=ten', user=self.admin)
        self.assertEqual(response.status_code, 400)

    def test_delete_admin_is_forbidden(self):
        response = self.api('delete', f'users/{self.admin.id}', user=self.admin)
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()['code'], 'FORBIDDEN')

    def test_malformed_body(self):
        response = self.client.post(
            '/api/classrooms',
            data='{not json',
            content_type='application/json',
            **self.auth_header(self.admin)
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['code'], 'BAD_USER_INPUT')

    def test_non_numeric_ids_are_input_errors(self):
        response = self.api(
            'post',
            'class-subjects',
            user=self.admin,
            data={'classId': 'abc', 'subjectId': self.subject.id}
        )
        self.assertEqual(response.status_code, 400)

    def test_dashboard_stats(self):
        response = self.api('get', 'schools/mine/stats', user=self.admin)
        self.assertEqual(response.json(), {'totalStudents': 1, 'totalTeachers': 1, 'totalClassRooms': 1})

    def test_enrollment(self):
        classroom = services.create_classroom(self.admin, 'Grade 5B')
        response = self.api(
            'post',
            'enrollments',
            user=self.admin,
            data={'studentId': self.student.id, 'classId': classroom.id}
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(reload(self.student).classroom_id, classroom.id)


class CleanupBlacklistCommandTest(TenantTestCase):

    def test_removes_only_expired_rows(self):
        TokenBlacklist.objects.create(
            token='expired-token',
            user=self.admin,
            expires_at=timezone.now() - timedelta(hours=1)
        )
        TokenBlacklist.objects.create(
            token='live-token',
            user=self.admin,
            expires_at=timezone.now() + timedelta(hours=1)
        )

        call_command('cleanup_blacklist', '--dry-run', stdout=StringIO())
        self.assertEqual(TokenBlacklist.objects.count(), 2)

        call_command('cleanup_blacklist', stdout=StringIO())
        self.assertEqual(list(TokenBlacklist.objects.values_list('token', flat=True)), ['live-token'])


class SeedDemoCommandTest(TenantTestCase):

    def test_seeding_twice_changes_nothing(self):
        from exams.models import Exam
        from timetable.models import Schedule

        call_command('seed_demo', stdout=StringIO())
        counts = (User.objects.count(), Schedule.objects.count(), Exam.objects.count())
        call_command('seed_demo', stdout=StringIO())

        self.assertEqual((User.objects.count(), Schedule.objects.count(), Exam.objects.count()), counts)
        admin = User.objects.get(email='admin@demo-school.test')
        self.assertEqual(services.dashboard_stats(admin), {
            'total_students': 5,
            'total_teachers': 2,
            'total_class_rooms': 2,
        })


class AdminSiteTest(TenantTestCase):

    def test_pages_render(self):
        superuser = User.objects.create_superuser('root@example.com', PASSWORD)
        self.client.force_login(superuser)

        for url in [
            '/admin/core/user/',
            '/admin/core/user/add/',
            f'/admin/core/user/{self.student.id}/change/',
            f'/admin/core/classroom/{self.classroom.id}/change/',
            '/admin/core/school/',
        ]:
            self.assertEqual(self.client.get(url).status_code, 200, url)
