"""
Business logic for accounts, schools, classrooms, subjects and enrollment.

GraphQL resolvers and REST views both call into this module; every function
takes the acting user first and raises ``core.exceptions`` errors.
"""
import logging
from datetime import datetime, timezone as dt_timezone

import jwt
from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from core.exceptions import (
    AuthenticationError,
    ConflictError,
    InputError,
    NotFoundError,
    UnauthorizedError,
)
from core.forms import (
    AssignSubjectForm,
    CreateUserForm,
    EnrollmentForm,
    LoginForm,
    NameForm,
    SchoolForm,
    SignupForm,
    SubjectTeacherForm,
    validate,
)
from core.models import (
    ClassRoom,
    ClassSubject,
    Enrollment,
    School,
    Subject,
    TokenBlacklist,
    User,
)
from core.permissions import (
    ensure_admin,
    ensure_authenticated,
    ensure_teacher_or_admin,
    get_scoped,
    is_admin,
    is_teacher,
    scoped,
)
from core.utils import decode_token, generate_access_token, generate_refresh_token

logger = logging.getLogger(__name__)


# ==================================================
# AUTHENTICATION
# ==================================================

def _register(email, password, user_name, role, conflict_message, school=None):
    if User.objects.filter(email__iexact=email).exists():
        raise ConflictError(conflict_message)
    try:
        return User.objects.create_user(
            email=email,
            password=password,
            user_name=user_name,
            role=role,
            school=school,
        )
    except IntegrityError:
        raise ConflictError(conflict_message)


def signup(email, password, user_name):
    """Self-registration; always creates a STUDENT without a school"""
    data = validate(SignupForm, email=email, password=password, user_name=user_name)
    user = _register(data['email'], data['password'], data['user_name'], User.STUDENT, "Email already registered.")
    logger.info("Student %s signed up", user.email)
    return user


def create_admin(email, password, user_name):
    """Self-service tenant onboarding; the admin creates their school afterwards"""
    data = validate(SignupForm, email=email, password=password, user_name=user_name)
    user = _register(data['email'], data['password'], data['user_name'], User.ADMIN, "Admin email already exists.")
    logger.info("Admin %s registered", user.email)
    return user


def login(email, password):
    """
    Returns:
        tuple: (user, access_token, refresh_token)
    """
    data = validate(LoginForm, email=email, password=password)

    user = User.objects.select_related('school').filter(email__iexact=data['email']).first()
    if not user or not user.check_password(data['password']):
        logger.warning("Failed login attempt for %s", data['email'])
        raise AuthenticationError("Invalid credentials")

    if not user.is_active:
        raise AuthenticationError("User account is inactive")

    return user, generate_access_token(user), generate_refresh_token(user)


def refresh_access_token(refresh_token):
    """
    Returns:
        tuple: (user, new_access_token)
    """
    try:
        payload = decode_token(refresh_token)
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Refresh token has expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid refresh token")

    if payload.get('type') != 'refresh':
        raise AuthenticationError("Invalid token type")

    user = User.objects.filter(id=payload.get('user_id')).first()
    if not user:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("User account is inactive")

    return user, generate_access_token(user)


def logout(token):
    """Blacklist an access token. Returns a human-readable message."""
    if not token:
        raise InputError("No token provided for logout")

    try:
        payload = decode_token(token)
    except jwt.ExpiredSignatureError:
        return "Token already expired. Logout successful."
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token provided")

    if payload.get('type') != 'access':
        raise InputError("Can only logout access tokens")

    exp_timestamp = payload.get('exp')
    expires_at = datetime.fromtimestamp(exp_timestamp, tz=dt_timezone.utc) if exp_timestamp else timezone.now()

    TokenBlacklist.objects.get_or_create(
        token=token,
        defaults={
            'user': User.objects.filter(id=payload.get('user_id')).first(),
            'expires_at': expires_at,
            'reason': 'logout'
        }
    )
    return "Logged out successfully. Token has been invalidated."


# ==================================================
# SCHOOLS
# ==================================================

def create_school(user, name):
    ensure_authenticated(user)
    if not is_admin(user):
        raise UnauthorizedError("Access denied. Admin role required.")
    if user.school_id or School.objects.filter(admin=user).exists():
        raise ConflictError("You already own a school.")

    data = validate(SchoolForm, name=name)
    with transaction.atomic():
        school = School.objects.create(name=data['name'], admin=user)
        user.school = school
        user.save(update_fields=['school'])

    logger.info("School %s created by %s", school.id, user.email)
    return school


def my_school(user):
    ensure_authenticated(user)
    if not user.school_id:
        return None
    return School.objects.filter(id=user.school_id).first()


def school_details(user, school_id):
    ensure_admin(user)
    if str(school_id) != str(user.school_id):
        raise UnauthorizedError("Access denied.")
    school = School.objects.filter(id=school_id).first()
    if not school:
        raise NotFoundError("School not found.")
    return school


# ==================================================
# USERS
# ==================================================

def seed_regular_grades(student, classroom, subject_ids=None):
    """
    Give ``student`` one REGULAR zero grade per subject of ``classroom``
    (optionally restricted to ``subject_ids``) they have no grade for yet.
    """
    from grades.models import StudentGrade

    assigned = ClassSubject.objects.filter(classroom=classroom)
    if subject_ids is not None:
        assigned = assigned.filter(subject_id__in=subject_ids)

    already_graded = set(
        StudentGrade.objects.filter(student=student, classroom=classroom).values_list('subject_id', flat=True)
    )
    StudentGrade.objects.bulk_create([
        StudentGrade(
            student=student,
            subject_id=subject_id,
            classroom=classroom,
            score=0,
            type=StudentGrade.REGULAR,
        )
        for subject_id in assigned.values_list('subject_id', flat=True)
        if subject_id not in already_graded
    ])


def create_user(admin, user_name, email, role, password, class_id=None):
    """Create a teacher or student in the admin's school"""
    ensure_admin(admin)
    data = validate(
        CreateUserForm,
        user_name=user_name,
        email=email,
        role=role,
        password=password,
        class_id=class_id,
    )

    if data['role'] == User.ADMIN:
        raise UnauthorizedError("Access denied. Admin accounts cannot be created this way.")

    classroom = None
    if data['class_id'] is not None:
        if data['role'] != User.STUDENT:
            raise InputError("Only students can be enrolled in a class")
        classroom = get_scoped(ClassRoom, admin, data['class_id'], label="Classroom")

    with transaction.atomic():
        user = _register(
            data['email'],
            data['password'],
            data['user_name'],
            data['role'],
            "Identity Conflict: Email already exists.",
            admin.school,
        )
        if classroom:
            Enrollment.objects.create(student=user, classroom=classroom)
            seed_regular_grades(user, classroom)

    logger.info("%s %s created in school %s", user.role.title(), user.email, admin.school_id)
    return user


def delete_user(admin, user_id):
    ensure_admin(admin)
    target = User.objects.filter(id=user_id).first()
    if target and target.role == User.ADMIN:
        raise UnauthorizedError("Access denied. Admin accounts cannot be deleted.")
    if not target or target.school_id != admin.school_id:
        raise NotFoundError("User not found")

    target.delete()
    logger.info("User %s deleted by %s", user_id, admin.email)


def _school_members(user, role):
    return User.objects.filter(school_id=user.school_id, role=role).order_by('id')


def list_teachers(admin):
    ensure_admin(admin)
    return _school_members(admin, User.TEACHER)


def get_teacher(admin, teacher_id):
    ensure_admin(admin)
    teacher = _school_members(admin, User.TEACHER).filter(id=teacher_id).first()
    if not teacher:
        raise NotFoundError("Teacher not found")
    return teacher


def list_students(admin, limit=None, offset=None, search=None):
    ensure_admin(admin)
    if (limit is not None and limit < 0) or (offset is not None and offset < 0):
        raise InputError("limit and offset cannot be negative")

    qs = _school_members(admin, User.STUDENT)
    if search:
        qs = qs.filter(Q(user_name__icontains=search) | Q(email__icontains=search))

    start = offset or 0
    if limit is not None:
        return qs[start:start + limit]
    return qs[start:]


def count_students(admin):
    ensure_admin(admin)
    return _school_members(admin, User.STUDENT).count()


def get_student(user, student_id):
    ensure_teacher_or_admin(user)
    student = _school_members(user, User.STUDENT).filter(id=student_id).first()
    if not student:
        raise NotFoundError("Student not found")
    return student


def dashboard_stats(admin):
    ensure_admin(admin)
    return {
        'total_students': _school_members(admin, User.STUDENT).count(),
        'total_teachers': _school_members(admin, User.TEACHER).count(),
        'total_class_rooms': ClassRoom.objects.filter(school_id=admin.school_id).count(),
    }


# ==================================================
# CLASSROOMS
# ==================================================

def create_classroom(admin, name):
    ensure_admin(admin)
    data = validate(NameForm, name=name)

    if ClassRoom.objects.filter(school_id=admin.school_id, name=data['name']).exists():
        raise ConflictError("Classroom already exists in your school.")
    try:
        with transaction.atomic():
            return ClassRoom.objects.create(school_id=admin.school_id, name=data['name'])
    except IntegrityError:
        raise ConflictError("Classroom already exists in your school.")


def update_classroom(admin, classroom_id, name):
    ensure_admin(admin)
    classroom = get_scoped(ClassRoom, admin, classroom_id, label="Classroom")
    data = validate(NameForm, name=name)

    duplicate = ClassRoom.objects.filter(
        school_id=admin.school_id,
        name=data['name']
    ).exclude(id=classroom.id)
    if duplicate.exists():
        raise ConflictError("Classroom already exists in your school.")

    classroom.name = data['name']
    classroom.save(update_fields=['name'])
    return classroom


def delete_classroom(admin, classroom_id):
    ensure_admin(admin)
    classroom = get_scoped(ClassRoom, admin, classroom_id, label="Classroom")
    classroom.delete()


def list_classrooms(user):
    ensure_teacher_or_admin(user)
    return scoped(ClassRoom.objects.all(), user)


def get_classroom(user, classroom_id):
    ensure_teacher_or_admin(user)
    return get_scoped(ClassRoom, user, classroom_id, label="Classroom")


# ==================================================
# SUBJECTS & ASSIGNMENTS
# ==================================================

def create_subject(admin, name):
    ensure_admin(admin)
    data = validate(NameForm, name=name)

    if Subject.objects.filter(school_id=admin.school_id, name=data['name']).exists():
        raise ConflictError("Subject already exists in your school.")
    try:
        with transaction.atomic():
            return Subject.objects.create(school_id=admin.school_id, name=data['name'])
    except IntegrityError:
        raise ConflictError("Subject already exists in your school.")


def update_subject(admin, subject_id, name):
    ensure_admin(admin)
    subject = get_scoped(Subject, admin, subject_id, label="Subject")
    data = validate(NameForm, name=name)

    duplicate = Subject.objects.filter(school_id=admin.school_id, name=data['name']).exclude(id=subject.id)
    if duplicate.exists():
        raise ConflictError("Subject already exists in your school.")

    subject.name = data['name']
    subject.save(update_fields=['name'])
    return subject


def delete_subject(admin, subject_id):
    ensure_admin(admin)
    subject = get_scoped(Subject, admin, subject_id, label="Subject")
    subject.delete()


def list_subjects(user):
    """Teachers see the subjects they teach, admins the whole catalog"""
    ensure_teacher_or_admin(user)
    if is_teacher(user):
        return Subject.objects.filter(class_subjects__teacher=user).distinct()
    return scoped(Subject.objects.all(), user)


def get_subject(user, subject_id):
    ensure_teacher_or_admin(user)
    return get_scoped(Subject, user, subject_id, label="Subject")


def _school_teacher(admin, teacher_id):
    teacher = _school_members(admin, User.TEACHER).filter(id=teacher_id).first()
    if not teacher:
        raise NotFoundError("Teacher not found")
    return teacher


def assign_subject(admin, class_id, subject_id, teacher_id=None):
    """Put a subject on a classroom's curriculum, optionally with its teacher"""
    ensure_admin(admin)
    data = validate(AssignSubjectForm, class_id=class_id, subject_id=subject_id, teacher_id=teacher_id)
    classroom = get_scoped(ClassRoom, admin, data['class_id'], label="Classroom")
    subject = get_scoped(Subject, admin, data['subject_id'], label="Subject")
    teacher = _school_teacher(admin, data['teacher_id']) if data['teacher_id'] is not None else None

    if ClassSubject.objects.filter(classroom=classroom, subject=subject).exists():
        raise ConflictError("Subject already assigned to this classroom.")

    try:
        with transaction.atomic():
            assignment = ClassSubject.objects.create(classroom=classroom, subject=subject, teacher=teacher)
            for enrollment in classroom.enrollments.select_related('student'):
                seed_regular_grades(enrollment.student, classroom, subject_ids=[subject.id])
    except IntegrityError:
        raise ConflictError("Subject already assigned to this classroom.")

    return assignment


def set_subject_teacher(admin, assignment_id, teacher_id=None):
    """Replace (or clear) the teacher of an existing assignment"""
    ensure_admin(admin)
    data = validate(SubjectTeacherForm, teacher_id=teacher_id)
    assignment = get_scoped(ClassSubject, admin, assignment_id, label="Assignment")
    assignment.teacher = _school_teacher(admin, data['teacher_id']) if data['teacher_id'] is not None else None
    assignment.save(update_fields=['teacher'])
    return assignment


def unassign_subject(admin, assignment_id):
    """Remove a subject from a classroom together with its weekly slots"""
    from timetable.models import Schedule

    ensure_admin(admin)
    assignment = get_scoped(ClassSubject, admin, assignment_id, label="Assignment")
    with transaction.atomic():
        Schedule.objects.filter(classroom_id=assignment.classroom_id, subject_id=assignment.subject_id).delete()
        assignment.delete()


def enroll_student(admin, student_id, class_id):
    """Enroll a student in a classroom, moving them if already enrolled elsewhere"""
    ensure_admin(admin)
    data = validate(EnrollmentForm, student_id=student_id, class_id=class_id)
    student = _school_members(admin, User.STUDENT).filter(id=data['student_id']).first()
    if not student:
        raise NotFoundError("Student not found")
    classroom = get_scoped(ClassRoom, admin, data['class_id'], label="Classroom")

    with transaction.atomic():
        enrollment, _ = Enrollment.objects.update_or_create(
            student=student,
            defaults={'classroom': classroom, 'enrolled_at': timezone.now()}
        )
        seed_regular_grades(student, classroom)

    return enrollment
