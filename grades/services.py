"""
Grade book operations and rankings
"""
import logging
from functools import reduce
from operator import or_

from django.db import transaction
from django.db.models import Avg, FloatField, Q, Value
from django.db.models.functions import Coalesce

from core.exceptions import InputError, NotFoundError
from core.forms import validate
from core.models import ClassSubject, User
from core.permissions import (
    ensure_admin,
    ensure_authenticated,
    ensure_teacher_or_admin,
    get_scoped,
    is_teacher,
    scoped,
)
from grades.forms import GradeForm, ScoreForm
from grades.models import StudentGrade

logger = logging.getLogger(__name__)


def _school_student(user, student_id):
    student = User.objects.filter(id=student_id, school_id=user.school_id, role=User.STUDENT).first()
    if not student:
        raise NotFoundError("Student not found")
    return student


def editable_grades(user):
    """
    Grades ``user`` may change: the whole school for an admin, only the
    (classroom, subject) pairs they teach for a teacher.
    """
    grades = scoped(StudentGrade.objects.all(), user)
    if not is_teacher(user):
        return grades

    pairs = list(ClassSubject.objects.filter(teacher=user).values_list('classroom_id', 'subject_id'))
    if not pairs:
        return grades.none()
    return grades.filter(reduce(or_, (Q(classroom_id=c, subject_id=s) for c, s in pairs)))


def add_grade(admin, student_id, subject_id, score, type=StudentGrade.REGULAR):
    ensure_admin(admin)
    data = validate(GradeForm, student_id=student_id, subject_id=subject_id, score=score, type=type)

    student = _school_student(admin, data['student_id'])
    classroom_id = student.classroom_id
    if not classroom_id:
        raise InputError("Student is not enrolled in a class")

    if not ClassSubject.objects.filter(classroom_id=classroom_id, subject_id=data['subject_id']).exists():
        raise NotFoundError("Subject not found")

    return StudentGrade.objects.create(
        student=student,
        subject_id=data['subject_id'],
        classroom_id=classroom_id,
        score=data['score'],
        type=data['type'],
    )


def update_bulk_grades(user, updates):
    """
    Apply ``[(grade_id, score), ...]``. Grades outside the caller's scope
    (or that do not exist) are skipped; an invalid score rejects the batch.

    Returns:
        list of updated StudentGrade
    """
    ensure_teacher_or_admin(user)
    for _, score in updates:
        validate(ScoreForm, score=score)

    updated = []
    allowed = editable_grades(user)
    with transaction.atomic():
        for grade_id, score in updates:
            grade = allowed.select_for_update().filter(id=grade_id).first()
            if grade is None:
                logger.info("Skipping grade %s outside the scope of %s", grade_id, user.email)
                continue
            grade.score = score
            grade.save(update_fields=['score'])
            updated.append(grade)
    return updated


def update_grade(user, grade_id, score):
    ensure_teacher_or_admin(user)
    data = validate(ScoreForm, score=score)
    grade = get_scoped(StudentGrade, user, grade_id, queryset=editable_grades(user), label="Grade")
    grade.score = data['score']
    grade.save(update_fields=['score'])
    return grade


def delete_grade(admin, grade_id):
    ensure_admin(admin)
    grade = get_scoped(StudentGrade, admin, grade_id, label="Grade")
    grade.delete()


def student_grades(user, student_id):
    """Staff of the student's school, or the student themself"""
    ensure_authenticated(user)
    if str(user.id) == str(student_id):
        return StudentGrade.objects.filter(student=user).select_related('subject')

    ensure_teacher_or_admin(user)
    student = _school_student(user, student_id)
    return StudentGrade.objects.filter(student=student).select_related('subject')


def top_students(admin, limit=5):
    """Students of the admin's school ranked by average score (no grades counts as 0)"""
    ensure_admin(admin)
    if limit < 1:
        raise InputError("limit must be at least 1")

    return User.objects.filter(
        school_id=admin.school_id,
        role=User.STUDENT
    ).annotate(
        avg_score=Coalesce(Avg('grades__score'), Value(0.0), output_field=FloatField())
    ).order_by('-avg_score', 'id')[:limit]
