"""
Exam lifecycle: creation with questions, access rules, submission scoring
"""
import logging

from django.db import IntegrityError, transaction

from core.exceptions import ConflictError, InputError, NotFoundError, UnauthorizedError
from core.forms import validate
from core.models import ClassRoom, ClassSubject
from core.permissions import (
    ensure_authenticated,
    ensure_student,
    ensure_teacher_or_admin,
    get_scoped,
    in_scope,
    is_admin,
    is_student,
    is_teacher,
    scoped,
)
from exams.forms import ExamForm
from exams.models import Exam, ExamSubmission, Question
from exams.utils import score_answers, serialize_answers
from exams.validators import ExamValidator
from grades.models import StudentGrade

logger = logging.getLogger(__name__)

DUPLICATE_EXAM = "An exam with this title and type already exists for this subject and class."


def create_exam(user, title, type, duration_in_minutes, subject_id, class_id, questions, description=None):
    """
    Create an exam and all of its questions in one transaction.

    Args:
        questions: list of dicts with question_text, options,
            correct_answer_index and points

    Returns:
        Exam
    """
    ensure_teacher_or_admin(user)
    data = validate(
        ExamForm,
        title=title,
        type=type,
        description=description,
        duration_in_minutes=duration_in_minutes,
        subject_id=subject_id,
        class_id=class_id,
    )

    classroom = get_scoped(ClassRoom, user, data['class_id'], label="Classroom")
    assignment = ClassSubject.objects.select_related('teacher').filter(
        classroom=classroom,
        subject_id=data['subject_id']
    ).first()
    if assignment is None:
        raise NotFoundError("Subject not found")

    if is_teacher(user):
        if assignment.teacher_id != user.id:
            raise UnauthorizedError("You do not teach this subject in this class")
        teacher = user
    else:
        if assignment.teacher is None:
            raise InputError("Assign a teacher to this subject before creating exams")
        teacher = assignment.teacher

    is_valid, error_message = ExamValidator.validate_questions(questions)
    if not is_valid:
        raise InputError(error_message)

    if Exam.objects.filter(
        title=data['title'],
        type=data['type'],
        subject_id=data['subject_id'],
        classroom=classroom
    ).exists():
        raise ConflictError(DUPLICATE_EXAM)

    try:
        with transaction.atomic():
            exam = Exam.objects.create(
                title=data['title'],
                type=data['type'],
                description=data['description'] or None,
                duration_in_minutes=data['duration_in_minutes'],
                subject_id=data['subject_id'],
                classroom=classroom,
                teacher=teacher,
            )
            Question.objects.bulk_create([
                Question(
                    exam=exam,
                    question_text=question['question_text'].strip(),
                    options=question['options'],
                    correct_answer_index=question['correct_answer_index'],
                    points=question['points'],
                    order=position,
                )
                for position, question in enumerate(questions)
            ])
    except IntegrityError:
        raise ConflictError(DUPLICATE_EXAM)

    logger.info("Exam %s (%s) created for classroom %s by %s", exam.id, exam.type, classroom.id, user.email)
    return exam


def delete_exam(user, exam_id):
    ensure_teacher_or_admin(user)
    exam = get_scoped(Exam, user, exam_id, label="Exam")
    if is_teacher(user) and exam.teacher_id != user.id:
        raise UnauthorizedError("You can only delete your own exams")
    exam.delete()


def available_exams(user):
    """Student: their class. Teacher: exams they own. Admin: the whole school."""
    ensure_authenticated(user)
    exams = Exam.objects.select_related('subject', 'classroom', 'teacher')
    if is_student(user):
        if not user.classroom_id:
            return exams.none()
        return exams.filter(classroom_id=user.classroom_id)
    if is_teacher(user):
        return exams.filter(teacher=user)
    if is_admin(user):
        return scoped(exams, user)
    return exams.none()


def check_exam_access(user, exam):
    """Raise unless ``user`` may read ``exam``"""
    if is_student(user):
        if exam.classroom_id != user.classroom_id:
            raise UnauthorizedError("This exam is not for your class")
    elif is_teacher(user):
        if exam.teacher_id != user.id:
            raise UnauthorizedError("You do not teach this exam")
    elif not in_scope(user, exam):
        raise NotFoundError("Exam not found")


def get_exam(user, exam_id):
    ensure_authenticated(user)
    exam = Exam.objects.select_related('classroom').filter(id=exam_id).first()
    if exam is None:
        raise NotFoundError("Exam not found")
    check_exam_access(user, exam)
    return exam


def exam_for_taking(user, exam_id):
    ensure_student(user)
    exam = Exam.objects.filter(id=exam_id).first()
    if exam is None or not user.classroom_id or exam.classroom_id != user.classroom_id:
        raise NotFoundError("Exam not found or not assigned to your class.")
    return exam


def exam_reports(user, exam_id):
    ensure_teacher_or_admin(user)
    exam = get_scoped(Exam, user, exam_id, label="Exam")
    if is_teacher(user) and exam.teacher_id != user.id:
        raise UnauthorizedError("Unauthorized: You can only view reports for your own exams.")
    return exam.submissions.select_related('student')


def submit_exam(user, exam_id, answers):
    """
    Score a student's answers and record both the submission and the
    mirrored grade atomically. Retakes create new rows.

    Args:
        answers: list of dicts with question_id and selected_index

    Returns:
        ExamSubmission
    """
    ensure_student(user)
    is_valid, error_message = ExamValidator.validate_answers(answers)
    if not is_valid:
        raise InputError(error_message)

    exam = Exam.objects.filter(id=exam_id).first()
    if exam is None:
        raise NotFoundError("Exam not found")
    if not user.classroom_id or exam.classroom_id != user.classroom_id:
        raise UnauthorizedError("This exam is not for your class")

    total_score = score_answers(exam.questions.all(), answers)

    with transaction.atomic():
        submission = ExamSubmission.objects.create(
            student=user,
            exam=exam,
            total_score=total_score,
            answers=serialize_answers(answers),
        )
        StudentGrade.objects.create(
            student=user,
            subject_id=exam.subject_id,
            classroom_id=exam.classroom_id,
            score=total_score,
            type=exam.type,
        )

    logger.info("Student %s submitted exam %s with score %s", user.id, exam.id, total_score)
    return submission
