"""
Exams Models
Multiple-choice exams, their questions and student submissions
"""
from django.db import models
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator


class Exam(models.Model):
    """
    Exam created by a teacher (or by an admin on behalf of the teacher
    assigned to the subject) for one classroom.
    """

    TYPE_CHOICES = [
        ('QUIZ', 'Quiz'),
        ('MIDTERM', 'Midterm Exam'),
        ('FINAL', 'Final Exam'),
        ('ASSIGNMENT', 'Assignment'),
    ]

    tenant_path = 'classroom__school'

    title = models.CharField(max_length=256)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    description = models.TextField(blank=True, null=True)
    duration_in_minutes = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Time allowed to complete the exam"
    )

    subject = models.ForeignKey(
        'core.Subject',
        on_delete=models.CASCADE,
        related_name='exams'
    )
    classroom = models.ForeignKey(
        'core.ClassRoom',
        on_delete=models.CASCADE,
        related_name='exams'
    )
    teacher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='exams',
        help_text="Teacher responsible for the exam"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        unique_together = ('title', 'type', 'subject', 'classroom')

    def __str__(self):
        return f"{self.title} ({self.type}) - {self.classroom.name}"

    @property
    def total_points(self):
        return sum(question.points for question in self.questions.all())


class Question(models.Model):
    """
    Multiple-choice question; ``options`` is a JSON list of answer strings
    and ``correct_answer_index`` points into it.
    """
    tenant_path = 'exam__classroom__school'

    exam = models.ForeignKey(
        Exam,
        on_delete=models.CASCADE,
        related_name='questions'
    )
    question_text = models.TextField()
    options = models.JSONField(default=list)
    correct_answer_index = models.IntegerField(validators=[MinValueValidator(0)])
    points = models.IntegerField(default=1, validators=[MinValueValidator(0)])
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['order', 'id']

    def __str__(self):
        return f"Q{self.order + 1}: {self.question_text[:50]}"

    def clean(self):
        from .validators import ExamValidator

        is_valid, error_message = ExamValidator.validate_question({
            'question_text': self.question_text,
            'options': self.options,
            'correct_answer_index': self.correct_answer_index,
            'points': self.points,
        })
        if not is_valid:
            raise ValidationError(error_message)


class ExamSubmission(models.Model):
    """
    One attempt of a student at an exam. Retakes create new rows.
    ``answers`` is a JSON list of {"questionId": int, "selectedIndex": int}.
    """
    tenant_path = 'exam__classroom__school'

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='exam_submissions'
    )
    exam = models.ForeignKey(
        Exam,
        on_delete=models.CASCADE,
        related_name='submissions'
    )
    total_score = models.IntegerField(default=0)
    answers = models.JSONField(default=list)
    submitted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-submitted_at', '-id']
        indexes = [
            models.Index(fields=['exam', 'student'], name='exams_sub_exam_student_idx'),
        ]

    def __str__(self):
        return f"{self.student} - {self.exam.title}: {self.total_score}"
