"""
Grade book: one row per recorded score of a student in a subject
"""
from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator
from django.utils import timezone


class StudentGrade(models.Model):
    """
    A recorded score. REGULAR rows are entered by staff (and seeded at 0 on
    enrollment/assignment); the other types mirror exam submissions.
    """
    REGULAR = 'REGULAR'

    TYPE_CHOICES = [
        (REGULAR, 'Regular'),
        ('QUIZ', 'Quiz'),
        ('MIDTERM', 'Midterm Exam'),
        ('FINAL', 'Final Exam'),
        ('ASSIGNMENT', 'Assignment'),
    ]

    tenant_path = 'classroom__school'

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='grades',
        help_text="Student who received this grade"
    )
    subject = models.ForeignKey(
        'core.Subject',
        on_delete=models.CASCADE,
        related_name='grades',
        help_text="Subject for which the grade is recorded"
    )
    classroom = models.ForeignKey(
        'core.ClassRoom',
        on_delete=models.CASCADE,
        related_name='grades',
        help_text="Classroom the student attended when graded"
    )
    score = models.IntegerField(
        default=0,
        validators=[MinValueValidator(0)]
    )
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=REGULAR)
    date_recorded = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-date_recorded', '-id']
        indexes = [
            models.Index(fields=['student', 'subject'], name='grades_student_subject_idx'),
            models.Index(fields=['classroom', 'subject'], name='grades_class_subject_idx'),
        ]

    def __str__(self):
        return f"{self.student} - {self.subject.name}: {self.score} ({self.type})"
