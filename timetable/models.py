"""
Weekly schedule for classrooms
"""
from django.db import models
from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator

from core.models import ClassRoom, Subject


TIME_PATTERN = r'^([01]\d|2[0-3]):[0-5]\d$'

time_validator = RegexValidator(
    regex=TIME_PATTERN,
    message="Time must be in HH:MM format (00:00 - 23:59)"
)


class Schedule(models.Model):
    """
    One weekly slot: a subject taught to a classroom on a day between two times.
    Times are zero-padded "HH:MM" strings, so string order is time order.
    """
    DAY_CHOICES = [
        ('Monday', 'Monday'),
        ('Tuesday', 'Tuesday'),
        ('Wednesday', 'Wednesday'),
        ('Thursday', 'Thursday'),
        ('Friday', 'Friday'),
        ('Saturday', 'Saturday'),
        ('Sunday', 'Sunday'),
    ]

    tenant_path = "classroom__school"

    classroom = models.ForeignKey(
        ClassRoom,
        on_delete=models.CASCADE,
        related_name="schedules"
    )
    subject = models.ForeignKey(
        Subject,
        on_delete=models.CASCADE,
        related_name="schedules"
    )
    day = models.CharField(max_length=10, choices=DAY_CHOICES)
    start_time = models.CharField(
        max_length=5,
        validators=[time_validator],
        help_text="Start of the slot (HH:MM)"
    )
    end_time = models.CharField(
        max_length=5,
        validators=[time_validator],
        help_text="End of the slot (HH:MM), exclusive"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('classroom', 'day', 'start_time')
        indexes = [
            models.Index(fields=['classroom', 'day'], name='tt_schedule_class_day_idx'),
            models.Index(fields=['subject', 'day'], name='tt_schedule_subject_day_idx'),
        ]

    def __str__(self):
        return f"{self.classroom.name} - {self.subject.name} - {self.day} {self.start_time}-{self.end_time}"

    def clean(self):
        if self.start_time and self.end_time and self.start_time >= self.end_time:
            raise ValidationError("Start time must be before end time")
