"""
Validators for schedule entries
Checks for scheduling conflicts before saving
"""
from functools import reduce
from operator import or_
from typing import Dict, Tuple

from django.db.models import Q

from .utils import intervals_overlap


class ScheduleConflictValidator:
    """
    Validates schedule entries for conflicts
    Ensures no double-booking of classrooms or teachers
    """

    @staticmethod
    def validate_entry(entry_data: Dict) -> Tuple[bool, str]:
        """
        Check for scheduling conflicts before creating/updating an entry

        Args:
            entry_data: Dictionary containing:
                - id: Schedule ID (None for new entries)
                - classroom_id: Classroom ID
                - subject_id: Subject ID
                - day: Day name (Monday..Sunday)
                - start_time: "HH:MM"
                - end_time: "HH:MM"

        Returns:
            Tuple of (is_valid: bool, error_message: str)
            - (True, "No conflicts found") if valid
            - (False, "Error message") if conflicts exist
        """
        from core.models import ClassSubject
        from .models import Schedule

        entry_id = entry_data.get('id')
        classroom_id = entry_data['classroom_id']
        subject_id = entry_data['subject_id']
        day = entry_data['day']
        start_time = entry_data['start_time']
        end_time = entry_data['end_time']

        # 1. Classroom double-booking check
        same_room = Schedule.objects.filter(classroom_id=classroom_id, day=day)
        if entry_id:
            same_room = same_room.exclude(id=entry_id)

        for slot in same_room:
            if intervals_overlap(start_time, end_time, slot.start_time, slot.end_time):
                return (
                    False,
                    f"Classroom conflict: This time slot overlaps with {slot.start_time}-{slot.end_time}."
                )

        # 2. Teacher double-booking check (skipped when nobody teaches the subject yet)
        teacher_id = ClassSubject.objects.filter(
            classroom_id=classroom_id,
            subject_id=subject_id
        ).values_list('teacher_id', flat=True).first()

        if teacher_id:
            pairs = ClassSubject.objects.filter(teacher_id=teacher_id).values_list('classroom_id', 'subject_id')
            taught = reduce(or_, (Q(classroom_id=c, subject_id=s) for c, s in pairs))

            teacher_slots = Schedule.objects.filter(taught, day=day)
            if entry_id:
                teacher_slots = teacher_slots.exclude(id=entry_id)

            for slot in teacher_slots:
                if intervals_overlap(start_time, end_time, slot.start_time, slot.end_time):
                    return (
                        False,
                        f"Teacher conflict: The assigned teacher is already teaching another class at "
                        f"{slot.start_time}-{slot.end_time}."
                    )

        # All checks passed
        return (True, "No conflicts found")
