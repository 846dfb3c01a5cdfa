"""
Weekly schedule operations: conflict-checked create/update, delete, listing
"""
import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from core.exceptions import ConflictError, InputError, NotFoundError, validation_messages
from core.forms import validate
from core.models import ClassRoom, ClassSubject, User
from core.permissions import ensure_admin, get_scoped, scoped
from timetable.forms import ScheduleForm
from timetable.models import Schedule
from timetable.utils import sort_weekly
from timetable.validators import ScheduleConflictValidator

logger = logging.getLogger(__name__)


def _save_checked(admin, schedule, class_id, subject_id, day, start_time, end_time):
    """
    Validate and persist ``schedule`` with the given slot.
    The classroom row and the teacher's assignments stay locked from the
    conflict checks until the write.
    """
    data = validate(
        ScheduleForm,
        class_id=class_id,
        subject_id=subject_id,
        day=day,
        start_time=start_time,
        end_time=end_time,
    )

    try:
        with transaction.atomic():
            classroom = get_scoped(
                ClassRoom,
                admin,
                data['class_id'],
                queryset=ClassRoom.objects.select_for_update(),
                label="Classroom",
            )

            assignment = ClassSubject.objects.filter(classroom=classroom, subject_id=data['subject_id']).first()
            if assignment is None:
                raise NotFoundError("Subject not found")

            # Bookings in other classrooms taught by the same teacher wait here
            if assignment.teacher_id:
                list(
                    ClassSubject.objects.select_for_update()
                    .filter(teacher_id=assignment.teacher_id)
                    .order_by('id')
                )

            schedule.classroom = classroom
            schedule.subject_id = data['subject_id']
            schedule.day = data['day']
            schedule.start_time = data['start_time']
            schedule.end_time = data['end_time']

            try:
                schedule.full_clean(validate_unique=False)
            except ValidationError as e:
                raise InputError(validation_messages(e))

            is_valid, error_message = ScheduleConflictValidator.validate_entry({
                'id': schedule.pk,
                'classroom_id': classroom.id,
                'subject_id': schedule.subject_id,
                'day': schedule.day,
                'start_time': schedule.start_time,
                'end_time': schedule.end_time,
            })
            if not is_valid:
                logger.info("Schedule rejected for classroom %s: %s", classroom.id, error_message)
                raise ConflictError(error_message)

            schedule.save()
    except IntegrityError:
        raise ConflictError("Classroom conflict: This time slot is already booked.")

    return schedule


def create_schedule(admin, class_id, subject_id, day, start_time, end_time):
    ensure_admin(admin)
    return _save_checked(admin, Schedule(), class_id, subject_id, day, start_time, end_time)


def update_schedule(admin, schedule_id, class_id, subject_id, day, start_time, end_time):
    """Move a slot; the same checks as creation run, ignoring the slot itself"""
    ensure_admin(admin)
    schedule = get_scoped(Schedule, admin, schedule_id, label="Schedule")
    return _save_checked(admin, schedule, class_id, subject_id, day, start_time, end_time)


def delete_schedule(admin, schedule_id):
    ensure_admin(admin)
    schedule = get_scoped(Schedule, admin, schedule_id, label="Schedule")
    schedule.delete()


def list_schedules(admin, class_id=None, day=None):
    ensure_admin(admin)
    qs = scoped(Schedule.objects.select_related('classroom', 'subject'), admin)
    if class_id is not None:
        qs = qs.filter(classroom_id=class_id)
    if day:
        qs = qs.filter(day=day)
    return sort_weekly(qs)


def schedules_for_user(user):
    """
    Student: the week of their classroom.
    Teacher: every slot of the (classroom, subject) pairs they teach.
    """
    if user.role == User.STUDENT:
        if not user.classroom_id:
            return []
        return sort_weekly(Schedule.objects.filter(classroom_id=user.classroom_id).select_related('subject'))

    if user.role == User.TEACHER:
        pairs = ClassSubject.objects.filter(teacher=user).values_list('classroom_id', 'subject_id')
        slots = []
        for classroom_id, subject_id in pairs:
            slots.extend(
                Schedule.objects.filter(classroom_id=classroom_id, subject_id=subject_id).select_related('subject')
            )
        return sort_weekly(slots)

    return []
