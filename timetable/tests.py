"""
Tests for the weekly schedule and its conflict checks
"""
from unittest.mock import patch

from django.test import SimpleTestCase

from core import services as core_services
from core.exceptions import ConflictError, InputError, NotFoundError, UnauthorizedError
from core.models import ClassSubject, User
from core.testing import PASSWORD, TenantTestCase, execute, make_school, reload
from timetable import services
from timetable.models import Schedule
from timetable.utils import intervals_overlap, sort_weekly
from timetable.validators import ScheduleConflictValidator


class IntervalTest(SimpleTestCase):

    def test_overlap_is_half_open(self):
        self.assertTrue(intervals_overlap('09:00', '10:00', '09:30', '10:30'))
        self.assertTrue(intervals_overlap('09:00', '12:00', '10:00', '11:00'))
        self.assertFalse(intervals_overlap('09:00', '10:00', '10:00', '11:00'))
        self.assertFalse(intervals_overlap('10:00', '11:00', '09:00', '10:00'))

    def test_weekly_sort(self):
        slots = [
            Schedule(day='Wednesday', start_time='08:00'),
            Schedule(day='Monday', start_time='13:00'),
            Schedule(day='Monday', start_time='09:00'),
        ]
        ordered = [(s.day, s.start_time) for s in sort_weekly(slots)]
        self.assertEqual(ordered, [('Monday', '09:00'), ('Monday', '13:00'), ('Wednesday', '08:00')])


class ScheduleConflictTest(TenantTestCase):
    """Classroom and teacher double-booking"""

    def setUp(self):
        super().setUp()
        self.other_classroom = core_services.create_classroom(self.admin, 'Grade 5B')
        self.science = core_services.create_subject(self.admin, 'Science')
        core_services.assign_subject(self.admin, self.classroom.id, self.science.id)
        core_services.assign_subject(
            self.admin,
            self.other_classroom.id,
            self.subject.id,
            teacher_id=self.teacher.id,
        )
        self.slot = services.create_schedule(
            self.admin, self.classroom.id, self.subject.id, 'Monday', '09:00', '10:00'
        )

    def test_classroom_overlap(self):
        with self.assertRaisesMessage(
            ConflictError,
            "Classroom conflict: This time slot overlaps with 09:00-10:00."
        ):
            services.create_schedule(self.admin, self.classroom.id, self.science.id, 'Monday', '09:30', '10:30')

    def test_touching_slots_are_allowed(self):
        schedule = services.create_schedule(
            self.admin, self.classroom.id, self.science.id, 'Monday', '10:00', '11:00'
        )
        self.assertEqual(schedule.start_time, '10:00')
        self.assertEqual(Schedule.objects.count(), 2)

    def test_same_time_other_day(self):
        services.create_schedule(self.admin, self.classroom.id, self.science.id, 'Tuesday', '09:00', '10:00')
        self.assertEqual(Schedule.objects.filter(day='Tuesday').count(), 1)

    def test_teacher_overlap_across_classrooms(self):
        with self.assertRaisesMessage(
            ConflictError,
            "Teacher conflict: The assigned teacher is already teaching another class at 09:00-10:00."
        ):
            services.create_schedule(
                self.admin, self.other_classroom.id, self.subject.id, 'Monday', '09:15', '09:45'
            )

    def test_booking_locks_the_teachers_assignments(self):
        select_for_update = ClassSubject.objects.select_for_update

        with patch.object(ClassSubject.objects, 'select_for_update', wraps=select_for_update) as lock:
            services.create_schedule(
                self.admin, self.other_classroom.id, self.subject.id, 'Tuesday', '09:00', '10:00'
            )
        lock.assert_called_once_with()

        with patch.object(ClassSubject.objects, 'select_for_update', wraps=select_for_update) as lock:
            services.create_schedule(
                self.admin, self.classroom.id, self.science.id, 'Tuesday', '09:00', '10:00'
            )
        lock.assert_not_called()

    def test_subject_without_teacher_skips_teacher_check(self):
        music = core_services.create_subject(self.admin, 'Music')
        core_services.assign_subject(self.admin, self.other_classroom.id, music.id)
        services.create_schedule(self.admin, self.classroom.id, self.science.id, 'Friday', '09:00', '10:00')

        is_valid, _ = ScheduleConflictValidator.validate_entry({
            'id': None,
            'classroom_id': self.other_classroom.id,
            'subject_id': music.id,
            'day': 'Friday',
            'start_time': '09:00',
            'end_time': '10:00',
        })
        self.assertTrue(is_valid)

    def test_update_ignores_the_slot_itself(self):
        moved = services.update_schedule(
            self.admin, self.slot.id, self.classroom.id, self.subject.id, 'Monday', '09:30', '10:30'
        )
        self.assertEqual((moved.start_time, moved.end_time), ('09:30', '10:30'))
        self.assertEqual(Schedule.objects.count(), 1)

    def test_update_into_a_busy_slot(self):
        other = services.create_schedule(
            self.admin, self.classroom.id, self.science.id, 'Monday', '11:00', '12:00'
        )
        with self.assertRaises(ConflictError):
            services.update_schedule(
                self.admin, other.id, self.classroom.id, self.science.id, 'Monday', '09:45', '10:15'
            )
        other.refresh_from_db()
        self.assertEqual(other.start_time, '11:00')

    def test_invalid_times(self):
        with self.assertRaises(InputError):
            services.create_schedule(self.admin, self.classroom.id, self.science.id, 'Monday', '9:00', '10:00')
        with self.assertRaises(InputError):
            services.create_schedule(self.admin, self.classroom.id, self.science.id, 'Monday', '14:00', '13:00')
        with self.assertRaises(InputError):
            services.create_schedule(self.admin, self.classroom.id, self.science.id, 'Monday', '24:00', '24:30')

    def test_invalid_day(self):
        with self.assertRaises(InputError):
            services.create_schedule(self.admin, self.classroom.id, self.science.id, 'Funday', '13:00', '14:00')

    def test_subject_must_be_assigned_to_the_classroom(self):
        art = core_services.create_subject(self.admin, 'Art')
        with self.assertRaisesMessage(NotFoundError, "Subject not found"):
            services.create_schedule(self.admin, self.classroom.id, art.id, 'Monday', '13:00', '14:00')

    def test_other_school_cannot_book(self):
        _, rival_admin = make_school('Rival Academy', 'admin@rival.test')
        with self.assertRaisesMessage(NotFoundError, "Classroom not found"):
            services.create_schedule(rival_admin, self.classroom.id, self.subject.id, 'Monday', '13:00', '14:00')
        with self.assertRaises(NotFoundError):
            services.delete_schedule(rival_admin, self.slot.id)

    def test_only_admins_manage_the_schedule(self):
        with self.assertRaises(UnauthorizedError):
            services.create_schedule(self.teacher, self.classroom.id, self.subject.id, 'Monday', '13:00', '14:00')

    def test_delete(self):
        services.delete_schedule(self.admin, self.slot.id)
        self.assertFalse(Schedule.objects.exists())


class ScheduleViewTest(TenantTestCase):
    """Listings for each role"""

    def setUp(self):
        super().setUp()
        self.science = core_services.create_subject(self.admin, 'Science')
        core_services.assign_subject(self.admin, self.classroom.id, self.science.id)
        services.create_schedule(self.admin, self.classroom.id, self.science.id, 'Wednesday', '08:00', '09:00')
        services.create_schedule(self.admin, self.classroom.id, self.subject.id, 'Monday', '13:00', '14:00')
        services.create_schedule(self.admin, self.classroom.id, self.subject.id, 'Monday', '09:00', '10:00')

    def test_admin_listing_is_weekly_ordered_and_filterable(self):
        slots = [(s.day, s.start_time) for s in services.list_schedules(self.admin)]
        self.assertEqual(slots, [('Monday', '09:00'), ('Monday', '13:00'), ('Wednesday', '08:00')])
        self.assertEqual(len(services.list_schedules(self.admin, day='Wednesday')), 1)

    def test_student_sees_class_week(self):
        result = execute('{ mySchedule { day startTime subject { name } } }', user=self.student)
        self.assertIsNone(result.errors)
        self.assertEqual(result.data['mySchedule'], [
            {'day': 'Monday', 'startTime': '09:00', 'subject': {'name': 'Mathematics'}},
            {'day': 'Monday', 'startTime': '13:00', 'subject': {'name': 'Mathematics'}},
            {'day': 'Wednesday', 'startTime': '08:00', 'subject': {'name': 'Science'}},
        ])

    def test_teacher_sees_only_taught_slots(self):
        slots = services.schedules_for_user(self.teacher)
        self.assertEqual([s.subject_id for s in slots], [self.subject.id, self.subject.id])

    def test_unenrolled_student_has_empty_week(self):
        loner = core_services.create_user(
            self.admin,
            user_name='Loner',
            email='loner@greenwood.test',
            role=User.STUDENT,
            password=PASSWORD,
        )
        self.assertEqual(services.schedules_for_user(reload(loner)), [])

    def test_create_schedule_mutation_conflict(self):
        mutation = """
            mutation ($classId: Int!, $subjectId: Int!) {
                createSchedule(classId: $classId, subjectId: $subjectId, day: "Monday", startTime: "09:30", endTime: "10:30") {
                    id
                }
            }
        """
        result = execute(
            mutation,
            user=self.admin,
            variables={'classId': self.classroom.id, 'subjectId': self.science.id}
        )
        self.assertEqual(result.errors[0].extensions['code'], 'CONFLICT')

    def test_rest_create_and_list(self):
        response = self.api('post', 'schedules', user=self.admin, data={
            'classId': self.classroom.id,
            'subjectId': self.science.id,
            'day': 'Friday',
            'startTime': '10:00',
            'endTime': '11:00',
        })
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['day'], 'Friday')

        response = self.api('get', f'schedules?classId={self.classroom.id}&day=Friday', user=self.admin)
        self.assertEqual(len(response.json()['schedules']), 1)

        response = self.api('post', 'schedules', user=self.admin, data={
            'classId': self.classroom.id,
            'subjectId': self.science.id,
            'day': 'Friday',
            'startTime': '10:30',
            'endTime': '11:30',
        })
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['code'], 'CONFLICT')
