"""
python manage.py seed_demo
Creates a demo school with staff, students, a weekly schedule and one exam.
Running it again leaves existing rows alone.
"""
from django.core.management.base import BaseCommand
from django.db import transaction

from core import services
from core.models import ClassRoom, ClassSubject, Subject, User
from exams.models import Exam
from exams.services import create_exam
from timetable.models import Schedule
from timetable.services import create_schedule

DEMO_PASSWORD = 'demo1234'
ADMIN_EMAIL = 'admin@demo-school.test'

TEACHERS = [
    ('Valerie Frizzle', 'frizzle@demo-school.test'),
    ('Nigel Ratburn', 'ratburn@demo-school.test'),
]

CLASSROOMS = {
    'Grade 5A': ['arnold', 'wanda', 'keesha'],
    'Grade 5B': ['ralphie', 'phoebe'],
}

# (subject, teacher email)
CURRICULUM = [
    ('Mathematics', 'frizzle@demo-school.test'),
    ('Science', 'frizzle@demo-school.test'),
    ('English', 'ratburn@demo-school.test'),
]

# (classroom, subject, day, start, end)
WEEK = [
    ('Grade 5A', 'Mathematics', 'Monday', '09:00', '10:00'),
    ('Grade 5A', 'English', 'Monday', '10:00', '11:00'),
    ('Grade 5A', 'Science', 'Wednesday', '09:00', '10:30'),
    ('Grade 5B', 'Mathematics', 'Monday', '10:00', '11:00'),
    ('Grade 5B', 'English', 'Monday', '09:00', '10:00'),
    ('Grade 5B', 'Science', 'Thursday', '13:00', '14:00'),
]


class Command(BaseCommand):
    help = 'Seed an idempotent demo tenant (admin, school, teachers, students, schedule, exam)'

    def handle(self, *args, **options):
        with transaction.atomic():
            admin = self.get_admin()
            teachers = {email: self.get_member(admin, name, email, User.TEACHER) for name, email in TEACHERS}

            classrooms = {}
            for classroom_name, students in CLASSROOMS.items():
                classroom = self.get_classroom(admin, classroom_name)
                classrooms[classroom_name] = classroom
                for student in students:
                    self.get_member(
                        admin,
                        student.title(),
                        f'{student}@demo-school.test',
                        User.STUDENT,
                        class_id=classroom.id,
                    )

            subjects = {}
            for subject_name, teacher_email in CURRICULUM:
                subject = self.get_subject(admin, subject_name)
                subjects[subject_name] = subject
                for classroom in classrooms.values():
                    if not ClassSubject.objects.filter(classroom=classroom, subject=subject).exists():
                        services.assign_subject(admin, classroom.id, subject.id, teachers[teacher_email].id)

            for classroom_name, subject_name, day, start_time, end_time in WEEK:
                classroom = classrooms[classroom_name]
                if not Schedule.objects.filter(classroom=classroom, day=day, start_time=start_time).exists():
                    create_schedule(admin, classroom.id, subjects[subject_name].id, day, start_time, end_time)

            self.seed_exam(admin, classrooms['Grade 5A'], subjects['Mathematics'])

        self.stdout.write(self.style.SUCCESS('Demo school ready'))
        self.stdout.write(f'Admin login: {ADMIN_EMAIL} / {DEMO_PASSWORD}')

    def get_admin(self):
        admin = User.objects.filter(email=ADMIN_EMAIL).first()
        if admin is None:
            admin = services.create_admin(ADMIN_EMAIL, DEMO_PASSWORD, 'Demo Principal')
            self.stdout.write(f'Created admin {ADMIN_EMAIL}')
        if not admin.school_id:
            services.create_school(admin, 'Walkerville Elementary')
            self.stdout.write('Created school Walkerville Elementary')
        return User.objects.select_related('school').get(pk=admin.pk)

    def get_member(self, admin, user_name, email, role, class_id=None):
        user = User.objects.filter(email=email).first()
        if user is None:
            user = services.create_user(
                admin,
                user_name=user_name,
                email=email,
                role=role,
                password=DEMO_PASSWORD,
                class_id=class_id,
            )
            self.stdout.write(f'Created {role.lower()} {email}')
        return user

    def get_classroom(self, admin, name):
        classroom = ClassRoom.objects.filter(school_id=admin.school_id, name=name).first()
        return classroom or services.create_classroom(admin, name)

    def get_subject(self, admin, name):
        subject = Subject.objects.filter(school_id=admin.school_id, name=name).first()
        return subject or services.create_subject(admin, name)

    def seed_exam(self, admin, classroom, subject):
        if Exam.objects.filter(classroom=classroom, subject=subject, title='Fractions Quiz').exists():
            return
        create_exam(
            admin,
            title='Fractions Quiz',
            type='QUIZ',
            duration_in_minutes=20,
            subject_id=subject.id,
            class_id=classroom.id,
            description='Warm-up on halves and quarters',
            questions=[
                {
                    'question_text': 'What is 1/2 + 1/4?',
                    'options': ['2/6', '3/4', '1/8'],
                    'correct_answer_index': 1,
                    'points': 2,
                },
                {
                    'question_text': 'Which fraction is the largest?',
                    'options': ['1/3', '1/5', '1/2'],
                    'correct_answer_index': 2,
                    'points': 1,
                },
            ],
        )
        self.stdout.write('Created exam Fractions Quiz')
