import strawberry
import strawberry_django
from datetime import datetime
from typing import Annotated, List, Optional

from core.models import (
    School,
    ClassRoom,
    Subject,
    ClassSubject,
    Enrollment,
    User,
)

ScheduleType = Annotated["ScheduleType", strawberry.lazy("timetable.graphql.types")]
StudentGradeType = Annotated["StudentGradeType", strawberry.lazy("grades.graphql.types")]


# ==================================================
# USER
# ==================================================

@strawberry_django.type(User)
class UserType:
    id: int
    email: str
    user_name: str
    role: str
    school_id: Optional[int]
    is_active: bool
    date_joined: datetime

    @strawberry_django.field
    def class_id(self) -> Optional[int]:
        """Classroom of an enrolled student"""
        return self.classroom_id

    @strawberry_django.field
    def class_room(self) -> Optional["ClassRoomType"]:
        enrollment = getattr(self, "enrollment", None)
        return enrollment.classroom if enrollment else None

    @strawberry_django.field
    def subjects_taught(self) -> List["ClassSubjectType"]:
        return self.teaching_assignments.select_related("classroom", "subject")

    @strawberry_django.field
    def grades(self) -> List[StudentGradeType]:
        return self.grades.select_related("subject")

    @strawberry_django.field
    def average_score(self) -> float:
        from grades.utils import average_score
        return average_score(self.grades.all())

    @strawberry_django.field
    def success_rate(self) -> float:
        from grades.utils import success_rate
        return success_rate(self.grades.all())

    @strawberry_django.field
    def schedules(self) -> List[ScheduleType]:
        """Student: their class's week. Teacher: every slot they teach."""
        from timetable.services import schedules_for_user
        return schedules_for_user(self)


# ==================================================
# SCHOOL & CLASSROOMS
# ==================================================

@strawberry_django.type(School)
class SchoolType:
    id: int
    name: str
    created_at: datetime
    admin: UserType

    @strawberry_django.field
    def class_rooms(self) -> List["ClassRoomType"]:
        return self.classrooms.all()


@strawberry_django.type(ClassRoom)
class ClassRoomType:
    id: int
    name: str
    school_id: int
    created_at: datetime

    @strawberry_django.field
    def subjects(self) -> List["SubjectType"]:
        return Subject.objects.filter(class_subjects__classroom=self).order_by("name")

    @strawberry_django.field
    def assignments(self) -> List["ClassSubjectType"]:
        return self.class_subjects.select_related("subject", "teacher")

    @strawberry_django.field
    def students(self) -> List[UserType]:
        return User.objects.filter(enrollment__classroom=self).order_by("user_name")

    @strawberry_django.field
    def schedules(self) -> List[ScheduleType]:
        from timetable.utils import sort_weekly
        return sort_weekly(self.schedules.select_related("subject"))


@strawberry_django.type(Subject)
class SubjectType:
    id: int
    name: str
    school_id: int
    created_at: datetime

    @strawberry_django.field
    def assignments(self) -> List["ClassSubjectType"]:
        return self.class_subjects.select_related("classroom", "teacher")

    @strawberry_django.field
    def grades(self) -> List[StudentGradeType]:
        return self.grades.select_related("student")

    @strawberry_django.field
    def success_rate(self) -> float:
        """Percentage of this subject's grades that pass"""
        from grades.utils import success_rate
        return success_rate(self.grades.all())


@strawberry_django.type(ClassSubject)
class ClassSubjectType:
    id: int
    created_at: datetime
    subject: SubjectType
    teacher: Optional[UserType]

    @strawberry_django.field
    def class_id(self) -> int:
        return self.classroom_id

    @strawberry_django.field
    def subject_id(self) -> int:
        return self.subject_id

    @strawberry_django.field
    def teacher_id(self) -> Optional[int]:
        return self.teacher_id

    @strawberry_django.field
    def class_room(self) -> ClassRoomType:
        return self.classroom


@strawberry_django.type(Enrollment)
class EnrollmentType:
    id: int
    student: UserType
    enrolled_at: datetime

    @strawberry_django.field
    def class_room(self) -> ClassRoomType:
        return self.classroom


@strawberry.type
class AdminStatsType:
    total_students: int
    total_teachers: int
    total_class_rooms: int


@strawberry.type
class DeleteResponse:
    success: bool
    message: str
