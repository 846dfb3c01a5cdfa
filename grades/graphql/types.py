"""
GraphQL types for the grade book
"""
import strawberry
import strawberry_django
from datetime import datetime

from grades.models import StudentGrade
from core.graphql.types import SubjectType, UserType


@strawberry_django.type(StudentGrade)
class StudentGradeType:
    id: int
    score: int
    type: str
    date_recorded: datetime
    subject: SubjectType
    student: UserType

    @strawberry_django.field
    def student_id(self) -> int:
        return self.student_id

    @strawberry_django.field
    def subject_id(self) -> int:
        return self.subject_id

    @strawberry_django.field
    def class_id(self) -> int:
        return self.classroom_id


@strawberry.input
class GradeUpdateInput:
    id: strawberry.ID
    score: int
