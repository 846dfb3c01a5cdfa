"""
GraphQL types for the Exam System
"""
import strawberry
import strawberry_django
from datetime import datetime
from typing import List, Optional
from strawberry.types import Info

from exams.models import Exam, Question, ExamSubmission
from core.graphql.auth import current_user
from core.graphql.types import ClassRoomType, SubjectType, UserType
from core.permissions import is_student


# ==================================================
# QUESTION TYPE
# ==================================================

@strawberry_django.type(Question)
class QuestionType:
    id: int
    question_text: str
    options: List[str]
    points: int
    order: int

    @strawberry_django.field
    def exam_id(self) -> int:
        return self.exam_id

    @strawberry_django.field
    def correct_answer_index(self, info: Info) -> Optional[int]:
        """Hidden from students"""
        if is_student(current_user(info)):
            return None
        return self.correct_answer_index


# ==================================================
# SUBMISSION TYPE
# ==================================================

@strawberry_django.type(ExamSubmission)
class ExamSubmissionType:
    id: int
    total_score: int
    answers: strawberry.scalars.JSON
    submitted_at: datetime
    student: UserType

    @strawberry_django.field
    def student_id(self) -> int:
        return self.student_id

    @strawberry_django.field
    def exam_id(self) -> int:
        return self.exam_id

    @strawberry_django.field
    def exam(self) -> "ExamType":
        return self.exam


# ==================================================
# EXAM TYPE
# ==================================================

@strawberry_django.type(Exam)
class ExamType:
    id: int
    title: str
    type: str
    description: Optional[str]
    duration_in_minutes: int
    created_at: datetime
    subject: SubjectType
    teacher: UserType

    @strawberry_django.field
    def subject_id(self) -> int:
        return self.subject_id

    @strawberry_django.field
    def class_id(self) -> int:
        return self.classroom_id

    @strawberry_django.field
    def teacher_id(self) -> int:
        return self.teacher_id

    @strawberry_django.field
    def class_room(self) -> ClassRoomType:
        return self.classroom

    @strawberry_django.field
    def questions(self) -> List[QuestionType]:
        return self.questions.all()

    @strawberry_django.field
    def total_points(self) -> int:
        return self.total_points

    @strawberry_django.field
    def submissions(self, info: Info) -> List[ExamSubmissionType]:
        """Students only ever see their own attempts"""
        user = current_user(info)
        submissions = self.submissions.select_related("student")
        if user is None:
            return []
        if is_student(user):
            return submissions.filter(student=user)
        return submissions

    @strawberry_django.field
    def has_submitted(self, info: Info) -> bool:
        user = current_user(info)
        if not is_student(user):
            return False
        return self.submissions.filter(student=user).exists()
