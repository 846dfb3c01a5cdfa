"""
GraphQL queries for the Exam System
"""
import strawberry
from typing import List
from strawberry.types import Info

from exams import services
from .types import ExamType, ExamSubmissionType
from core.graphql.auth import require_auth


@strawberry.type
class ExamQuery:

    @strawberry.field
    @require_auth
    def available_exams(self, info: Info) -> List[ExamType]:
        """
        Students: exams of their class
        Teachers: exams they created
        Admins: every exam of the school
        """
        return services.available_exams(info.context.request.user)

    @strawberry.field
    @require_auth
    def exam(self, info: Info, id: int) -> ExamType:
        return services.get_exam(info.context.request.user, id)

    @strawberry.field
    @require_auth
    def exam_for_taking(self, info: Info, id: int) -> ExamType:
        """Exam with its questions, answers hidden; students of the exam's class only"""
        return services.exam_for_taking(info.context.request.user, id)

    @strawberry.field
    @require_auth
    def exam_reports(self, info: Info, exam_id: int) -> List[ExamSubmissionType]:
        return services.exam_reports(info.context.request.user, exam_id)
