"""
GraphQL mutations for the Exam System
"""
import strawberry
from typing import List, Optional
from strawberry.types import Info

from exams import services
from .types import ExamType, ExamSubmissionType
from core.graphql.auth import require_auth
from core.graphql.types import DeleteResponse


# ==================================================
# INPUT TYPES
# ==================================================

@strawberry.input
class QuestionInput:
    question_text: str
    options: List[str]
    correct_answer_index: int
    points: int = 1


@strawberry.input
class StudentAnswerInput:
    question_id: int
    selected_index: int


# ==================================================
# MUTATIONS
# ==================================================

@strawberry.type
class ExamMutation:

    @strawberry.mutation
    @require_auth
    def create_exam_with_questions(
        self,
        info: Info,
        title: str,
        type: str,
        duration_in_minutes: int,
        subject_id: int,
        class_id: int,
        questions: List[QuestionInput],
        description: Optional[str] = None
    ) -> ExamType:
        """
        Create an exam together with its questions (all or nothing)
        """
        return services.create_exam(
            info.context.request.user,
            title=title,
            type=type,
            description=description,
            duration_in_minutes=duration_in_minutes,
            subject_id=subject_id,
            class_id=class_id,
            questions=[
                {
                    'question_text': question.question_text,
                    'options': list(question.options),
                    'correct_answer_index': question.correct_answer_index,
                    'points': question.points,
                }
                for question in questions
            ],
        )

    @strawberry.mutation
    @require_auth
    def delete_exam(self, info: Info, id: int) -> DeleteResponse:
        services.delete_exam(info.context.request.user, id)
        return DeleteResponse(success=True, message="Exam deleted successfully")

    @strawberry.mutation
    @require_auth
    def submit_exam_response(
        self,
        info: Info,
        exam_id: int,
        answers: List[StudentAnswerInput]
    ) -> ExamSubmissionType:
        """
        Score the student's answers; the result is also recorded as a grade
        """
        return services.submit_exam(
            info.context.request.user,
            exam_id,
            [
                {'question_id': answer.question_id, 'selected_index': answer.selected_index}
                for answer in answers
            ],
        )
