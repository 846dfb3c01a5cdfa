"""
GraphQL mutations for grades management
"""
import strawberry
from typing import List
from strawberry.types import Info

from grades import services
from grades.models import StudentGrade
from .types import GradeUpdateInput, StudentGradeType
from core.graphql.auth import require_auth
from core.graphql.types import DeleteResponse


@strawberry.type
class GradesMutation:

    @strawberry.mutation
    @require_auth
    def add_grade(
        self,
        info: Info,
        student_id: int,
        subject_id: int,
        score: int,
        type: str = StudentGrade.REGULAR
    ) -> StudentGradeType:
        return services.add_grade(info.context.request.user, student_id, subject_id, score, type=type)

    @strawberry.mutation
    @require_auth
    def update_bulk_grades(self, info: Info, grades: List[GradeUpdateInput]) -> List[StudentGradeType]:
        """
        Update several scores at once. Grades the caller cannot edit are skipped.
        """
        updates = []
        for grade in grades:
            try:
                grade_id = int(grade.id)
            except ValueError:
                continue
            updates.append((grade_id, grade.score))
        return services.update_bulk_grades(info.context.request.user, updates)

    @strawberry.mutation
    @require_auth
    def delete_grade(self, info: Info, id: int) -> DeleteResponse:
        services.delete_grade(info.context.request.user, id)
        return DeleteResponse(success=True, message="Grade deleted successfully")
