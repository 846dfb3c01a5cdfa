"""
GraphQL queries for grades management
"""
import strawberry
from typing import List
from strawberry.types import Info

from grades import services
from .types import StudentGradeType
from core.graphql.auth import require_auth
from core.graphql.types import UserType


@strawberry.type
class GradesQuery:

    @strawberry.field
    @require_auth
    def student_grades(self, info: Info, student_id: int) -> List[StudentGradeType]:
        """
        All grades of a student. Staff of the student's school can read
        any student; a student can read their own.
        """
        return services.student_grades(info.context.request.user, student_id)

    @strawberry.field
    @require_auth
    def top_students(self, info: Info, limit: int = 5) -> List[UserType]:
        """Best students of the school by average score"""
        return services.top_students(info.context.request.user, limit=limit)
