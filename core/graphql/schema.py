import strawberry
from django.conf import settings
from strawberry.extensions import QueryDepthLimiter

from .queries import Query as CoreQuery
from .mutations import Mutation as CoreMutation
from .extensions import ErrorCodeExtension, mask_unexpected_errors
from timetable.graphql.queries import TimetableQuery
from timetable.graphql.mutations import TimetableMutation
from grades.graphql.queries import GradesQuery
from grades.graphql.mutations import GradesMutation
from exams.graphql.queries import ExamQuery
from exams.graphql.mutations import ExamMutation

# ==================================================
# MERGED SCHEMA
# ==================================================

# Merge queries from core, timetable, grades and exams apps
@strawberry.type
class Query(CoreQuery, TimetableQuery, GradesQuery, ExamQuery):
    pass


# Merge mutations from core, timetable, grades and exams apps
@strawberry.type
class Mutation(CoreMutation, TimetableMutation, GradesMutation, ExamMutation):
    pass


# Create unified schema
schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    extensions=[
        lambda: QueryDepthLimiter(max_depth=settings.GRAPHQL_MAX_DEPTH),
        ErrorCodeExtension,
        mask_unexpected_errors,
    ]
)
