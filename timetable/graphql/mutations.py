"""
GraphQL mutations for the weekly schedule
"""
import strawberry
from strawberry.types import Info

from timetable import services
from .types import ScheduleType
from core.graphql.auth import require_auth
from core.graphql.types import DeleteResponse


@strawberry.type
class TimetableMutation:
    """
    GraphQL mutations for the schedule system
    """

    @strawberry.mutation
    @require_auth
    def create_schedule(
        self,
        info: Info,
        class_id: int,
        subject_id: int,
        day: str,
        start_time: str,
        end_time: str
    ) -> ScheduleType:
        """
        Book a weekly slot for a classroom

        Raises:
            ConflictError: if the classroom or the subject's teacher is busy
        """
        return services.create_schedule(
            info.context.request.user,
            class_id=class_id,
            subject_id=subject_id,
            day=day,
            start_time=start_time,
            end_time=end_time,
        )

    @strawberry.mutation
    @require_auth
    def update_schedule(
        self,
        info: Info,
        id: int,
        class_id: int,
        subject_id: int,
        day: str,
        start_time: str,
        end_time: str
    ) -> ScheduleType:
        return services.update_schedule(
            info.context.request.user,
            id,
            class_id=class_id,
            subject_id=subject_id,
            day=day,
            start_time=start_time,
            end_time=end_time,
        )

    @strawberry.mutation
    @require_auth
    def delete_schedule(self, info: Info, id: int) -> DeleteResponse:
        services.delete_schedule(info.context.request.user, id)
        return DeleteResponse(success=True, message="Schedule deleted successfully")
