"""
GraphQL queries for the weekly schedule
"""
import strawberry
from typing import List, Optional
from strawberry.types import Info

from timetable import services
from .types import ScheduleType
from core.graphql.auth import require_auth


@strawberry.type
class TimetableQuery:
    """
    GraphQL queries for the schedule system
    """

    @strawberry.field
    @require_auth
    def schedules(
        self,
        info: Info,
        class_id: Optional[int] = None,
        day: Optional[str] = None
    ) -> List[ScheduleType]:
        """
        Weekly schedule of the admin's school, Monday first

        Args:
            class_id: Optional classroom filter
            day: Optional day filter (Monday..Sunday)
        """
        return services.list_schedules(info.context.request.user, class_id=class_id, day=day)

    @strawberry.field
    @require_auth
    def my_schedule(self, info: Info) -> List[ScheduleType]:
        """Week of the requesting student or teacher"""
        return services.schedules_for_user(info.context.request.user)
