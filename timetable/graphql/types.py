"""
GraphQL types for the weekly schedule
"""
import strawberry_django
from datetime import datetime

from timetable.models import Schedule
from core.graphql.types import ClassRoomType, SubjectType


@strawberry_django.type(Schedule)
class ScheduleType:
    id: int
    day: str
    start_time: str
    end_time: str
    created_at: datetime
    subject: SubjectType

    @strawberry_django.field
    def class_id(self) -> int:
        return self.classroom_id

    @strawberry_django.field
    def subject_id(self) -> int:
        return self.subject_id

    @strawberry_django.field
    def class_room(self) -> ClassRoomType:
        return self.classroom
