import strawberry
from typing import List, Optional
from strawberry.types import Info

from core import services
from .types import (
    AdminStatsType,
    ClassRoomType,
    SchoolType,
    SubjectType,
    UserType,
)
from .auth import current_user, require_auth


@strawberry.type
class Query:

    # ==================================================
    # CURRENT USER & SCHOOL
    # ==================================================
    @strawberry.field
    def me(self, info: Info) -> Optional[UserType]:
        """
        Get current authenticated user info
        Used for page refresh to restore auth state
        Returns null without a valid JWT token
        """
        return current_user(info)

    @strawberry.field
    @require_auth
    def my_school(self, info: Info) -> Optional[SchoolType]:
        return services.my_school(info.context.request.user)

    @strawberry.field
    @require_auth
    def school_details(self, info: Info, school_id: int) -> SchoolType:
        return services.school_details(info.context.request.user, school_id)

    @strawberry.field
    @require_auth
    def admin_dashboard_stats(self, info: Info) -> AdminStatsType:
        stats = services.dashboard_stats(info.context.request.user)
        return AdminStatsType(**stats)

    # ==================================================
    # TEACHERS & STUDENTS
    # ==================================================
    @strawberry.field
    @require_auth
    def my_teachers(self, info: Info) -> List[UserType]:
        return services.list_teachers(info.context.request.user)

    @strawberry.field
    @require_auth
    def teacher(self, info: Info, id: int) -> UserType:
        return services.get_teacher(info.context.request.user, id)

    @strawberry.field
    @require_auth
    def my_students(
        self,
        info: Info,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        search: Optional[str] = None
    ) -> List[UserType]:
        return services.list_students(info.context.request.user, limit=limit, offset=offset, search=search)

    @strawberry.field
    @require_auth
    def total_students_count(self, info: Info) -> int:
        return services.count_students(info.context.request.user)

    @strawberry.field
    @require_auth
    def student(self, info: Info, id: int) -> UserType:
        return services.get_student(info.context.request.user, id)

    # ==================================================
    # CLASSROOMS
    # ==================================================
    @strawberry.field
    @require_auth
    def class_rooms(self, info: Info) -> List[ClassRoomType]:
        return services.list_classrooms(info.context.request.user)

    @strawberry.field
    @require_auth
    def class_room(self, info: Info, id: int) -> ClassRoomType:
        return services.get_classroom(info.context.request.user, id)

    # ==================================================
    # SUBJECTS
    # ==================================================
    @strawberry.field
    @require_auth
    def subjects(self, info: Info) -> List[SubjectType]:
        return services.list_subjects(info.context.request.user)

    @strawberry.field
    @require_auth
    def subject(self, info: Info, id: int) -> SubjectType:
        return services.get_subject(info.context.request.user, id)
