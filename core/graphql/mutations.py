import strawberry
from typing import Optional
from strawberry.types import Info

from core import services
from core.utils import bearer_token
from .types import (
    ClassRoomType,
    ClassSubjectType,
    DeleteResponse,
    EnrollmentType,
    SchoolType,
    SubjectType,
    UserType,
)
from .auth import require_auth


# ==================================================
# RESPONSE TYPES
# ==================================================

@strawberry.type
class LoginResponse:
    user: UserType
    access_token: str
    refresh_token: str
    message: str


@strawberry.type
class LogoutResponse:
    success: bool
    message: str


# ==================================================
# MUTATIONS
# ==================================================

@strawberry.type
class Mutation:

    # ==================================================
    # AUTHENTICATION
    # ==================================================
    @strawberry.mutation
    def signup(self, email: str, password: str, user_name: str) -> UserType:
        """Register a student account (not linked to any school yet)"""
        return services.signup(email, password, user_name)

    @strawberry.mutation
    def create_admin(self, email: str, password: str, user_name: str) -> UserType:
        """Register a school administrator, who then creates their school"""
        return services.create_admin(email, password, user_name)

    @strawberry.mutation
    def login(self, email: str, password: str) -> LoginResponse:
        """
        Login with email and password
        Returns user data with JWT tokens
        """
        user, access_token, refresh_token = services.login(email, password)
        return LoginResponse(
            user=user,
            access_token=access_token,
            refresh_token=refresh_token,
            message=f"Login successful. Welcome {user.user_name}!"
        )

    @strawberry.mutation
    def refresh_token(self, refresh_token: str) -> LoginResponse:
        """
        Refresh access token using refresh token
        """
        user, access_token = services.refresh_access_token(refresh_token)
        return LoginResponse(
            user=user,
            access_token=access_token,
            refresh_token=refresh_token,  # Keep same refresh token
            message="Token refreshed successfully"
        )

    @strawberry.mutation
    def logout(self, info: Info, access_token: Optional[str] = None) -> LogoutResponse:
        """
        Logout user by blacklisting their access token
        Token can be provided as argument or extracted from Authorization header
        """
        token = access_token or bearer_token(info.context.request)
        message = services.logout(token)
        return LogoutResponse(success=True, message=message)

    # ==================================================
    # SCHOOL & USERS
    # ==================================================
    @strawberry.mutation
    @require_auth
    def create_school(self, info: Info, name: str) -> SchoolType:
        return services.create_school(info.context.request.user, name)

    @strawberry.mutation
    @require_auth
    def create_user(
        self,
        info: Info,
        user_name: str,
        email: str,
        role: str,
        password: str,
        class_id: Optional[int] = None
    ) -> UserType:
        """
        Admin-only: create a teacher or student in the admin's school.
        Students created with a class are enrolled right away.
        """
        return services.create_user(
            info.context.request.user,
            user_name=user_name,
            email=email,
            role=role,
            password=password,
            class_id=class_id,
        )

    @strawberry.mutation
    @require_auth
    def delete_user(self, info: Info, id: int) -> DeleteResponse:
        services.delete_user(info.context.request.user, id)
        return DeleteResponse(success=True, message="User deleted successfully")

    @strawberry.mutation
    @require_auth
    def enroll_student(self, info: Info, student_id: int, class_id: int) -> EnrollmentType:
        return services.enroll_student(info.context.request.user, student_id, class_id)

    # ==================================================
    # CLASSROOMS
    # ==================================================
    @strawberry.mutation
    @require_auth
    def create_class_room(self, info: Info, name: str) -> ClassRoomType:
        return services.create_classroom(info.context.request.user, name)

    @strawberry.mutation
    @require_auth
    def update_class_room(self, info: Info, id: int, name: str) -> ClassRoomType:
        return services.update_classroom(info.context.request.user, id, name)

    @strawberry.mutation
    @require_auth
    def delete_class_room(self, info: Info, id: int) -> DeleteResponse:
        services.delete_classroom(info.context.request.user, id)
        return DeleteResponse(success=True, message="Classroom deleted successfully")

    # ==================================================
    # SUBJECTS & ASSIGNMENTS
    # ==================================================
    @strawberry.mutation
    @require_auth
    def create_subject(self, info: Info, name: str) -> SubjectType:
        return services.create_subject(info.context.request.user, name)

    @strawberry.mutation
    @require_auth
    def update_subject(self, info: Info, id: int, name: str) -> SubjectType:
        return services.update_subject(info.context.request.user, id, name)

    @strawberry.mutation
    @require_auth
    def delete_subject(self, info: Info, id: int) -> DeleteResponse:
        services.delete_subject(info.context.request.user, id)
        return DeleteResponse(success=True, message="Subject deleted successfully")

    @strawberry.mutation
    @require_auth
    def assign_subject(
        self,
        info: Info,
        class_id: int,
        subject_id: int,
        teacher_id: Optional[int] = None
    ) -> ClassSubjectType:
        """Add a subject to a classroom's curriculum; enrolled students get a starting grade"""
        return services.assign_subject(info.context.request.user, class_id, subject_id, teacher_id)

    @strawberry.mutation
    @require_auth
    def set_subject_teacher(
        self,
        info: Info,
        assignment_id: int,
        teacher_id: Optional[int] = None
    ) -> ClassSubjectType:
        return services.set_subject_teacher(info.context.request.user, assignment_id, teacher_id)

    @strawberry.mutation
    @require_auth
    def unassign_subject(self, info: Info, id: int) -> DeleteResponse:
        services.unassign_subject(info.context.request.user, id)
        return DeleteResponse(success=True, message="Subject removed from classroom")
