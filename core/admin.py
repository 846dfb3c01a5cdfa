from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.forms import BaseUserCreationForm, UserChangeForm

from .models import School, ClassRoom, Subject, ClassSubject, Enrollment, TokenBlacklist

User = get_user_model()


# ==================================================
# USER FORMS
# ==================================================

class SchoolUserCreationForm(BaseUserCreationForm):
	class Meta:
		model = User
		fields = ("email", "user_name", "role", "school")


class SchoolUserChangeForm(UserChangeForm):
	class Meta:
		model = User
		fields = ("email", "user_name", "role", "school", "is_active", "is_staff", "is_superuser")


# ==================================================
# SCHOOL STRUCTURE
# ==================================================

class ClassRoomInline(admin.TabularInline):
	model = ClassRoom
	extra = 0


class ClassSubjectInline(admin.TabularInline):
	model = ClassSubject
	extra = 0
	autocomplete_fields = ("subject", "teacher")


@admin.register(School)
class SchoolAdmin(admin.ModelAdmin):
	list_display = ("name", "admin", "created_at")
	search_fields = ("name", "admin__email")
	inlines = [ClassRoomInline]


@admin.register(ClassRoom)
class ClassRoomAdmin(admin.ModelAdmin):
	list_display = ("name", "school", "created_at")
	search_fields = ("name",)
	list_filter = ("school",)
	inlines = [ClassSubjectInline]


@admin.register(Subject)
class SubjectAdmin(admin.ModelAdmin):
	list_display = ("name", "school")
	search_fields = ("name",)
	list_filter = ("school",)


@admin.register(ClassSubject)
class ClassSubjectAdmin(admin.ModelAdmin):
	list_display = ("classroom", "subject", "teacher")
	list_filter = ("classroom__school",)
	search_fields = ("classroom__name", "subject__name", "teacher__email")


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
	list_display = ("student", "classroom", "enrolled_at")
	list_filter = ("classroom__school", "classroom")
	search_fields = ("student__email", "student__user_name")


@admin.register(TokenBlacklist)
class TokenBlacklistAdmin(admin.ModelAdmin):
	list_display = ("user", "reason", "blacklisted_at", "expires_at")
	list_filter = ("reason",)
	search_fields = ("user__email",)
	readonly_fields = ("token", "blacklisted_at")


@admin.register(User)
class CustomUserAdmin(BaseUserAdmin):
	"""Users are looked up by email; role and school replace Django's username"""
	form = SchoolUserChangeForm
	add_form = SchoolUserCreationForm

	list_display = ("email", "user_name", "role", "school", "is_active", "is_staff")
	search_fields = ("email", "user_name")
	list_filter = ("role", "school", "is_active", "is_staff", "is_superuser")
	readonly_fields = ("date_joined", "last_login")

	fieldsets = (
		(None, {"fields": ("email", "user_name", "password")}),
		("School", {"fields": ("role", "school")}),
		("Permissions", {
			"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")
		}),
		("Important dates", {"fields": ("date_joined", "last_login")}),
	)

	add_fieldsets = (
		(None, {
			"classes": ("wide",),
			"fields": ("email", "user_name", "role", "school",
					   "password1", "password2", "is_active", "is_staff"),
		}),
	)

	ordering = ("-date_joined",)
	filter_horizontal = ("groups", "user_permissions")
