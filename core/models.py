from django.db import models
from django.conf import settings
from django.contrib.auth.models import (
    AbstractBaseUser,
    PermissionsMixin,
    BaseUserManager
)
from django.utils import timezone


# ==================================================
# TENANT: SCHOOL
# ==================================================

class School(models.Model):
    """
    A tenant. Everything reachable from a school (classrooms, subjects,
    schedules, exams, grades) is visible only to that school's users.
    """
    name = models.CharField(max_length=256)
    admin = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="administered_school"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name


# ==================================================
# ACADEMIC STRUCTURE
# ==================================================

class ClassRoom(models.Model):
    tenant_path = "school"

    name = models.CharField(max_length=256)
    school = models.ForeignKey(
        School,
        on_delete=models.CASCADE,
        related_name="classrooms"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("school", "name")
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.school})"


class Subject(models.Model):
    """
    School-wide subject catalog entry (e.g., Mathematics).
    Subjects reach classrooms through ClassSubject.
    """
    tenant_path = "school"

    name = models.CharField(max_length=256)
    school = models.ForeignKey(
        School,
        on_delete=models.CASCADE,
        related_name="subjects"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("school", "name")
        ordering = ["name"]

    def __str__(self):
        return self.name


class ClassSubject(models.Model):
    """
    Assigns a subject to a classroom with one responsible teacher
    """
    tenant_path = "classroom__school"

    classroom = models.ForeignKey(
        ClassRoom,
        on_delete=models.CASCADE,
        related_name="class_subjects"
    )
    subject = models.ForeignKey(
        Subject,
        on_delete=models.CASCADE,
        related_name="class_subjects"
    )
    teacher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="teaching_assignments"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ("classroom", "subject")

    def __str__(self):
        return f"{self.classroom.name} - {self.subject.name}"


class Enrollment(models.Model):
    """
    Links a student to the one classroom they attend
    """
    tenant_path = "classroom__school"

    student = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="enrollment"
    )
    classroom = models.ForeignKey(
        ClassRoom,
        on_delete=models.CASCADE,
        related_name="enrollments"
    )
    enrolled_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return f"{self.student} in {self.classroom.name}"


# ==================================================
# USER AUTH MODELS
# ==================================================

class UserManager(BaseUserManager):
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("User must have an email")

        email = self.normalize_email(email)
        extra_fields.setdefault("user_name", email.split("@")[0])

        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", User.ADMIN)
        return self.create_user(email, password=password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"

    ROLE_CHOICES = [
        (ADMIN, "Admin"),
        (TEACHER, "Teacher"),
        (STUDENT, "Student"),
    ]

    tenant_path = "school"

    email = models.EmailField(unique=True)
    user_name = models.CharField(max_length=256)
    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=STUDENT,
        db_index=True
    )
    school = models.ForeignKey(
        School,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="users"
    )

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    date_joined = models.DateTimeField(default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    def __str__(self):
        return self.email

    @property
    def classroom_id(self):
        """Classroom of an enrolled student, None for everyone else"""
        enrollment = getattr(self, "enrollment", None)
        return enrollment.classroom_id if enrollment else None


# ==================================================
# TOKEN BLACKLIST (for logout functionality)
# ==================================================

class TokenBlacklist(models.Model):
    """
    Store invalidated JWT tokens (for logout functionality)
    Tokens in this table are considered logged out
    """
    token = models.CharField(max_length=500, unique=True, db_index=True)
    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="blacklisted_tokens",
        null=True,
        blank=True
    )
    blacklisted_at = models.DateTimeField(auto_now_add=True)
    expires_at = models.DateTimeField()
    reason = models.CharField(
        max_length=50,
        default='logout',
        choices=[
            ('logout', 'User Logout'),
            ('forced', 'Forced Logout'),
            ('security', 'Security Reason'),
        ]
    )

    class Meta:
        ordering = ['-blacklisted_at']
        indexes = [
            models.Index(fields=['expires_at'], name='core_blacklist_expires_idx'),
        ]

    def __str__(self):
        return f"Blacklisted token for {self.user} at {self.blacklisted_at}"

    @classmethod
    def is_blacklisted(cls, token):
        return cls.objects.filter(token=token).exists()

    @classmethod
    def cleanup_expired(cls):
        """Remove expired tokens from blacklist (run periodically)"""
        return cls.objects.filter(expires_at__lt=timezone.now()).delete()
