"""
Role checks and tenant scoping

Every resolver and REST view that touches school-owned data goes through
these helpers. A tenant entity declares how to reach its school with a
``tenant_path`` class attribute (e.g. ``"classroom__school"``).
"""
from django.core.exceptions import ObjectDoesNotExist

from core.exceptions import AuthenticationError, UnauthorizedError, NotFoundError
from core.models import School, User


# ==================================================
# ROLE PREDICATES
# ==================================================

def is_admin(user) -> bool:
    return bool(user and user.is_authenticated and user.role == User.ADMIN)


def is_teacher(user) -> bool:
    return bool(user and user.is_authenticated and user.role == User.TEACHER)


def is_student(user) -> bool:
    return bool(user and user.is_authenticated and user.role == User.STUDENT)


# ==================================================
# GUARDS
# ==================================================

def ensure_authenticated(user, jwt_error=None):
    if not user or not user.is_authenticated:
        if jwt_error:
            raise AuthenticationError(f"Authentication failed: {jwt_error}")
        raise AuthenticationError()
    return user


def ensure_admin(user):
    """Admin who already owns a school"""
    ensure_authenticated(user)
    if not is_admin(user):
        raise UnauthorizedError("Access denied. Admin role required.")
    if not user.school_id:
        raise UnauthorizedError("Access denied. Create a school first.")
    return user


def ensure_teacher_or_admin(user):
    ensure_authenticated(user)
    if not (is_admin(user) or is_teacher(user)):
        raise UnauthorizedError("Access denied. Teacher or admin role required.")
    if not user.school_id:
        raise UnauthorizedError("Access denied. You are not linked to a school.")
    return user


def ensure_student(user):
    ensure_authenticated(user)
    if not is_student(user):
        raise UnauthorizedError("Access denied. Student role required.")
    return user


# ==================================================
# TENANT SCOPING
# ==================================================

def school_id_of(obj):
    """
    Resolve the id of the school owning ``obj`` by walking its tenant path.
    Returns None when any link along the way is missing.
    """
    if isinstance(obj, School):
        return obj.id

    path = getattr(obj, "tenant_path", None)
    if path is None:
        raise TypeError(f"{type(obj).__name__} is not a tenant entity")

    current = obj
    for part in path.split("__"):
        try:
            current = getattr(current, part)
        except ObjectDoesNotExist:
            return None
        if current is None:
            return None
    return current.id


def in_scope(user, obj) -> bool:
    """True when ``obj`` belongs to the same school as ``user``"""
    if not user or not user.is_authenticated or not user.school_id:
        return False
    return school_id_of(obj) == user.school_id


def scoped(queryset, user):
    """Filter a tenant queryset down to the user's school"""
    if not user or not user.is_authenticated or not user.school_id:
        return queryset.none()
    model = queryset.model
    if model is School:
        return queryset.filter(id=user.school_id)
    return queryset.filter(**{f"{model.tenant_path}_id": user.school_id})


def get_scoped(model, user, pk, queryset=None, label=None):
    """
    Point lookup restricted to the user's school.
    Missing rows and rows of another school are reported the same way.
    """
    qs = queryset if queryset is not None else model.objects.all()
    obj = scoped(qs, user).filter(pk=pk).first()
    if obj is None:
        raise NotFoundError(f"{label or model._meta.verbose_name.title()} not found")
    return obj
