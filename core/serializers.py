"""
Plain-dict renderings of core models for the REST endpoints.
Keys follow the GraphQL field names (camelCase).
"""


def _iso(value):
    return value.isoformat() if value else None


def serialize_user(user):
    return {
        'id': user.id,
        'email': user.email,
        'userName': user.user_name,
        'role': user.role,
        'schoolId': user.school_id,
        'classId': user.classroom_id,
        'createdAt': _iso(user.date_joined),
    }


def serialize_school(school):
    return {
        'id': school.id,
        'name': school.name,
        'adminId': school.admin_id,
        'createdAt': _iso(school.created_at),
    }


def serialize_classroom(classroom):
    return {
        'id': classroom.id,
        'name': classroom.name,
        'schoolId': classroom.school_id,
        'createdAt': _iso(classroom.created_at),
    }


def serialize_subject(subject):
    return {
        'id': subject.id,
        'name': subject.name,
        'schoolId': subject.school_id,
    }


def serialize_class_subject(assignment):
    return {
        'id': assignment.id,
        'classId': assignment.classroom_id,
        'subjectId': assignment.subject_id,
        'teacherId': assignment.teacher_id,
    }


def serialize_enrollment(enrollment):
    return {
        'id': enrollment.id,
        'studentId': enrollment.student_id,
        'classId': enrollment.classroom_id,
        'enrolledAt': _iso(enrollment.enrolled_at),
    }
