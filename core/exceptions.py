"""
Error taxonomy shared by GraphQL resolvers and REST views
"""
from django.core.exceptions import ValidationError


class SchoolAdminError(Exception):
    """Base class for request-level errors reported back to the caller"""
    code = 'BAD_REQUEST'
    status_code = 400
    default_message = 'Bad request.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InputError(SchoolAdminError):
    code = 'BAD_USER_INPUT'
    status_code = 400
    default_message = 'Invalid input.'


class NotFoundError(SchoolAdminError):
    code = 'NOT_FOUND'
    status_code = 404
    default_message = 'Resource not found.'


class ConflictError(SchoolAdminError):
    code = 'CONFLICT'
    status_code = 409
    default_message = 'Resource already exists.'


class UnauthorizedError(SchoolAdminError):
    code = 'FORBIDDEN'
    status_code = 403
    default_message = 'Access denied.'


class AuthenticationError(UnauthorizedError):
    code = 'UNAUTHENTICATED'
    status_code = 401
    default_message = 'Authentication required. Please login to access this resource.'


def validation_messages(error: ValidationError) -> str:
    """Flatten a Django ValidationError into a single readable message"""
    if hasattr(error, 'message_dict'):
        messages = []
        for field, field_messages in error.message_dict.items():
            messages.extend(field_messages)
        return "; ".join(messages)
    return "; ".join(error.messages)


def form_errors(form) -> InputError:
    """Build an InputError out of a bound, invalid Django form"""
    messages = []
    for field, errors in form.errors.items():
        label = field if field != '__all__' else ''
        for error in errors:
            messages.append(f"{label}: {error}" if label else error)
    return InputError("; ".join(messages))
