"""
URL configuration for SMS project.

/graphql/  the merged Strawberry schema
/api/      JSON REST endpoints backed by the same services
/admin/    Django admin
"""
from django.contrib import admin
from django.urls import include, path
from django.views.decorators.csrf import csrf_exempt
from strawberry.django.views import GraphQLView

from core.exceptions import (
    AuthenticationError,
    ConflictError,
    InputError,
    NotFoundError,
    SchoolAdminError,
    UnauthorizedError,
)
from core.graphql.schema import schema


STATUS_BY_CODE = {
    error_class.code: error_class.status_code
    for error_class in (
        SchoolAdminError,
        InputError,
        NotFoundError,
        ConflictError,
        UnauthorizedError,
        AuthenticationError,
    )
}


def status_for_errors(errors):
    """
    HTTP status for a GraphQL error list, decided by the first error.
    Domain errors carry their code in ``extensions``; anything raised by
    GraphQL itself (syntax, validation, depth) is classified by its message.
    """
    error = errors[0]
    code = (error.get('extensions') or {}).get('code')
    if code in STATUS_BY_CODE:
        return STATUS_BY_CODE[code]

    error_message = error.get('message', '').lower()

    if error_message == 'unexpected error.':
        return 500

    # Authentication errors
    if any(keyword in error_message for keyword in [
        'authentication', 'not authenticated', 'unauthorized', 'invalid token'
    ]):
        return 401

    # Authorization/Permission errors
    if any(keyword in error_message for keyword in [
        'forbidden', 'not allowed', 'access denied', 'insufficient permissions'
    ]):
        return 403

    # Not found errors
    if any(keyword in error_message for keyword in [
        'not found', 'does not exist', 'no matching'
    ]):
        return 404

    return 400


class CustomGraphQLView(GraphQLView):
    """GraphQL view that returns proper HTTP status codes for errors"""

    def create_response(self, response_data, *args, **kwargs):
        response = super().create_response(response_data, *args, **kwargs)

        errors = response_data.get('errors') if isinstance(response_data, dict) else None
        if errors:
            response.status_code = status_for_errors(errors)

        return response


api_urlpatterns = [
    path('', include('core.urls')),
    path('', include('timetable.urls')),
    path('', include('grades.urls')),
    path('', include('exams.urls')),
]

urlpatterns = [
    path('admin/', admin.site.urls),
    path('graphql/', csrf_exempt(CustomGraphQLView.as_view(schema=schema))),
    path('api/', include(api_urlpatterns)),
]
