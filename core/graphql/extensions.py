"""
Schema extensions that shape GraphQL errors
"""
import logging

from graphql import GraphQLError
from strawberry.extensions import MaskErrors, SchemaExtension

from core.exceptions import SchoolAdminError

logger = logging.getLogger(__name__)


class ErrorCodeExtension(SchemaExtension):
    """
    Copy the ``code`` of domain errors into ``extensions`` so clients (and
    the GraphQL view) can tell NOT_FOUND from CONFLICT without parsing text.
    """

    def on_operation(self):
        yield
        result = self.execution_context.result
        if not result or not getattr(result, 'errors', None):
            return
        for error in result.errors:
            original = error.original_error
            if isinstance(original, SchoolAdminError):
                if error.extensions is None:
                    error.extensions = {}
                error.extensions['code'] = original.code


def should_mask_error(error: GraphQLError) -> bool:
    """Hide internals of anything that is not a deliberate domain error"""
    original = error.original_error
    if original is None or isinstance(original, SchoolAdminError):
        return False
    logger.error("Unexpected error while resolving %s", error.path, exc_info=original)
    return True


def mask_unexpected_errors():
    return MaskErrors(should_mask_error=should_mask_error, error_message="Unexpected error.")
