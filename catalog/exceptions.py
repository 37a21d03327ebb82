import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Base for errors raised by the catalog, folder tree and upload services."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = 'Catalog error.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Not found.'


class Conflict(CatalogError):
    status_code = status.HTTP_409_CONFLICT
    default_message = 'Conflict.'


class BadRequest(CatalogError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Bad request.'


class Internal(CatalogError):
    default_message = 'Internal storage error.'


def catalog_exception_handler(exc, context):
    """
    REST_FRAMEWORK['EXCEPTION_HANDLER'] - render CatalogError subclasses the
    same way DRF renders its own errors: {"detail": "..."} + status code.
    """
    if isinstance(exc, CatalogError):
        if exc.status_code >= 500:
            logger.error('%s: %s', context.get('view').__class__.__name__, exc.message)
        return Response({'detail': exc.message}, status=exc.status_code)
    return exception_handler(exc, context)
