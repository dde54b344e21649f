import logging
from http import HTTPStatus

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class StorageObjectNotFound(FileNotFoundError):
    """The requested key does not exist in the media bucket."""


class StorageUnavailable(Exception):
    """Any other failure talking to the media bucket."""


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"
    default_code = "conflict"


def _flatten(detail):
    if isinstance(detail, dict):
        messages = []
        for value in detail.values():
            messages.extend(_flatten(value))
        return messages
    if isinstance(detail, (list, tuple)):
        messages = []
        for value in detail:
            messages.extend(_flatten(value))
        return messages
    return [str(detail)]


def _reason(code):
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return "Error"


def api_exception_handler(exc, context):
    """Render API errors as ``{statusCode, message, error}``."""
    if isinstance(exc, StorageUnavailable):
        logger.error("Storage failure in %s: %s", context.get("view").__class__.__name__, exc)
        return Response(
            {"statusCode": 500, "message": "Storage is unavailable", "error": "Internal Server Error"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        response.data = {
            "statusCode": response.status_code,
            "message": _flatten(exc.detail),
            "error": "Validation failed",
        }
        return response

    detail = getattr(exc, "detail", None)
    message = _flatten(detail) if detail is not None else [str(exc)]
    response.data = {
        "statusCode": response.status_code,
        "message": message[0] if len(message) == 1 else message,
        "error": _reason(response.status_code),
    }
    return response
