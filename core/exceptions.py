import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from core.presenters import to_camel

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """The backing store could not complete an operation."""


class DuplicateError(StorageError):
    """A unique field (username, email, slug) is already taken."""

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f'{field} already exists')


class MissingReference(StorageError):
    """A foreign key points at a row that does not exist."""

    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f'{field} {value} does not exist')


class ServiceError(Exception):
    """An upstream service (e.g. the geocoder) failed or is not configured."""


_CODES = {
    status.HTTP_400_BAD_REQUEST: 'bad_request',
    status.HTTP_401_UNAUTHORIZED: 'not_authenticated',
    status.HTTP_403_FORBIDDEN: 'forbidden',
    status.HTTP_404_NOT_FOUND: 'not_found',
    status.HTTP_405_METHOD_NOT_ALLOWED: 'method_not_allowed',
}


def _flatten(detail, path: str = '') -> list[dict]:
    """Turn DRF's nested error detail into ``[{path, message}]``."""
    if isinstance(detail, dict):
        out = []
        for key, value in detail.items():
            sub = key if key != 'non_field_errors' else ''
            out.extend(_flatten(value, f'{path}.{sub}' if path and sub else (sub or path)))
        return out
    if isinstance(detail, list):
        out = []
        for idx, item in enumerate(detail):
            if isinstance(item, (dict, list)):
                out.extend(_flatten(item, f'{path}.{idx}' if path else str(idx)))
            else:
                out.append({'path': path, 'message': str(item)})
        return out
    return [{'path': path, 'message': str(detail)}]


def error_response(code: str, message, status_code: int, fields: list | None = None) -> Response:
    error = {'code': code, 'message': message}
    if fields is not None:
        error['fields'] = fields
    return Response({'ok': False, 'error': error}, status=status_code)


def api_exception_handler(exc, context):
    if isinstance(exc, DuplicateError):
        return error_response('duplicate', str(exc), 400, [{'path': to_camel(exc.field), 'message': str(exc)}])

    if isinstance(exc, MissingReference):
        return error_response('validation_error', str(exc), 400, [{'path': to_camel(exc.field), 'message': str(exc)}])

    if isinstance(exc, exceptions.ValidationError):
        message = getattr(exc, 'message', None) or 'Invalid request data'
        return error_response('validation_error', message, exc.status_code, _flatten(exc.detail))

    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception('unhandled error in %s', type(view).__name__ if view else 'view', exc_info=exc)
        message = str(exc) if isinstance(exc, ServiceError) else 'Server error'
        return error_response('server_error', message, 500)

    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = str(resp.data)
    out = error_response(_CODES.get(resp.status_code, 'api_error'), detail, resp.status_code)
    for header in ('WWW-Authenticate', 'Retry-After'):
        if header in resp:
            out[header] = resp[header]
    return out


class InvalidPayload(exceptions.ValidationError):
    """ValidationError carrying a human summary next to the field list."""

    def __init__(self, message: str, detail):
        super().__init__(detail)
        self.message = message
