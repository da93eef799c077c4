import logging

from django.conf import settings

from core.storage import build_storage

logger = logging.getLogger(__name__)


class StorageMiddleware:
    """Attach the process-wide store to every request as ``request.storage``.

    The backend is picked once, from ``settings.STORAGE_BACKEND``, when
    Django builds the middleware chain.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.storage = build_storage(settings.STORAGE_BACKEND)
        logger.info('storage backend: %s', self.storage.name)

    def __call__(self, request):
        request.storage = self.storage
        return self.get_response(request)
