"""
Storage backends.

``build_storage`` is called once per process (see
:class:`core.middleware.StorageMiddleware`); handlers only ever see the
abstract :class:`Storage` interface on ``request.storage``.
"""
from __future__ import annotations

from .base import Storage
from .database import DatabaseStorage
from .memory import MemStorage

BACKENDS = {
    DatabaseStorage.name: DatabaseStorage,
    MemStorage.name: MemStorage,
}


def build_storage(name: str) -> Storage:
    try:
        return BACKENDS[name]()
    except KeyError:
        raise ValueError(f'unknown storage backend: {name!r}') from None


__all__ = ['Storage', 'DatabaseStorage', 'MemStorage', 'build_storage']
