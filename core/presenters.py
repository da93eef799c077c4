"""
Response shaping.

Entities are snake_case dataclasses; the API speaks camelCase.  Every
handler funnels its payload through :func:`present` so that a ``User``
never leaves the process with its ``password`` attached, including
users nested inside composite responses (post authors, comment authors,
second-opinion patients and doctors).
"""
from __future__ import annotations

import dataclasses
import datetime as dt
from typing import Any

from django.utils import timezone

from core.entities import SosContract, User

# Fields never serialised, whatever the entity.
REDACTED = {User: {'password'}}


def to_camel(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part[:1].upper() + part[1:] for part in rest)


def _value(v: Any) -> Any:
    if dataclasses.is_dataclass(v) and not isinstance(v, type):
        return present(v)
    if isinstance(v, dict):
        return {k: _value(x) for k, x in v.items()}
    if isinstance(v, (list, tuple)):
        return [_value(x) for x in v]
    if isinstance(v, (dt.datetime, dt.date)):
        return v.isoformat()
    return v


def present(entity: Any, **extra: Any) -> Any:
    """Entity (or list / dict of entities) -> camelCase JSON-ready dict."""
    if entity is None:
        return None
    if isinstance(entity, (list, tuple)):
        return [present(e) for e in entity]
    if isinstance(entity, dict):
        return _value(entity)
    hidden = REDACTED.get(type(entity), set())
    out = {
        to_camel(f.name): _value(getattr(entity, f.name))
        for f in dataclasses.fields(entity)
        if f.name not in hidden
    }
    if isinstance(entity, SosContract):
        out['isExpired'] = entity.is_expired(timezone.now())
    for key, value in extra.items():
        out[key] = _value(value)
    return out
