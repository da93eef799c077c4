import logging
from typing import Any, Dict, Optional

from core.entities import AuditEvent

logger = logging.getLogger('onconet.audit')


def log_action(storage, *, user: Optional[Any], action: str, object_type: Optional[str] = None,
               object_id: Optional[int] = None, detail: Optional[Dict[str, Any]] = None,
               ip_address: Optional[str] = None) -> AuditEvent:
    event = storage.create_audit_event({
        'user_id': getattr(user, 'id', None),
        'action': action,
        'object_type': object_type,
        'object_id': object_id,
        'detail': dict(detail or {}),
        'ip_address': ip_address or None,
    })
    logger.info('%s %s#%s by user %s %s', action, object_type or '-', object_id or '-',
                event.user_id or '-', event.detail, extra={'audit_event_id': event.id})
    return event
