from rest_framework.exceptions import NotFound

from core.exceptions import InvalidPayload

STATUSES = ('pending', 'accepted', 'rejected', 'completed', 'cancelled')

# status -> statuses it may move to
TRANSITIONS = {
    'pending': {'accepted', 'rejected', 'cancelled'},
    'accepted': {'completed', 'cancelled'},
    'rejected': set(),
    'completed': set(),
    'cancelled': set(),
}


def can_transition(current: str, new: str) -> bool:
    return new in TRANSITIONS.get(current, set())


def change_status(storage, request_id: int, new_status: str):
    """Move a request to ``new_status``; refuses moves the table forbids."""
    current = storage.get_second_opinion_request(request_id)
    if current is None:
        raise NotFound('Request not found')
    if not can_transition(current.status, new_status):
        raise InvalidPayload(
            f'Cannot change status from {current.status} to {new_status}',
            {'status': [f'{current.status} -> {new_status} is not allowed']},
        )
    updated = storage.update_second_opinion_request_status(request_id, new_status)
    if updated is None:
        raise NotFound('Request not found')
    return updated
