from django.utils import timezone


def create_contract(storage, data: dict):
    """Create an inactive contract, stamping ``consent_date`` when consent is given."""
    payload = dict(data)
    payload.pop('is_active', None)
    if payload.get('consent_given'):
        payload['consent_date'] = timezone.now()
    else:
        payload['consent_date'] = None
    return storage.create_sos_contract(payload)
