import pytest

from core.storage import DatabaseStorage, MemStorage


@pytest.fixture(autouse=True)
def fast_hashing(settings):
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']


@pytest.fixture(params=['memory', 'database'])
def store(request):
    """Each storage backend; contract tests run once per backend."""
    if request.param == 'database':
        request.getfixturevalue('db')
        return DatabaseStorage()
    return MemStorage()


@pytest.fixture
def people(store):
    """A patient and a professional, created directly in the store."""
    patient = store.create_user({
        'username': 'alice', 'email': 'alice@x.com', 'password': 'x',
        'full_name': 'Alice Rossi', 'user_type': 'patient',
    })
    doctor = store.create_user({
        'username': 'dr_bob', 'email': 'bob@x.com', 'password': 'x',
        'full_name': 'Dr. Bob Verdi', 'user_type': 'professional',
        'available_for_second_opinion': True,
    })
    return patient, doctor
