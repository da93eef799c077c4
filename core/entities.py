"""
Typed entities handed out by every storage backend.

Both :class:`core.storage.memory.MemStorage` and
:class:`core.storage.database.DatabaseStorage` return these plain
dataclasses rather than ORM instances, so handlers never depend on the
backend that produced a record.  Field names are snake_case; the
presenters in :mod:`core.presenters` turn them into camelCase JSON.

The ``*Update`` classes are the partial-update records.  Each one
declares only the fields a client may change; anything not set stays
:data:`UNSET` and is left untouched by the store.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field, fields
from typing import Any, Optional


USER_TYPES = ('patient', 'professional', 'pharmacy')
RECORD_TYPES = ('diagnosis', 'treatment', 'medication', 'test_result', 'visit')
CONTRACT_TYPES = ('sos', 'emergency', 'consultation')
EMERGENCY_TYPES = ('oncological', 'general', 'urgent')
ACCESS_LEVELS = ('full', 'limited', 'view_only')


@dataclass
class User:
    id: int
    username: str
    email: str
    password: str
    full_name: str
    user_type: str = 'patient'
    is_verified: bool = False
    created_at: Optional[dt.datetime] = None
    # patient
    birth_date: Optional[dt.date] = None
    # professional
    specialization: Optional[str] = None
    hospital: Optional[str] = None
    license_number: Optional[str] = None
    studio_address: Optional[str] = None
    booking_calendar: Optional[Any] = None
    contacts: Optional[Any] = None
    reviews: list = field(default_factory=list)
    verification_document: Optional[str] = None
    available_for_second_opinion: bool = False
    calendar_settings: Optional[Any] = None
    # pharmacy
    pharmacy_name: Optional[str] = None
    address: Optional[str] = None
    pharmacy_offers: Optional[str] = None
    google_maps_link: Optional[str] = None
    # common
    city: Optional[str] = None
    region: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    profile_image: Optional[str] = None

    # DRF permission classes check this on ``request.user``.
    @property
    def is_authenticated(self) -> bool:
        return True


@dataclass
class ForumCategory:
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    post_count: int = 0


@dataclass
class ForumPost:
    id: int
    title: str
    content: str
    user_id: int
    category_id: int
    comment_count: int = 0
    view_count: int = 0
    created_at: Optional[dt.datetime] = None


@dataclass
class ForumComment:
    id: int
    content: str
    user_id: int
    post_id: int
    created_at: Optional[dt.datetime] = None


@dataclass
class SecondOpinionRequest:
    id: int
    patient_id: int
    doctor_id: int
    diagnosis: str
    description: str
    document_links: list = field(default_factory=list)
    status: str = 'pending'
    created_at: Optional[dt.datetime] = None


@dataclass
class Message:
    id: int
    sender_id: int
    receiver_id: int
    content: str
    is_read: bool = False
    created_at: Optional[dt.datetime] = None


@dataclass
class Pharmacy:
    id: int
    name: str
    address: str
    city: str
    region: str
    phone: Optional[str] = None
    specializations: list = field(default_factory=list)
    rating: Optional[int] = None
    review_count: int = 0
    image_url: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass
class Testimonial:
    id: int
    name: str
    role: str
    location: str
    content: str
    rating: int
    image_url: Optional[str] = None


@dataclass
class MedicalRecord:
    id: int
    patient_id: int
    record_type: str
    title: str
    description: str
    date: dt.date
    doctor_name: Optional[str] = None
    hospital_name: Optional[str] = None
    medications: Optional[Any] = None
    documents: list = field(default_factory=list)
    is_private: bool = True
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


@dataclass
class SosContract:
    id: int
    patient_id: int
    doctor_id: int
    emergency_type: str
    contract_type: str = 'sos'
    access_level: str = 'full'
    shared_record_ids: list = field(default_factory=list)
    is_active: bool = False
    expires_at: Optional[dt.datetime] = None
    consent_given: bool = False
    consent_date: Optional[dt.datetime] = None
    emergency_notes: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    def is_expired(self, now: Optional[dt.datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        now = now or dt.datetime.now(dt.timezone.utc)
        return self.expires_at <= now


@dataclass
class AuditEvent:
    id: int
    action: str
    user_id: Optional[int] = None
    object_type: Optional[str] = None
    object_id: Optional[int] = None
    detail: dict = field(default_factory=dict)
    ip_address: Optional[str] = None
    created_at: Optional[dt.datetime] = None


# Fields no client payload may set; stores drop them before inserting.
SERVER_ASSIGNED = frozenset({'id', 'created_at', 'updated_at'})


def insertable_fields(entity_cls: type) -> set[str]:
    return {f.name for f in fields(entity_cls)} - SERVER_ASSIGNED


# ---------------------------------------------------------------------------
# Partial updates
# ---------------------------------------------------------------------------

class _Unset:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'UNSET'

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


class Patch:
    """Base for the per-entity update records."""

    @classmethod
    def from_data(cls, data: dict):
        """Build a patch from validated data, ignoring undeclared keys."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})

    def changes(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET}

    def __bool__(self) -> bool:
        return bool(self.changes())


@dataclass
class UserUpdate(Patch):
    email: Any = UNSET
    full_name: Any = UNSET
    birth_date: Any = UNSET
    specialization: Any = UNSET
    hospital: Any = UNSET
    license_number: Any = UNSET
    studio_address: Any = UNSET
    booking_calendar: Any = UNSET
    contacts: Any = UNSET
    verification_document: Any = UNSET
    available_for_second_opinion: Any = UNSET
    calendar_settings: Any = UNSET
    pharmacy_name: Any = UNSET
    address: Any = UNSET
    pharmacy_offers: Any = UNSET
    google_maps_link: Any = UNSET
    city: Any = UNSET
    region: Any = UNSET
    phone: Any = UNSET
    bio: Any = UNSET
    profile_image: Any = UNSET


@dataclass
class PharmacyUpdate(Patch):
    name: Any = UNSET
    address: Any = UNSET
    city: Any = UNSET
    region: Any = UNSET
    phone: Any = UNSET
    specializations: Any = UNSET
    rating: Any = UNSET
    image_url: Any = UNSET
    latitude: Any = UNSET
    longitude: Any = UNSET


@dataclass
class MedicalRecordUpdate(Patch):
    record_type: Any = UNSET
    title: Any = UNSET
    description: Any = UNSET
    date: Any = UNSET
    doctor_name: Any = UNSET
    hospital_name: Any = UNSET
    medications: Any = UNSET
    documents: Any = UNSET
    is_private: Any = UNSET


@dataclass
class SosContractUpdate(Patch):
    contract_type: Any = UNSET
    emergency_type: Any = UNSET
    access_level: Any = UNSET
    shared_record_ids: Any = UNSET
    is_active: Any = UNSET
    expires_at: Any = UNSET
    consent_given: Any = UNSET
    consent_date: Any = UNSET
    emergency_notes: Any = UNSET
