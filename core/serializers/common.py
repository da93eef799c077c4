import bleach
from rest_framework import serializers

from core.exceptions import InvalidPayload


def load(serializer_cls, data, message: str, **kwargs) -> dict:
    """Validate ``data`` or raise 400 with ``message`` and the field errors."""
    s = serializer_cls(data=data, **kwargs)
    if not s.is_valid():
        raise InvalidPayload(message, s.errors)
    return s.validated_data


def parse_id(raw, label: str) -> int:
    """Path ids arrive as strings; anything but a positive integer is a 400."""
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise InvalidPayload(f'Invalid {label} ID', {'id': [f'Invalid {label} ID']})
    if value < 1:
        raise InvalidPayload(f'Invalid {label} ID', {'id': [f'Invalid {label} ID']})
    return value


def clean_text(v: str) -> str:
    v = bleach.clean((v or '').strip(), strip=True)
    if not v:
        raise serializers.ValidationError('This field may not be blank.')
    return v


class OptionalIdField(serializers.IntegerField):
    """Optional id filter; ``?categoryId=`` (blank) means no filter."""

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_null', True)
        kwargs.setdefault('min_value', 1)
        super().__init__(**kwargs)

    def validate_empty_values(self, data):
        if isinstance(data, str) and not data.strip():
            data = None
        return super().validate_empty_values(data)
