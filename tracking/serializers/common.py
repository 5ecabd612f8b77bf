from __future__ import annotations

import bleach
from rest_framework import serializers


def clean_text(value: str | None) -> str:
    return bleach.clean((value or '').strip(), strip=True)


def iso(value) -> str | None:
    return value.isoformat() if value else None


class CleanCharField(serializers.CharField):
    """CharField that strips markup from free text."""

    def to_internal_value(self, data):
        return clean_text(super().to_internal_value(data))


def related_error(label: str) -> dict:
    return {
        'does_not_exist': f'{label} غير موجود',
        'incorrect_type': f'معرف {label} غير صالح',
    }
