import bleach
from rest_framework import serializers


class CleanCharField(serializers.CharField):
    """Free text with any markup stripped."""

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        return bleach.clean(value, tags=[], strip=True)


def optional_text(**kwargs):
    kwargs.setdefault('max_length', 2000)
    return CleanCharField(required=False, allow_blank=True, allow_null=True, **kwargs)
