from rest_framework import serializers
from .models import Setting


class SettingSerializer(serializers.ModelSerializer):
    """Serializer for a stored setting."""

    class Meta:
        model = Setting
        fields = ['key', 'value', 'updated_at']
        read_only_fields = fields


class SettingInputSerializer(serializers.Serializer):
    """
    Validate input for creating/updating a setting.

    Fields:
        key (str): Setting key, e.g. 'cash_gst_mode'
        value (str): New value
    """

    key = serializers.CharField(max_length=100)
    value = serializers.CharField(allow_blank=False)
