"""
Serializers for org_settings app
"""
import re
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from rest_framework import serializers

from .models import OrgSettings

TIME_REGEX = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


class BrandingSerializer(serializers.Serializer):
    logoUrl = serializers.URLField(required=False)
    primaryColor = serializers.CharField(required=False, max_length=32)
    secondaryColor = serializers.CharField(required=False, max_length=32)
    primaryTextColor = serializers.CharField(required=False, max_length=32)
    secondaryTextColor = serializers.CharField(required=False, max_length=32)


class BusinessHourSerializer(serializers.Serializer):
    dow = serializers.IntegerField(min_value=0, max_value=6)
    opens = serializers.CharField()
    closes = serializers.CharField()

    def validate(self, attrs):
        for key in ('opens', 'closes'):
            if not TIME_REGEX.match(attrs[key]):
                raise serializers.ValidationError({key: 'Use HH:mm (24h).'})
        if attrs['opens'] >= attrs['closes']:
            raise serializers.ValidationError('opens must be earlier than closes.')
        return attrs


class HolidaySerializer(serializers.Serializer):
    date = serializers.DateField()
    name = serializers.CharField(max_length=200)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        # Stored as JSON
        value['date'] = value['date'].isoformat()
        return value


class OrgSettingsSerializer(serializers.ModelSerializer):
    organizationId = serializers.IntegerField(source='organization_id', read_only=True)
    organizationName = serializers.CharField(source='organization.name', read_only=True)
    businessHours = serializers.JSONField(source='business_hours', read_only=True)
    createdBy = serializers.IntegerField(source='created_by_id', read_only=True)
    updatedBy = serializers.IntegerField(source='updated_by_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = OrgSettings
        fields = [
            'id', 'organizationId', 'organizationName', 'branding', 'businessHours',
            'holidays', 'timezone', 'createdBy', 'updatedBy', 'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class OrgSettingsWriteSerializer(serializers.Serializer):
    """
    Upsert payload. partial=True for PATCH.
    validated_data keys are model field names (orgId excepted).
    """
    orgId = serializers.IntegerField(required=False)
    branding = BrandingSerializer(required=False)
    businessHours = BusinessHourSerializer(many=True, required=False, source='business_hours')
    holidays = HolidaySerializer(many=True, required=False)
    timezone = serializers.CharField(required=False, max_length=64)

    def validate_timezone(self, value):
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise serializers.ValidationError(f"Unknown timezone '{value}'.")
        return value

    def validate_businessHours(self, value):
        days = [entry['dow'] for entry in value]
        if len(days) != len(set(days)):
            raise serializers.ValidationError('Each day of week may appear only once.')
        return [dict(entry) for entry in value]

    def validate_holidays(self, value):
        return [dict(entry) for entry in value]

    def validate_branding(self, value):
        return dict(value)
