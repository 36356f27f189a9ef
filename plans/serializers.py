"""
Serializers for plans app
"""
from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from .models import Plan

SLUG_REGEX = r'^[a-z0-9]+(?:-[a-z0-9]+)*$'


class PlanSerializer(serializers.ModelSerializer):
    """Read shape (camelCase, frontend compat)."""
    durationUnit = serializers.CharField(source='duration_unit', read_only=True)
    durationValue = serializers.IntegerField(source='duration_value', read_only=True)
    isTrial = serializers.BooleanField(source='is_trial', read_only=True)
    postTrialPlan = serializers.IntegerField(source='post_trial_plan_id', allow_null=True, read_only=True)
    postTrialPlanName = serializers.CharField(source='post_trial_plan.name', default=None, read_only=True)
    isActive = serializers.BooleanField(source='is_active', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Plan
        fields = [
            'id', 'name', 'description', 'slug', 'durationUnit', 'durationValue',
            'price', 'features', 'isTrial', 'postTrialPlan', 'postTrialPlanName',
            'isActive', 'serial', 'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class PlanWriteSerializer(serializers.Serializer):
    """
    Create/update payload. Use partial=True for PATCH.
    validated_data keys are model field names.
    """
    name = serializers.CharField(
        min_length=2,
        max_length=100,
        validators=[UniqueValidator(queryset=Plan.objects.all(), message='Plan name already exists')],
    )
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    slug = serializers.RegexField(
        SLUG_REGEX,
        required=False,
        error_messages={'invalid': 'Slug must be kebab-case: letters, numbers and dashes only.'},
    )
    durationUnit = serializers.ChoiceField(source='duration_unit', choices=Plan.DURATION_UNIT_CHOICES)
    durationValue = serializers.IntegerField(source='duration_value', min_value=1)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    features = serializers.ListField(child=serializers.CharField(), required=False)
    isTrial = serializers.BooleanField(source='is_trial', required=False)
    postTrialPlan = serializers.IntegerField(source='post_trial_plan_id', required=False, allow_null=True)
    isActive = serializers.BooleanField(source='is_active', required=False)
    serial = serializers.IntegerField(min_value=0, required=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Exclude the plan being edited from the name uniqueness check
        if self.instance is not None:
            self.fields['name'].validators = [
                UniqueValidator(
                    queryset=Plan.objects.exclude(pk=self.instance.pk),
                    message='Plan name already exists',
                )
            ]

    def validate(self, attrs):
        post_trial_id = attrs.get('post_trial_plan_id')
        if 'post_trial_plan_id' not in attrs and self.instance is not None:
            post_trial_id = self.instance.post_trial_plan_id
        if attrs.get('is_trial') and not post_trial_id:
            raise serializers.ValidationError(
                {'postTrialPlan': 'Trial plans must specify a postTrialPlan'}
            )
        return attrs
