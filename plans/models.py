"""
Subscription plans offered to organizations.
"""
from django.core.validators import MinValueValidator
from django.db import models


class Plan(models.Model):
    DURATION_DAY = 'DAY'
    DURATION_WEEK = 'WEEK'
    DURATION_MONTH = 'MONTH'
    DURATION_YEAR = 'YEAR'
    DURATION_UNIT_CHOICES = [
        (DURATION_DAY, 'Day'),
        (DURATION_WEEK, 'Week'),
        (DURATION_MONTH, 'Month'),
        (DURATION_YEAR, 'Year'),
    ]

    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True, default='')
    slug = models.SlugField(max_length=120, unique=True)
    duration_unit = models.CharField(max_length=10, choices=DURATION_UNIT_CHOICES)
    duration_value = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(0)]
    )
    features = models.JSONField(default=list, blank=True)
    is_trial = models.BooleanField(default=False)
    post_trial_plan = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='trial_plans',
        help_text='Plan an organization moves to when this trial ends',
    )
    is_active = models.BooleanField(default=True, db_index=True)
    serial = models.PositiveIntegerField(default=0, help_text='Display order (ascending)')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'plans'
        ordering = ['serial', 'id']

    def __str__(self):
        return self.name
