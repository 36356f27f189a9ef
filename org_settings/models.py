"""
Per-organization settings: branding, business hours, holidays, timezone.
"""
from django.conf import settings
from django.db import models
from django.db.models import Q


class OrgSettingsQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_deleted=False)


class OrgSettings(models.Model):
    """
    At most one non-deleted row per organization. Deleting is soft (is_deleted);
    a later upsert creates a fresh row.
    """
    organization = models.ForeignKey(
        'core.Organization',
        on_delete=models.CASCADE,
        related_name='settings_rows',
    )
    # {logoUrl, primaryColor, secondaryColor, primaryTextColor, secondaryTextColor}
    branding = models.JSONField(default=dict, blank=True)
    # [{dow: 0-6, opens: "HH:mm", closes: "HH:mm"}]
    business_hours = models.JSONField(default=list, blank=True)
    # [{date: "YYYY-MM-DD", name}]
    holidays = models.JSONField(default=list, blank=True)
    timezone = models.CharField(max_length=64, default='UTC')
    is_deleted = models.BooleanField(default=False, db_index=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = OrgSettingsQuerySet.as_manager()

    class Meta:
        db_table = 'org_settings'
        verbose_name = 'Organization settings'
        verbose_name_plural = 'Organization settings'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['organization'],
                condition=Q(is_deleted=False),
                name='uniq_active_org_settings',
            ),
        ]

    def __str__(self):
        return f"Settings for {self.organization_id}"
