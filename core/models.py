"""
Core models - Organization (tenant) and the audit trail.
"""
from django.conf import settings
from django.db import models


class Organization(models.Model):
    """
    Tenant. Owns users, settings, invoices and uploads.
    """
    STATUS_ACTIVE = 'ACTIVE'
    STATUS_BLOCKED = 'BLOCKED'
    STATUS_INACTIVE = 'INACTIVE'
    STATUS_PENDING = 'PENDING'
    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_BLOCKED, 'Blocked'),
        (STATUS_INACTIVE, 'Inactive'),
        (STATUS_PENDING, 'Pending'),
    ]

    name = models.CharField(max_length=255, unique=True)
    slug = models.SlugField(max_length=100, unique=True)
    email = models.EmailField(unique=True, blank=True, null=True)
    phone = models.CharField(max_length=32, blank=True, null=True)
    address = models.JSONField(default=dict, blank=True)
    plan = models.ForeignKey(
        'plans.Plan',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='organizations',
    )
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True
    )
    plan_start_date = models.DateTimeField(null=True, blank=True)
    next_billing_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'organizations'
        verbose_name = 'Organization'
        verbose_name_plural = 'Organizations'
        ordering = ['name']

    def __str__(self):
        return self.name


class AuditLog(models.Model):
    """
    Who did what, per organization. Written by core.audit.log_action.
    """
    organization = models.ForeignKey(
        Organization,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs',
    )
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs',
    )
    action = models.CharField(max_length=100)
    message = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['organization', 'created_at'], name='audit_logs_org_created_idx'),
        ]

    def __str__(self):
        return f"[{self.created_at:%Y-%m-%d %H:%M}] {self.action}"
