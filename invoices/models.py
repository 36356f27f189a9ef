"""
Invoice model.
"""
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q


class InvoiceQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_deleted=False)


class Invoice(models.Model):
    STATUS_DRAFT = 'DRAFT'
    STATUS_SENT = 'SENT'
    STATUS_PAID = 'PAID'
    STATUS_VOID = 'VOID'
    STATUS_CHOICES = [
        (STATUS_DRAFT, 'Draft'),
        (STATUS_SENT, 'Sent'),
        (STATUS_PAID, 'Paid'),
        (STATUS_VOID, 'Void'),
    ]

    organization = models.ForeignKey(
        'core.Organization',
        on_delete=models.CASCADE,
        related_name='invoices',
    )
    # ORG_CODE-SEQUENCE, see invoices.invoice_ids
    invoice_id = models.CharField(max_length=32, null=True, blank=True, db_index=True)
    bill_to_name = models.CharField(max_length=255)
    bill_to_email = models.EmailField(blank=True, default='')
    bill_to_address = models.TextField(blank=True, default='')
    currency = models.CharField(max_length=3, default='USD')
    # [{description, quantity, unitPrice}]
    items = models.JSONField(default=list)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    tax = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    notes = models.TextField(blank=True, default='')
    issue_date = models.DateField()
    due_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_DRAFT, db_index=True)
    pdf_filename = models.CharField(max_length=255, blank=True, default='')
    is_deleted = models.BooleanField(default=False, db_index=True)
    deleted_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_invoices',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = InvoiceQuerySet.as_manager()

    class Meta:
        db_table = 'invoices'
        ordering = ['-created_at', '-id']
        constraints = [
            models.UniqueConstraint(
                fields=['organization', 'invoice_id'],
                condition=Q(is_deleted=False),
                name='uniq_live_invoice_id_per_org',
            ),
        ]
        indexes = [
            models.Index(fields=['organization', 'is_deleted'], name='invoices_org_deleted_idx'),
        ]

    def __str__(self):
        return self.invoice_id or f"Invoice #{self.pk}"
