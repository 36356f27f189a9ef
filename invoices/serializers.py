"""
Serializers for invoices app
"""
from rest_framework import serializers

from .models import Invoice


class InvoiceItemSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=500)
    quantity = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, default=1)
    unitPrice = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class InvoiceCreateSerializer(serializers.Serializer):
    """validated_data keys are model field names."""
    billToName = serializers.CharField(source='bill_to_name', max_length=255)
    billToEmail = serializers.EmailField(source='bill_to_email', required=False, allow_blank=True)
    billToAddress = serializers.CharField(source='bill_to_address', required=False, allow_blank=True)
    currency = serializers.RegexField(r'^[A-Za-z]{3}$', required=False)
    items = InvoiceItemSerializer(many=True, allow_empty=False)
    tax = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    discount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    issueDate = serializers.DateField(source='issue_date')
    dueDate = serializers.DateField(source='due_date', required=False, allow_null=True)
    status = serializers.ChoiceField(choices=Invoice.STATUS_CHOICES, required=False)

    def validate_currency(self, value):
        return value.upper()

    def validate_items(self, value):
        return [dict(item) for item in value]

    def validate(self, attrs):
        due = attrs.get('due_date')
        if due and due < attrs['issue_date']:
            raise serializers.ValidationError({'dueDate': 'Due date cannot be before issue date.'})
        return attrs


class InvoiceStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Invoice.STATUS_CHOICES)


class InvoiceSerializer(serializers.ModelSerializer):
    invoiceId = serializers.CharField(source='invoice_id', read_only=True)
    organizationId = serializers.IntegerField(source='organization_id', read_only=True)
    billToName = serializers.CharField(source='bill_to_name', read_only=True)
    billToEmail = serializers.CharField(source='bill_to_email', read_only=True)
    billToAddress = serializers.CharField(source='bill_to_address', read_only=True)
    issueDate = serializers.DateField(source='issue_date', read_only=True)
    dueDate = serializers.DateField(source='due_date', read_only=True)
    pdfFilename = serializers.CharField(source='pdf_filename', read_only=True)
    hasPdf = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Invoice
        fields = [
            'id', 'invoiceId', 'organizationId', 'billToName', 'billToEmail', 'billToAddress',
            'currency', 'items', 'subtotal', 'tax', 'discount', 'total', 'notes',
            'issueDate', 'dueDate', 'status', 'pdfFilename', 'hasPdf', 'createdAt',
        ]
        read_only_fields = fields

    def get_hasPdf(self, obj):
        return bool(obj.pdf_filename)
