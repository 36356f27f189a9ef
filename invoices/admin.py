from django.contrib import admin

from .models import Invoice


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ['invoice_id', 'organization', 'bill_to_name', 'total', 'currency', 'status', 'issue_date', 'is_deleted']
    list_filter = ['status', 'is_deleted', 'organization']
    search_fields = ['invoice_id', 'bill_to_name', 'bill_to_email']
    readonly_fields = ['invoice_id', 'pdf_filename', 'created_by', 'created_at', 'updated_at']
