from django.contrib import admin

from .models import AuditLog, Organization


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'email', 'plan', 'status', 'next_billing_date', 'created_at']
    list_filter = ['status', 'plan']
    search_fields = ['name', 'slug', 'email']
    prepopulated_fields = {'slug': ('name',)}


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['created_at', 'organization', 'actor', 'action']
    list_filter = ['action']
    search_fields = ['action', 'message']
    readonly_fields = ['organization', 'actor', 'action', 'message', 'created_at']
