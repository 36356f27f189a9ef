from django.contrib import admin

from .models import OrgSettings


@admin.register(OrgSettings)
class OrgSettingsAdmin(admin.ModelAdmin):
    list_display = ['organization', 'timezone', 'is_deleted', 'updated_at']
    list_filter = ['is_deleted', 'timezone']
    search_fields = ['organization__name', 'timezone']
    readonly_fields = ['created_by', 'updated_by', 'created_at', 'updated_at']
