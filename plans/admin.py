from django.contrib import admin

from .models import Plan


@admin.register(Plan)
class PlanAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'duration_value', 'duration_unit', 'price', 'is_trial', 'is_active', 'serial']
    list_filter = ['is_trial', 'is_active', 'duration_unit']
    search_fields = ['name', 'slug', 'description']
    ordering = ['serial', 'id']
