from django.contrib import admin

from .models import Upload


@admin.register(Upload)
class UploadAdmin(admin.ModelAdmin):
    list_display = ['filename', 'original_name', 'organization', 'mimetype', 'size', 'uploaded_by', 'created_at']
    list_filter = ['mimetype', 'organization']
    search_fields = ['filename', 'original_name', 'mimetype']
    readonly_fields = ['filename', 'url', 'size', 'created_at', 'updated_at']
