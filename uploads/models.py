from django.conf import settings
from django.db import models


def upload_path(instance, filename):
    return f'{settings.UPLOAD_DIR}/{filename}'


class Upload(models.Model):
    """A file stored under MEDIA_ROOT/uploads, owned by one organization."""
    organization = models.ForeignKey(
        'core.Organization',
        on_delete=models.CASCADE,
        related_name='uploads',
    )
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='uploads',
    )
    file = models.FileField(upload_to=upload_path, max_length=255)
    filename = models.CharField(max_length=255, db_index=True)
    original_name = models.CharField(max_length=255, blank=True, default='')
    url = models.CharField(max_length=500)
    mimetype = models.CharField(max_length=100, db_index=True)
    size = models.PositiveBigIntegerField(help_text='Size in bytes')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'uploads'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['organization', 'created_at'], name='uploads_org_created_idx'),
        ]

    def __str__(self):
        return self.filename
