"""
Upload services - validation, storage and org-scoped removal of files.
"""
import logging
import os
import random
import time

from django.conf import settings
from django.db import transaction
from django.db.models import Q

from core.audit import actor_display, log_action
from core.exceptions import AppError
from core.models import Organization
from core.utils import filter_by_organization
from .models import Upload

logger = logging.getLogger(__name__)

SEARCHABLE_FIELDS = ('filename', 'original_name', 'mimetype')


def unique_filename(original_name):
    """'Scan.PDF' -> '1718035200123-482913004.pdf'"""
    _, ext = os.path.splitext(original_name or '')
    return f'{int(time.time() * 1000)}-{random.randint(0, 10**9)}{ext.lower()}'


def validate_file(file_obj):
    if file_obj is None:
        raise AppError(400, 'No file uploaded', 'no_file')
    if file_obj.size > settings.UPLOAD_MAX_BYTES:
        limit_mb = settings.UPLOAD_MAX_BYTES // (1024 * 1024)
        raise AppError(400, f"File '{file_obj.name}' exceeds the {limit_mb} MB limit", 'file_too_large')
    mimetype = (getattr(file_obj, 'content_type', '') or '').lower()
    if mimetype not in settings.UPLOAD_ALLOWED_MIME_TYPES:
        raise AppError(400, f"File type '{mimetype or 'unknown'}' is not allowed", 'file_type_not_allowed')


def validate_files(files):
    if not files:
        raise AppError(400, 'No files uploaded', 'no_file')
    if len(files) > settings.UPLOAD_MAX_FILES:
        raise AppError(400, f'At most {settings.UPLOAD_MAX_FILES} files per request', 'too_many_files')
    for file_obj in files:
        validate_file(file_obj)


def _save_file(file_obj, base_url, organization, user):
    if hasattr(file_obj, 'seek'):
        file_obj.seek(0)
    upload = Upload(
        organization=organization,
        uploaded_by=user,
        original_name=(file_obj.name or '')[:255],
        mimetype=file_obj.content_type.lower(),
        size=file_obj.size,
    )
    upload.file.save(unique_filename(file_obj.name), file_obj, save=False)
    upload.filename = os.path.basename(upload.file.name)
    upload.url = f"{base_url.rstrip('/')}{upload.file.url}"
    try:
        upload.save()
    except Exception:
        _remove_from_disk(upload)
        raise
    logger.info('File stored: id=%s name=%s org=%s', upload.pk, upload.file.name, organization.pk)
    return upload


def single_upload(file_obj, base_url, organization, user):
    validate_file(file_obj)
    upload = _save_file(file_obj, base_url, organization, user)
    log_action(
        'File Uploaded',
        f'File uploaded: {upload.original_name or upload.filename} '
        f'(type={upload.mimetype}, size={upload.size} bytes) by {actor_display(user)}',
        actor=user,
        organization=organization,
    )
    return upload


@transaction.atomic
def multiple_upload(files, base_url, organization, user):
    """
    All files are validated before any of them is written. If storing one
    fails, files already written for the batch are removed again.
    """
    validate_files(files)
    uploads = []
    try:
        for file_obj in files:
            uploads.append(_save_file(file_obj, base_url, organization, user))
    except Exception:
        logger.warning('Batch upload failed after %s file(s); removing them', len(uploads))
        for upload in uploads:
            _remove_from_disk(upload)
        raise
    names = ', '.join(u.original_name or u.filename for u in uploads)
    log_action(
        'Files Uploaded',
        f'Files uploaded: count={len(uploads)}; names=[{names}] by {actor_display(user)}',
        actor=user,
        organization=organization,
    )
    return uploads


def _remove_from_disk(upload):
    if upload.file and upload.file.storage.exists(upload.file.name):
        upload.file.delete(save=False)


def delete_file(user, pk):
    upload = filter_by_organization(Upload.objects.all(), user).filter(pk=pk).first()
    if upload is None:
        raise AppError(404, 'File not found or not authorized')
    _remove_from_disk(upload)
    filename = upload.filename
    organization = upload.organization
    upload.delete()
    log_action(
        'File Deleted',
        f'File deleted: id={pk} name={filename} by {actor_display(user)}',
        actor=user,
        organization=organization,
    )


def delete_files(user, ids):
    """Ids outside the caller's organization are skipped. Returns the count removed."""
    uploads = list(filter_by_organization(Upload.objects.all(), user).filter(pk__in=ids))
    for upload in uploads:
        _remove_from_disk(upload)
    Upload.objects.filter(pk__in=[u.pk for u in uploads]).delete()
    log_action(
        'Files Deleted',
        f'Files deleted: count={len(uploads)} of {len(ids)} requested by {actor_display(user)}',
        actor=user,
    )
    return len(uploads)


def list_files(queryset, params):
    search = (params.get('search') or '').strip()
    if search:
        query = Q()
        for field in SEARCHABLE_FIELDS:
            query |= Q(**{f'{field}__icontains': search})
        queryset = queryset.filter(query)
    mimetype = (params.get('mimetype') or '').strip()
    if mimetype:
        queryset = queryset.filter(mimetype=mimetype)
    return queryset.select_related('uploaded_by').order_by('-created_at', '-id')


def list_my_files(user, params):
    return list_files(filter_by_organization(Upload.objects.all(), user), params)


def list_org_files(user, org_id, params):
    org = Organization.objects.filter(pk=org_id).first()
    if org is None:
        raise AppError(404, 'Organization not found')
    if not user.is_super_admin and user.organization_id != org.pk:
        raise AppError(403, 'You can only view files of your own organization')
    return list_files(Upload.objects.filter(organization=org), params)
