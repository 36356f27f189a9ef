"""
Organization settings services.
"""
import logging

from django.db import transaction
from django.db.models import Q

from core.audit import actor_display, log_action
from core.exceptions import AppError
from core.models import Organization
from core.utils import require_organization
from .models import OrgSettings

logger = logging.getLogger(__name__)

SEARCHABLE_FIELDS = ('timezone', 'organization__name')
EDITABLE_FIELDS = ('branding', 'business_hours', 'holidays', 'timezone')


def _base_queryset():
    return OrgSettings.objects.active().select_related('organization')


def _not_found():
    return AppError(404, 'Organization settings not found')


@transaction.atomic
def create_org_settings(org_id, data, actor=None):
    """
    Create settings for an organization. Returns (settings, created);
    an existing active row is returned untouched.
    """
    org = Organization.objects.select_for_update().filter(pk=org_id).first()
    if org is None:
        raise AppError(400, 'Invalid org id')

    existing = _base_queryset().filter(organization=org).first()
    if existing is not None:
        return existing, False

    row = OrgSettings(organization=org, created_by=_user_or_none(actor))
    _apply(row, data)
    row.save()
    logger.info('Org settings created: org=%s', org.pk)
    log_action(
        'Organization Settings Created',
        f"Org settings created for Org '{org.name}' by {actor_display(actor)}",
        actor=actor,
        organization=org,
    )
    return row, True


def list_org_settings(params):
    qs = _base_queryset()
    search = (params.get('search') or '').strip()
    if search:
        query = Q()
        for field in SEARCHABLE_FIELDS:
            query |= Q(**{f'{field}__icontains': search})
        qs = qs.filter(query)
    return qs.order_by('-created_at', '-id')


def get_org_settings_by_org(org_id):
    row = _base_queryset().filter(organization_id=org_id).first()
    if row is None:
        raise _not_found()
    return row


def get_my_org_settings(user):
    org_id = getattr(user, 'organization_id', None)
    if org_id is None:
        raise _not_found()
    return get_org_settings_by_org(org_id)


@transaction.atomic
def upsert_my_org_settings(user, patch):
    """
    Create or update the caller's settings. Returns (settings, created).
    """
    org = require_organization(user)
    # Lock the org row; concurrent upserts queue here
    Organization.objects.select_for_update().filter(pk=org.pk).first()

    row = _base_queryset().filter(organization=org).first()
    created = row is None
    if created:
        row = OrgSettings(organization=org, created_by=user)
    else:
        row.updated_by = user
    _apply(row, patch)
    row.save()

    fields = ', '.join(sorted(k for k in patch if k in EDITABLE_FIELDS))
    log_action(
        'Organization Settings Created' if created else 'Organization Settings Updated',
        f"Org settings {'created' if created else 'updated'} for Org '{org.name}' "
        f"fields=[{fields}] by {actor_display(user)}",
        actor=user,
        organization=org,
    )
    return row, created


def delete_org_settings(org_id, actor=None):
    row = _base_queryset().filter(organization_id=org_id).first()
    if row is None:
        raise _not_found()
    row.is_deleted = True
    row.updated_by = _user_or_none(actor)
    row.save(update_fields=['is_deleted', 'updated_by', 'updated_at'])
    logger.info('Org settings soft-deleted: org=%s', org_id)
    log_action(
        'Organization Settings Deleted',
        f"Org settings deleted for Org '{row.organization.name}' by {actor_display(actor)}",
        actor=actor,
        organization=row.organization,
    )
    return row


def _apply(row, data):
    for field in EDITABLE_FIELDS:
        if field in data:
            setattr(row, field, data[field])


def _user_or_none(user):
    if user is not None and getattr(user, 'is_authenticated', False):
        return user
    return None
