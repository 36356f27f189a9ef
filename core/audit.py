"""
Audit trail helper.
"""
import logging

from django.db import transaction

from .models import AuditLog

logger = logging.getLogger(__name__)


def actor_display(user):
    if user is None or not getattr(user, 'is_authenticated', False):
        return 'system'
    return getattr(user, 'email', None) or str(user.pk)


def log_action(action, message='', *, actor=None, organization=None):
    """
    Record one audit entry. A failure here is logged and swallowed so that it
    never rolls back or fails the business operation that triggered it.
    The insert runs in its own savepoint; the caller's transaction stays usable.
    """
    if organization is None and actor is not None:
        organization = getattr(actor, 'organization', None)
    if actor is not None and not getattr(actor, 'is_authenticated', False):
        actor = None
    try:
        with transaction.atomic():
            return AuditLog.objects.create(
                organization=organization,
                actor=actor,
                action=action,
                message=message,
            )
    except Exception:
        logger.exception('Failed to write audit log entry %r', action)
        return None
