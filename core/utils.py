"""
Core utilities - organization scoping, etc.
"""
from .exceptions import AppError


def _user_org_id(user):
    return getattr(user, 'organization_id', None)


def require_organization(user):
    """
    Return the caller's organization, or raise 400 when the account has none.
    Every tenant-scoped endpoint starts here.
    """
    org = getattr(user, 'organization', None)
    if org is None:
        raise AppError(400, 'User is not assigned to an organization', 'no_organization')
    return org


def filter_by_organization(queryset, user, org_field='organization'):
    """
    Restrict queryset to the user's organization.
    Super admins get the queryset unfiltered; users without an org get nothing.
    """
    if getattr(user, 'is_super_admin', False):
        return queryset
    org_id = _user_org_id(user)
    if org_id is None:
        return queryset.none()
    return queryset.filter(**{f'{org_field}_id': org_id})
