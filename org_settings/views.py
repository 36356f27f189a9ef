"""
Organization settings API.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsOrgAdmin, IsSuperAdmin
from core.utils import require_organization
from . import services
from .serializers import OrgSettingsSerializer, OrgSettingsWriteSerializer


class OrgSettingsPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'limit'
    max_page_size = 100


def _check_org_access(user, org_id):
    if user.is_super_admin:
        return
    if user.organization_id != org_id:
        raise PermissionDenied('You can only access your own organization settings.')


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsSuperAdmin])
def org_settings_list_view(request):
    """
    GET /api/org-settings/?search=&page=&limit=
    """
    qs = services.list_org_settings(request.query_params)
    paginator = OrgSettingsPagination()
    page = paginator.paginate_queryset(qs, request)
    return paginator.get_paginated_response(OrgSettingsSerializer(page, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsOrgAdmin])
def org_settings_create_view(request):
    """
    POST /api/org-settings/create
    Body: {orgId?, branding, businessHours, holidays, timezone}
    orgId defaults to the caller's organization. 201 when created,
    200 with the existing row when settings already exist.
    """
    serializer = OrgSettingsWriteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = dict(serializer.validated_data)
    org_id = data.pop('orgId', None)
    if org_id is None:
        org_id = require_organization(request.user).pk
    _check_org_access(request.user, org_id)

    row, created = services.create_org_settings(org_id, data, actor=request.user)
    return Response(
        OrgSettingsSerializer(row).data,
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
    )


@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def my_org_settings_view(request):
    """
    GET /api/org-settings/me - any member of the organization
    PUT /api/org-settings/me - upsert, full payload (admins)
    PATCH /api/org-settings/me - upsert, partial payload (admins)
    """
    if request.method == 'GET':
        return Response(OrgSettingsSerializer(services.get_my_org_settings(request.user)).data)

    if not request.user.is_org_admin:
        raise PermissionDenied('Only organization admins can change settings.')

    serializer = OrgSettingsWriteSerializer(data=request.data, partial=request.method == 'PATCH')
    serializer.is_valid(raise_exception=True)
    data = dict(serializer.validated_data)
    data.pop('orgId', None)

    row, created = services.upsert_my_org_settings(request.user, data)
    return Response(
        OrgSettingsSerializer(row).data,
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
    )


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def org_settings_by_org_view(request, org_id):
    """
    GET /api/org-settings/org/{orgId}
    DELETE /api/org-settings/org/{orgId} (soft delete, admins)
    """
    _check_org_access(request.user, org_id)

    if request.method == 'GET':
        return Response(OrgSettingsSerializer(services.get_org_settings_by_org(org_id)).data)

    if not request.user.is_org_admin:
        raise PermissionDenied('Only organization admins can delete settings.')
    services.delete_org_settings(org_id, actor=request.user)
    return Response({'detail': 'Organization settings deleted'}, status=status.HTTP_200_OK)
