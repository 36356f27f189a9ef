"""
Uploads API. Files belong to the caller's organization.
"""
from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.pagination import PageNumberPagination
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.utils import require_organization
from . import services
from .serializers import DeleteFilesSerializer, UploadSerializer


class UploadsPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'limit'
    max_page_size = 100


def _base_url(request):
    return request.build_absolute_uri('/').rstrip('/')


def _paginated(request, qs):
    paginator = UploadsPagination()
    page = paginator.paginate_queryset(qs, request)
    return paginator.get_paginated_response(UploadSerializer(page, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def single_upload_view(request):
    """POST /api/uploads/single  multipart field: file"""
    org = require_organization(request.user)
    upload = services.single_upload(request.FILES.get('file'), _base_url(request), org, request.user)
    return Response(UploadSerializer(upload).data, status=status.HTTP_201_CREATED)


@api_view(['POST', 'DELETE'])
@permission_classes([IsAuthenticated])
def multiple_view(request):
    """
    POST /api/uploads/multiple  multipart field: files (repeatable)
    DELETE /api/uploads/multiple  Body: {fileIds: [...]}
    """
    if request.method == 'POST':
        org = require_organization(request.user)
        uploads = services.multiple_upload(
            request.FILES.getlist('files'), _base_url(request), org, request.user,
        )
        return Response(UploadSerializer(uploads, many=True).data, status=status.HTTP_201_CREATED)

    serializer = DeleteFilesSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    count = services.delete_files(request.user, serializer.validated_data['fileIds'])
    return Response({'detail': f'{count} files deleted successfully', 'deleted': count})


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def upload_detail_view(request, pk):
    """DELETE /api/uploads/{id}"""
    services.delete_file(request.user, pk)
    return Response({'detail': 'File deleted successfully'}, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def uploads_view(request):
    """GET /api/uploads/all?search=&mimetype=&page=&limit="""
    return _paginated(request, services.list_my_files(request.user, request.query_params))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def org_uploads_view(request, org_id):
    """GET /api/uploads/org/{orgId}"""
    return _paginated(request, services.list_org_files(request.user, org_id, request.query_params))
