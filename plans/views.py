"""
Plans API.
Reads are public (pricing page); writes are super-admin only.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from accounts.permissions import IsSuperAdminOrReadOnly
from . import services
from .serializers import PlanSerializer, PlanWriteSerializer


class PlansPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'limit'
    max_page_size = 100


@api_view(['GET', 'POST'])
@permission_classes([IsSuperAdminOrReadOnly])
def plans_view(request):
    """
    GET /api/plans/?activeOnly=true&search=&page=&limit=
    POST /api/plans/
    """
    if request.method == 'GET':
        qs = services.list_plans(request.query_params)
        paginator = PlansPagination()
        page = paginator.paginate_queryset(qs, request)
        return paginator.get_paginated_response(PlanSerializer(page, many=True).data)

    serializer = PlanWriteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    plan = services.create_plan(serializer.validated_data, actor=request.user)
    return Response(PlanSerializer(plan).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsSuperAdminOrReadOnly])
def plan_detail_view(request, pk):
    """
    GET /api/plans/{id}
    PATCH /api/plans/{id}
    DELETE /api/plans/{id}
    """
    if request.method == 'GET':
        return Response(PlanSerializer(services.get_plan(pk)).data)

    if request.method == 'PATCH':
        serializer = PlanWriteSerializer(services.get_plan(pk), data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        plan = services.update_plan(pk, serializer.validated_data, actor=request.user)
        return Response(PlanSerializer(plan).data)

    plan = services.delete_plan(pk, actor=request.user)
    return Response({'detail': f"Plan '{plan.name}' deleted"}, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsSuperAdminOrReadOnly])
def plan_by_slug_view(request, slug):
    """GET /api/plans/slug/{slug}"""
    return Response(PlanSerializer(services.get_plan_by_slug(slug)).data)
