"""
Invoices API. Every endpoint is scoped to the caller's organization.
"""
from django.http import FileResponse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsOrgAdmin
from core.utils import require_organization
from . import services
from .invoice_ids import generate_invoice_id
from .serializers import InvoiceCreateSerializer, InvoiceSerializer, InvoiceStatusSerializer


class InvoicesPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'limit'
    max_page_size = 100


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def next_invoice_id_view(request):
    """
    GET /api/invoices/next-id
    Preview only; the id is assigned for real when the invoice is created.
    """
    org = require_organization(request.user)
    return Response({'invoiceId': generate_invoice_id(org.pk)})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def invoices_view(request):
    """
    GET /api/invoices/?status=&search=&page=&limit=
    POST /api/invoices/ (org admins)
    """
    if request.method == 'GET':
        qs = services.list_invoices(request.user, request.query_params)
        paginator = InvoicesPagination()
        page = paginator.paginate_queryset(qs, request)
        return paginator.get_paginated_response(InvoiceSerializer(page, many=True).data)

    if not request.user.is_org_admin:
        raise PermissionDenied('Only organization admins can do this.')
    org = require_organization(request.user)
    serializer = InvoiceCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    invoice = services.create_invoice(org, serializer.validated_data, actor=request.user)
    return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def invoice_detail_view(request, pk):
    """
    GET /api/invoices/{id}
    DELETE /api/invoices/{id} (soft delete, org admins)
    """
    if request.method == 'GET':
        return Response(InvoiceSerializer(services.get_invoice(request.user, pk)).data)

    if not request.user.is_org_admin:
        raise PermissionDenied('Only organization admins can do this.')
    services.delete_invoice(request.user, pk)
    return Response({'detail': 'Invoice deleted'}, status=status.HTTP_200_OK)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsOrgAdmin])
def invoice_status_view(request, pk):
    """PATCH /api/invoices/{id}/status  Body: {status}"""
    serializer = InvoiceStatusSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    invoice = services.update_invoice_status(request.user, pk, serializer.validated_data['status'])
    return Response(InvoiceSerializer(invoice).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def invoice_generate_pdf_view(request, pk):
    """
    POST /api/invoices/{id}/pdf
    Renders a fresh PDF and returns the updated invoice.
    """
    invoice = services.generate_invoice_pdf(request.user, pk)
    return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def invoice_download_pdf_view(request, pk):
    """GET /api/invoices/{id}/pdf/download"""
    invoice, path = services.invoice_pdf_file(request.user, pk)
    return FileResponse(
        open(path, 'rb'),
        content_type='application/pdf',
        as_attachment=True,
        filename=f"{invoice.invoice_id or invoice.pk}.pdf",
    )

