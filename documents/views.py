"""
Documents API: render caller-supplied HTML (agreements, letters) to PDF.
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.audit import log_action
from .pdf import pdf_url, render_pdf
from .serializers import RenderPdfSerializer

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def render_pdf_view(request):
    """
    POST /api/documents/pdf
    Body: {html, filename}
    Returns: {filename, url}. The filename must be unique; an existing file
    with the same name is overwritten.
    """
    serializer = RenderPdfSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    filename = render_pdf(serializer.validated_data['html'], serializer.validated_data['filename'])
    log_action('Document PDF Generated', f"PDF '{filename}' generated", actor=request.user)
    return Response({
        'filename': filename,
        'url': pdf_url(filename),
    }, status=status.HTTP_201_CREATED)
