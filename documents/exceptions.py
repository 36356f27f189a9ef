"""
PDF rendering errors. A missing browser configuration and a failed render are
separate error types with separate codes.
"""
from rest_framework import status

from core.exceptions import AppError


class PdfConfigurationError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'PDF rendering is not configured.'
    default_code = 'pdf_not_configured'

    def __init__(self, detail=None):
        super().__init__(detail=detail)


class PdfRenderError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'PDF rendering failed.'
    default_code = 'pdf_render_failed'

    def __init__(self, detail=None, code=None, status_code=None):
        super().__init__(status_code=status_code, detail=detail, code=code or self.default_code)
