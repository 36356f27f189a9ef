"""
Custom middleware for orgsuite-back.
"""
from django.utils.deprecation import MiddlewareMixin
import logging

logger = logging.getLogger(__name__)


class FrameOptionsExemptMiddleware(MiddlewareMixin):
    """
    Remove X-Frame-Options for responses that must be embeddable in iframes
    (generated invoice/agreement PDFs, media files).
    Must run after django.middleware.clickjacking.XFrameOptionsMiddleware.
    """
    FRAME_EXEMPT_PREFIXES = ('/media/',)

    def process_response(self, request, response):
        path = request.path
        content_type = response.get('Content-Type', '') or ''

        should_exempt = (
            any(path.startswith(prefix) for prefix in self.FRAME_EXEMPT_PREFIXES)
            or 'application/pdf' in content_type.lower()
            or path.lower().endswith('.pdf')
        )
        if not should_exempt:
            return response

        # Header names are case-insensitive
        for header_name in [h for h in response if h.lower() == 'x-frame-options']:
            del response[header_name]
            logger.debug('Removed X-Frame-Options for path: %s', path)

        response['X-Frame-Allowed'] = 'true'
        return response
