"""
URL configuration for orgsuite-back project
"""
from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods
from django.views.decorators.clickjacking import xframe_options_exempt
from django.views.generic import RedirectView
from django.conf import settings
from django.views.static import serve
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularSwaggerView,
    SpectacularRedocView,
)


@require_http_methods(["GET"])
def health_view(request):
    """Minimal health check for connectivity verification. No auth required."""
    return JsonResponse({'status': 'ok', 'service': 'orgsuite-back'})


@require_http_methods(["GET"])
def api_root(request):
    """Root endpoint - API information"""
    return JsonResponse({
        'name': 'OrgSuite API',
        'version': '1.0.0',
        'endpoints': {
            'health': '/api/health/',
            'auth': '/api/auth/',
            'plans': '/api/plans/',
            'orgSettings': '/api/org-settings/',
            'invoices': '/api/invoices/',
            'documents': '/api/documents/',
            'uploads': '/api/uploads/',
            'docs': '/api/docs/',
            'schema': '/api/schema/',
        }
    })


urlpatterns = [
    path('', api_root, name='api-root'),
    path('admin', RedirectView.as_view(url='/admin/', permanent=False)),
    path('admin/', admin.site.urls),
    path('api/', api_root),
    path('api/health/', health_view, name='api-health'),

    # API Schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),

    # API endpoints
    path('api/auth/', include('accounts.urls')),
    path('api/plans/', include('plans.urls')),
    path('api/org-settings/', include('org_settings.urls')),
    path('api/invoices/', include('invoices.urls')),
    path('api/documents/', include('documents.urls')),
    path('api/uploads/', include('uploads.urls')),
]


# Serve media files (uploads, generated PDFs) with iframe exemption for previews.
@xframe_options_exempt
def media_serve(request, path):
    """Serve media files; allow iframe embedding for PDF preview."""
    return serve(request, path, document_root=settings.MEDIA_ROOT)


media_url_pattern = settings.MEDIA_URL.lstrip('/')
urlpatterns += [path(f'{media_url_pattern}<path:path>', media_serve)]
