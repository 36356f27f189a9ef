"""
URLs for documents app
"""
from django.urls import path

from . import views

app_name = 'documents'

urlpatterns = [
    path('pdf', views.render_pdf_view, name='render-pdf'),
]
