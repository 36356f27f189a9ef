"""
URLs for invoices app
"""
from django.urls import path

from . import views

app_name = 'invoices'

urlpatterns = [
    path('', views.invoices_view, name='list'),
    path('next-id', views.next_invoice_id_view, name='next-id'),
    path('<int:pk>', views.invoice_detail_view, name='detail'),
    path('<int:pk>/status', views.invoice_status_view, name='status'),
    path('<int:pk>/pdf', views.invoice_generate_pdf_view, name='pdf'),
    path('<int:pk>/pdf/download', views.invoice_download_pdf_view, name='pdf-download'),
]
