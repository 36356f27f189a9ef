"""
URLs for uploads app
"""
from django.urls import path

from . import views

app_name = 'uploads'

urlpatterns = [
    path('all', views.uploads_view, name='uploads-list'),
    path('single', views.single_upload_view, name='uploads-single'),
    path('multiple', views.multiple_view, name='uploads-multiple'),
    path('org/<int:org_id>', views.org_uploads_view, name='uploads-by-org'),
    path('<int:pk>', views.upload_detail_view, name='uploads-detail'),
]
