"""
URLs for org_settings app
"""
from django.urls import path

from . import views

app_name = 'org_settings'

urlpatterns = [
    path('', views.org_settings_list_view, name='list'),
    path('create', views.org_settings_create_view, name='create'),
    path('me', views.my_org_settings_view, name='me'),
    path('org/<int:org_id>', views.org_settings_by_org_view, name='by-org'),
]
