"""
URLs for plans app
"""
from django.urls import path

from . import views

app_name = 'plans'

urlpatterns = [
    path('', views.plans_view, name='list'),
    path('slug/<slug:slug>', views.plan_by_slug_view, name='by-slug'),
    path('<int:pk>', views.plan_detail_view, name='detail'),
]
