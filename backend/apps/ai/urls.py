"""URL configuration for the AI app."""
from django.urls import path

from . import views

app_name = 'ai'

urlpatterns = [
    path('evaluate/', views.EvaluatePositionView.as_view(), name='evaluate'),
]
