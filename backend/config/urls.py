"""URL configuration for Backgammon analysis project."""
from django.urls import include, path

urlpatterns = [
    path('api/ai/', include('apps.ai.urls')),
]
