from django.urls import path

from modules.core.views import health_check, metrics_view

urlpatterns = [
    path("health", health_check, name="health_check"),
    path("metrics", metrics_view, name="metrics"),
]
