"""
Exam Portal URL Configuration

Routes the Django admin and the examination API. All API endpoints live
under /api/ and are defined in examination/urls.py.
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path


def health_check(request):
    return JsonResponse({"success": True, "message": "Server is running"})


urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/health/", health_check, name="health"),
    path("api/", include("examination.urls")),
]
