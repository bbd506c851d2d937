"""
Exam Portal URL Configuration

This module defines the URL routing structure for the examination API.
Each functional area (auth, users, exams, questions, results) has its own
URL pattern list and namespace.

URL Structure:
- /api/token/: Authentication endpoints (JWT token management)
- /api/auth/: Logout, self-registration, own profile and password
- /api/users/: User administration (admin only)
- /api/exams/: Exam catalog, question listing, submission and own result
- /api/questions/: Single question administration
- /api/results/: Result listings and dashboard statistics

Author: Exam Portal Development Team
Version: 1.0.0
"""

from typing import List

from django.urls import URLPattern, include, path
from rest_framework.routers import DefaultRouter

from .catalog import views as catalog_views
from .results import views as result_views
from .users import views as user_views

app_name = "examination"


def _create_users_router() -> DefaultRouter:
    """
    Create and configure the router for user management endpoints.

    Returns:
        Configured DefaultRouter for user CRUD operations
    """
    router = DefaultRouter()
    router.register(r"users", user_views.UserCrudViewSet, basename="users")
    return router


users_router = _create_users_router()

auth_urlpatterns: List[URLPattern] = [
    path("logout/", user_views.LogoutView.as_view(), name="logout"),
    path("register/", user_views.StudentRegistrationView.as_view(), name="register"),
    path("profile/", user_views.ProfileView.as_view(), name="profile"),
    path("password/", user_views.ChangePasswordView.as_view(), name="change-password"),
]

exams_urlpatterns: List[URLPattern] = [
    path("", catalog_views.ExamListCreateView.as_view(), name="exam-list"),
    path("<int:pk>/", catalog_views.ExamDetailView.as_view(), name="exam-detail"),
    path(
        "<int:exam_id>/questions/",
        catalog_views.ExamQuestionListCreateView.as_view(),
        name="exam-questions",
    ),
    # Attempt submission and the caller's own result
    path("<int:exam_id>/submit/", result_views.SubmitExamView.as_view(), name="exam-submit"),
    path("<int:exam_id>/result/", result_views.ExamResultView.as_view(), name="exam-result"),
]

questions_urlpatterns: List[URLPattern] = [
    path("<int:pk>/", catalog_views.QuestionDetailView.as_view(), name="question-detail"),
]

results_urlpatterns: List[URLPattern] = [
    path("", result_views.MyResultsView.as_view(), name="my-results"),
    path("all/", result_views.AllResultsView.as_view(), name="all-results"),
    path("statistics/", result_views.ResultStatisticsView.as_view(), name="statistics"),
]

urlpatterns: List[URLPattern] = [
    path("token/", user_views.CustomTokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("token/refresh/", user_views.CustomTokenRefreshView.as_view(), name="token_refresh"),
    path("auth/", include((auth_urlpatterns, "auth"))),
    path("", include(users_router.urls)),
    path("exams/", include((exams_urlpatterns, "exams"))),
    path("questions/", include((questions_urlpatterns, "questions"))),
    path("results/", include((results_urlpatterns, "results"))),
]
