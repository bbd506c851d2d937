"""
Exam Portal Users Views Package

Authentication, own-profile and admin user management views.
"""

from .auth_views import (
    CustomTokenObtainPairView,
    CustomTokenRefreshView,
    LogoutView,
    StudentRegistrationView,
    ProfileView,
    ChangePasswordView,
)
from .user_crud_view import UserCrudViewSet
