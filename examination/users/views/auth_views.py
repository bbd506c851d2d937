"""
Exam Portal Authentication Views

This module provides the identity endpoints the examination system relies
on: cookie-based JWT login/refresh/logout, student self-registration, the
own-profile endpoint and password changes.

Views:
- CustomTokenObtainPairView: Login, tokens stored in HTTP-only cookies
- CustomTokenRefreshView: Refresh from the refresh_token cookie
- LogoutView: Blacklist the refresh token and clear cookies
- StudentRegistrationView: Public sign-up as student
- ProfileView: Read and update the caller's own profile
- ChangePasswordView: Change the caller's password

Author: Exam Portal Development Team
Version: 1.0.0
"""

import logging

from django.conf import settings
from django.utils.translation import gettext_lazy as _
from rest_framework import status, generics
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView

from backend.custom_auth import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE
from ..serializers import (
    UserSerializer,
    ProfileUpdateSerializer,
    ChangePasswordSerializer,
    StudentRegistrationSerializer,
)

logger = logging.getLogger(__name__)


def _set_token_cookies(response: Response, refresh=None, access=None) -> None:
    """Store the given tokens as HTTP-only cookies on the response."""
    lifetimes = settings.SIMPLE_JWT
    cookie_kwargs = {
        "httponly": True,
        "secure": settings.JWT_COOKIE_SECURE,
        "samesite": settings.JWT_COOKIE_SAMESITE,
        "path": "/",
    }
    if refresh:
        response.set_cookie(
            REFRESH_TOKEN_COOKIE,
            refresh,
            max_age=int(lifetimes["REFRESH_TOKEN_LIFETIME"].total_seconds()),
            **cookie_kwargs,
        )
    if access:
        response.set_cookie(
            ACCESS_TOKEN_COOKIE,
            access,
            max_age=int(lifetimes["ACCESS_TOKEN_LIFETIME"].total_seconds()),
            **cookie_kwargs,
        )


class CustomTokenObtainPairView(TokenObtainPairView):
    """
    Login view storing JWT tokens in secure HTTP-only cookies instead of
    returning them in the response body. The body keeps the user id,
    username and role for the frontend.
    """

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        if response.status_code == 200:
            data = response.data
            refresh = data.pop("refresh", None)
            access = data.pop("access", None)
            _set_token_cookies(response, refresh=refresh, access=access)
            logger.info(f"User {data.get('username')} logged in as {data.get('role')}")
        return response


class CustomTokenRefreshView(APIView):
    """
    Refresh the JWT tokens from the refresh_token cookie and store the new
    tokens in cookies.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        refresh_token = request.COOKIES.get(REFRESH_TOKEN_COOKIE)
        if not refresh_token:
            return Response(
                {"detail": "Refresh token not provided", "error_code": "validation_failed"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        serializer = TokenRefreshSerializer(data={"refresh": refresh_token})
        try:
            serializer.is_valid(raise_exception=True)
        except TokenError as e:
            return Response(
                {"detail": str(e), "error_code": "validation_failed"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        data = serializer.validated_data
        response = Response(status=status.HTTP_200_OK)
        _set_token_cookies(response, refresh=data.get("refresh"), access=data.get("access"))
        return response


class LogoutView(APIView):
    """
    Invalidate the refresh token and clear both JWT cookies.

    Always answers 205 Reset Content; an unusable refresh token is logged
    and otherwise ignored since the cookies are removed either way.
    """

    permission_classes = [AllowAny]

    def post(self, request):
        refresh_token = request.COOKIES.get(REFRESH_TOKEN_COOKIE)
        if refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
            except TokenError as e:
                logger.warning(f"Logout with unusable refresh token: {e}")
        response = Response(
            {"detail": _("Successfully logged out.")},
            status=status.HTTP_205_RESET_CONTENT,
        )
        response.delete_cookie(REFRESH_TOKEN_COOKIE)
        response.delete_cookie(ACCESS_TOKEN_COOKIE)
        return response


class StudentRegistrationView(generics.CreateAPIView):
    """
    Public registration endpoint. New accounts always get the student role.

    Request Body Example (JSON):
    {
        "username": "johndoe",
        "email": "john@example.com",
        "password": "secret1234",
        "password_confirm": "secret1234",
        "standard": "10th",
        "division": "A",
        "roll_no": "101"
    }
    """

    serializer_class = StudentRegistrationSerializer
    permission_classes = [AllowAny]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"Registered student {user.username}")
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class ProfileView(APIView):
    """Read and update the authenticated user's own profile."""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        return Response(UserSerializer(request.user).data)

    def put(self, request: Request) -> Response:
        return self._update(request, partial=False)

    def patch(self, request: Request) -> Response:
        return self._update(request, partial=True)

    def _update(self, request: Request, partial: bool) -> Response:
        serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(UserSerializer(user).data)


class ChangePasswordView(APIView):
    """Change the authenticated user's password."""

    permission_classes = [IsAuthenticated]

    def put(self, request: Request) -> Response:
        serializer = ChangePasswordSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({"detail": _("Password updated successfully.")})
