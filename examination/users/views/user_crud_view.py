"""
Exam Portal User Management Views

This module provides user management for administrators: listing users,
inspecting a single user, changing a user's role and deleting users.
Users are created through self-registration or the Django admin.

Author: Exam Portal Development Team
Version: 1.0.0
"""

import logging
from typing import Optional
from django.contrib.auth.models import User
from django.db.models import QuerySet
from rest_framework import mixins, viewsets, status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from ..models import Profile, UserRole
from ..permissions import IsAdminRole
from ..serializers import UserSerializer, RoleUpdateSerializer

logger = logging.getLogger(__name__)


class UserCrudViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    User management ViewSet for administrative operations.

    Permissions:
    - Requires the admin role (IsAdminRole)
    - Admins cannot demote or delete themselves
    """

    serializer_class = UserSerializer
    permission_classes = [IsAdminRole]

    def get_queryset(self) -> QuerySet[User]:
        """
        Get users with their profile joined in.

        Supports ?role=admin|student filtering.
        """
        queryset = User.objects.select_related("profile").order_by("id")
        role = self.request.query_params.get("role")
        if role in UserRole.values:
            queryset = queryset.filter(profile__role=role)
        return queryset

    def destroy(self, request: Request, *args, **kwargs) -> Response:
        """
        Delete a user. Their results are removed by cascade.
        """
        user = self.get_object()
        if user.pk == request.user.pk:
            return Response(
                {"detail": "You cannot delete your own account.", "error_code": "validation_failed"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        logger.info(f"Admin {request.user.username} deleted user {user.username}")
        user.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["put"], url_path="role")
    def update_role(self, request: Request, pk: Optional[str] = None) -> Response:
        """
        Set the role of a user.

        Request Body Example (JSON):
            {"role": "admin"}
        """
        user = self.get_object()
        serializer = RoleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        role = serializer.validated_data["role"]

        if user.pk == request.user.pk and role != UserRole.ADMIN:
            return Response(
                {"detail": "You cannot remove your own admin role.", "error_code": "validation_failed"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        profile, _created = Profile.objects.get_or_create(user=user)
        profile.role = role
        profile.save(update_fields=["role"])
        logger.info(f"Admin {request.user.username} set role of {user.username} to {role}")

        user.refresh_from_db()
        return Response(UserSerializer(user).data, status=status.HTTP_200_OK)
