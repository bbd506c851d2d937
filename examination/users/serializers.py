"""
Exam Portal User Serializers

This module provides serializers for authentication, the own-profile
endpoint, password changes, student self-registration and admin role
management.

Serializers:
- CustomTokenObtainPairSerializer: JWT token carrying username and role
- UserSerializer: User data with profile details and role
- ProfileUpdateSerializer: Own profile updates (no role changes)
- ChangePasswordSerializer: Password change with current password check
- StudentRegistrationSerializer: Public sign-up, always as student
- RoleUpdateSerializer: Admin role assignment

Author: Exam Portal Development Team
Version: 1.0.0
"""

from typing import Dict, Any
from django.contrib.auth.models import User
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from .models import Profile, UserRole, role_of

PROFILE_FIELDS = ("standard", "division", "roll_no", "phone")


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    JWT token serializer that adds the username and role to the token and
    to the login response body.
    """

    @classmethod
    def get_token(cls, user: User) -> RefreshToken:
        token = super().get_token(user)
        token["username"] = user.username
        token["role"] = role_of(user)
        return token

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        data = super().validate(attrs)
        data.update({
            "user_id": self.user.id,
            "username": self.user.username,
            "role": role_of(self.user),
        })
        return data


class UserSerializer(serializers.ModelSerializer):
    """
    User data serializer including the profile role and student details.
    """

    role = serializers.SerializerMethodField()
    full_name = serializers.SerializerMethodField()
    standard = serializers.CharField(source="profile.standard", read_only=True)
    division = serializers.CharField(source="profile.division", read_only=True)
    roll_no = serializers.CharField(source="profile.roll_no", read_only=True)
    phone = serializers.CharField(source="profile.phone", read_only=True)

    class Meta:
        model = User
        fields = (
            "id", "username", "email", "first_name", "last_name", "full_name",
            "role", "standard", "division", "roll_no", "phone",
            "is_active", "date_joined", "last_login",
        )
        read_only_fields = fields

    def get_role(self, obj: User) -> str:
        return role_of(obj)

    def get_full_name(self, obj: User) -> str:
        """
        Get formatted full name of the user.

        Returns:
            Formatted full name or username if names are not available
        """
        full_name = f"{obj.first_name} {obj.last_name}".strip()
        return full_name or obj.username


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """
    Own-profile update: user names, email and the student details.
    The role is deliberately not writable here.
    """

    standard = serializers.CharField(required=False, allow_blank=True, max_length=30)
    division = serializers.CharField(required=False, allow_blank=True, max_length=30)
    roll_no = serializers.CharField(required=False, allow_blank=True, max_length=30)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=30)

    class Meta:
        model = User
        fields = ("email", "first_name", "last_name") + PROFILE_FIELDS

    def validate_email(self, value: str) -> str:
        if value:
            user_id = self.instance.id if self.instance else None
            if User.objects.filter(email=value).exclude(id=user_id).exists():
                raise serializers.ValidationError(
                    _("A user with this email address already exists.")
                )
        return value

    @transaction.atomic
    def update(self, instance: User, validated_data: Dict[str, Any]) -> User:
        profile_data = {
            field: validated_data.pop(field)
            for field in PROFILE_FIELDS
            if field in validated_data
        }
        instance = super().update(instance, validated_data)
        if profile_data:
            try:
                profile = instance.profile
            except Profile.DoesNotExist:
                profile = Profile.objects.create(user=instance)
            for field, value in profile_data.items():
                setattr(profile, field, value)
            profile.save(update_fields=list(profile_data))
        return instance


class ChangePasswordSerializer(serializers.Serializer):
    """
    Password change for the authenticated user.

    The current password must be supplied and the new one must pass
    Django's password validators.
    """

    current_password = serializers.CharField(write_only=True, required=True)
    new_password = serializers.CharField(write_only=True, required=True, min_length=8)

    def validate_current_password(self, value: str) -> str:
        user = self.context["request"].user
        if not user.check_password(value):
            raise serializers.ValidationError(_("Current password is incorrect."))
        return value

    def validate_new_password(self, value: str) -> str:
        try:
            validate_password(value, user=self.context["request"].user)
        except DjangoValidationError as e:
            raise serializers.ValidationError(list(e.messages))
        return value

    def save(self, **kwargs) -> User:
        user = self.context["request"].user
        user.set_password(self.validated_data["new_password"])
        user.save(update_fields=["password"])
        return user


class StudentRegistrationSerializer(serializers.ModelSerializer):
    """
    Public self-registration. Registered users always get the student
    role; admins are promoted through the role endpoint.
    """

    password = serializers.CharField(write_only=True, min_length=8, required=True)
    password_confirm = serializers.CharField(write_only=True, min_length=8, required=True)
    standard = serializers.CharField(required=False, allow_blank=True, max_length=30)
    division = serializers.CharField(required=False, allow_blank=True, max_length=30)
    roll_no = serializers.CharField(required=False, allow_blank=True, max_length=30)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=30)

    class Meta:
        model = User
        fields = [
            "username", "email", "first_name", "last_name",
            "password", "password_confirm",
        ] + list(PROFILE_FIELDS)
        extra_kwargs = {"email": {"required": True}}

    def validate_email(self, value):
        if User.objects.filter(email=value).exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return value

    def validate(self, data):
        if data["password"] != data["password_confirm"]:
            raise serializers.ValidationError({"password_confirm": "Passwords do not match"})
        return data

    @transaction.atomic
    def create(self, validated_data):
        password = validated_data.pop("password")
        validated_data.pop("password_confirm")
        profile_data = {
            field: validated_data.pop(field)
            for field in PROFILE_FIELDS
            if field in validated_data
        }

        user = User.objects.create_user(password=password, **validated_data)

        # The post_save signal already created the profile
        profile = user.profile
        profile.role = UserRole.STUDENT
        for field, value in profile_data.items():
            setattr(profile, field, value)
        profile.save()
        return user


class RoleUpdateSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=UserRole.choices)
