"""
Exam Portal User Models

This module extends Django's built-in User model with a profile that
carries the user's role (admin or student) and the student details shown
on results.

Models:
- Profile: Role and student details for a user

Features:
- Automatic profile creation for new users
- Staff and superusers created through Django start out as admins

Author: Exam Portal Development Team
Version: 1.0.0
"""

from django.db import models
from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver
from django.utils.translation import gettext_lazy as _


class UserRole(models.TextChoices):
    ADMIN = "admin", _("Admin")
    STUDENT = "student", _("Student")


class Profile(models.Model):
    """
    Extended user profile for the Exam Portal.

    Attributes:
        user: One-to-one relationship with Django User model
        role: Either admin (authors exams) or student (takes exams)
        standard, division, roll_no, phone: Optional student details
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
        verbose_name=_("User"),
    )
    role = models.CharField(
        max_length=10,
        choices=UserRole.choices,
        default=UserRole.STUDENT,
        verbose_name=_("Role"),
    )
    standard = models.CharField(max_length=30, blank=True, verbose_name=_("Standard"))
    division = models.CharField(max_length=30, blank=True, verbose_name=_("Division"))
    roll_no = models.CharField(max_length=30, blank=True, verbose_name=_("Roll number"))
    phone = models.CharField(max_length=30, blank=True, verbose_name=_("Phone"))

    class Meta:
        verbose_name = _("User Profile")
        verbose_name_plural = _("User Profiles")
        db_table = "examination_profile"

    def __str__(self) -> str:
        return f"{self.user.username} Profile ({self.role})"

    def __repr__(self) -> str:
        return f"<Profile(user={self.user.username}, role={self.role})>"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.STUDENT


def role_of(user) -> str:
    """
    Return the role of a user, creating the profile when it is missing.

    Anonymous users have no role and yield an empty string.
    """
    if not user or not user.is_authenticated:
        return ""
    try:
        return user.profile.role
    except Profile.DoesNotExist:
        return Profile.objects.create(user=user, role=_default_role_for(user)).role


def _default_role_for(user) -> str:
    if user.is_staff or user.is_superuser:
        return UserRole.ADMIN
    return UserRole.STUDENT


# --- Signal Handlers for Automatic Profile Management ---


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_user_profile(sender, instance, created: bool, **kwargs) -> None:
    """
    Automatically create a user profile when a new user is created.

    Args:
        sender: The User model class
        instance: The actual User instance that was saved
        created: Boolean indicating if this is a new instance
        **kwargs: Additional signal arguments
    """
    if created:
        Profile.objects.get_or_create(
            user=instance, defaults={"role": _default_role_for(instance)}
        )
