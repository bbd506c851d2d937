"""
Exam Portal Django Admin Configuration

Admin interface for users (with their profile inline), exams (with their
questions inline), questions and the read-only results.

Author: Exam Portal Development Team
Version: 1.0.0
"""

from typing import Optional

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import User
from django.db.models import Count, QuerySet
from django.http import HttpRequest
from django.utils.translation import gettext_lazy as _

from .models import Exam, Profile, Question, Result

# --- User Management Administration ---


class ProfileInline(admin.StackedInline):
    """Role and school details edited directly within the user admin."""

    model = Profile
    can_delete = False
    verbose_name_plural = "Profile Information"
    fk_name = "user"
    fields = ("role", "standard", "division", "roll_no", "phone")

    def get_extra(self, request: HttpRequest, obj: Optional[User] = None, **kwargs) -> int:
        """Return 0 extra forms since the profile is created automatically."""
        return 0


class UserAdmin(BaseUserAdmin):
    inlines = (ProfileInline,)
    list_display = (
        "username",
        "email",
        "first_name",
        "last_name",
        "get_role",
        "is_active",
    )
    list_select_related = ("profile",)
    list_filter = ("profile__role", "is_staff", "is_active", "date_joined")
    search_fields = ("username", "first_name", "last_name", "email", "profile__roll_no")
    ordering = ("username",)

    @admin.display(description=_("Role"))
    def get_role(self, instance: User) -> Optional[str]:
        try:
            return instance.profile.get_role_display()
        except Profile.DoesNotExist:
            return None


admin.site.unregister(User)
admin.site.register(User, UserAdmin)

# --- Examination Administration ---


class QuestionInline(admin.TabularInline):
    model = Question
    extra = 1
    fields = ("text", "options", "correct_answer", "marks")


@admin.register(Exam)
class ExamAdmin(admin.ModelAdmin):
    """
    Administration interface for exams.

    Questions are edited inline; model validation (pass mark within total
    marks) runs on save through Exam.clean().
    """

    list_display = (
        "title",
        "duration",
        "total_marks",
        "passing_marks",
        "is_active",
        "question_count",
        "created_by",
        "created_at",
    )
    list_filter = ("is_active", "created_at")
    search_fields = ("title", "description")
    readonly_fields = ("created_at",)
    inlines = [QuestionInline]
    fieldsets = (
        (_("Exam Information"), {"fields": ("title", "description", "is_active")}),
        (_("Scoring"), {"fields": ("duration", "total_marks", "passing_marks")}),
        (_("Audit"), {"fields": ("created_by", "created_at")}),
    )

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        return (
            super()
            .get_queryset(request)
            .select_related("created_by")
            .annotate(question_total=Count("questions"))
        )

    @admin.display(description=_("Questions"), ordering="question_total")
    def question_count(self, obj: Exam) -> int:
        return obj.question_total


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ("text", "exam", "correct_answer", "marks", "created_at")
    list_filter = ("exam",)
    search_fields = ("text", "exam__title")
    autocomplete_fields = ("exam",)
    readonly_fields = ("created_at",)

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        return super().get_queryset(request).select_related("exam")


@admin.register(Result)
class ResultAdmin(admin.ModelAdmin):
    """Results are written only by submissions; the admin can inspect and delete them."""

    list_display = ("student", "exam", "score", "total_marks", "percentage", "passed", "submitted_at")
    list_filter = ("passed", "exam", "submitted_at")
    search_fields = ("student__username", "student__email", "exam__title")
    readonly_fields = (
        "student",
        "exam",
        "answers",
        "score",
        "total_marks",
        "percentage",
        "passed",
        "submitted_at",
    )

    def has_add_permission(self, request: HttpRequest) -> bool:
        return False

    def has_change_permission(self, request: HttpRequest, obj: Optional[Result] = None) -> bool:
        return False

    def get_queryset(self, request: HttpRequest) -> QuerySet:
        return super().get_queryset(request).select_related("student", "exam")
