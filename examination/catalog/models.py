from django.db import models
from django.conf import settings
from django.utils.translation import gettext_lazy as _
from django.core.validators import MinValueValidator
from django.core.exceptions import ValidationError

User = settings.AUTH_USER_MODEL


def max_options() -> int:
    return getattr(settings, "EXAM_MAX_OPTIONS", 4)


class ExamQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)


class Exam(models.Model):
    title = models.CharField(max_length=255)
    description = models.TextField()
    duration = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text=_("Time limit in minutes."),
    )
    total_marks = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    passing_marks = models.PositiveIntegerField(
        help_text=_("Minimum score required to pass. Cannot exceed total marks."),
    )
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_exams",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = ExamQuerySet.as_manager()

    class Meta:
        verbose_name = _("Exam")
        verbose_name_plural = _("Exams")
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return self.title

    def clean(self):
        if (
            self.passing_marks is not None
            and self.total_marks is not None
            and self.passing_marks > self.total_marks
        ):
            raise ValidationError(
                {"passing_marks": _("Passing marks cannot exceed total marks.")}
            )

    @property
    def duration_seconds(self) -> int:
        return self.duration * 60


class Question(models.Model):
    exam = models.ForeignKey(Exam, on_delete=models.CASCADE, related_name="questions")
    text = models.TextField()
    options = models.JSONField(
        default=list,
        help_text=_("Ordered list of answer options."),
    )
    correct_answer = models.PositiveSmallIntegerField(
        help_text=_("Index of the correct option (0-based)."),
    )
    marks = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Question")
        verbose_name_plural = _("Questions")
        ordering = ["exam", "created_at", "id"]

    def __str__(self):
        return f"{self.exam.title}: {self.text[:40]}"

    def clean(self):
        options = self.options if isinstance(self.options, list) else []
        if not 2 <= len(options) <= max_options():
            raise ValidationError(
                {"options": _("A question needs between 2 and %(max)s options.") % {"max": max_options()}}
            )
        if any(not isinstance(option, str) or not option.strip() for option in options):
            raise ValidationError({"options": _("Options must be non-empty text.")})
        if self.correct_answer is not None and self.correct_answer >= len(options):
            raise ValidationError(
                {"correct_answer": _("Correct answer must be the index of one of the options.")}
            )

    def is_correct(self, selected_answer) -> bool:
        return selected_answer == self.correct_answer
