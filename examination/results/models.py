from django.db import models
from django.conf import settings
from django.utils.translation import gettext_lazy as _

from ..catalog.models import Exam

User = settings.AUTH_USER_MODEL

# selected_answer value stored for a question the student did not answer
UNANSWERED = -1


class Result(models.Model):
    """
    The outcome of one student's single attempt at one exam.

    Created once on submission and never updated afterwards. The unique
    constraint on (student, exam) is what guarantees at most one result
    per pair, also under concurrent submissions.
    """

    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name="exam_results")
    exam = models.ForeignKey(Exam, on_delete=models.CASCADE, related_name="results")
    answers = models.JSONField(
        default=list,
        help_text=_("Submitted answers as [{question_id, selected_answer}], -1 = unanswered."),
    )
    score = models.PositiveIntegerField()
    total_marks = models.PositiveIntegerField(
        help_text=_("Copied from the exam at submission time."),
    )
    percentage = models.FloatField()
    passed = models.BooleanField()
    submitted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Result")
        verbose_name_plural = _("Results")
        ordering = ["-submitted_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["student", "exam"],
                name="unique_result_per_student_exam",
            ),
        ]

    def __str__(self):
        return f"Result for {self.exam.title} by {self.student.username}: {self.score}/{self.total_marks}"

    @property
    def answered_count(self) -> int:
        return sum(1 for answer in self.answers if answer.get("selected_answer") != UNANSWERED)
