from typing import Dict

from django.contrib.auth.models import User
from django.db.models import QuerySet

from ..catalog.models import Exam
from ..exceptions import ResultNotFound
from ..users.models import UserRole
from .models import Result


def result_for(student_id, exam_id) -> Result:
    """
    The unique result of a student for an exam.

    Raises:
        ResultNotFound: If the student has not submitted the exam
    """
    try:
        return Result.objects.select_related("exam", "student", "student__profile").get(
            student_id=student_id, exam_id=exam_id
        )
    except (Result.DoesNotExist, ValueError, TypeError):
        raise ResultNotFound()


def results_for_student(student_id) -> QuerySet:
    return (
        Result.objects.filter(student_id=student_id)
        .select_related("exam", "student")
        .order_by("-submitted_at", "-id")
    )


def all_results() -> QuerySet:
    return Result.objects.select_related("exam", "student").order_by("-submitted_at", "-id")


def dashboard_statistics() -> Dict[str, int]:
    """Counts shown on the admin dashboard."""
    return {
        "total_exams": Exam.objects.count(),
        "active_exams": Exam.objects.active().count(),
        "total_students": User.objects.filter(profile__role=UserRole.STUDENT).count(),
        "total_results": Result.objects.count(),
        "passed_results": Result.objects.filter(passed=True).count(),
    }
