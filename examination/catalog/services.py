"""
Exam Catalog and Question Bank Services

Read and authoring operations on exams and their questions. The views and
the in-process session gateway both go through these functions so that
not-found handling and the answer-key rule live in one place.

Author: Exam Portal Development Team
Version: 1.0.0
"""

import logging
from typing import List

from django.db.models import Count, QuerySet

from ..exceptions import ExamNotFound, QuestionNotFound
from .models import Exam, Question

logger = logging.getLogger(__name__)


def list_exams(include_inactive: bool = False) -> QuerySet:
    """
    Exams for listing, newest first, annotated with their question count.

    Args:
        include_inactive: Also return exams whose is_active flag is off
    """
    queryset = Exam.objects.select_related("created_by").annotate(
        question_count=Count("questions")
    )
    if not include_inactive:
        queryset = queryset.filter(is_active=True)
    return queryset.order_by("-created_at", "-id")


def get_exam(exam_id) -> Exam:
    """
    Resolve an exam by id.

    Raises:
        ExamNotFound: If no exam has this id
    """
    try:
        return Exam.objects.select_related("created_by").get(pk=exam_id)
    except (Exam.DoesNotExist, ValueError, TypeError):
        raise ExamNotFound()


def get_question(question_id) -> Question:
    try:
        return Question.objects.select_related("exam").get(pk=question_id)
    except (Question.DoesNotExist, ValueError, TypeError):
        raise QuestionNotFound()


def answer_key(exam_id) -> List[Question]:
    """
    Full question set of an exam, correct answers included.

    This is the grading input; it must not be handed to student-facing code
    without going through a student projection.
    """
    return list(Question.objects.filter(exam_id=exam_id).order_by("created_at", "id"))


def questions_for(exam_id) -> QuerySet:
    """Questions of an existing exam in display order."""
    get_exam(exam_id)
    return Question.objects.filter(exam_id=exam_id).order_by("created_at", "id")


def delete_exam(exam: Exam) -> None:
    """Delete an exam. Its questions (and results) are removed by cascade."""
    question_count = exam.questions.count()
    logger.info(f"Deleting exam '{exam.title}' (ID: {exam.id}) with {question_count} questions")
    exam.delete()
