"""
Attempt Scoring Service

Grades a student's submitted answers against the exam's answer key and
stores the single Result allowed per (student, exam) pair.

Pipeline:
1. Reject the attempt if a result already exists (fast path)
2. Resolve the exam
3. Load the answer key (all questions with correct answers)
4. Grade: marks of every question answered with its correct index
5. Compute percentage and pass/fail
6. Insert the Result; the unique constraint rejects racing duplicates

Author: Exam Portal Development Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from django.db import IntegrityError, transaction

from ..catalog import services as catalog
from ..catalog.models import Exam, Question
from ..exceptions import AlreadySubmitted, ValidationFailed
from .models import Result, UNANSWERED

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmittedAnswer:
    """One entry of a submission. selected_answer is UNANSWERED (-1) when skipped."""

    question_id: int
    selected_answer: int = UNANSWERED

    @property
    def is_answered(self) -> bool:
        return self.selected_answer != UNANSWERED

    def to_dict(self) -> Dict[str, int]:
        return {"question_id": self.question_id, "selected_answer": self.selected_answer}


@dataclass(frozen=True)
class Outcome:
    score: int
    total_marks: int
    percentage: float
    passed: bool


def grade(questions: Iterable[Question], answers: Iterable[SubmittedAnswer]) -> int:
    """
    Sum the marks of the questions answered with their correct index.

    Answers for unknown question ids and unanswered questions count zero.
    Each question is graded once; if it appears several times in the
    submission the last entry wins. No partial credit, no penalties.
    """
    selected: Dict[int, int] = {}
    for answer in answers:
        selected[answer.question_id] = answer.selected_answer

    score = 0
    for question in questions:
        choice = selected.get(question.id, UNANSWERED)
        if choice != UNANSWERED and question.is_correct(choice):
            score += question.marks
    return score


def evaluate(score: int, exam: Exam) -> Outcome:
    """
    Percentage and pass/fail for a score on an exam.

    Raises:
        ValidationFailed: If the exam's total marks are not positive
    """
    if not exam.total_marks or exam.total_marks <= 0:
        raise ValidationFailed(
            f"Exam {exam.id} has no positive total marks; cannot compute a percentage."
        )
    return Outcome(
        score=score,
        total_marks=exam.total_marks,
        percentage=score / exam.total_marks * 100,
        passed=score >= exam.passing_marks,
    )


def existing_result_id(student_id, exam_id) -> Optional[int]:
    return (
        Result.objects.filter(student_id=student_id, exam_id=exam_id)
        .values_list("id", flat=True)
        .first()
    )


def submit_attempt(exam_id, student, answers: List[SubmittedAnswer]) -> Result:
    """
    Grade and store a student's attempt at an exam.

    Args:
        exam_id: Id of the exam being submitted
        student: The submitting user
        answers: Submitted answers, unanswered entries included

    Returns:
        The newly created Result

    Raises:
        AlreadySubmitted: If a result exists for (student, exam), whether
            found up front or reported by the unique constraint
        ExamNotFound: If the exam does not exist
        ValidationFailed: If the exam is inactive or has no positive total marks
    """
    # Fast path only; the unique constraint below is authoritative
    result_id = existing_result_id(student.pk, exam_id)
    if result_id is not None:
        logger.info(f"Rejected second submission of exam {exam_id} by {student.username}")
        raise AlreadySubmitted(result_id=result_id)

    exam = catalog.get_exam(exam_id)
    if not exam.is_active:
        raise ValidationFailed("This exam is not open for submissions.")
    questions = catalog.answer_key(exam.pk)
    outcome = evaluate(grade(questions, answers), exam)

    try:
        with transaction.atomic():
            result = Result.objects.create(
                student=student,
                exam=exam,
                answers=[answer.to_dict() for answer in answers],
                score=outcome.score,
                total_marks=outcome.total_marks,
                percentage=outcome.percentage,
                passed=outcome.passed,
            )
    except IntegrityError:
        result_id = existing_result_id(student.pk, exam.pk)
        if result_id is None:
            raise
        logger.warning(
            f"Concurrent duplicate submission of exam {exam.id} by {student.username} "
            f"rejected by the unique constraint"
        )
        raise AlreadySubmitted(result_id=result_id)

    logger.info(
        f"Exam {exam.id} submitted by {student.username}: "
        f"{outcome.score}/{outcome.total_marks} ({outcome.percentage:.2f}%), "
        f"{'passed' if outcome.passed else 'failed'}"
    )
    return result
