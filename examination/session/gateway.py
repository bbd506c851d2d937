"""
Exam Session Gateways

The exam-taking session talks to the examination backend through an
ExamGateway. Two implementations exist:

- LocalExamGateway: calls the services in-process for one student
- HttpExamGateway: calls the REST API with requests

Both hand the session student projections only (QuestionPrompt has no
correct answer) and report failures with the exceptions from
examination.exceptions.

Author: Exam Portal Development Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests
from django.db import DatabaseError

from ..exceptions import (
    ERRORS_BY_CODE,
    ExamPortalError,
    NotFound,
    ResultNotFound,
    Transient,
    Unauthorized,
    ValidationFailed,
)
from ..results.scoring import SubmittedAnswer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExamInfo:
    id: int
    title: str
    duration: int
    total_marks: int
    passing_marks: int

    @property
    def duration_seconds(self) -> int:
        return self.duration * 60

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "ExamInfo":
        return cls(
            id=data["id"],
            title=data["title"],
            duration=data["duration"],
            total_marks=data["total_marks"],
            passing_marks=data["passing_marks"],
        )


@dataclass(frozen=True)
class QuestionPrompt:
    """A question as a student sees it: text, options and marks, never the answer."""

    id: int
    text: str
    options: List[str]
    marks: int

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "QuestionPrompt":
        return cls(
            id=data["id"],
            text=data["text"],
            options=list(data["options"]),
            marks=data["marks"],
        )


@dataclass(frozen=True)
class SubmissionReceipt:
    result_id: int
    score: int
    total_marks: int
    percentage: float
    passed: bool

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "SubmissionReceipt":
        return cls(
            result_id=data["id"],
            score=data["score"],
            total_marks=data["total_marks"],
            percentage=data["percentage"],
            passed=data["passed"],
        )


class ExamGateway:
    """Operations the exam-taking session needs from the backend."""

    def fetch_existing_result(self, exam_id: int) -> Optional[int]:
        """Id of the caller's result for the exam, or None if not attempted."""
        raise NotImplementedError

    def fetch_exam(self, exam_id: int) -> ExamInfo:
        raise NotImplementedError

    def fetch_questions(self, exam_id: int) -> List[QuestionPrompt]:
        raise NotImplementedError

    def submit(self, exam_id: int, answers: List[SubmittedAnswer]) -> SubmissionReceipt:
        raise NotImplementedError


class LocalExamGateway(ExamGateway):
    """In-process gateway acting on behalf of one student."""

    def __init__(self, student):
        self.student = student

    def fetch_existing_result(self, exam_id: int) -> Optional[int]:
        from ..results import queries

        try:
            return queries.result_for(self.student.pk, exam_id).id
        except ResultNotFound:
            return None
        except DatabaseError as e:
            raise Transient(str(e))

    def fetch_exam(self, exam_id: int) -> ExamInfo:
        from ..catalog import services
        from ..catalog.serializers import ExamSerializer

        try:
            return ExamInfo.from_payload(ExamSerializer(services.get_exam(exam_id)).data)
        except DatabaseError as e:
            raise Transient(str(e))

    def fetch_questions(self, exam_id: int) -> List[QuestionPrompt]:
        from ..catalog import services
        from ..catalog.serializers import question_serializer_for
        from ..users.permissions import answer_key_access_for

        serializer_class = question_serializer_for(answer_key_access_for(self.student))
        try:
            questions = services.questions_for(exam_id)
            return [QuestionPrompt.from_payload(serializer_class(q).data) for q in questions]
        except DatabaseError as e:
            raise Transient(str(e))

    def submit(self, exam_id: int, answers: List[SubmittedAnswer]) -> SubmissionReceipt:
        from ..results.scoring import submit_attempt
        from ..results.serializers import ResultSerializer

        try:
            result = submit_attempt(exam_id, self.student, answers)
        except DatabaseError as e:
            raise Transient(str(e))
        return SubmissionReceipt.from_payload(ResultSerializer(result).data)


class HttpExamGateway(ExamGateway):
    """
    Gateway calling the Exam Portal REST API.

    Args:
        base_url: API root, e.g. "https://exams.example.com/api/"
        access_token: Optional JWT sent as Bearer header
        session: Optional requests.Session (e.g. carrying login cookies)
        timeout: Optional request timeout in seconds; None waits indefinitely
    """

    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/") + "/"
        self.session = session or requests.Session()
        self.timeout = timeout
        if access_token:
            self.session.headers["Authorization"] = f"Bearer {access_token}"

    def fetch_existing_result(self, exam_id: int) -> Optional[int]:
        try:
            data = self._request("GET", f"exams/{exam_id}/result/")
        except NotFound:
            return None
        return data["id"]

    def fetch_exam(self, exam_id: int) -> ExamInfo:
        return ExamInfo.from_payload(self._request("GET", f"exams/{exam_id}/"))

    def fetch_questions(self, exam_id: int) -> List[QuestionPrompt]:
        data = self._request("GET", f"exams/{exam_id}/questions/")
        return [QuestionPrompt.from_payload(item) for item in data]

    def submit(self, exam_id: int, answers: List[SubmittedAnswer]) -> SubmissionReceipt:
        payload = {"answers": [answer.to_dict() for answer in answers]}
        return SubmissionReceipt.from_payload(
            self._request("POST", f"exams/{exam_id}/submit/", json=payload)
        )

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = self.base_url + path
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise Transient(f"Could not reach the exam service: {e}")

        if not response.ok:
            raise self._error_from(response)
        try:
            return response.json()
        except ValueError:
            logger.error(f"{method} {url} returned a non-JSON body (HTTP {response.status_code})")
            raise Transient("The exam service sent an unreadable response.")

    @staticmethod
    def _error_from(response: requests.Response) -> ExamPortalError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        message = body.get("detail") or f"HTTP {response.status_code}"
        error_class = ERRORS_BY_CODE.get(body.get("error_code"))
        if error_class is None:
            error_class = _ERRORS_BY_STATUS.get(response.status_code, Transient)

        if error_class.error_code == "already_submitted":
            return error_class(message, result_id=(body.get("details") or {}).get("result_id"))
        return error_class(message, details=body.get("details"))


_ERRORS_BY_STATUS = {
    400: ValidationFailed,
    401: Unauthorized,
    403: Unauthorized,
    404: NotFound,
}
