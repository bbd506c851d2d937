"""
Exam-Taking Session

Client-side state machine for one student taking one exam:

    LOADING -> IN_PROGRESS -> SUBMITTING -> DONE
                                        -> SUBMIT_FAILED -> SUBMITTING (manual retry)
    LOADING -> BLOCKED   (a result already exists)
    LOADING -> ERRORED   (exam or questions could not be loaded)
    SUBMITTING -> BLOCKED (the backend reports the exam as already submitted)

The countdown is driven by an injected TickSource so it can be advanced
deterministically in tests. The backend is reached through an ExamGateway.

Usage:
    session = ExamSession(exam_id, LocalExamGateway(student), IntervalTicker(), confirm=ask_user)
    session.load()
    session.select_answer(question_id, 2)
    session.submit()
    session.close()

Author: Exam Portal Development Team
Version: 1.0.0
"""

import logging
import threading
from enum import Enum
from typing import Callable, Dict, List, Optional

from ..exceptions import AlreadySubmitted, ExamPortalError, ValidationFailed
from ..results.models import UNANSWERED
from ..results.scoring import SubmittedAnswer
from .gateway import ExamGateway, ExamInfo, QuestionPrompt, SubmissionReceipt
from .ticker import ManualTicker, TickSource

logger = logging.getLogger(__name__)

WARNING_THRESHOLD_SECONDS = 5 * 60
DANGER_THRESHOLD_SECONDS = 2 * 60

ConfirmCallback = Callable[[int], bool]


class SessionState(str, Enum):
    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    SUBMITTING = "submitting"
    SUBMIT_FAILED = "submit_failed"
    DONE = "done"
    BLOCKED = "blocked"
    ERRORED = "errored"


TERMINAL_STATES = (SessionState.DONE, SessionState.BLOCKED, SessionState.ERRORED)


def _decline(unanswered_count: int) -> bool:
    return False


class ExamSession:
    """
    One student's attempt at one exam, from loading to the stored result.

    Args:
        exam_id: The exam being taken
        gateway: Backend access (fetch exam/questions, submit)
        ticker: Countdown tick source; a ManualTicker when omitted
        confirm: Called with the number of unanswered questions before a
            manual submit leaves questions blank. Returning False keeps the
            session in progress. Without a callback such submits are declined.
    """

    def __init__(
        self,
        exam_id: int,
        gateway: ExamGateway,
        ticker: Optional[TickSource] = None,
        confirm: Optional[ConfirmCallback] = None,
    ):
        self.exam_id = exam_id
        self.gateway = gateway
        self.ticker = ticker or ManualTicker()
        self.confirm = confirm or _decline

        self.state = SessionState.LOADING
        self.exam: Optional[ExamInfo] = None
        self.questions: List[QuestionPrompt] = []
        self.remaining_seconds = 0
        self.result_id: Optional[int] = None
        self.receipt: Optional[SubmissionReceipt] = None
        self.error_message: Optional[str] = None
        self.closed = False

        self._answers: Dict[int, int] = {}
        self._lock = threading.RLock()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def load(self) -> SessionState:
        """Check for a prior attempt, fetch the exam and its questions, start the countdown."""
        with self._lock:
            if self.state != SessionState.LOADING or self.closed:
                return self.state

            try:
                existing = self.gateway.fetch_existing_result(self.exam_id)
                if existing is not None:
                    self.result_id = existing
                    self._transition(SessionState.BLOCKED)
                    return self.state

                self.exam = self.gateway.fetch_exam(self.exam_id)
                self.questions = self.gateway.fetch_questions(self.exam_id)
            except ExamPortalError as e:
                self.error_message = e.message
                self._transition(SessionState.ERRORED)
                return self.state
            except Exception:
                logger.exception(f"Unexpected error loading exam {self.exam_id}")
                self.error_message = "The exam could not be loaded."
                self._transition(SessionState.ERRORED)
                return self.state

            self.remaining_seconds = self.exam.duration_seconds
            self._transition(SessionState.IN_PROGRESS)
            self.ticker.start(self.tick)
            return self.state

    def select_answer(self, question_id: int, option_index: int) -> None:
        """
        Record the selected option for a question; the last selection wins.

        Passing UNANSWERED clears the selection. Once the countdown has run out the
        selections are frozen and further changes are ignored.

        Raises:
            ValidationFailed: If the question is not part of the exam or the
                option index is out of range
        """
        with self._lock:
            if self.state not in (SessionState.IN_PROGRESS, SessionState.SUBMIT_FAILED):
                return
            if self.remaining_seconds == 0:
                return

            question = self._question(question_id)
            if option_index == UNANSWERED:
                self._answers.pop(question_id, None)
                return
            if not 0 <= option_index < len(question.options):
                raise ValidationFailed(
                    f"Option {option_index} does not exist for question {question_id}."
                )
            self._answers[question_id] = option_index

    def selected_answer(self, question_id: int) -> int:
        return self._answers.get(question_id, UNANSWERED)

    @property
    def answered_count(self) -> int:
        return len(self._answers)

    @property
    def unanswered_count(self) -> int:
        return len(self.questions) - self.answered_count

    def tick(self) -> None:
        """One elapsed second. Reaching zero submits automatically, without confirmation."""
        with self._lock:
            if self.state != SessionState.IN_PROGRESS or self.closed:
                return
            self.remaining_seconds = max(0, self.remaining_seconds - 1)
            if self.remaining_seconds == 0:
                logger.info(f"Time is up for exam {self.exam_id}, submitting automatically")
                self._submit()

    def format_remaining(self) -> str:
        minutes, seconds = divmod(self.remaining_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"

    def time_warning_level(self) -> str:
        if self.remaining_seconds <= DANGER_THRESHOLD_SECONDS:
            return "danger"
        if self.remaining_seconds <= WARNING_THRESHOLD_SECONDS:
            return "warning"
        return "normal"

    def submit(self) -> SessionState:
        """
        Manual submit request.

        Ignored unless the session is in progress or a previous submit
        failed. Leaving questions unanswered requires confirmation, except
        when the countdown has already run out.
        """
        with self._lock:
            if self.state not in (SessionState.IN_PROGRESS, SessionState.SUBMIT_FAILED):
                return self.state

            unanswered = self.unanswered_count
            if unanswered > 0 and self.remaining_seconds > 0 and not self.confirm(unanswered):
                logger.debug(f"Submit of exam {self.exam_id} cancelled, {unanswered} unanswered")
                return self.state

            return self._submit()

    def packaged_answers(self) -> List[SubmittedAnswer]:
        """Every question's current answer, UNANSWERED for questions without a selection."""
        return [
            SubmittedAnswer(question_id=q.id, selected_answer=self.selected_answer(q.id))
            for q in self.questions
        ]

    def _submit(self) -> SessionState:
        self._transition(SessionState.SUBMITTING)
        self.ticker.cancel()
        self.error_message = None

        try:
            receipt = self.gateway.submit(self.exam_id, self.packaged_answers())
        except AlreadySubmitted as e:
            self.result_id = e.result_id
            self._transition(SessionState.BLOCKED)
            return self.state
        except ExamPortalError as e:
            self.error_message = f"{e.message} Please try submitting again."
            self._transition(SessionState.SUBMIT_FAILED)
            return self.state
        except Exception:
            logger.exception(f"Unexpected error submitting exam {self.exam_id}")
            self.error_message = "Submitting the exam failed. Please try submitting again."
            self._transition(SessionState.SUBMIT_FAILED)
            return self.state

        self.receipt = receipt
        self.result_id = receipt.result_id
        self._transition(SessionState.DONE)
        return self.state

    def close(self) -> None:
        """Release the countdown. Safe to call on any state, any number of times."""
        with self._lock:
            self.closed = True
            self.ticker.cancel()

    @property
    def is_finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def _question(self, question_id: int) -> QuestionPrompt:
        for question in self.questions:
            if question.id == question_id:
                return question
        raise ValidationFailed(f"Question {question_id} is not part of exam {self.exam_id}.")

    def _transition(self, state: SessionState) -> None:
        logger.info(f"Exam session {self.exam_id}: {self.state.value} -> {state.value}")
        self.state = state
