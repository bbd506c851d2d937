"""
Exam-taking session: countdown, answer map and submission for one student.
"""

from .gateway import (
    ExamGateway,
    ExamInfo,
    HttpExamGateway,
    LocalExamGateway,
    QuestionPrompt,
    SubmissionReceipt,
)
from .machine import ExamSession, SessionState
from .ticker import IntervalTicker, ManualTicker, TickSource

__all__ = [
    "ExamGateway",
    "ExamInfo",
    "ExamSession",
    "HttpExamGateway",
    "IntervalTicker",
    "LocalExamGateway",
    "ManualTicker",
    "QuestionPrompt",
    "SessionState",
    "SubmissionReceipt",
    "TickSource",
]
