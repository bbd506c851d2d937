"""
Shared fixtures for the examination test-suite.
"""

from django.contrib.auth.models import User

from examination.catalog.models import Exam, Question
from examination.users.models import UserRole

PASSWORD = "Musterpassword-42"


def make_user(username, role=UserRole.STUDENT, **profile):
    user = User.objects.create_user(
        username=username,
        password=PASSWORD,
        email=f"{username}@example.com",
    )
    user.profile.role = role
    for field, value in profile.items():
        setattr(user.profile, field, value)
    user.profile.save()
    return user


def make_admin(username="admin"):
    return make_user(username, role=UserRole.ADMIN)


def make_student(username="student", **profile):
    return make_user(username, role=UserRole.STUDENT, **profile)


def make_exam(created_by=None, questions=4, marks=5, total_marks=20, passing_marks=12, **fields):
    """An exam with `questions` four-option questions, every correct answer at index 0."""
    exam = Exam.objects.create(
        title=fields.pop("title", "JavaScript Fundamentals"),
        description=fields.pop("description", "Test your knowledge of JavaScript basics"),
        duration=fields.pop("duration", 60),
        total_marks=total_marks,
        passing_marks=passing_marks,
        created_by=created_by,
        **fields,
    )
    for number in range(questions):
        Question.objects.create(
            exam=exam,
            text=f"Question {number + 1}",
            options=["right", "wrong", "also wrong", "still wrong"],
            correct_answer=0,
            marks=marks,
        )
    return exam
