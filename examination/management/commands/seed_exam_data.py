import logging

from django.contrib.auth.models import User
from django.core.management.base import BaseCommand
from django.db import transaction

from ...models import Exam, Question, Result, UserRole

logger = logging.getLogger(__name__)

ADMIN_ACCOUNT = {
    "username": "admin",
    "email": "admin@example.com",
    "password": "admin123",
    "first_name": "Admin",
    "last_name": "User",
}

STUDENT_ACCOUNTS = [
    {
        "username": "john",
        "email": "john@example.com",
        "password": "student123",
        "first_name": "John",
        "last_name": "Doe",
        "profile": {"standard": "10th", "division": "A", "roll_no": "101", "phone": "+91 9876543210"},
    },
    {
        "username": "jane",
        "email": "jane@example.com",
        "password": "student123",
        "first_name": "Jane",
        "last_name": "Smith",
        "profile": {"standard": "10th", "division": "B", "roll_no": "102", "phone": "+91 9876543211"},
    },
]

DEMO_EXAM = {
    "title": "JavaScript Fundamentals",
    "description": "Test your knowledge of JavaScript basics",
    "duration": 60,
    "total_marks": 20,
    "passing_marks": 12,
    "is_active": True,
}

DEMO_QUESTIONS = [
    (
        "What is JavaScript?",
        ["A programming language", "A database", "An operating system", "A framework"],
    ),
    (
        "Which keyword is used to declare a variable in JavaScript?",
        ["var", "int", "string", "variable"],
    ),
    (
        "What does DOM stand for?",
        [
            "Document Object Model",
            "Data Object Model",
            "Digital Object Model",
            "Document Oriented Model",
        ],
    ),
    (
        "Which method is used to parse a string to an integer?",
        ["parseInt()", "parseFloat()", "Number()", "toInteger()"],
    ),
]


class Command(BaseCommand):
    help = (
        "Seeds a demo admin, two students and the 'JavaScript Fundamentals' exam "
        "with four questions."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--clear",
            action="store_true",
            help="Delete all exams, questions, results and the demo accounts before seeding.",
        )
        parser.add_argument(
            "--destroy",
            action="store_true",
            help="Only delete the data --clear would delete; do not seed.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options["clear"] or options["destroy"]:
            self._clear()
            if options["destroy"]:
                self.stdout.write(self.style.SUCCESS("Data destroyed."))
                return

        admin = self._ensure_user(ADMIN_ACCOUNT, UserRole.ADMIN, is_staff=True)
        for account in STUDENT_ACCOUNTS:
            self._ensure_user(account, UserRole.STUDENT)

        exam, created = Exam.objects.get_or_create(
            title=DEMO_EXAM["title"],
            defaults={**DEMO_EXAM, "created_by": admin},
        )
        if not created:
            self.stdout.write(f'Exam "{exam.title}" already exists, skipping questions.')
            return

        for text, options_ in DEMO_QUESTIONS:
            Question.objects.create(exam=exam, text=text, options=options_, correct_answer=0, marks=5)

        logger.info(f"Seeded demo exam {exam.id} with {len(DEMO_QUESTIONS)} questions")
        self.stdout.write(self.style.SUCCESS("Sample data imported successfully!"))
        self.stdout.write(f"Admin - {ADMIN_ACCOUNT['username']} / {ADMIN_ACCOUNT['password']}")
        for account in STUDENT_ACCOUNTS:
            self.stdout.write(f"Student - {account['username']} / {account['password']}")
        self.stdout.write(f"Created exam: {exam.title} (ID: {exam.id}) with {len(DEMO_QUESTIONS)} questions")

    def _clear(self):
        self.stdout.write(self.style.WARNING("Deleting exam data and demo accounts..."))
        Result.objects.all().delete()
        Question.objects.all().delete()
        Exam.objects.all().delete()
        usernames = [ADMIN_ACCOUNT["username"]] + [a["username"] for a in STUDENT_ACCOUNTS]
        deleted, _ = User.objects.filter(username__in=usernames).delete()
        logger.info(f"Cleared exam data and {deleted} demo account objects")

    def _ensure_user(self, account, role, is_staff=False):
        user, created = User.objects.get_or_create(
            username=account["username"],
            defaults={
                "email": account["email"],
                "first_name": account["first_name"],
                "last_name": account["last_name"],
                "is_staff": is_staff,
            },
        )
        if created:
            user.set_password(account["password"])
            user.save(update_fields=["password"])
            self.stdout.write(self.style.SUCCESS(f'User "{user.username}" created.'))
        else:
            self.stdout.write(f'User "{user.username}" already exists.')

        profile = user.profile
        profile.role = role
        for field, value in account.get("profile", {}).items():
            setattr(profile, field, value)
        profile.save()
        return user
