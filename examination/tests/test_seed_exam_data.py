from io import StringIO

from django.contrib.auth.models import User
from django.core.management import call_command
from django.test import TestCase

from examination.catalog.models import Exam, Question
from examination.results.models import Result
from examination.users.models import UserRole


class SeedExamDataTests(TestCase):
    def seed(self, *args):
        call_command("seed_exam_data", *args, stdout=StringIO())

    def test_seeds_demo_accounts_and_exam(self):
        self.seed()

        admin = User.objects.get(username="admin")
        self.assertEqual(admin.profile.role, UserRole.ADMIN)
        self.assertTrue(admin.check_password("admin123"))
        john = User.objects.get(username="john")
        self.assertEqual(john.profile.role, UserRole.STUDENT)
        self.assertEqual(john.profile.roll_no, "101")

        exam = Exam.objects.get(title="JavaScript Fundamentals")
        self.assertEqual((exam.duration, exam.total_marks, exam.passing_marks), (60, 20, 12))
        self.assertEqual(exam.created_by, admin)
        questions = Question.objects.filter(exam=exam)
        self.assertEqual(questions.count(), 4)
        self.assertEqual(sum(q.marks for q in questions), exam.total_marks)
        self.assertTrue(all(q.correct_answer == 0 for q in questions))

    def test_seeding_twice_does_not_duplicate(self):
        self.seed()
        self.seed()

        self.assertEqual(Exam.objects.count(), 1)
        self.assertEqual(Question.objects.count(), 4)
        self.assertEqual(User.objects.count(), 3)

    def test_clear_removes_results_before_reseeding(self):
        self.seed()
        exam = Exam.objects.get()
        Result.objects.create(
            student=User.objects.get(username="jane"), exam=exam, answers=[],
            score=0, total_marks=20, percentage=0.0, passed=False,
        )

        self.seed("--clear")

        self.assertFalse(Result.objects.exists())
        self.assertEqual(Exam.objects.count(), 1)
        self.assertNotEqual(Exam.objects.get().pk, exam.pk)

    def test_destroy(self):
        self.seed()
        self.seed("--destroy")

        self.assertFalse(Exam.objects.exists())
        self.assertFalse(User.objects.filter(username__in=["admin", "john", "jane"]).exists())
