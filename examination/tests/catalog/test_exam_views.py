from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from examination.catalog.models import Exam, Question
from examination.results.models import Result
from examination.tests.helpers import make_admin, make_exam, make_student

EXAM_PAYLOAD = {
    "title": "HTML Basics",
    "description": "Tags, attributes and forms",
    "duration": 30,
    "total_marks": 10,
    "passing_marks": 6,
}


class ExamListViewTests(APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = make_admin()
        cls.student = make_student()
        cls.active = make_exam(created_by=cls.admin, title="Active exam")
        cls.inactive = make_exam(created_by=cls.admin, title="Draft exam", is_active=False)

    def test_students_only_see_active_exams(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.get("/api/exams/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([e["title"] for e in response.json()], ["Active exam"])
        self.assertEqual(response.json()[0]["question_count"], 4)

    def test_admins_see_all_exams(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get("/api/exams/")

        self.assertEqual(
            {e["title"] for e in response.json()},
            {"Active exam", "Draft exam"},
        )

    def test_anonymous_listing_is_rejected(self):
        response = self.client.get("/api/exams/")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class ExamAuthoringTests(APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = make_admin()
        cls.student = make_student()

    def test_admin_creates_exam(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post("/api/exams/", EXAM_PAYLOAD, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        exam = Exam.objects.get(pk=response.json()["id"])
        self.assertEqual(exam.created_by, self.admin)
        self.assertTrue(exam.is_active)
        self.assertEqual(response.json()["created_by"]["username"], "admin")

    def test_student_cannot_create_exam(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.post("/api/exams/", EXAM_PAYLOAD, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Exam.objects.exists())

    def test_passing_marks_above_total_marks_is_rejected(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            "/api/exams/", {**EXAM_PAYLOAD, "passing_marks": 11}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()["error_code"], "validation_failed")
        self.assertIn("passing_marks", response.json()["details"])

    def test_partial_update_checks_against_stored_total(self):
        exam = make_exam(created_by=self.admin, questions=0, total_marks=10, passing_marks=5)
        self.client.force_authenticate(user=self.admin)

        response = self.client.patch(f"/api/exams/{exam.id}/", {"passing_marks": 12}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.patch(f"/api/exams/{exam.id}/", {"passing_marks": 10}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["passing_marks"], 10)

    def test_zero_duration_is_rejected(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post("/api/exams/", {**EXAM_PAYLOAD, "duration": 0}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("duration", response.json()["details"])

    def test_unknown_exam(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.get("/api/exams/999999/")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()["error_code"], "exam_not_found")

    def test_student_cannot_delete_exam(self):
        exam = make_exam(created_by=self.admin)
        self.client.force_authenticate(user=self.student)

        response = self.client.delete(f"/api/exams/{exam.id}/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Exam.objects.filter(pk=exam.pk).exists())

    def test_delete_cascades_to_questions_and_results(self):
        exam = make_exam(created_by=self.admin)
        Result.objects.create(
            student=self.student, exam=exam, answers=[], score=0,
            total_marks=20, percentage=0.0, passed=False,
        )
        self.client.force_authenticate(user=self.admin)

        response = self.client.delete(f"/api/exams/{exam.id}/")

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Question.objects.filter(exam_id=exam.id).exists())
        self.assertFalse(Result.objects.filter(exam_id=exam.id).exists())


class ExamModelTests(TestCase):
    def test_clean_rejects_passing_marks_above_total(self):
        exam = Exam(title="t", description="d", duration=10, total_marks=10, passing_marks=11)
        with self.assertRaises(ValidationError) as ctx:
            exam.full_clean()
        self.assertIn("passing_marks", ctx.exception.message_dict)

    def test_duration_in_seconds(self):
        self.assertEqual(Exam(duration=60).duration_seconds, 3600)
