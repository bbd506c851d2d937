from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from examination.catalog.models import Question
from examination.catalog.serializers import (
    AdminQuestionSerializer,
    StudentQuestionSerializer,
    question_serializer_for,
)
from examination.tests.helpers import make_admin, make_exam, make_student
from examination.users.models import UserRole
from examination.users.permissions import AnswerKeyAccess, answer_key_access_for

QUESTION_PAYLOAD = {
    "text": "What does CSS stand for?",
    "options": ["Cascading Style Sheets", "Computer Style Sheets", "Creative Style System"],
    "correct_answer": 0,
    "marks": 2,
}


class QuestionProjectionTests(APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = make_admin()
        cls.student = make_student()
        cls.exam = make_exam(created_by=cls.admin)
        cls.url = f"/api/exams/{cls.exam.id}/questions/"

    def test_student_listing_has_no_answer_key(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.json()), 4)
        for question in response.json():
            self.assertNotIn("correct_answer", question)
            self.assertEqual(question["options"][0], "right")
        self.assertNotIn("correct_answer", response.content.decode())

    def test_admin_listing_has_answer_key(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        for question in response.json():
            self.assertEqual(question["correct_answer"], 0)

    def test_promoted_student_sees_answer_key(self):
        self.student.profile.role = UserRole.ADMIN
        self.student.profile.save()
        self.client.force_authenticate(user=self.student)

        response = self.client.get(self.url)
        self.assertIn("correct_answer", response.json()[0])

    def test_listing_for_unknown_exam(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.get("/api/exams/999999/questions/")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()["error_code"], "exam_not_found")

    def test_projection_decision(self):
        self.assertEqual(answer_key_access_for(self.admin), AnswerKeyAccess.GRANTED)
        self.assertEqual(answer_key_access_for(self.student), AnswerKeyAccess.WITHHELD)
        self.assertIs(question_serializer_for(AnswerKeyAccess.GRANTED), AdminQuestionSerializer)
        self.assertIs(question_serializer_for(AnswerKeyAccess.WITHHELD), StudentQuestionSerializer)
        self.assertNotIn("correct_answer", StudentQuestionSerializer.Meta.fields)


class QuestionAuthoringTests(APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = make_admin()
        cls.student = make_student()
        cls.exam = make_exam(created_by=cls.admin, questions=0)
        cls.url = f"/api/exams/{cls.exam.id}/questions/"

    def setUp(self):
        self.client.force_authenticate(user=self.admin)

    def test_admin_adds_question(self):
        response = self.client.post(self.url, QUESTION_PAYLOAD, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        question = Question.objects.get(pk=response.json()["id"])
        self.assertEqual(question.exam, self.exam)
        self.assertEqual(question.correct_answer, 0)
        self.assertEqual(response.json()["exam"], self.exam.id)

    def test_student_cannot_add_question(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.post(self.url, QUESTION_PAYLOAD, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Question.objects.exists())

    def test_add_question_to_unknown_exam(self):
        response = self.client.post("/api/exams/999999/questions/", QUESTION_PAYLOAD, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_correct_answer_must_index_an_option(self):
        response = self.client.post(
            self.url, {**QUESTION_PAYLOAD, "correct_answer": 3}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("correct_answer", response.json()["details"])

    def test_option_count_limits(self):
        too_few = self.client.post(self.url, {**QUESTION_PAYLOAD, "options": ["only"]}, format="json")
        too_many = self.client.post(
            self.url, {**QUESTION_PAYLOAD, "options": ["a", "b", "c", "d", "e"]}, format="json"
        )

        self.assertEqual(too_few.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(too_many.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("options", too_many.json()["details"])

    def test_update_and_delete_question(self):
        question = Question.objects.create(
            exam=self.exam, text="Old", options=["a", "b"], correct_answer=1, marks=1
        )

        response = self.client.patch(
            f"/api/questions/{question.id}/", {"text": "New", "correct_answer": 0}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        question.refresh_from_db()
        self.assertEqual((question.text, question.correct_answer), ("New", 0))

        response = self.client.delete(f"/api/questions/{question.id}/")
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Question.objects.filter(pk=question.pk).exists())

    def test_students_cannot_read_single_question(self):
        question = Question.objects.create(
            exam=self.exam, text="Q", options=["a", "b"], correct_answer=1, marks=1
        )
        self.client.force_authenticate(user=self.student)

        response = self.client.get(f"/api/questions/{question.id}/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_question(self):
        response = self.client.get("/api/questions/999999/")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()["error_code"], "question_not_found")


class QuestionModelTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        cls.exam = make_exam(questions=0)

    def test_clean_validates_options_and_answer_index(self):
        with self.assertRaises(ValidationError):
            Question(exam=self.exam, text="Q", options=["a"], correct_answer=0).full_clean()
        with self.assertRaises(ValidationError):
            Question(exam=self.exam, text="Q", options=["a", "b"], correct_answer=2).full_clean()
        with self.assertRaises(ValidationError):
            Question(exam=self.exam, text="Q", options=["a", " "], correct_answer=0).full_clean()

        Question(exam=self.exam, text="Q", options=["a", "b"], correct_answer=1).full_clean()

    def test_is_correct(self):
        question = Question(options=["a", "b"], correct_answer=1)
        self.assertTrue(question.is_correct(1))
        self.assertFalse(question.is_correct(0))
        self.assertFalse(question.is_correct(-1))
