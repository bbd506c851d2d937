from django.contrib.auth.models import User
from rest_framework import status
from rest_framework.test import APITestCase

from examination.results.models import Result
from examination.tests.helpers import make_admin, make_exam, make_student
from examination.users.models import UserRole


class UserCrudViewSetTests(APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.admin = make_admin()
        cls.john = make_student("john")
        cls.jane = make_student("jane")

    def setUp(self):
        self.client.force_authenticate(user=self.admin)

    def test_list_users(self):
        response = self.client.get("/api/users/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([u["username"] for u in response.json()], ["admin", "john", "jane"])

    def test_filter_by_role(self):
        response = self.client.get("/api/users/", {"role": "student"})

        self.assertEqual({u["username"] for u in response.json()}, {"john", "jane"})
        self.assertTrue(all(u["role"] == "student" for u in response.json()))

    def test_students_cannot_manage_users(self):
        self.client.force_authenticate(user=self.john)

        self.assertEqual(self.client.get("/api/users/").status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.put(f"/api/users/{self.john.id}/role/", {"role": "admin"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_promote_student(self):
        response = self.client.put(f"/api/users/{self.john.id}/role/", {"role": "admin"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["role"], "admin")
        self.assertEqual(User.objects.get(pk=self.john.pk).profile.role, UserRole.ADMIN)

    def test_invalid_role(self):
        response = self.client.put(f"/api/users/{self.john.id}/role/", {"role": "teacher"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_admin_cannot_demote_self(self):
        response = self.client.put(f"/api/users/{self.admin.id}/role/", {"role": "student"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(User.objects.get(pk=self.admin.pk).profile.role, UserRole.ADMIN)

    def test_admin_cannot_delete_self(self):
        response = self.client.delete(f"/api/users/{self.admin.id}/")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_delete_user_removes_results(self):
        exam = make_exam(created_by=self.admin)
        Result.objects.create(
            student=self.jane, exam=exam, answers=[], score=0,
            total_marks=20, percentage=0.0, passed=False,
        )

        response = self.client.delete(f"/api/users/{self.jane.id}/")

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(User.objects.filter(pk=self.jane.pk).exists())
        self.assertFalse(Result.objects.exists())
