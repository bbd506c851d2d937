"""
Token cookies, refresh and logout, registration, own profile and password change.
"""

from django.contrib.auth.models import User
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from examination.tests.helpers import PASSWORD, make_admin, make_student
from examination.users.models import Profile, UserRole, role_of


class TokenTests(TestCase):
    def setUp(self):
        self.user = make_student("testUser")
        self.response = self.client.post(
            "/api/token/", {"username": "testUser", "password": PASSWORD}
        )

    def test_login_sets_cookies_and_returns_role(self):
        self.assertEqual(self.response.status_code, status.HTTP_200_OK)
        self.assertIn("access_token", self.response.cookies)
        self.assertIn("refresh_token", self.response.cookies)
        body = self.response.json()
        self.assertNotIn("access", body)
        self.assertEqual(body["role"], "student")
        self.assertEqual(body["username"], "testUser")

    def test_cookie_authenticates_requests(self):
        response = self.client.get("/api/auth/profile/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["username"], "testUser")

    def test_wrong_password(self):
        response = self.client.post("/api/token/", {"username": "testUser", "password": "nope"})
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_token_success(self):
        response = self.client.post("/api/token/refresh/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(response.cookies["access_token"])

    def test_refresh_token_failure(self):
        self.client.cookies["refresh_token"] = "bad token"
        response = self.client.post("/api/token/refresh/")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_refresh_token_missing(self):
        del self.client.cookies["refresh_token"]
        response = self.client.post("/api/token/refresh/")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_logout_clears_cookies_and_blacklists_refresh_token(self):
        refresh_token = self.client.cookies["refresh_token"].value

        response = self.client.post("/api/auth/logout/")
        self.assertEqual(response.status_code, status.HTTP_205_RESET_CONTENT)
        self.assertEqual(response.cookies["access_token"].value, "")

        self.client.cookies["refresh_token"] = refresh_token
        response = self.client.post("/api/token/refresh/")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class RegistrationTests(APITestCase):
    def test_registration_always_creates_a_student(self):
        response = self.client.post(
            "/api/auth/register/",
            {
                "username": "johndoe",
                "email": "john@example.com",
                "password": "secret1234",
                "password_confirm": "secret1234",
                "standard": "10th",
                "division": "A",
                "roll_no": "101",
                "role": "admin",
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()["role"], "student")
        self.assertEqual(response.json()["roll_no"], "101")
        user = User.objects.get(username="johndoe")
        self.assertEqual(user.profile.role, UserRole.STUDENT)
        self.assertTrue(user.check_password("secret1234"))

    def test_password_mismatch(self):
        response = self.client.post(
            "/api/auth/register/",
            {
                "username": "johndoe",
                "email": "john@example.com",
                "password": "secret1234",
                "password_confirm": "secret5678",
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password_confirm", response.json()["details"])

    def test_duplicate_email(self):
        make_student("jane")
        response = self.client.post(
            "/api/auth/register/",
            {
                "username": "jane2",
                "email": "jane@example.com",
                "password": "secret1234",
                "password_confirm": "secret1234",
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", response.json()["details"])


class ProfileViewTests(APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.student = make_student("john", standard="10th", division="A")

    def setUp(self):
        self.client.force_authenticate(user=self.student)

    def test_get_own_profile(self):
        response = self.client.get("/api/auth/profile/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["standard"], "10th")
        self.assertEqual(response.json()["full_name"], "john")

    def test_patch_profile_does_not_change_role(self):
        response = self.client.patch(
            "/api/auth/profile/",
            {"first_name": "John", "phone": "+91 9876543210", "role": "admin"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        profile = Profile.objects.get(user=self.student)
        self.assertEqual(profile.phone, "+91 9876543210")
        self.assertEqual(profile.division, "A")
        self.assertEqual(profile.role, UserRole.STUDENT)
        self.assertEqual(response.json()["full_name"], "John")

    def test_change_password(self):
        response = self.client.put(
            "/api/auth/password/",
            {"current_password": PASSWORD, "new_password": "a-Much-Better-Pass42"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.student.refresh_from_db()
        self.assertTrue(self.student.check_password("a-Much-Better-Pass42"))

    def test_change_password_requires_current_password(self):
        response = self.client.put(
            "/api/auth/password/",
            {"current_password": "wrong", "new_password": "a-Much-Better-Pass42"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("current_password", response.json()["details"])


class ProfileSignalTests(TestCase):
    def test_profile_created_with_default_role(self):
        student = User.objects.create_user(username="plain", password=PASSWORD)
        staff = User.objects.create_user(username="staff", password=PASSWORD, is_staff=True)

        self.assertEqual(student.profile.role, UserRole.STUDENT)
        self.assertEqual(staff.profile.role, UserRole.ADMIN)

    def test_missing_profile_is_recreated(self):
        user = User.objects.create_user(username="orphan", password=PASSWORD)
        Profile.objects.filter(user=user).delete()
        user = User.objects.get(pk=user.pk)

        self.assertEqual(role_of(user), UserRole.STUDENT)
        self.assertTrue(Profile.objects.filter(user=user).exists())

    def test_admin_helper(self):
        self.assertTrue(make_admin().profile.is_admin)
