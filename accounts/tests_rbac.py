"""
Auth and RBAC tests.
- Login returns tokens and the user payload
- Blocked organizations cannot log in
- IsOrgAdmin / IsSuperAdmin gate the admin endpoints
"""
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from core.models import Organization


class RBACTests(TestCase):
    def setUp(self):
        self.org = Organization.objects.create(name="Test Org", slug="test-org")
        self.client = APIClient()

        self.super_admin = User.objects.create_user(
            email="root@test.io",
            password="pass123",
            full_name="Root",
            role=User.ROLE_SUPER_ADMIN,
        )
        self.admin = User.objects.create_user(
            email="admin@test.io",
            password="pass123",
            full_name="Admin",
            role=User.ROLE_ADMIN,
            organization=self.org,
        )
        self.member = User.objects.create_user(
            email="member@test.io",
            password="pass123",
            full_name="Member",
            role=User.ROLE_MEMBER,
            organization=self.org,
        )

    def _auth_header(self, user: User) -> dict:
        token = str(AccessToken.for_user(user))
        return {"HTTP_AUTHORIZATION": f"Bearer {token}"}

    def test_login_returns_tokens_and_user(self):
        res = self.client.post(
            "/api/auth/login", {"email": "admin@test.io", "password": "pass123"}, format="json"
        )
        self.assertEqual(res.status_code, 200)
        self.assertIn("accessToken", res.data)
        self.assertEqual(res.data["user"]["role"], "admin")
        self.assertEqual(res.data["user"]["organizationId"], self.org.id)

    def test_login_wrong_password_returns_401(self):
        res = self.client.post(
            "/api/auth/login", {"email": "admin@test.io", "password": "nope"}, format="json"
        )
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.data["code"], "invalid_credentials")

    def test_login_blocked_organization_returns_401(self):
        self.org.status = Organization.STATUS_BLOCKED
        self.org.save(update_fields=["status"])
        res = self.client.post(
            "/api/auth/login", {"email": "member@test.io", "password": "pass123"}, format="json"
        )
        self.assertEqual(res.status_code, 401)

    def test_me_requires_auth(self):
        res = self.client.get("/api/auth/me")
        self.assertEqual(res.status_code, 401)

    def test_me_returns_current_user(self):
        self.client.credentials(**self._auth_header(self.member))
        res = self.client.get("/api/auth/me")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["email"], "member@test.io")

    def test_member_cannot_create_plan(self):
        self.client.credentials(**self._auth_header(self.member))
        res = self.client.post("/api/plans/", {"name": "Gold"}, format="json")
        self.assertEqual(res.status_code, 403)

    def test_admin_cannot_create_plan(self):
        self.client.credentials(**self._auth_header(self.admin))
        res = self.client.post("/api/plans/", {"name": "Gold"}, format="json")
        self.assertEqual(res.status_code, 403)

    def test_member_cannot_upsert_org_settings(self):
        self.client.credentials(**self._auth_header(self.member))
        res = self.client.put("/api/org-settings/me", {"timezone": "UTC"}, format="json")
        self.assertEqual(res.status_code, 403)

    def test_admin_can_upsert_org_settings(self):
        self.client.credentials(**self._auth_header(self.admin))
        res = self.client.put("/api/org-settings/me", {"timezone": "UTC"}, format="json")
        self.assertEqual(res.status_code, 201)

    def test_super_admin_can_list_org_settings(self):
        self.client.credentials(**self._auth_header(self.super_admin))
        res = self.client.get("/api/org-settings/")
        self.assertEqual(res.status_code, 200)

    def test_admin_cannot_list_all_org_settings(self):
        self.client.credentials(**self._auth_header(self.admin))
        res = self.client.get("/api/org-settings/")
        self.assertEqual(res.status_code, 403)
