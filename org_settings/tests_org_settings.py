"""
Organization settings: create-or-return, upsert, soft delete, validation.
"""
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from core.exceptions import AppError
from core.models import AuditLog, Organization
from org_settings.models import OrgSettings
from org_settings import services


class OrgSettingsServiceTests(TestCase):
    def setUp(self):
        self.org = Organization.objects.create(name="Acme", slug="acme")
        self.admin = User.objects.create_user(
            email="admin@acme.io", password="pass123", full_name="Admin",
            role=User.ROLE_ADMIN, organization=self.org,
        )

    def test_create_returns_existing_row(self):
        first, created = services.create_org_settings(self.org.id, {"timezone": "Asia/Dhaka"}, actor=self.admin)
        self.assertTrue(created)
        second, created = services.create_org_settings(self.org.id, {"timezone": "UTC"}, actor=self.admin)
        self.assertFalse(created)
        self.assertEqual(second.pk, first.pk)
        self.assertEqual(second.timezone, "Asia/Dhaka")

    def test_create_unknown_org_returns_400(self):
        with self.assertRaises(AppError) as ctx:
            services.create_org_settings(9999, {}, actor=self.admin)
        self.assertEqual(ctx.exception.status_code, 400)

    def test_upsert_creates_then_updates(self):
        row, created = services.upsert_my_org_settings(self.admin, {"timezone": "Europe/Berlin"})
        self.assertTrue(created)
        self.assertEqual(row.created_by, self.admin)
        row, created = services.upsert_my_org_settings(self.admin, {"holidays": [{"date": "2025-12-25", "name": "Xmas"}]})
        self.assertFalse(created)
        self.assertEqual(row.timezone, "Europe/Berlin")
        self.assertEqual(row.updated_by, self.admin)
        self.assertEqual(OrgSettings.objects.active().filter(organization=self.org).count(), 1)
        self.assertTrue(AuditLog.objects.filter(action="Organization Settings Updated").exists())

    def test_soft_delete_then_upsert_creates_new_row(self):
        services.upsert_my_org_settings(self.admin, {})
        services.delete_org_settings(self.org.id, actor=self.admin)
        with self.assertRaises(AppError) as ctx:
            services.get_my_org_settings(self.admin)
        self.assertEqual(ctx.exception.status_code, 404)
        _, created = services.upsert_my_org_settings(self.admin, {})
        self.assertTrue(created)
        self.assertEqual(OrgSettings.objects.filter(organization=self.org).count(), 2)


class OrgSettingsApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.org = Organization.objects.create(name="Acme", slug="acme")
        self.other_org = Organization.objects.create(name="Globex", slug="globex")
        self.admin = User.objects.create_user(
            email="admin@acme.io", password="pass123", full_name="Admin",
            role=User.ROLE_ADMIN, organization=self.org,
        )
        self.member = User.objects.create_user(
            email="member@acme.io", password="pass123", full_name="Member",
            role=User.ROLE_MEMBER, organization=self.org,
        )

    def _auth(self, user):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")

    def test_get_mine_without_settings_returns_404(self):
        self._auth(self.member)
        res = self.client.get("/api/org-settings/me")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["detail"], "Organization settings not found")

    def test_put_creates_and_member_can_read(self):
        self._auth(self.admin)
        payload = {
            "branding": {"logoUrl": "https://cdn.acme.io/logo.png", "primaryColor": "#112233"},
            "businessHours": [{"dow": 1, "opens": "09:00", "closes": "17:00"}],
            "holidays": [{"date": "2025-01-01", "name": "New Year"}],
            "timezone": "Asia/Dhaka",
        }
        res = self.client.put("/api/org-settings/me", payload, format="json")
        self.assertEqual(res.status_code, 201, res.data)

        self._auth(self.member)
        res = self.client.get("/api/org-settings/me")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["timezone"], "Asia/Dhaka")
        self.assertEqual(res.data["businessHours"], [{"dow": 1, "opens": "09:00", "closes": "17:00"}])
        self.assertEqual(res.data["holidays"], [{"date": "2025-01-01", "name": "New Year"}])

    def test_invalid_timezone_returns_400(self):
        self._auth(self.admin)
        res = self.client.patch("/api/org-settings/me", {"timezone": "Mars/Olympus"}, format="json")
        self.assertEqual(res.status_code, 400)

    def test_invalid_business_hours_returns_400(self):
        self._auth(self.admin)
        res = self.client.patch(
            "/api/org-settings/me",
            {"businessHours": [{"dow": 7, "opens": "09:00", "closes": "17:00"}]},
            format="json",
        )
        self.assertEqual(res.status_code, 400)

    def test_create_for_other_org_forbidden_for_admin(self):
        self._auth(self.admin)
        res = self.client.post("/api/org-settings/create", {"orgId": self.other_org.id}, format="json")
        self.assertEqual(res.status_code, 403)

    def test_create_for_own_org_then_existing_returns_200(self):
        self._auth(self.admin)
        res = self.client.post("/api/org-settings/create", {"timezone": "UTC"}, format="json")
        self.assertEqual(res.status_code, 201)
        res = self.client.post("/api/org-settings/create", {"timezone": "Asia/Tokyo"}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["timezone"], "UTC")

    def test_get_and_delete_by_org(self):
        self._auth(self.admin)
        self.client.put("/api/org-settings/me", {}, format="json")
        res = self.client.get(f"/api/org-settings/org/{self.org.id}")
        self.assertEqual(res.status_code, 200)
        res = self.client.delete(f"/api/org-settings/org/{self.org.id}")
        self.assertEqual(res.status_code, 200)
        res = self.client.delete(f"/api/org-settings/org/{self.org.id}")
        self.assertEqual(res.status_code, 404)

    def test_member_cannot_delete(self):
        self._auth(self.member)
        res = self.client.delete(f"/api/org-settings/org/{self.org.id}")
        self.assertEqual(res.status_code, 403)
