"""
Plan catalogue: slugging, post-trial rules, public reads, super-admin writes.
"""
from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from core.models import AuditLog, Organization
from plans.models import Plan
from plans.services import make_slug


class MakeSlugTests(SimpleTestCase):
    def test_lowercases_and_dashes_spaces(self):
        self.assertEqual(make_slug("Pro Plan"), "pro-plan")

    def test_strips_symbols_and_collapses_dashes(self):
        self.assertEqual(make_slug("  Pro -- Plan (2025)! "), "pro-plan-2025")


class PlanApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.root = User.objects.create_user(
            email="root@test.io", password="pass123", full_name="Root", role=User.ROLE_SUPER_ADMIN,
        )
        self.basic = Plan.objects.create(
            name="Basic", slug="basic", duration_unit="MONTH", duration_value=1,
            price=Decimal("10.00"), serial=2,
        )

    def _auth(self, user):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")

    def _payload(self, **overrides):
        data = {
            "name": "Pro Plan",
            "durationUnit": "MONTH",
            "durationValue": 1,
            "price": "29.00",
            "features": ["invoices", "uploads"],
        }
        data.update(overrides)
        return data

    def test_list_is_public_and_ordered_by_serial(self):
        Plan.objects.create(
            name="Starter", slug="starter", duration_unit="MONTH", duration_value=1,
            price=Decimal("0"), serial=1,
        )
        res = self.client.get("/api/plans/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual([p["slug"] for p in res.data["results"]], ["starter", "basic"])

    def test_list_active_only(self):
        Plan.objects.create(
            name="Legacy", slug="legacy", duration_unit="YEAR", duration_value=1,
            price=Decimal("99"), is_active=False,
        )
        res = self.client.get("/api/plans/?activeOnly=true")
        self.assertEqual(res.data["count"], 1)

    def test_list_search(self):
        res = self.client.get("/api/plans/?search=bas")
        self.assertEqual(res.data["count"], 1)
        res = self.client.get("/api/plans/?search=nothing")
        self.assertEqual(res.data["count"], 0)

    def test_create_derives_slug_and_writes_audit_log(self):
        self._auth(self.root)
        res = self.client.post("/api/plans/", self._payload(), format="json")
        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["slug"], "pro-plan")
        self.assertTrue(res.data["isActive"])
        self.assertTrue(AuditLog.objects.filter(action="Plan Created").exists())

    def test_create_duplicate_name_returns_400(self):
        self._auth(self.root)
        res = self.client.post("/api/plans/", self._payload(name="Basic"), format="json")
        self.assertEqual(res.status_code, 400)

    def test_trial_requires_post_trial_plan(self):
        self._auth(self.root)
        res = self.client.post("/api/plans/", self._payload(name="Trial", isTrial=True), format="json")
        self.assertEqual(res.status_code, 400)

    def test_trial_with_unknown_post_trial_plan_returns_400(self):
        self._auth(self.root)
        res = self.client.post(
            "/api/plans/", self._payload(name="Trial", isTrial=True, postTrialPlan=9999), format="json"
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["detail"], "Post Trial Plan does not reference an existing plan")

    def test_trial_cannot_point_to_trial(self):
        trial = Plan.objects.create(
            name="Trial A", slug="trial-a", duration_unit="DAY", duration_value=14,
            price=Decimal("0"), is_trial=True, post_trial_plan=self.basic,
        )
        self._auth(self.root)
        res = self.client.post(
            "/api/plans/", self._payload(name="Trial B", isTrial=True, postTrialPlan=trial.id), format="json"
        )
        self.assertEqual(res.status_code, 400)

    def test_trial_with_valid_post_trial_plan(self):
        self._auth(self.root)
        res = self.client.post(
            "/api/plans/",
            self._payload(name="Free Trial", price="0", isTrial=True, postTrialPlan=self.basic.id),
            format="json",
        )
        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["postTrialPlan"], self.basic.id)

    def test_trial_cannot_reference_itself(self):
        self._auth(self.root)
        res = self.client.patch(
            f"/api/plans/{self.basic.id}", {"isTrial": True, "postTrialPlan": self.basic.id}, format="json"
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["detail"], "Post Trial Plan cannot reference the same plan")

    def test_update_name_refreshes_slug(self):
        self._auth(self.root)
        res = self.client.patch(f"/api/plans/{self.basic.id}", {"name": "Basic Plus"}, format="json")
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["slug"], "basic-plus")

    def test_get_by_id_and_slug(self):
        res = self.client.get(f"/api/plans/{self.basic.id}")
        self.assertEqual(res.data["name"], "Basic")
        res = self.client.get("/api/plans/slug/basic")
        self.assertEqual(res.data["id"], self.basic.id)

    def test_get_missing_returns_404(self):
        res = self.client.get("/api/plans/slug/missing")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data, {"detail": "Plan not found", "code": "not_found"})

    def test_delete(self):
        self._auth(self.root)
        res = self.client.delete(f"/api/plans/{self.basic.id}")
        self.assertEqual(res.status_code, 200)
        self.assertFalse(Plan.objects.filter(pk=self.basic.id).exists())

    def test_delete_plan_in_use_returns_409(self):
        Organization.objects.create(name="Acme", slug="acme", plan=self.basic)
        self._auth(self.root)
        res = self.client.delete(f"/api/plans/{self.basic.id}")
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.data["code"], "plan_in_use")

    def test_anonymous_write_returns_401(self):
        res = self.client.post("/api/plans/", self._payload(), format="json")
        self.assertEqual(res.status_code, 401)
