"""
Audit trail: entries are written, and a failed write never undoes the
operation that triggered it.
"""
from decimal import Decimal
from unittest import mock

from django.db import IntegrityError
from django.test import TestCase, TransactionTestCase

from accounts.models import User
from core.audit import actor_display, log_action
from core.models import AuditLog, Organization
from org_settings import services as org_settings_services
from org_settings.models import OrgSettings
from plans import services as plan_services
from plans.models import Plan


def failing_insert():
    return mock.patch.object(AuditLog, "_do_insert", side_effect=IntegrityError("audit insert failed"))


class LogActionTests(TestCase):
    def setUp(self):
        self.org = Organization.objects.create(name="Acme", slug="acme")
        self.admin = User.objects.create_user(
            email="admin@acme.io", password="pass123", full_name="Admin",
            role=User.ROLE_ADMIN, organization=self.org,
        )

    def test_organization_defaults_to_actor_organization(self):
        entry = log_action("Thing Done", "done", actor=self.admin)
        self.assertEqual(entry.organization, self.org)
        self.assertEqual(entry.actor, self.admin)

    def test_actor_display(self):
        self.assertEqual(actor_display(self.admin), "admin@acme.io")
        self.assertEqual(actor_display(None), "system")

    def test_failed_write_returns_none(self):
        with failing_insert(), self.assertLogs("core.audit", level="ERROR"):
            self.assertIsNone(log_action("Thing Done", actor=self.admin))


class AuditFailureKeepsWorkTests(TransactionTestCase):
    def setUp(self):
        self.org = Organization.objects.create(name="Acme", slug="acme")
        self.admin = User.objects.create_user(
            email="admin@acme.io", password="pass123", full_name="Admin",
            role=User.ROLE_ADMIN, organization=self.org,
        )

    def test_plan_is_saved_when_audit_write_fails(self):
        with failing_insert(), self.assertLogs("core.audit", level="ERROR"):
            plan = plan_services.create_plan({
                "name": "Pro Plan",
                "duration_unit": "MONTH",
                "duration_value": 1,
                "price": Decimal("29.00"),
            })
        self.assertTrue(Plan.objects.filter(pk=plan.pk).exists())
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_settings_upsert_is_saved_when_audit_write_fails(self):
        with failing_insert(), self.assertLogs("core.audit", level="ERROR"):
            row, created = org_settings_services.upsert_my_org_settings(self.admin, {"timezone": "Asia/Dhaka"})
        self.assertTrue(created)
        self.assertEqual(OrgSettings.objects.get(pk=row.pk).timezone, "Asia/Dhaka")
