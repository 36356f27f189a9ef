"""
Invoice workflow: creation with numbering and totals, scoping, soft delete,
PDF generation and download.
"""
from datetime import date
from decimal import Decimal
from unittest import mock

from django.conf import settings
from django.db import IntegrityError, transaction
from django.test import SimpleTestCase, TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from core.exceptions import AppError
from core.models import AuditLog, Organization
from invoices.models import Invoice
from invoices.services import compute_totals, create_invoice, format_money


class ComputeTotalsTests(SimpleTestCase):
    def test_line_amounts_and_totals(self):
        items, subtotal, total = compute_totals(
            [
                {"description": "Design", "quantity": Decimal("2"), "unitPrice": Decimal("150.00")},
                {"description": "Hosting", "quantity": Decimal("1.5"), "unitPrice": Decimal("10.00")},
            ],
            tax=Decimal("31.50"),
            discount=Decimal("15"),
        )
        self.assertEqual(subtotal, Decimal("315.00"))
        self.assertEqual(total, Decimal("331.50"))
        self.assertEqual(items[0], {"description": "Design", "quantity": 2, "unitPrice": "150.00", "amount": "300.00"})
        self.assertEqual(items[1]["quantity"], "1.5")

    def test_discount_larger_than_total_is_rejected(self):
        with self.assertRaises(AppError):
            compute_totals([{"description": "x", "quantity": 1, "unitPrice": Decimal("5")}], discount=Decimal("10"))

    def test_format_money(self):
        self.assertEqual(format_money(Decimal("1234.5"), "USD"), "$1,234.50")
        self.assertEqual(format_money(Decimal("10"), "SEK"), "SEK 10.00")


class InvoiceApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.org = Organization.objects.create(
            name="Thunder Client Limited", slug="tcl", email="billing@tcl.io",
            address={"line1": "1 Main St", "city": "Dhaka"},
        )
        self.other_org = Organization.objects.create(name="Globex", slug="globex")
        self.admin = User.objects.create_user(
            email="admin@tcl.io", password="pass123", full_name="Admin",
            role=User.ROLE_ADMIN, organization=self.org,
        )
        self.member = User.objects.create_user(
            email="member@tcl.io", password="pass123", full_name="Member",
            role=User.ROLE_MEMBER, organization=self.org,
        )
        self.outsider = User.objects.create_user(
            email="admin@globex.io", password="pass123", full_name="Outsider",
            role=User.ROLE_ADMIN, organization=self.other_org,
        )

    def _auth(self, user):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(user)}")

    def _payload(self, **overrides):
        data = {
            "billToName": "Wayne Enterprises",
            "billToEmail": "ap@wayne.com",
            "currency": "usd",
            "items": [{"description": "Consulting", "quantity": 3, "unitPrice": "100.00"}],
            "tax": "15.00",
            "issueDate": "2025-03-01",
            "dueDate": "2025-03-31",
        }
        data.update(overrides)
        return data

    def test_next_id_preview(self):
        self._auth(self.member)
        res = self.client.get("/api/invoices/next-id")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data, {"invoiceId": "TCL-0001"})

    def test_create_assigns_sequential_ids_and_totals(self):
        self._auth(self.admin)
        first = self.client.post("/api/invoices/", self._payload(), format="json")
        second = self.client.post("/api/invoices/", self._payload(), format="json")
        self.assertEqual(first.status_code, 201, first.data)
        self.assertEqual(first.data["invoiceId"], "TCL-0001")
        self.assertEqual(second.data["invoiceId"], "TCL-0002")
        self.assertEqual(first.data["subtotal"], "300.00")
        self.assertEqual(first.data["total"], "315.00")
        self.assertEqual(first.data["currency"], "USD")
        self.assertTrue(AuditLog.objects.filter(action="Invoice Created", organization=self.org).exists())

    def test_member_cannot_create(self):
        self._auth(self.member)
        res = self.client.post("/api/invoices/", self._payload(), format="json")
        self.assertEqual(res.status_code, 403)

    def test_validation_errors(self):
        self._auth(self.admin)
        res = self.client.post("/api/invoices/", self._payload(items=[]), format="json")
        self.assertEqual(res.status_code, 400)
        res = self.client.post("/api/invoices/", self._payload(dueDate="2025-02-01"), format="json")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["code"], "validation_error")

    def test_list_is_scoped_to_organization(self):
        create_invoice(self.org, {
            "bill_to_name": "A", "items": [{"description": "x", "unitPrice": Decimal("1")}],
            "issue_date": date(2025, 1, 1),
        })
        create_invoice(self.other_org, {
            "bill_to_name": "B", "items": [{"description": "y", "unitPrice": Decimal("1")}],
            "issue_date": date(2025, 1, 1),
        })
        self._auth(self.member)
        res = self.client.get("/api/invoices/")
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["invoiceId"], "TCL-0001")

    def test_other_organization_invoice_is_404(self):
        invoice = create_invoice(self.org, {
            "bill_to_name": "A", "items": [{"description": "x", "unitPrice": Decimal("1")}],
            "issue_date": date(2025, 1, 1),
        })
        self._auth(self.outsider)
        res = self.client.get(f"/api/invoices/{invoice.pk}")
        self.assertEqual(res.status_code, 404)

    def test_soft_delete_frees_the_sequence(self):
        self._auth(self.admin)
        self.client.post("/api/invoices/", self._payload(), format="json")
        second = self.client.post("/api/invoices/", self._payload(), format="json")
        res = self.client.delete(f"/api/invoices/{second.data['id']}")
        self.assertEqual(res.status_code, 200)
        self.assertTrue(Invoice.objects.get(pk=second.data["id"]).is_deleted)
        res = self.client.get("/api/invoices/next-id")
        self.assertEqual(res.data["invoiceId"], "TCL-0002")

    def test_duplicate_live_id_is_rejected_by_constraint(self):
        Invoice.objects.create(organization=self.org, invoice_id="TCL-0001", bill_to_name="A", issue_date=date(2025, 1, 1))
        with self.assertRaises(IntegrityError), transaction.atomic():
            Invoice.objects.create(organization=self.org, invoice_id="TCL-0001", bill_to_name="B", issue_date=date(2025, 1, 1))

    def test_status_update(self):
        self._auth(self.admin)
        created = self.client.post("/api/invoices/", self._payload(), format="json")
        res = self.client.patch(f"/api/invoices/{created.data['id']}/status", {"status": "PAID"}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["status"], "PAID")

    def test_generate_and_download_pdf(self):
        self._auth(self.admin)
        created = self.client.post("/api/invoices/", self._payload(), format="json")
        invoice_pk = created.data["id"]

        res = self.client.get(f"/api/invoices/{invoice_pk}/pdf/download")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["code"], "pdf_not_generated")

        def fake_render(html, filename, output_dir=None):
            self.assertIn("TCL-0001", html)
            self.assertIn("Wayne Enterprises", html)
            self.assertIn("$315.00", html)
            self.assertIn("1 Main St", html)
            settings.PDF_OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
            (settings.PDF_OUTPUT_DIR / f"{filename}.pdf").write_bytes(b"%PDF-1.4 stub")
            return f"{filename}.pdf"

        with mock.patch("invoices.services.render_pdf", side_effect=fake_render):
            res = self.client.post(f"/api/invoices/{invoice_pk}/pdf")
        self.assertEqual(res.status_code, 201, res.data)
        self.assertTrue(res.data["hasPdf"])
        self.assertTrue(res.data["pdfFilename"].startswith("invoice-TCL-0001-"))

        res = self.client.get(f"/api/invoices/{invoice_pk}/pdf/download")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res["Content-Type"], "application/pdf")
        self.assertIn('filename="TCL-0001.pdf"', res["Content-Disposition"])
        self.assertEqual(b"".join(res.streaming_content), b"%PDF-1.4 stub")
        res.close()
