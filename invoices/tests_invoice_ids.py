"""Invoice identifier derivation, scanning and formatting."""
from datetime import date

from django.test import SimpleTestCase, TestCase

from core.exceptions import AppError
from core.models import Organization
from invoices.invoice_ids import (
    agenerate_invoice_id,
    conforming_sequence,
    derive_org_code,
    format_invoice_id,
    generate_invoice_id,
    scan_max_sequence,
    sequence_pattern,
)
from invoices.models import Invoice


class DeriveOrgCodeTests(SimpleTestCase):
    def test_single_word_takes_first_three_characters(self):
        self.assertEqual(derive_org_code("Google"), "GOO")

    def test_short_single_word_is_not_padded(self):
        self.assertEqual(derive_org_code("Hp"), "HP")

    def test_multiple_words_take_initials(self):
        self.assertEqual(derive_org_code("Thunder Client Limited"), "TCL")

    def test_only_first_three_words_count(self):
        self.assertEqual(derive_org_code("One Two Three Four"), "OTT")

    def test_two_words_give_two_letters(self):
        self.assertEqual(derive_org_code("acme corp"), "AC")

    def test_extra_whitespace_is_collapsed(self):
        self.assertEqual(derive_org_code("  Thunder   Client \t Limited "), "TCL")

    def test_non_alphabetic_characters_pass_through(self):
        self.assertEqual(derive_org_code("3M Company"), "3C")
        self.assertEqual(derive_org_code("42"), "42")


class FormatInvoiceIdTests(SimpleTestCase):
    def test_pads_to_four_digits(self):
        self.assertEqual(format_invoice_id(0, "TCL"), "TCL-0001")
        self.assertEqual(format_invoice_id(4, "GOO"), "GOO-0005")
        self.assertEqual(format_invoice_id(10, "GOO"), "GOO-0011")

    def test_expands_beyond_four_digits(self):
        self.assertEqual(format_invoice_id(9998, "GOO"), "GOO-9999")
        self.assertEqual(format_invoice_id(9999, "GOO"), "GOO-10000")
        self.assertEqual(format_invoice_id(123455, "GOO"), "GOO-123456")


class ConformingSequenceTests(SimpleTestCase):
    def setUp(self):
        self.pattern = sequence_pattern("GOO")

    def test_exact_identifier_yields_sequence(self):
        self.assertEqual(conforming_sequence("GOO-0012", self.pattern), 12)
        self.assertEqual(conforming_sequence("goo-0012", self.pattern), 12)

    def test_trailing_newline_is_non_conforming(self):
        self.assertIsNone(conforming_sequence("GOO-0009\n", self.pattern))

    def test_non_ascii_digits_are_non_conforming(self):
        self.assertIsNone(conforming_sequence("GOO-٠٠١٢", self.pattern))

    def test_code_is_escaped(self):
        self.assertIsNone(conforming_sequence("AXB-0001", sequence_pattern("A.B")))
        self.assertEqual(conforming_sequence("A.B-0001", sequence_pattern("A.B")), 1)


class GenerateInvoiceIdTests(TestCase):
    def setUp(self):
        self.google = Organization.objects.create(name="Google", slug="google")

    def _invoice(self, org, invoice_id, **extra):
        return Invoice.objects.create(
            organization=org, invoice_id=invoice_id, bill_to_name="Client",
            issue_date=date(2025, 1, 1), **extra,
        )

    def test_first_id_for_new_organization(self):
        org = Organization.objects.create(name="Thunder Client Limited", slug="tcl")
        self.assertEqual(generate_invoice_id(org.pk), "TCL-0001")

    def test_soft_deleted_invoices_are_excluded(self):
        self._invoice(self.google, "GOO-0001")
        self._invoice(self.google, "GOO-0002", is_deleted=True)
        self._invoice(self.google, "GOO-0003")
        self.assertEqual(generate_invoice_id(self.google.pk), "GOO-0004")

    def test_deleted_highest_sequence_is_reissued(self):
        self._invoice(self.google, "GOO-0001")
        self._invoice(self.google, "GOO-0002", is_deleted=True)
        self.assertEqual(generate_invoice_id(self.google.pk), "GOO-0002")

    def test_ids_from_previous_name_are_ignored(self):
        self._invoice(self.google, "ALP-0042")
        self._invoice(self.google, "GOO-0002")
        self.assertEqual(scan_max_sequence(self.google.pk, "GOO"), 2)
        self.assertEqual(generate_invoice_id(self.google.pk), "GOO-0003")

    def test_non_conforming_and_empty_ids_are_ignored(self):
        self._invoice(self.google, "GOO-12a")
        self._invoice(self.google, "XGOO-0009")
        self._invoice(self.google, "GOO-0005-draft")
        self._invoice(self.google, "GOO-0009\n")
        self._invoice(self.google, "GOO-\u0660\u0660\u0661\u0662")
        self._invoice(self.google, "")
        self._invoice(self.google, None)
        self.assertEqual(scan_max_sequence(self.google.pk, "GOO"), 0)

    def test_match_is_case_insensitive(self):
        self._invoice(self.google, "goo-0007")
        self.assertEqual(generate_invoice_id(self.google.pk), "GOO-0008")

    def test_other_organizations_do_not_count(self):
        other = Organization.objects.create(name="Goodyear", slug="goodyear")
        self._invoice(other, "GOO-0050")
        self.assertEqual(generate_invoice_id(self.google.pk), "GOO-0001")

    def test_sequence_past_four_digits(self):
        self._invoice(self.google, "GOO-9999")
        self.assertEqual(generate_invoice_id(self.google.pk), "GOO-10000")

    def test_numeric_not_lexicographic_maximum(self):
        self._invoice(self.google, "GOO-0999")
        self._invoice(self.google, "GOO-10000")
        self.assertEqual(generate_invoice_id(self.google.pk), "GOO-10001")

    def test_unknown_organization_is_404(self):
        with self.assertRaises(AppError) as ctx:
            generate_invoice_id(999999)
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(str(ctx.exception.detail), "Organization not found")

    def test_blank_name_is_400(self):
        Organization.objects.filter(pk=self.google.pk).update(name="   ")
        with self.assertRaises(AppError) as ctx:
            generate_invoice_id(self.google.pk)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(str(ctx.exception.detail), "Organization name not found")

    async def test_async_variant(self):
        await Invoice.objects.acreate(
            organization=self.google, invoice_id="GOO-0003", bill_to_name="Client",
            issue_date=date(2025, 1, 1),
        )
        self.assertEqual(await agenerate_invoice_id(self.google.pk), "GOO-0004")

    async def test_async_unknown_organization_is_404(self):
        with self.assertRaises(AppError) as ctx:
            await agenerate_invoice_id(999999)
        self.assertEqual(ctx.exception.status_code, 404)
