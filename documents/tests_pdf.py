"""
PDF pipeline tests. Chromium is replaced by a fake Playwright so the suite
runs without a browser; the fake writes a stub PDF where page.pdf is told to.
"""
import base64
import shutil
import tempfile
from pathlib import Path
from unittest import mock

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase, TestCase, override_settings
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from core.models import Organization
from documents.exceptions import PdfConfigurationError, PdfRenderError
from documents.fonts import (
    GOOGLE_FONTS_URL,
    SIGNATURE_STYLE_TO_CLASS,
    get_signature_font_css,
    signature_class,
    wrap_html_with_fonts,
)
from documents.pdf import generate_pdf, render_pdf, sanitize_pdf_filename


def fake_playwright(launch_error=None, content_error=None):
    """Returns (async_playwright replacement, chromium, browser, page)."""
    page = mock.AsyncMock()

    async def write_pdf(path, **kwargs):
        Path(path).write_bytes(b"%PDF-1.4\n%stub\n")

    page.pdf.side_effect = write_pdf
    if content_error is not None:
        page.set_content.side_effect = content_error

    browser = mock.AsyncMock()
    browser.new_page.return_value = page

    playwright = mock.MagicMock()
    playwright.chromium.launch = mock.AsyncMock(return_value=browser, side_effect=launch_error)

    context = mock.MagicMock()
    context.__aenter__ = mock.AsyncMock(return_value=playwright)
    context.__aexit__ = mock.AsyncMock(return_value=False)
    return mock.MagicMock(return_value=context), playwright.chromium, browser, page


class SanitizeFilenameTests(SimpleTestCase):
    def test_strips_illegal_characters(self):
        self.assertEqual(sanitize_pdf_filename('a<b>c:d"e/f\\g|h?i*j'), "abcdefghij.pdf")

    def test_keeps_legal_characters(self):
        self.assertEqual(sanitize_pdf_filename("Invoice TCL-0001 (copy)"), "Invoice TCL-0001 (copy).pdf")


class GeneratePdfTests(SimpleTestCase):
    def setUp(self):
        self.output_dir = Path(tempfile.mkdtemp(prefix="pdf-test-")) / "nested" / "PDFs"
        self.addCleanup(shutil.rmtree, self.output_dir.parents[1], True)

    async def test_writes_sanitized_file_and_returns_name(self):
        factory, chromium, browser, page = fake_playwright()
        with mock.patch("documents.pdf.async_playwright", factory):
            name = await generate_pdf("<p>Hello</p>", 'Agreement: "Acme"/2025?', self.output_dir)

        self.assertEqual(name, "Agreement Acme2025.pdf")
        written = self.output_dir / name
        self.assertTrue(written.exists())
        self.assertTrue(written.read_bytes().startswith(b"%PDF"))
        for char in '<>:"/\\|?*':
            self.assertNotIn(char, name)
        browser.close.assert_awaited_once()

    async def test_browser_and_page_options(self):
        factory, chromium, browser, page = fake_playwright()
        with mock.patch("documents.pdf.async_playwright", factory):
            await generate_pdf("<p>x</p>", "opts", self.output_dir)

        launch_kwargs = chromium.launch.await_args.kwargs
        self.assertIn("--no-sandbox", launch_kwargs["args"])
        self.assertIn("--disable-setuid-sandbox", launch_kwargs["args"])
        self.assertIn("--font-render-hinting=none", launch_kwargs["args"])
        self.assertNotIn("executable_path", launch_kwargs)
        browser.new_page.assert_awaited_once_with(viewport={"width": 1200, "height": 800})
        page.goto.assert_awaited_once_with("about:blank", wait_until="domcontentloaded")

        html, = page.set_content.await_args.args
        self.assertIn("<!DOCTYPE html>", html)
        self.assertIn(".signature-dancing", html)
        self.assertEqual(page.set_content.await_args.kwargs, {"wait_until": "domcontentloaded", "timeout": 60000})

        pdf_kwargs = page.pdf.await_args.kwargs
        self.assertEqual(pdf_kwargs["format"], "A4")
        self.assertTrue(pdf_kwargs["print_background"])
        self.assertEqual(pdf_kwargs["margin"], {"top": "10mm", "bottom": "5mm", "left": "5mm", "right": "5mm"})

    @override_settings(PDF_PRODUCTION=True, CHROME_PATH=None)
    async def test_production_without_chrome_path_fails_before_launch(self):
        factory, chromium, browser, page = fake_playwright()
        with mock.patch("documents.pdf.async_playwright", factory):
            with self.assertRaises(PdfConfigurationError):
                await generate_pdf("<p>x</p>", "prod", self.output_dir)
        factory.assert_not_called()
        chromium.launch.assert_not_awaited()

    @override_settings(PDF_PRODUCTION=True, CHROME_PATH="/usr/bin/chromium")
    async def test_production_uses_configured_chrome(self):
        factory, chromium, browser, page = fake_playwright()
        with mock.patch("documents.pdf.async_playwright", factory):
            await generate_pdf("<p>x</p>", "prod", self.output_dir)
        self.assertEqual(chromium.launch.await_args.kwargs["executable_path"], "/usr/bin/chromium")

    async def test_timeout_maps_to_render_error_and_closes_browser(self):
        factory, chromium, browser, page = fake_playwright(
            content_error=PlaywrightTimeoutError("Timeout 60000ms exceeded")
        )
        with mock.patch("documents.pdf.async_playwright", factory):
            with self.assertRaises(PdfRenderError) as ctx:
                await generate_pdf("<p>x</p>", "slow", self.output_dir)
        self.assertEqual(ctx.exception.get_codes(), "pdf_render_timeout")
        browser.close.assert_awaited_once()
        self.assertFalse((self.output_dir / "slow.pdf").exists())

    async def test_browser_failure_maps_to_render_error_and_closes_browser(self):
        factory, chromium, browser, page = fake_playwright(
            content_error=PlaywrightError("Target closed")
        )
        with mock.patch("documents.pdf.async_playwright", factory):
            with self.assertRaises(PdfRenderError) as ctx:
                await generate_pdf("<p>x</p>", "broken", self.output_dir)
        self.assertEqual(ctx.exception.get_codes(), "pdf_render_failed")
        browser.close.assert_awaited_once()

    async def test_close_failure_does_not_hide_render_error(self):
        factory, chromium, browser, page = fake_playwright(
            content_error=PlaywrightTimeoutError("Timeout 60000ms exceeded")
        )
        browser.close.side_effect = PlaywrightError("Browser has been closed")
        with mock.patch("documents.pdf.async_playwright", factory):
            with self.assertRaises(PdfRenderError) as ctx, self.assertLogs("documents.pdf", level="WARNING"):
                await generate_pdf("<p>x</p>", "slow", self.output_dir)
        self.assertEqual(ctx.exception.get_codes(), "pdf_render_timeout")
        browser.close.assert_awaited_once()

    async def test_launch_failure_maps_to_render_error(self):
        factory, chromium, browser, page = fake_playwright(
            launch_error=PlaywrightError("Executable doesn't exist")
        )
        with mock.patch("documents.pdf.async_playwright", factory):
            with self.assertRaises(PdfRenderError):
                await generate_pdf("<p>x</p>", "nolaunch", self.output_dir)
        browser.close.assert_not_awaited()

    async def test_missing_font_loading_api_is_ignored(self):
        factory, chromium, browser, page = fake_playwright()
        page.evaluate.side_effect = PlaywrightError("document.fonts is undefined")
        with mock.patch("documents.pdf.async_playwright", factory):
            name = await generate_pdf("<p>x</p>", "nofonts", self.output_dir)
        self.assertTrue((self.output_dir / name).exists())

    def test_sync_wrapper(self):
        factory, chromium, browser, page = fake_playwright()
        with mock.patch("documents.pdf.async_playwright", factory):
            name = render_pdf("<p>x</p>", "sync", self.output_dir)
        self.assertEqual(name, "sync.pdf")
        self.assertTrue((self.output_dir / "sync.pdf").exists())


class FontCssTests(SimpleTestCase):
    def setUp(self):
        self.fonts_dir = Path(tempfile.mkdtemp(prefix="fonts-test-"))
        self.addCleanup(shutil.rmtree, self.fonts_dir, True)

    def test_no_font_files_falls_back_to_remote_import(self):
        css = get_signature_font_css(self.fonts_dir)
        self.assertIn(f"@import url('{GOOGLE_FONTS_URL}')", css)
        self.assertNotIn("@font-face", css)

    def test_present_font_is_embedded_as_data_url(self):
        (self.fonts_dir / "kalam.woff2").write_bytes(b"wOF2-kalam")
        css = get_signature_font_css(self.fonts_dir)
        encoded = base64.b64encode(b"wOF2-kalam").decode("ascii")
        self.assertIn("font-family: 'Kalam';", css)
        self.assertIn(f"url(data:font/woff2;base64,{encoded}) format('woff2')", css)
        self.assertEqual(css.count("@font-face"), 1)
        self.assertNotIn("@import", css)

    def test_signature_classes_and_print_rules(self):
        css = get_signature_font_css(self.fonts_dir)
        self.assertIn(".signature-brush-script {", css)
        self.assertIn("font-family: 'Brush Script MT', cursive !important;", css)
        self.assertIn("font-family: 'Helvetica', 'Arial', sans-serif !important;", css)
        self.assertIn("@media print", css)
        self.assertIn("page-break-inside: avoid !important;", css)
        self.assertIn(".signatures-row", css)

    def test_style_to_class_map(self):
        self.assertEqual(len(SIGNATURE_STYLE_TO_CLASS), 15)
        self.assertEqual(signature_class("great-vibes"), "signature-great-vibes")
        self.assertEqual(signature_class("fancy"), "signature-fancy")
        self.assertIsNone(signature_class("comic-sans"))


class WrapHtmlTests(SimpleTestCase):
    def setUp(self):
        self.fonts_dir = Path(tempfile.mkdtemp(prefix="fonts-test-"))
        self.addCleanup(shutil.rmtree, self.fonts_dir, True)

    def test_fragment_is_wrapped_in_document(self):
        html = wrap_html_with_fonts("<p>Signed</p>", self.fonts_dir)
        self.assertTrue(html.startswith("<!DOCTYPE html>"))
        self.assertIn('<meta charset="UTF-8">', html)
        self.assertIn("<p>Signed</p>", html)
        self.assertLess(html.index("<style>"), html.index("<body>"))

    def test_css_inserted_after_head(self):
        html = wrap_html_with_fonts("<!doctype html><html><head><title>x</title></head><body></body></html>", self.fonts_dir)
        self.assertIn("<head>\n<style>", html)
        self.assertEqual(html.count("<head>"), 1)

    def test_head_created_after_html(self):
        html = wrap_html_with_fonts("<html><body>x</body></html>", self.fonts_dir)
        self.assertIn("<html>\n<head>\n<style>", html)

    def test_document_without_html_or_head_tag_is_untouched(self):
        source = '<!DOCTYPE html><html lang="en"><body>x</body></html>'
        self.assertEqual(wrap_html_with_fonts(source, self.fonts_dir), source)


class RenderPdfApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.org = Organization.objects.create(name="Acme", slug="acme")
        self.user = User.objects.create_user(
            email="member@acme.io", password="pass123", full_name="Member",
            role=User.ROLE_MEMBER, organization=self.org,
        )

    def test_requires_auth(self):
        res = self.client.post("/api/documents/pdf", {"html": "<p>x</p>", "filename": "x"}, format="json")
        self.assertEqual(res.status_code, 401)

    def test_renders_and_returns_url(self):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(self.user)}")
        factory, chromium, browser, page = fake_playwright()
        with mock.patch("documents.pdf.async_playwright", factory):
            res = self.client.post(
                "/api/documents/pdf", {"html": "<p>Signed</p>", "filename": "agreement-42"}, format="json"
            )
        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["filename"], "agreement-42.pdf")
        self.assertEqual(res.data["url"], "/media/documents/PDFs/agreement-42.pdf")

    @override_settings(PDF_PRODUCTION=True, CHROME_PATH=None)
    def test_configuration_error_is_reported(self):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(self.user)}")
        res = self.client.post("/api/documents/pdf", {"html": "<p>x</p>", "filename": "x"}, format="json")
        self.assertEqual(res.status_code, 500)
        self.assertEqual(res.data["code"], "pdf_not_configured")


class RenderPdfCommandTests(SimpleTestCase):
    def setUp(self):
        self.workdir = Path(tempfile.mkdtemp(prefix="cmd-test-"))
        self.addCleanup(shutil.rmtree, self.workdir, True)

    def test_renders_html_file(self):
        source = self.workdir / "doc.html"
        source.write_text("<p>From CLI</p>", encoding="utf-8")
        factory, chromium, browser, page = fake_playwright()
        with mock.patch("documents.pdf.async_playwright", factory):
            call_command("render_pdf", str(source), "cli-doc", output_dir=str(self.workdir / "out"))
        self.assertTrue((self.workdir / "out" / "cli-doc.pdf").exists())

    def test_missing_html_file(self):
        with self.assertRaises(CommandError):
            call_command("render_pdf", str(self.workdir / "missing.html"), "x")
