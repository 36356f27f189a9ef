"""
Render an HTML file to PDF with the same pipeline the API uses.

Usage:
  python manage.py render_pdf agreement.html "Agreement Acme 2025"
  python manage.py render_pdf invoice.html INV-0001 --output-dir /tmp/pdfs
"""
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from documents.exceptions import PdfConfigurationError, PdfRenderError
from documents.pdf import pdf_path, render_pdf


class Command(BaseCommand):
    help = "Render an HTML file to PDF (headless Chromium) and print the output path."

    def add_arguments(self, parser):
        parser.add_argument("html_file", help="Path to the HTML document or fragment")
        parser.add_argument("filename", help="Output filename without .pdf")
        parser.add_argument("--output-dir", dest="output_dir", help="Defaults to PDF_OUTPUT_DIR")

    def handle(self, *args, **options):
        source = Path(options["html_file"])
        if not source.is_file():
            raise CommandError(f"HTML file not found: {source}")
        html = source.read_text(encoding="utf-8")

        try:
            filename = render_pdf(html, options["filename"], options.get("output_dir"))
        except (PdfConfigurationError, PdfRenderError) as exc:
            raise CommandError(str(exc.detail)) from exc

        output = pdf_path(filename, options.get("output_dir"))
        self.stdout.write(self.style.SUCCESS(f"PDF generated: {output}"))
