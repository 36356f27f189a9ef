"""
HTML -> PDF with headless Chromium (Playwright).

Each call owns one browser process and closes it on every exit path.
Filenames are used as given (after sanitizing); making them unique is the
caller's job.
"""
import asyncio
import logging
import re
from pathlib import Path
from urllib.parse import quote

from asgiref.sync import async_to_sync, sync_to_async
from django.conf import settings
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from .exceptions import PdfConfigurationError, PdfRenderError
from .fonts import wrap_html_with_fonts

logger = logging.getLogger(__name__)

ILLEGAL_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')

LAUNCH_ARGS = ['--no-sandbox', '--disable-setuid-sandbox', '--font-render-hinting=none']
VIEWPORT = {'width': 1200, 'height': 800}
PDF_MARGINS = {'top': '10mm', 'bottom': '5mm', 'left': '5mm', 'right': '5mm'}
SETTLE_DELAY_SECONDS = 0.15


def sanitize_pdf_filename(filename):
    """'Q1: <draft>' -> 'Q1 draft.pdf'"""
    return ILLEGAL_FILENAME_CHARS.sub('', filename) + '.pdf'


def _launch_options():
    """
    PDF_PRODUCTION: use the host's Chromium at CHROME_PATH.
    Otherwise Playwright's bundled Chromium (``playwright install chromium``).
    """
    options = {'headless': True, 'args': LAUNCH_ARGS}
    if settings.PDF_PRODUCTION:
        if not settings.CHROME_PATH:
            raise PdfConfigurationError('CHROME_PATH is not configured for production PDF generation')
        options['executable_path'] = settings.CHROME_PATH
    return options


async def _wait_for_fonts(page):
    # Best effort: the Font Loading API may be missing.
    try:
        await page.evaluate('document.fonts && document.fonts.ready')
    except PlaywrightError as exc:
        logger.debug('document.fonts.ready unavailable: %s', exc)


async def _render(browser, html, file_path):
    page = await browser.new_page(viewport=VIEWPORT)
    await page.goto('about:blank', wait_until='domcontentloaded')
    # domcontentloaded, not networkidle: unreachable remote fonts must not stall the render
    await page.set_content(
        html,
        wait_until='domcontentloaded',
        timeout=settings.PDF_CONTENT_TIMEOUT_MS,
    )
    await _wait_for_fonts(page)
    await asyncio.sleep(SETTLE_DELAY_SECONDS)
    await page.pdf(
        path=str(file_path),
        format='A4',
        print_background=True,
        margin=PDF_MARGINS,
        prefer_css_page_size=False,
    )


async def _close_browser(browser):
    # A failing close must not replace the render error
    try:
        await browser.close()
    except PlaywrightError as exc:
        logger.warning('Chromium did not close cleanly: %s', exc)


async def generate_pdf(html_content, filename, output_dir=None):
    """
    Render html_content to ``<output_dir>/<sanitized filename>.pdf``.
    Returns the sanitized filename.

    Raises PdfConfigurationError before launching anything when production mode
    has no CHROME_PATH, and PdfRenderError (code pdf_render_timeout or
    pdf_render_failed) when Chromium fails.
    """
    launch_options = _launch_options()

    output_dir = Path(output_dir or settings.PDF_OUTPUT_DIR)
    await sync_to_async(output_dir.mkdir)(parents=True, exist_ok=True)
    sanitized = sanitize_pdf_filename(filename)
    file_path = output_dir / sanitized

    html = await sync_to_async(wrap_html_with_fonts)(html_content)

    async with async_playwright() as playwright:
        try:
            browser = await playwright.chromium.launch(**launch_options)
        except PlaywrightError as exc:
            logger.error('Chromium launch failed: %s', exc)
            raise PdfRenderError(f'Could not start the PDF browser: {exc}') from exc
        try:
            await _render(browser, html, file_path)
        except PlaywrightTimeoutError as exc:
            logger.warning('PDF render timed out for %s', sanitized)
            raise PdfRenderError(
                'PDF rendering timed out', code='pdf_render_timeout'
            ) from exc
        except PlaywrightError as exc:
            logger.error('PDF render failed for %s: %s', sanitized, exc)
            raise PdfRenderError(f'PDF rendering failed: {exc}') from exc
        finally:
            await _close_browser(browser)

    logger.info('PDF generated: %s', sanitized)
    return sanitized


def render_pdf(html_content, filename, output_dir=None):
    """Blocking wrapper around generate_pdf for sync views and commands."""
    return async_to_sync(generate_pdf)(html_content, filename, output_dir)


def pdf_path(filename, output_dir=None):
    return Path(output_dir or settings.PDF_OUTPUT_DIR) / filename


def pdf_url(filename):
    """Public URL of a file in PDF_OUTPUT_DIR when it lives under MEDIA_ROOT."""
    try:
        relative = Path(settings.PDF_OUTPUT_DIR).relative_to(settings.MEDIA_ROOT)
    except ValueError:
        return None
    return f"{settings.MEDIA_URL}{relative.as_posix()}/{quote(filename)}"
