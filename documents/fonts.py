"""
Signature font CSS for PDF rendering.

Fonts are read from settings.PDF_FONTS_DIR (``<slug>.woff2``) and embedded as
base64 data URLs, so rendering does not depend on the network. When no font
file is present a Google Fonts @import is emitted instead; headless Chromium
may or may not manage to load it.
"""
import base64
import logging
from pathlib import Path

from django.conf import settings
from django.template.loader import render_to_string

logger = logging.getLogger(__name__)

# (family, file name)
SIGNATURE_FONTS = (
    ('Dancing Script', 'dancing-script.woff2'),
    ('Allura', 'allura.woff2'),
    ('Alex Brush', 'alex-brush.woff2'),
    ('Kalam', 'kalam.woff2'),
    ('Pacifico', 'pacifico.woff2'),
    ('Great Vibes', 'great-vibes.woff2'),
    ('Sacramento', 'sacramento.woff2'),
    ('Satisfy', 'satisfy.woff2'),
    ('Courgette', 'courgette.woff2'),
)

GOOGLE_FONTS_URL = (
    'https://fonts.googleapis.com/css2?family=Dancing+Script:wght@400;700'
    '&family=Kalam:wght@400;700&family=Pacifico&family=Great+Vibes&family=Allura'
    '&family=Sacramento&family=Alex+Brush&family=Satisfy&family=Courgette&display=swap'
)

# CSS class -> font-family declaration
SIGNATURE_CLASSES = (
    ('signature-dancing', "'Dancing Script', cursive"),
    ('signature-great-vibes', "'Great Vibes', cursive"),
    ('signature-pacifico', "'Pacifico', cursive"),
    ('signature-satisfy', "'Satisfy', cursive"),
    ('signature-kalam', "'Kalam', cursive"),
    ('signature-allura', "'Allura', cursive"),
    ('signature-alex-brush', "'Alex Brush', cursive"),
    ('signature-courgette', "'Courgette', cursive"),
    ('signature-sacramento', "'Sacramento', cursive"),
    ('signature-brush-script', "'Brush Script MT', cursive"),
    ('signature-formal', "'Times New Roman', serif"),
    ('signature-modern', "'Helvetica', 'Arial', sans-serif"),
    ('signature-handwritten', "'Kalam', cursive"),
    ('signature-stylish', "'Allura', cursive"),
    ('signature-fancy', "'Alex Brush', cursive"),
)

# Signature style value sent by the frontend -> CSS class
SIGNATURE_STYLE_TO_CLASS = {
    css_class.removeprefix('signature-'): css_class for css_class, _ in SIGNATURE_CLASSES
}


def signature_class(style):
    """'great-vibes' -> 'signature-great-vibes'; None for unknown styles."""
    return SIGNATURE_STYLE_TO_CLASS.get(style)


def _read_font_base64(path):
    if not path.is_file():
        return None
    try:
        return base64.b64encode(path.read_bytes()).decode('ascii')
    except OSError as exc:
        logger.warning('Could not read font file %s: %s', path, exc)
        return None


def get_signature_font_css(fonts_dir=None):
    """<style> block with embedded @font-face rules and signature classes."""
    fonts_dir = Path(fonts_dir or settings.PDF_FONTS_DIR)
    font_faces = []
    for family, file_name in SIGNATURE_FONTS:
        data = _read_font_base64(fonts_dir / file_name)
        if data is None:
            continue
        font_faces.append({'family': family, 'data': data, 'weight': '400', 'style': 'normal'})

    if not font_faces:
        logger.debug('No signature fonts in %s, using remote stylesheet', fonts_dir)

    return render_to_string('documents/signature_fonts.html', {
        'font_faces': font_faces,
        'fallback_import': None if font_faces else GOOGLE_FONTS_URL,
        'style_classes': SIGNATURE_CLASSES,
    })


def wrap_html_with_fonts(html_content, fonts_dir=None):
    """
    Inject the font <style> block. Full documents get it right after <head>
    (or a new head after <html>); fragments are wrapped in an HTML5 document.
    A full document with neither tag is returned unchanged.
    """
    font_css = get_signature_font_css(fonts_dir)
    lowered = html_content.strip().lower()

    if lowered.startswith('<!doctype') or lowered.startswith('<html'):
        if '<head>' in html_content:
            return html_content.replace('<head>', f'<head>\n{font_css}', 1)
        if '<html>' in html_content:
            return html_content.replace('<html>', f'<html>\n<head>\n{font_css}\n</head>', 1)
        return html_content

    return (
        '<!DOCTYPE html>\n'
        '<html>\n'
        '  <head>\n'
        '    <meta charset="UTF-8">\n'
        '    <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f'    {font_css}\n'
        '  </head>\n'
        '  <body>\n'
        f'    {html_content}\n'
        '  </body>\n'
        '</html>\n'
    )
