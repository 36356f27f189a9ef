"""
Invoice identifiers: ``{ORG_CODE}-{SEQUENCE}``.

    Thunder Client Limited -> TCL-0001, TCL-0002, ...
    Google                 -> GOO-0001, ...
    One Two Three Four     -> OTT-0001, ...

The sequence is rebuilt on every call by scanning the organization's live
invoices; nothing is persisted here. Callers store the id together with the
invoice (see invoices.services.create_invoice, which serializes on the
organization row).
"""
import re

from core.exceptions import AppError
from core.models import Organization
from .models import Invoice

MIN_SEQUENCE_WIDTH = 4


def derive_org_code(name):
    """
    One word: its first 3 characters. Several words: initials of the first 3.
    Upper-cased; characters are not filtered and codes are not unique.
    """
    words = ' '.join(name.split()).split(' ')
    if len(words) == 1:
        code = words[0][:3]
    else:
        code = ''.join(word[0] for word in words[:3])
    return code.upper()


def sequence_pattern(code):
    return re.compile(rf'{re.escape(code)}-([0-9]+)', re.IGNORECASE)


def conforming_sequence(invoice_id, pattern):
    """
    Sequence number of invoice_id, or None for non-conforming identifiers
    (another code, e.g. issued before the organization was renamed, or free text).
    Non-conforming identifiers are ignored by the scan.
    """
    match = pattern.fullmatch(invoice_id)
    if match is None:
        return None
    return int(match.group(1))


def _live_invoice_ids(org_id):
    return (
        Invoice.objects
        .filter(organization_id=org_id, is_deleted=False, invoice_id__isnull=False)
        .exclude(invoice_id='')
        .values_list('invoice_id', flat=True)
    )


def _max_of(invoice_ids, code):
    pattern = sequence_pattern(code)
    sequences = (conforming_sequence(value, pattern) for value in invoice_ids)
    return max((seq for seq in sequences if seq is not None), default=0)


def scan_max_sequence(org_id, code):
    """Highest sequence already issued under code for this organization; 0 if none."""
    return _max_of(_live_invoice_ids(org_id), code)


async def ascan_max_sequence(org_id, code):
    return _max_of([value async for value in _live_invoice_ids(org_id)], code)


def format_invoice_id(max_sequence, code):
    """(4, 'GOO') -> 'GOO-0005'; (9999, 'GOO') -> 'GOO-10000'"""
    return f'{code}-{str(max_sequence + 1).zfill(MIN_SEQUENCE_WIDTH)}'


def _org_code(organization):
    name = (organization.name or '').strip()
    if not name:
        raise AppError(400, 'Organization name not found', 'organization_name_missing')
    return derive_org_code(name)


def generate_invoice_id(org_id):
    """
    Next invoice id for the organization. Raises AppError 404 when the
    organization does not exist, 400 when it has no name.
    """
    organization = Organization.objects.filter(pk=org_id).only('id', 'name').first()
    if organization is None:
        raise AppError(404, 'Organization not found', 'organization_not_found')
    code = _org_code(organization)
    return format_invoice_id(scan_max_sequence(organization.pk, code), code)


async def agenerate_invoice_id(org_id):
    """Async variant of generate_invoice_id for ASGI callers."""
    organization = await Organization.objects.filter(pk=org_id).only('id', 'name').afirst()
    if organization is None:
        raise AppError(404, 'Organization not found', 'organization_not_found')
    code = _org_code(organization)
    return format_invoice_id(await ascan_max_sequence(organization.pk, code), code)
