"""
Invoice services - numbering, totals, PDF generation.
"""
import logging
import time
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction
from django.db.models import Q
from django.template.loader import render_to_string
from django.utils import timezone

from core.audit import actor_display, log_action
from core.exceptions import AppError
from core.models import Organization
from core.utils import filter_by_organization
from documents.pdf import pdf_path, render_pdf
from .invoice_ids import generate_invoice_id
from .models import Invoice

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')
SEARCHABLE_FIELDS = ('invoice_id', 'bill_to_name', 'bill_to_email')
CURRENCY_SYMBOLS = {
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
    'AZN': '₼',
    'BDT': '৳',
    'INR': '₹',
}


def _money(value):
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_totals(items, tax=0, discount=0):
    """
    Line amounts and invoice totals. Each item is {description, quantity, unitPrice}.
    Returns (normalized_items, subtotal, total).
    """
    normalized = []
    subtotal = Decimal('0')
    for item in items:
        quantity = Decimal(item.get('quantity', 1))
        unit_price = _money(item.get('unitPrice', 0))
        amount = _money(quantity * unit_price)
        subtotal += amount
        normalized.append({
            'description': item['description'],
            'quantity': str(quantity.normalize()) if quantity % 1 else int(quantity),
            'unitPrice': str(unit_price),
            'amount': str(amount),
        })
    subtotal = _money(subtotal)
    total = _money(subtotal + _money(tax) - _money(discount))
    if total < 0:
        raise AppError(400, 'Discount cannot exceed subtotal plus tax', 'invalid_total')
    return normalized, subtotal, total


def create_invoice(organization, data, actor=None):
    """
    Create an invoice with the next ORG_CODE-SEQUENCE id.

    The id is derived by scanning existing invoices, so two concurrent creates
    could compute the same value; the organization row lock serializes them
    and the (organization, invoice_id) constraint rejects anything that slips
    through.
    """
    data = dict(data)
    items, subtotal, total = compute_totals(
        data.pop('items'), data.get('tax', 0), data.get('discount', 0)
    )
    with transaction.atomic():
        Organization.objects.select_for_update().filter(pk=organization.pk).first()
        invoice = Invoice.objects.create(
            organization=organization,
            invoice_id=generate_invoice_id(organization.pk),
            items=items,
            subtotal=subtotal,
            total=total,
            created_by=actor if getattr(actor, 'is_authenticated', False) else None,
            **data,
        )
    logger.info('Invoice created: %s org=%s', invoice.invoice_id, organization.pk)
    log_action(
        'Invoice Created',
        f"Invoice {invoice.invoice_id} created for '{invoice.bill_to_name}' by {actor_display(actor)}",
        actor=actor,
        organization=organization,
    )
    return invoice


def list_invoices(user, params):
    qs = filter_by_organization(Invoice.objects.active(), user).select_related('organization')
    status_filter = (params.get('status') or '').upper()
    if status_filter:
        qs = qs.filter(status=status_filter)
    search = (params.get('search') or '').strip()
    if search:
        query = Q()
        for field in SEARCHABLE_FIELDS:
            query |= Q(**{f'{field}__icontains': search})
        qs = qs.filter(query)
    return qs.order_by('-created_at', '-id')


def get_invoice(user, pk):
    invoice = (
        filter_by_organization(Invoice.objects.active(), user)
        .select_related('organization')
        .filter(pk=pk)
        .first()
    )
    if invoice is None:
        raise AppError(404, 'Invoice not found')
    return invoice


def update_invoice_status(user, pk, new_status):
    invoice = get_invoice(user, pk)
    invoice.status = new_status
    invoice.save(update_fields=['status', 'updated_at'])
    log_action(
        'Invoice Status Changed',
        f"Invoice {invoice.invoice_id} marked {new_status} by {actor_display(user)}",
        actor=user,
        organization=invoice.organization,
    )
    return invoice


def delete_invoice(user, pk):
    """Soft delete. The id leaves the sequence scan, so it may be issued again."""
    invoice = get_invoice(user, pk)
    invoice.is_deleted = True
    invoice.deleted_at = timezone.now()
    invoice.save(update_fields=['is_deleted', 'deleted_at', 'updated_at'])
    log_action(
        'Invoice Deleted',
        f"Invoice {invoice.invoice_id} deleted by {actor_display(user)}",
        actor=user,
        organization=invoice.organization,
    )
    return invoice


def format_money(value, currency):
    symbol = CURRENCY_SYMBOLS.get(currency)
    amount = f"{Decimal(value):,.2f}"
    return f"{symbol}{amount}" if symbol else f"{currency} {amount}"


def build_invoice_context(invoice):
    org = invoice.organization
    address = org.address or {}
    city_line = ', '.join(
        part for part in (address.get('city'), address.get('state'), address.get('zip')) if part
    )
    currency = invoice.currency
    return {
        'invoice': invoice,
        'company': {
            'name': org.name,
            'email': org.email,
            'phone': org.phone,
            'address_lines': [
                line for line in (address.get('line1'), address.get('line2'), city_line) if line
            ],
        },
        'rows': [
            {
                'description': item['description'],
                'quantity': item['quantity'],
                'unit_price': format_money(item['unitPrice'], currency),
                'amount': format_money(item['amount'], currency),
            }
            for item in invoice.items
        ],
        'subtotal': format_money(invoice.subtotal, currency),
        'tax': format_money(invoice.tax, currency) if invoice.tax else None,
        'discount': format_money(invoice.discount, currency) if invoice.discount else None,
        'total': format_money(invoice.total, currency),
    }


def generate_invoice_pdf(user, pk):
    """
    Render the invoice to PDF and remember the file on the invoice.
    Every call writes a new file (timestamped name).
    """
    invoice = get_invoice(user, pk)
    html = render_to_string('invoices/invoice_pdf.html', build_invoice_context(invoice))
    base_name = f"invoice-{invoice.invoice_id or invoice.pk}-{int(time.time() * 1000)}"
    filename = render_pdf(html, base_name)

    invoice.pdf_filename = filename
    invoice.save(update_fields=['pdf_filename', 'updated_at'])
    log_action(
        'Invoice PDF Generated',
        f"Invoice {invoice.invoice_id} PDF generated by {actor_display(user)}",
        actor=user,
        organization=invoice.organization,
    )
    return invoice


def invoice_pdf_file(user, pk):
    invoice = get_invoice(user, pk)
    if not invoice.pdf_filename:
        raise AppError(404, 'PDF has not been generated for this invoice', 'pdf_not_generated')
    path = pdf_path(invoice.pdf_filename)
    if not path.is_file():
        raise AppError(404, 'PDF file is missing', 'pdf_missing')
    return invoice, path
