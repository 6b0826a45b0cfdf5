"""
Print Helper Module
Renders the café print documents (kitchen ticket, tax invoice, customer
receipt, cashier copy, sales receipt) from order records.

Every render method is a pure function of (record, settings): no clock, no
globals, so rendering the same record twice gives identical HTML.
"""
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional
from urllib.parse import quote

import pytz
from jinja2 import Environment, FileSystemLoader, select_autoescape

from templates.print_config import (
    FOOTER_MESSAGES, TRACKING_PATHS, get_qr_config, get_template_config,
    order_type_color, order_type_label, receipt_order_type_label,
)
from utils.qr import render_qr_data_uri, safe_render_qr
from utils.vat import DEFAULT_VAT_RATE, breakdown_for, format_money, format_percent, to_decimal
from utils.zatca import ZatcaFields, encode_tlv, validate_vat_number

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'templates')

DEFAULT_FONT_CSS_URL = 'https://fonts.googleapis.com/css2?family=Cairo:wght@400;600;700&display=swap'


@dataclass(frozen=True)
class PrintSettings:
    """هوية البائع وإعدادات الطباعة - تُمرَّر صراحةً لكل عملية توليد."""
    seller_name: str = 'CLUNY CAFE'
    vat_number: str = '311234567890003'
    seller_name_en: Optional[str] = None
    cr_number: Optional[str] = None
    vat_rate: Decimal = DEFAULT_VAT_RATE
    branch_name: Optional[str] = None
    branch_address: Optional[str] = None
    tracking_base_url: str = ''
    currency: str = 'ر.س'
    timezone: str = 'Asia/Riyadh'
    font_css_url: Optional[str] = DEFAULT_FONT_CSS_URL
    qr_enabled: bool = True

    @classmethod
    def from_config(cls, config) -> "PrintSettings":
        """Build settings from a Flask config (or any mapping of the same keys)."""
        return cls(
            seller_name=config.get('ZATCA_SELLER_NAME') or cls.seller_name,
            seller_name_en=config.get('ZATCA_SELLER_NAME_EN') or None,
            vat_number=validate_vat_number(config.get('ZATCA_VAT_NUMBER') or cls.vat_number),
            cr_number=config.get('ZATCA_CR_NUMBER') or None,
            vat_rate=to_decimal(config.get('VAT_RATE', DEFAULT_VAT_RATE)),
            branch_name=config.get('BRANCH_NAME') or None,
            branch_address=config.get('BRANCH_ADDRESS') or None,
            tracking_base_url=(config.get('TRACKING_BASE_URL') or '').rstrip('/'),
            currency=config.get('PRINT_CURRENCY') or cls.currency,
            timezone=config.get('PRINT_TIMEZONE') or cls.timezone,
            font_css_url=config.get('PRINT_FONT_CSS_URL', DEFAULT_FONT_CSS_URL) or None,
            qr_enabled=bool(config.get('PRINT_QR_ENABLED', True)),
        )


def _finalize(value):
    # never let a missing value print as "None"
    return '' if value is None else value


class DocumentRenderer:
    """Helper class for rendering print documents from order records"""

    def __init__(self, settings: Optional[PrintSettings] = None, qr_renderer=render_qr_data_uri):
        self.settings = settings or PrintSettings()
        self.qr_renderer = qr_renderer
        self.env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=select_autoescape(['html']),
            finalize=_finalize,
        )
        self.env.filters['money'] = format_money
        self.env.filters['percent'] = format_percent

    # -- helpers -----------------------------------------------------------

    def generate_qr(self, payload: str, slot: str) -> Optional[str]:
        """QR as data URI, or None when disabled or when generation fails."""
        if not self.settings.qr_enabled:
            return None
        return safe_render_qr(payload, renderer=self.qr_renderer, **get_qr_config(slot))

    def tracking_url(self, document_type: str, order_number: str) -> str:
        path = TRACKING_PATHS[document_type].format(order_number=quote(str(order_number), safe=''))
        return f"{self.settings.tracking_base_url}{path}"

    def zatca_payload(self, record, breakdown) -> str:
        """Base64(TLV) للفاتورة - المحتوى الذي يُشفَّر داخل رمز QR."""
        return encode_tlv(ZatcaFields.from_invoice(record, self.settings, breakdown))

    def local_date_parts(self, value: datetime):
        """(date, time) strings in the store's timezone."""
        if value.tzinfo is not None:
            value = value.astimezone(pytz.timezone(self.settings.timezone))
        time_str = value.strftime('%I:%M:%S ') + ('ص' if value.hour < 12 else 'م')
        return value.strftime('%Y/%m/%d'), time_str

    def _render(self, document_type: str, **context) -> str:
        template = self.env.get_template(get_template_config(document_type)['template'])
        context.setdefault('settings', self.settings)
        context.setdefault('currency', self.settings.currency)
        context.setdefault('font_css_url', self.settings.font_css_url)
        context.setdefault('footer', FOOTER_MESSAGES)
        return template.render(**context)

    def _record_context(self, record):
        date_str, time_str = self.local_date_parts(record.date)
        return {'record': record, 'date_str': date_str, 'time_str': time_str}

    # -- documents ---------------------------------------------------------

    def render_kitchen_ticket(self, order) -> str:
        return self._render('kitchen_ticket', order=order)

    def render_tax_invoice(self, record) -> str:
        breakdown = breakdown_for(record, self.settings.vat_rate)
        zatca_qr = self.generate_qr(self.zatca_payload(record, breakdown), 'zatca')
        tracking_qr = self.generate_qr(self.tracking_url('tax_invoice', record.order_number), 'tax_invoice_tracking')

        type_label = None
        if record.order_type or record.order_type_label:
            type_label = order_type_label(record.order_type, record.order_type_label)

        return self._render(
            'tax_invoice',
            breakdown=breakdown,
            invoice_number=record.effective_invoice_number,
            branch_name=record.branch_name or self.settings.branch_name,
            branch_address=record.branch_address or self.settings.branch_address,
            order_type_label=type_label,
            zatca_qr=zatca_qr,
            zatca_qr_width=get_qr_config('zatca')['width_px'],
            tracking_qr=tracking_qr,
            tracking_qr_width=get_qr_config('tax_invoice_tracking')['width_px'],
            **self._record_context(record),
        )

    def render_customer_receipt(self, record) -> str:
        tracking_url = self.tracking_url('customer_receipt', record.order_number)
        return self._render(
            'customer_receipt',
            order_type_label=receipt_order_type_label(record.order_type, record.order_type_label),
            order_type_color=order_type_color(record.order_type),
            tracking_url=tracking_url,
            tracking_qr=self.generate_qr(tracking_url, 'customer_receipt'),
            tracking_qr_width=get_qr_config('customer_receipt')['width_px'],
            **self._record_context(record),
        )

    def render_cashier_copy(self, record) -> str:
        return self._render(
            'cashier_copy',
            order_type_label=receipt_order_type_label(record.order_type, record.order_type_label),
            **self._record_context(record),
        )

    def render_sales_receipt(self, record) -> str:
        tracking_url = self.tracking_url('sales_receipt', record.order_number)
        return self._render(
            'sales_receipt',
            tracking_qr=self.generate_qr(tracking_url, 'sales_receipt'),
            tracking_qr_width=get_qr_config('sales_receipt')['width_px'],
            **self._record_context(record),
        )

    def render_employee_card(self, card) -> str:
        """بطاقة الموظف؛ رمز QR يظهر فقط عند وجود qr_code."""
        check_in_qr = self.generate_qr(card.qr_code, 'employee_card') if card.qr_code else None
        return self._render(
            'employee_card',
            card=card,
            check_in_qr=check_in_qr,
            check_in_qr_width=get_qr_config('employee_card')['width_px'],
        )

    def render(self, document_type: str, record) -> str:
        """Render a document by type name (see templates.print_config.PRINT_TEMPLATES)"""
        get_template_config(document_type)
        return getattr(self, f"render_{document_type}")(record)

    def document_title(self, document_type: str, record) -> str:
        prefix = get_template_config(document_type)['title']
        if document_type == 'tax_invoice':
            return f"{prefix} - {record.effective_invoice_number}"
        if document_type == 'employee_card':
            return f"{prefix} - {record.employee_name}"
        return f"{prefix} - {record.order_number}"


def init_print_helper(app):
    """Initialize the document renderer with the Flask app's print settings"""
    app.config.setdefault('PRINT_QR_ENABLED', True)
    renderer = DocumentRenderer(PrintSettings.from_config(app.config))
    app.extensions['print_helper'] = renderer
    return renderer
