# -*- coding: utf-8 -*-
"""
اختبارات توليد المستندات: تذكرة المطبخ، الفاتورة الضريبية، الإيصالات.
"""
import re
from dataclasses import replace

import pytest

from conftest import STUB_QR
from models import EmployeeCard
from print_helper import DocumentRenderer
from utils.qr import QRRenderError
from utils.zatca import decode_fields


def _field(html, name):
    m = re.search(r'data-field="%s">([^<]*)<' % name, html)
    assert m, f"{name} not rendered"
    return m.group(1).split()[0]


# -- kitchen ticket ---------------------------------------------------------

def test_kitchen_ticket_urgent_shows_badge(renderer, kitchen_order):
    html = renderer.render_kitchen_ticket(replace(kitchen_order, priority='urgent', notes='بدون سكر'))
    assert 'class="urgent">عاجل!<' in html
    assert 'بدون سكر' in html


def test_kitchen_ticket_normal_has_no_prices(renderer, kitchen_order):
    html = renderer.render_kitchen_ticket(kitchen_order)
    assert 'class="urgent"' not in html
    assert '#1001' in html
    assert 'x2' in html
    assert 'Latte' in html
    assert 'طاولة 7' in html
    assert 'ر.س' not in html
    assert 'ملاحظات' not in html


# -- tax invoice ------------------------------------------------------------

def test_tax_invoice_totals_for_114(renderer, simple_record):
    html = renderer.render_tax_invoice(simple_record)
    assert _field(html, 'net-before-vat') == '99.13'
    assert _field(html, 'vat-amount') == '14.87'
    assert _field(html, 'grand-total') == '114.00'
    assert 'فاتورة ضريبية مبسطة' in html
    assert 'INV-1001' in html
    assert '311234567890003' in html
    # no discount rows without discounts
    assert 'items-discount' not in html
    assert 'promo-discount' not in html
    assert 'invoice-discount' not in html


def test_tax_invoice_qr_carries_zatca_payload(renderer, simple_record, stub_qr_calls):
    html = renderer.render_tax_invoice(simple_record)

    fields = decode_fields(stub_qr_calls[0])
    assert fields.seller_name == 'CLUNY CAFE'
    assert fields.vat_number == '311234567890003'
    assert fields.timestamp == '2024-06-01T12:30:00Z'
    assert fields.total_with_vat == '114.00'
    assert fields.vat_amount == '14.87'
    assert stub_qr_calls[1] == 'https://cafe.example/tracking/1001'

    assert 'alt="ZATCA QR"' in html
    assert 'alt="Order Tracking QR"' in html
    assert html.count(STUB_QR) == 2


def test_tax_invoice_with_all_discounts(renderer, full_record):
    html = renderer.render_tax_invoice(full_record)
    assert _field(html, 'net-before-vat') == '150.00'
    assert _field(html, 'vat-amount') == '22.50'
    assert _field(html, 'grand-total') == '172.50'
    assert 'WELCOME10 (10%)' in html
    assert '(10.00)' in html
    assert '(20.00)' in html
    assert '(13.91)' in html
    assert '193.91' in html
    assert 'INV-20240601-000042' in html
    assert 'T-05' in html
    assert '+966501234567' in html
    assert 'محلي' in html
    assert 'Saudi Coffee' in html
    # line total is shown after the line discount
    assert '188.50' in html


def test_tax_invoice_is_deterministic_with_real_qr(settings, full_record):
    renderer = DocumentRenderer(settings)
    first = renderer.render_tax_invoice(full_record)
    assert first == renderer.render_tax_invoice(full_record)
    assert 'data:image/png;base64,' in first


def test_absent_optional_fields_are_omitted(renderer, simple_record):
    html = renderer.render_tax_invoice(replace(simple_record, customer_name=''))
    for doc in (html, renderer.render_customer_receipt(simple_record),
                renderer.render_cashier_copy(simple_record), renderer.render_sales_receipt(simple_record)):
        assert 'None' not in doc
        assert 'null' not in doc
        assert 'undefined' not in doc
    assert 'الجوال' not in html
    assert 'الطاولة' not in html
    assert 'نوع الطلب' not in html
    assert 'عميل' in html


def test_tax_invoice_survives_qr_failure(settings, simple_record):
    def failing(payload, **options):
        raise QRRenderError('capacity exceeded')

    html = DocumentRenderer(settings, qr_renderer=failing).render_tax_invoice(simple_record)
    assert _field(html, 'grand-total') == '114.00'
    assert 'qr-section' not in html.split('</style>')[1]
    assert '<img' not in html


def test_qr_disabled_skips_rendering(settings, simple_record, stub_qr_renderer, stub_qr_calls):
    renderer = DocumentRenderer(replace(settings, qr_enabled=False), qr_renderer=stub_qr_renderer)
    html = renderer.render_tax_invoice(simple_record)
    assert stub_qr_calls == []
    assert '<img' not in html


def test_tax_invoice_time_is_local(renderer, simple_record):
    html = renderer.render_tax_invoice(simple_record)
    # 12:30 UTC is 15:30 in Riyadh
    assert '2024/06/01' in html
    assert '03:30:00 م' in html


# -- receipts ---------------------------------------------------------------

def test_customer_receipt_badge_and_tracking(renderer, simple_record, stub_qr_calls):
    html = renderer.render_customer_receipt(simple_record)
    assert stub_qr_calls == ['https://cafe.example/order/1001']
    assert 'https://cafe.example/order/1001' in html
    assert '#1001' in html
    assert 'استلام' in html
    assert '#3b82f6' in html
    assert '114.00' in html


def test_customer_receipt_dine_in_badge(renderer, full_record):
    html = renderer.render_customer_receipt(full_record)
    assert 'في الكافيه' in html
    assert '#8b5cf6' in html


def test_cashier_copy_has_signature_and_prices(renderer, full_record, stub_qr_calls):
    html = renderer.render_cashier_copy(full_record)
    assert 'signature-line' in html
    assert '200.00' in html
    assert '223.00' in html
    assert '-23.00' in html
    assert '172.50' in html
    assert 'تم الحفظ في' in html
    assert stub_qr_calls == []


def test_sales_receipt(renderer, simple_record, stub_qr_calls):
    html = renderer.render_sales_receipt(simple_record)
    assert stub_qr_calls == ['https://cafe.example/tracking?order=1001']
    assert 'فاتورة مبيعات' in html
    assert '114.00' in html
    assert STUB_QR in html


# -- employee card ----------------------------------------------------------

CARD = EmployeeCard(employee_name='خالد', employment_number='1042', role='باريستا',
                    phone='0500000000', branch_name='فرع العليا', qr_code='EMP-1042')


def test_employee_card_shows_staff_details(renderer, stub_qr_calls):
    html = renderer.render_employee_card(CARD)
    assert '<title>بطاقة الموظف - خالد</title>' in html
    assert 'بطاقة تعريف الموظف' in html
    for value in ('CLUNY CAFE', '1042', 'باريستا', '0500000000', 'فرع العليا'):
        assert value in html
    assert stub_qr_calls == ['EMP-1042']
    assert STUB_QR in html
    assert 'امسح للتسجيل السريع' in html
    assert 'width="120"' in html


def test_employee_card_without_branch_or_qr(renderer, stub_qr_calls):
    html = renderer.render_employee_card(replace(CARD, branch_name=None, qr_code=None))
    assert 'الفرع' not in html
    assert '<img' not in html
    assert stub_qr_calls == []


def test_employee_card_survives_qr_failure(settings):
    def failing(payload, **options):
        raise QRRenderError('capacity exceeded')

    html = DocumentRenderer(settings, qr_renderer=failing).render_employee_card(CARD)
    assert 'خالد' in html
    assert '<img' not in html


# -- dispatch by name -------------------------------------------------------

def test_render_by_name_and_titles(renderer, full_record):
    assert renderer.render('cashier_copy', full_record) == renderer.render_cashier_copy(full_record)
    assert renderer.document_title('tax_invoice', full_record) == 'فاتورة ضريبية - INV-20240601-000042'
    assert renderer.document_title('customer_receipt', full_record) == 'إيصال استلام - 1002'
    assert renderer.render('employee_card', CARD) == renderer.render_employee_card(CARD)
    assert renderer.document_title('employee_card', CARD) == 'بطاقة الموظف - خالد'


def test_render_unknown_document_type(renderer, simple_record):
    with pytest.raises(KeyError):
        renderer.render('gift_card', simple_record)


def test_font_import_is_optional(settings, simple_record, stub_qr_renderer):
    without = DocumentRenderer(settings, qr_renderer=stub_qr_renderer).render_sales_receipt(simple_record)
    assert '@import' not in without
    with_font = DocumentRenderer(replace(settings, font_css_url='https://fonts.example/cairo.css'),
                                 qr_renderer=stub_qr_renderer).render_sales_receipt(simple_record)
    assert "@import url('https://fonts.example/cairo.css')" in with_font
