import os, sys
from datetime import datetime
from decimal import Decimal

import pytest
import pytz

# Ensure project root in path
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app import create_app
from config import TestingConfig
from models import DiscountInfo, InvoiceRecord, KitchenOrder, OrderItem
from print_helper import DocumentRenderer, PrintSettings

STUB_QR = 'data:image/png;base64,QRSTUB'


@pytest.fixture(scope='session')
def test_app():
    app = create_app(TestingConfig)
    yield app


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture()
def settings():
    return PrintSettings(
        seller_name='CLUNY CAFE',
        seller_name_en='CLUNY CAFE',
        vat_number='311234567890003',
        cr_number='1010123456',
        branch_name='الفرع الرئيسي',
        branch_address='الرياض، المملكة العربية السعودية',
        tracking_base_url='https://cafe.example',
        font_css_url=None,
    )


@pytest.fixture()
def stub_qr_calls():
    return []


@pytest.fixture()
def stub_qr_renderer(stub_qr_calls):
    """QR renderer that records payloads and returns a fixed image."""
    def render(payload, **options):
        stub_qr_calls.append(payload)
        return STUB_QR
    return render


@pytest.fixture()
def renderer(settings, stub_qr_renderer):
    return DocumentRenderer(settings, qr_renderer=stub_qr_renderer)


@pytest.fixture()
def order_date():
    return datetime(2024, 6, 1, 12, 30, tzinfo=pytz.utc)


@pytest.fixture()
def simple_record(order_date):
    """طلب بسيط: صنف واحد بسعر 114 شامل الضريبة بدون خصم"""
    return InvoiceRecord(
        order_number='1001',
        total=Decimal('114.00'),
        items=[OrderItem(name='لاتيه', quantity=1, unit_price=Decimal('114.00'))],
        date=order_date,
        customer_name='أحمد',
        employee_name='سارة',
        payment_method_label='نقدي',
    )


@pytest.fixture()
def full_record(order_date):
    """طلب بكل الحقول الاختيارية والخصومات الثلاثة"""
    return InvoiceRecord(
        order_number='1002',
        invoice_number='INV-20240601-000042',
        total=Decimal('172.50'),
        items=[
            OrderItem(name='قهوة سعودية', name_alt='Saudi Coffee', quantity=2, unit_price=Decimal('100.00'),
                      line_discount=Decimal('11.50')),
            OrderItem(name='كرواسون', name_alt='Croissant', quantity=1, unit_price=Decimal('23.00')),
        ],
        date=order_date,
        customer_name='أحمد',
        customer_phone='+966501234567',
        table_number='T-05',
        employee_name='سارة',
        payment_method_label='مدى',
        order_type='dine_in',
        discount=DiscountInfo(code='WELCOME10', percentage=Decimal('10'), amount=Decimal('23.00')),
        invoice_discount=Decimal('16.00'),
    )


@pytest.fixture()
def kitchen_order():
    return KitchenOrder(
        order_number='1001',
        items=[OrderItem(name='لاتيه', name_alt='Latte', quantity=2, unit_price=Decimal('0'))],
        timestamp='12:30',
        table_number='7',
    )
