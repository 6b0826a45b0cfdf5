# -*- coding: utf-8 -*-
"""
سجلات الطلبات والفواتير التي يستلمها مولّد المطبوعات.

Records are built by the order system (or from request JSON via ``from_dict``)
and are read-only for the print layer.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from utils.vat import to_decimal

ORDER_TYPES = ('dine_in', 'takeaway', 'delivery', 'pickup')
PRIORITIES = ('normal', 'urgent')


def _pick(data: Dict[str, Any], *keys, default=None):
    """First non-empty value among snake_case / camelCase spellings."""
    for key in keys:
        value = data.get(key)
        if value is not None and value != '':
            return value
    return default


def _required(data: Dict[str, Any], *keys):
    value = _pick(data, *keys)
    if value is None:
        raise ValueError(f"missing required field '{keys[0]}'")
    return value


def _optional_str(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _non_negative(value, name: str) -> Decimal:
    amount = to_decimal(value)
    if amount < 0:
        raise ValueError(f"{name} cannot be negative")
    return amount


def _whole_number(value) -> int:
    """1, 2.0 and "3" pass; 1.9, true and "two" do not."""
    if isinstance(value, bool):
        raise ValueError("item quantity must be a whole number")
    try:
        amount = to_decimal(value)
    except ValueError:
        raise ValueError("item quantity must be a whole number")
    if amount != amount.to_integral_value():
        raise ValueError(f"item quantity must be a whole number, got {value!r}")
    return int(amount)


def parse_datetime(value) -> datetime:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValueError(f"invalid date: {value!r}")
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise ValueError(f"invalid ISO 8601 date: {value!r}")


def normalize_order_type(value) -> Optional[str]:
    value = _optional_str(value)
    if value is None:
        return None
    value = value.lower().replace('-', '_')
    if value not in ORDER_TYPES:
        raise ValueError(f"unknown order type {value!r}")
    return value


@dataclass(frozen=True)
class OrderItem:
    name: str
    quantity: int
    unit_price: Decimal
    name_alt: Optional[str] = None
    line_discount: Decimal = Decimal('0')

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def net_total(self) -> Decimal:
        return self.line_total - self.line_discount

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderItem":
        # the POS front-end nests the product as coffeeItem {nameAr, nameEn, price}
        product = data.get('coffeeItem') or data.get('product') or {}
        merged = {**product, **data}
        quantity = _whole_number(_required(merged, 'quantity', 'qty'))
        if quantity <= 0:
            raise ValueError("item quantity must be positive")
        return cls(
            name=str(_required(merged, 'name', 'product_name', 'nameAr', 'productNameLocal')),
            name_alt=_optional_str(_pick(merged, 'name_alt', 'nameEn', 'productNameAlt')),
            quantity=quantity,
            unit_price=_non_negative(_required(merged, 'unit_price', 'unitPrice', 'price'), 'unit price'),
            line_discount=_non_negative(_pick(merged, 'line_discount', 'itemDiscount', 'lineDiscount', default=0), 'line discount'),
        )


@dataclass(frozen=True)
class DiscountInfo:
    """خصم كود ترويجي على مستوى الفاتورة (المبلغ شامل للضريبة)."""
    code: str
    percentage: Decimal
    amount: Decimal

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["DiscountInfo"]:
        if not data:
            return None
        percentage = to_decimal(_pick(data, 'percentage', default=0))
        if not 0 <= percentage <= 100:
            raise ValueError("discount percentage must be between 0 and 100")
        return cls(
            code=str(_pick(data, 'code', default='')),
            percentage=percentage,
            amount=_non_negative(_pick(data, 'amount', default=0), 'discount amount'),
        )


@dataclass(frozen=True)
class InvoiceRecord:
    """Completed transaction as handed over by the order/accounting system."""
    order_number: str
    total: Decimal
    items: List[OrderItem]
    date: datetime
    customer_name: str
    employee_name: str
    payment_method_label: str
    invoice_number: Optional[str] = None
    discount: Optional[DiscountInfo] = None
    invoice_discount: Decimal = Decimal('0')
    customer_phone: Optional[str] = None
    table_number: Optional[str] = None
    branch_name: Optional[str] = None
    branch_address: Optional[str] = None
    order_type: Optional[str] = None
    order_type_label: Optional[str] = None
    subtotal: Optional[Decimal] = None

    @property
    def effective_invoice_number(self) -> str:
        return self.invoice_number or f"INV-{self.order_number}"

    @property
    def items_discount_total(self) -> Decimal:
        return sum((item.line_discount for item in self.items), Decimal('0'))

    @property
    def items_subtotal(self) -> Decimal:
        if self.subtotal is not None:
            return self.subtotal
        return sum((item.line_total for item in self.items), Decimal('0'))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InvoiceRecord":
        if not isinstance(data, dict):
            raise ValueError("invoice record must be a JSON object")
        raw_items = data.get('items') or []
        if not raw_items:
            raise ValueError("invoice record has no items")
        subtotal = _pick(data, 'subtotal')
        return cls(
            order_number=str(_required(data, 'order_number', 'orderNumber')),
            invoice_number=_optional_str(_pick(data, 'invoice_number', 'invoiceNumber')),
            total=_non_negative(_required(data, 'total'), 'total'),
            discount=DiscountInfo.from_dict(data.get('discount')),
            invoice_discount=_non_negative(_pick(data, 'invoice_discount', 'invoiceDiscount', default=0), 'invoice discount'),
            items=[OrderItem.from_dict(item) for item in raw_items],
            date=parse_datetime(_required(data, 'date')),
            customer_name=str(_pick(data, 'customer_name', 'customerName', default='')),
            customer_phone=_optional_str(_pick(data, 'customer_phone', 'customerPhone')),
            table_number=_optional_str(_pick(data, 'table_number', 'tableNumber')),
            branch_name=_optional_str(_pick(data, 'branch_name', 'branchName')),
            branch_address=_optional_str(_pick(data, 'branch_address', 'branchAddress')),
            employee_name=str(_pick(data, 'employee_name', 'employeeName', default='')),
            payment_method_label=str(_pick(data, 'payment_method_label', 'paymentMethodLabel', 'paymentMethod', default='')),
            order_type=normalize_order_type(_pick(data, 'order_type', 'orderType', 'deliveryType')),
            order_type_label=_optional_str(_pick(data, 'order_type_label', 'orderTypeName', 'deliveryTypeAr')),
            subtotal=None if subtotal is None else _non_negative(subtotal, 'subtotal'),
        )


@dataclass(frozen=True)
class KitchenOrder:
    """تذكرة المطبخ: أسماء وكميات فقط بدون أسعار."""
    order_number: str
    items: List[OrderItem]
    timestamp: str = ''
    priority: str = 'normal'
    table_number: Optional[str] = None
    notes: Optional[str] = None

    @property
    def is_urgent(self) -> bool:
        return self.priority == 'urgent'

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KitchenOrder":
        if not isinstance(data, dict):
            raise ValueError("kitchen order must be a JSON object")
        priority = str(_pick(data, 'priority', default='normal')).lower()
        if priority not in PRIORITIES:
            raise ValueError(f"unknown priority {priority!r}")
        raw_items = data.get('items') or []
        if not raw_items:
            raise ValueError("kitchen order has no items")
        # kitchen items carry no price
        items = [OrderItem.from_dict({'price': 0, **raw}) for raw in raw_items]
        return cls(
            order_number=str(_required(data, 'order_number', 'orderNumber')),
            items=items,
            timestamp=str(_pick(data, 'timestamp', default='')),
            priority=priority,
            table_number=_optional_str(_pick(data, 'table_number', 'tableNumber')),
            notes=_optional_str(_pick(data, 'notes')),
        )


@dataclass(frozen=True)
class EmployeeCard:
    """بطاقة تعريف الموظف، مع رمز QR اختياري لتسجيل الحضور السريع."""
    employee_name: str
    employment_number: str
    role: str
    phone: str
    employee_id: Optional[str] = None
    branch_name: Optional[str] = None
    qr_code: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EmployeeCard":
        if not isinstance(data, dict):
            raise ValueError("employee card must be a JSON object")
        return cls(
            employee_name=str(_required(data, 'employee_name', 'employeeName')),
            employment_number=str(_required(data, 'employment_number', 'employmentNumber')),
            role=str(_required(data, 'role')),
            phone=str(_required(data, 'phone')),
            employee_id=_optional_str(_pick(data, 'employee_id', 'employeeId')),
            branch_name=_optional_str(_pick(data, 'branch_name', 'branchName')),
            qr_code=_optional_str(_pick(data, 'qr_code', 'qrCode')),
        )
