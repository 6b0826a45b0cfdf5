# -*- coding: utf-8 -*-
"""
حساب ضريبة القيمة المضافة من إجمالي شامل للضريبة.

All café prices, discounts and totals are VAT-inclusive, so the taxable base
is back-solved from the total. The VAT amount is always ``total - net`` after
rounding, which keeps the printed net + VAT equal to the printed total.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal('0.01')
# upper bound for any single amount or total
MAX_AMOUNT = Decimal('10') ** 12
DEFAULT_VAT_RATE = Decimal('0.15')


def to_decimal(value) -> Decimal:
    """Coerce user/JSON input to Decimal. None and '' count as zero."""
    if value is None or value == '':
        return Decimal('0')
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, Decimal):
        return _checked(value, value)
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"not a number: {value!r}")
    return _checked(amount, value)


def _checked(amount: Decimal, original) -> Decimal:
    if not amount.is_finite():
        raise ValueError(f"not a finite number: {original!r}")
    if abs(amount) > MAX_AMOUNT:
        raise ValueError(f"amount out of range: {original!r}")
    return amount


def q2(value) -> Decimal:
    try:
        return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"cannot round {value!r} to 2 decimal places")


def format_money(value) -> str:
    return str(q2(value))


def format_percent(value) -> str:
    return str(to_decimal(value).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class VatBreakdown:
    total: Decimal
    net_before_vat: Decimal
    vat_amount: Decimal
    subtotal_before_discounts: Decimal
    items_discount_ex_vat: Decimal
    promo_discount_ex_vat: Decimal
    invoice_discount_ex_vat: Decimal
    rate: Decimal

    @property
    def rate_percent(self) -> str:
        return format_percent(self.rate * 100)

    @property
    def has_discounts(self) -> bool:
        return any((self.items_discount_ex_vat, self.promo_discount_ex_vat, self.invoice_discount_ex_vat))


def compute_vat_breakdown(total, rate=DEFAULT_VAT_RATE, items_discount=0,
                          promo_discount=0, invoice_discount=0) -> VatBreakdown:
    """تفصيل الضريبة لفاتورة إجماليها شامل للضريبة.

    Every discount is VAT-inclusive: it is shown ex-VAT (divided by 1 + rate)
    and added back to the net to give the pre-discount subtotal.
    """
    total = q2(total)
    rate = to_decimal(rate)
    if rate < 0:
        raise ValueError("VAT rate cannot be negative")
    gross = Decimal('1') + rate

    items_discount = to_decimal(items_discount)
    promo_discount = to_decimal(promo_discount)
    invoice_discount = to_decimal(invoice_discount)

    net = q2(total / gross)
    vat_amount = total - net
    all_discounts = items_discount + promo_discount + invoice_discount

    return VatBreakdown(
        total=total,
        net_before_vat=net,
        vat_amount=vat_amount,
        subtotal_before_discounts=q2(total / gross + all_discounts / gross),
        items_discount_ex_vat=q2(items_discount / gross),
        promo_discount_ex_vat=q2(promo_discount / gross),
        invoice_discount_ex_vat=q2(invoice_discount / gross),
        rate=rate,
    )


def breakdown_for(record, rate=DEFAULT_VAT_RATE) -> VatBreakdown:
    """Breakdown for an InvoiceRecord (line, promo-code and invoice discounts)."""
    promo = record.discount.amount if record.discount else 0
    return compute_vat_breakdown(
        record.total,
        rate,
        items_discount=record.items_discount_total,
        promo_discount=promo,
        invoice_discount=record.invoice_discount,
    )
