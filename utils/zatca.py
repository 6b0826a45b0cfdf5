"""
ترميز TLV لرمز QR الخاص بهيئة الزكاة والضريبة والجمارك (ZATCA - المرحلة الأولى)
ZATCA Phase 1 TLV encoding for the simplified tax invoice QR payload.

The five tags and their order are part of the wire contract checked by
FATOORA-compliant scanners:
    1 seller name, 2 VAT number, 3 timestamp (ISO 8601),
    4 invoice total incl. VAT, 5 VAT amount
"""
from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from datetime import datetime
from typing import List, Tuple

import pytz

TAG_SELLER_NAME = 1
TAG_VAT_NUMBER = 2
TAG_TIMESTAMP = 3
TAG_TOTAL_WITH_VAT = 4
TAG_VAT_AMOUNT = 5

MAX_VALUE_BYTES = 255


class TLVEncodingError(ValueError):
    """قيمة لا يمكن ترميزها في حقل TLV (أطول من 255 بايت أو مخزن مقطوع)."""


@dataclass(frozen=True)
class ZatcaFields:
    """الحقول الخمسة المطلوبة في رمز QR للفاتورة الضريبية المبسطة."""
    seller_name: str
    vat_number: str
    timestamp: str
    total_with_vat: str
    vat_amount: str

    def as_tags(self) -> List[Tuple[int, str]]:
        return [
            (TAG_SELLER_NAME, self.seller_name),
            (TAG_VAT_NUMBER, self.vat_number),
            (TAG_TIMESTAMP, self.timestamp),
            (TAG_TOTAL_WITH_VAT, self.total_with_vat),
            (TAG_VAT_AMOUNT, self.vat_amount),
        ]

    @classmethod
    def from_invoice(cls, record, settings, breakdown) -> "ZatcaFields":
        """بناء حقول ZATCA من الفاتورة والإعدادات وتفصيل الضريبة المحسوب."""
        from utils.vat import format_money
        return cls(
            seller_name=settings.seller_name,
            vat_number=settings.vat_number,
            timestamp=format_zatca_timestamp(record.date, settings.timezone),
            total_with_vat=format_money(breakdown.total),
            vat_amount=format_money(breakdown.vat_amount),
        )


def format_zatca_timestamp(value: datetime, timezone: str = 'Asia/Riyadh') -> str:
    """ISO 8601 in UTC without microseconds, e.g. 2024-06-01T09:30:00Z.

    Naive datetimes are taken to be local time in ``timezone``.
    """
    if value.tzinfo is None:
        value = pytz.timezone(timezone).localize(value)
    return value.astimezone(pytz.utc).strftime('%Y-%m-%dT%H:%M:%SZ')


def validate_vat_number(value: str) -> str:
    value = (value or '').strip()
    if len(value) != 15 or not value.isascii() or not value.isdigit():
        raise ValueError(f"VAT number must be exactly 15 digits, got {value!r}")
    return value


# TLV helpers
def tlv_record(tag: int, value: str) -> bytes:
    """إنشاء سجل TLV واحد: بايت للوسم، بايت للطول، ثم القيمة بترميز UTF-8."""
    raw = value.encode('utf-8')
    if len(raw) > MAX_VALUE_BYTES:
        raise TLVEncodingError(
            f"TLV tag {tag} value is {len(raw)} bytes; the limit is {MAX_VALUE_BYTES}"
        )
    return bytes([tag, len(raw)]) + raw


def tlv_bytes(fields: ZatcaFields) -> bytes:
    return b''.join(tlv_record(tag, value) for tag, value in fields.as_tags())


def encode_tlv(fields: ZatcaFields) -> str:
    """Base64(TLV) - هذا هو النص الذي يُشفَّر داخل رمز QR (وليس صورة PNG)."""
    return base64.b64encode(tlv_bytes(fields)).decode('ascii')


def decode_tlv(payload: str) -> List[Tuple[int, str]]:
    """Parse a base64 TLV payload back into ``(tag, value)`` pairs, in order."""
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise TLVEncodingError(f"payload is not valid base64: {e}") from e

    records = []
    pos = 0
    while pos < len(data):
        if pos + 2 > len(data):
            raise TLVEncodingError(f"truncated TLV header at byte {pos}")
        tag, length = data[pos], data[pos + 1]
        start, end = pos + 2, pos + 2 + length
        if end > len(data):
            raise TLVEncodingError(f"TLV tag {tag} claims {length} bytes, only {len(data) - start} left")
        records.append((tag, data[start:end].decode('utf-8')))
        pos = end
    return records


def decode_fields(payload: str) -> ZatcaFields:
    records = decode_tlv(payload)
    tags = [tag for tag, _ in records]
    if tags != [TAG_SELLER_NAME, TAG_VAT_NUMBER, TAG_TIMESTAMP, TAG_TOTAL_WITH_VAT, TAG_VAT_AMOUNT]:
        raise TLVEncodingError(f"unexpected TLV tag sequence {tags}")
    return ZatcaFields(*(value for _, value in records))
