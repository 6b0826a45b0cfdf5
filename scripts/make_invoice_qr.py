"""
Build a ZATCA Phase 1 QR payload from the command line, decode it back and
optionally save the QR image.

    python -m scripts.make_invoice_qr --seller "شركة الاختبار المحدودة" \
        --vat 300000000000003 --total 100.00 --vat-amount 15.00 --out invoice_qr.png
"""
import argparse
import base64
import sys
from datetime import datetime

import pytz

from models import parse_datetime
from utils.qr import QRRenderError, render_qr_data_uri
from utils.vat import format_money, to_decimal
from utils.zatca import ZatcaFields, decode_tlv, encode_tlv, format_zatca_timestamp, validate_vat_number


def build_parser():
    parser = argparse.ArgumentParser(description="ZATCA TLV/QR helper")
    parser.add_argument('--seller', required=True, help="seller name (tag 1)")
    parser.add_argument('--vat', required=True, help="15-digit VAT number (tag 2)")
    parser.add_argument('--total', required=True, help="invoice total incl. VAT (tag 4)")
    parser.add_argument('--vat-amount', required=True, help="VAT amount (tag 5)")
    parser.add_argument('--time', help="ISO 8601 invoice time; defaults to now in Asia/Riyadh")
    parser.add_argument('--timezone', default='Asia/Riyadh')
    parser.add_argument('--out', help="write the QR image to this PNG file")
    parser.add_argument('--width', type=int, default=180)
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # وقت/تاريخ الفاتورة بصيغة ISO8601
    try:
        if args.time:
            when = parse_datetime(args.time)
        else:
            when = datetime.now(pytz.timezone(args.timezone))
        fields = ZatcaFields(
            seller_name=args.seller,
            vat_number=validate_vat_number(args.vat),
            timestamp=format_zatca_timestamp(when, args.timezone),
            total_with_vat=format_money(to_decimal(args.total)),
            vat_amount=format_money(to_decimal(args.vat_amount)),
        )
        tlv_b64 = encode_tlv(fields)
    except ValueError as e:
        parser.error(str(e))

    # هذا هو المحتوى الذي يجب أن يُشفَّر داخل الـ QR
    print("TLV Base64:")
    print(tlv_b64)
    for tag, value in decode_tlv(tlv_b64):
        print(f"  {tag}: {value}")

    if args.out:
        try:
            data_uri = render_qr_data_uri(tlv_b64, width_px=args.width)
        except QRRenderError as e:
            print(f"QR generation failed: {e}", file=sys.stderr)
            return 1
        with open(args.out, 'wb') as f:
            f.write(base64.b64decode(data_uri.split(',', 1)[1]))
        print(f"Saved QR image to {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
