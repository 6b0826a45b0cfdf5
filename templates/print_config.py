# Print Template Configuration
# This file contains configuration for the café print documents

PRINT_TEMPLATES = {
    'kitchen_ticket': {
        'template': 'print/kitchen_ticket.html',
        'title': 'طلب المطبخ',
        'description': 'Kitchen ticket: names and quantities only, no prices',
        'print_options': {'paper_width': '80mm', 'auto_print': True, 'auto_close': True, 'show_print_button': False},
    },

    'tax_invoice': {
        'template': 'print/tax_invoice.html',
        'title': 'فاتورة ضريبية',
        'description': 'ZATCA simplified tax invoice with VAT breakdown and QR',
        'print_options': {'paper_width': '80mm', 'auto_print': True, 'auto_close': False, 'show_print_button': True},
    },

    'customer_receipt': {
        'template': 'print/customer_receipt.html',
        'title': 'إيصال استلام',
        'description': 'Customer receipt with order-type badge and tracking QR',
        'print_options': {'paper_width': '80mm', 'auto_print': True, 'auto_close': False, 'show_print_button': True},
    },

    'cashier_copy': {
        'template': 'print/cashier_copy.html',
        'title': 'نسخة الكاشير',
        'description': 'Compact cashier copy with prices and card signature line',
        'print_options': {'paper_width': '80mm', 'auto_print': True, 'auto_close': False, 'show_print_button': True},
    },

    'sales_receipt': {
        'template': 'print/sales_receipt.html',
        'title': 'إيصال',
        'description': 'Simple sales receipt with prices and a small tracking QR',
        'print_options': {'paper_width': '80mm', 'auto_print': True, 'auto_close': False, 'show_print_button': True},
    },

    'employee_card': {
        'template': 'print/employee_card.html',
        'title': 'بطاقة الموظف',
        'description': 'Staff ID card with an optional quick check-in QR',
        'print_options': {'paper_width': '80mm', 'auto_print': True, 'auto_close': False, 'show_print_button': True},
    },
}

# URL slugs accepted by the HTTP layer
DOCUMENT_SLUGS = {
    'kitchen-ticket': 'kitchen_ticket',
    'tax-invoice': 'tax_invoice',
    'customer-receipt': 'customer_receipt',
    'cashier-copy': 'cashier_copy',
    'sales-receipt': 'sales_receipt',
    'employee-card': 'employee_card',
}

# Order of the full invoice set and the delay (seconds) before each window opens
FULL_INVOICE_SET = [
    ('tax_invoice', 0.0),
    ('customer_receipt', 0.5),
    ('cashier_copy', 1.0),
]

# QR Code configuration
QR_CONFIG = {
    'zatca': {'width_px': 180, 'margin_modules': 1, 'error_correction': 'M'},
    'tax_invoice_tracking': {'width_px': 120, 'margin_modules': 1, 'error_correction': 'M'},
    'customer_receipt': {'width_px': 150, 'margin_modules': 1, 'error_correction': 'M'},
    'sales_receipt': {'width_px': 100, 'margin_modules': 1, 'error_correction': 'M'},
    'employee_card': {'width_px': 120, 'margin_modules': 1, 'error_correction': 'M'},
}

# Tracking links, relative to TRACKING_BASE_URL
TRACKING_PATHS = {
    'tax_invoice': '/tracking/{order_number}',
    'customer_receipt': '/order/{order_number}',
    'sales_receipt': '/tracking?order={order_number}',
}

ORDER_TYPE_LABELS = {
    'dine_in': 'محلي',
    'takeaway': 'سفري',
    'delivery': 'توصيل',
    'pickup': 'استلام',
}

# Receipt badge labels follow the customer-facing wording
RECEIPT_ORDER_TYPE_LABELS = {
    'dine_in': 'في الكافيه',
    'delivery': 'توصيل',
}
RECEIPT_ORDER_TYPE_DEFAULT = 'استلام'

ORDER_TYPE_COLORS = {
    'dine_in': '#8b5cf6',
    'delivery': '#10b981',
}
ORDER_TYPE_DEFAULT_COLOR = '#3b82f6'

# Print button configurations
PRINT_BUTTONS = {
    'print_text': 'Print',
    'print_text_ar': 'طباعة',
    'close_text': 'Close',
    'close_text_ar': 'إغلاق',
}

# Footer messages configuration
FOOTER_MESSAGES = {
    'thank_you': {
        'en': 'Thank you for visiting us!',
        'ar': 'شكراً لزيارتكم'
    },
    'enjoy': {
        'en': 'We hope you enjoy your order',
        'ar': 'نتمنى لكم تجربة ممتعة'
    },
    'scan_to_track': {
        'en': 'Scan to track your order',
        'ar': 'امسح لتتبع طلبك'
    },
    'scan_to_check_in': {
        'en': 'Scan for quick check-in',
        'ar': 'امسح للتسجيل السريع'
    },
}


def get_template_config(document_type):
    """Get configuration for a specific document type"""
    try:
        return PRINT_TEMPLATES[document_type]
    except KeyError:
        raise KeyError(f"unknown document type {document_type!r}") from None


def get_qr_config(name):
    """Get QR code options for a document QR slot"""
    return QR_CONFIG.get(name, QR_CONFIG['zatca'])


def get_print_options(document_type):
    """Default print dispatch options for a document type"""
    return dict(get_template_config(document_type)['print_options'])


def resolve_document_type(slug):
    """Map a URL slug (or a plain document type) to a document type, or None"""
    if slug in PRINT_TEMPLATES:
        return slug
    return DOCUMENT_SLUGS.get(slug)


def order_type_label(order_type, override=None):
    if override:
        return override
    return ORDER_TYPE_LABELS.get(order_type, 'غير محدد')


def receipt_order_type_label(order_type, override=None):
    if override:
        return override
    return RECEIPT_ORDER_TYPE_LABELS.get(order_type, RECEIPT_ORDER_TYPE_DEFAULT)


def order_type_color(order_type):
    return ORDER_TYPE_COLORS.get(order_type, ORDER_TYPE_DEFAULT_COLOR)
