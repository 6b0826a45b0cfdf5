from flask import Blueprint, Response, current_app, jsonify, request

from models import EmployeeCard, InvoiceRecord, KitchenOrder, parse_datetime
from services.print_dispatcher import PrintOptions, prepare_print_html
from templates.print_config import get_qr_config, resolve_document_type
from utils.qr import safe_render_qr
from utils.vat import breakdown_for, format_money, to_decimal
from utils.zatca import ZatcaFields, decode_tlv, encode_tlv, format_zatca_timestamp, validate_vat_number

bp = Blueprint('receipt', __name__)


def _renderer():
    return current_app.extensions['print_helper']


def _orchestrator():
    return current_app.extensions['print_orchestrator']


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValueError("request body must be a JSON object")
    return data


def _parse_record(document_type, data):
    if document_type == 'kitchen_ticket':
        return KitchenOrder.from_dict(data)
    if document_type == 'employee_card':
        return EmployeeCard.from_dict(data)
    return InvoiceRecord.from_dict(data)


@bp.errorhandler(ValueError)
def _bad_request(e):
    current_app.logger.warning(f"Rejected print request: {e}")
    return jsonify({'error': str(e)}), 400


@bp.route('/health')
def health():
    return jsonify({'status': 'ok'})


@bp.route('/print/<slug>', methods=['POST'])
def print_receipt(slug):
    """تجهيز المستند للطباعة وإرجاعه كصفحة HTML"""
    document_type = resolve_document_type(slug)
    if document_type is None:
        return jsonify({'error': f"unknown document type '{slug}'"}), 404

    record = _parse_record(document_type, _json_body())
    options = PrintOptions.from_mapping(request.args, base=_orchestrator().options_for(document_type))

    renderer = _renderer()
    title = renderer.document_title(document_type, record)
    try:
        html = renderer.render(document_type, record)
    except ValueError:
        raise
    except Exception as e:
        current_app.logger.exception(f"Error rendering {title}")
        return jsonify({'error': 'render failed', 'message': str(e)}), 500

    return Response(prepare_print_html(html, title, options), mimetype='text/html')


@bp.route('/print/full-set', methods=['POST'])
def print_full_set():
    """طباعة الفاتورة الضريبية + إيصال الاستلام + نسخة الكاشير"""
    record = InvoiceRecord.from_dict(_json_body())
    _orchestrator().print_full_invoice_set(record)
    renderer = _renderer()
    titles = [renderer.document_title(t, record) for t in ('tax_invoice', 'customer_receipt', 'cashier_copy')]
    return jsonify({'queued': titles}), 202


@bp.route('/zatca/qr', methods=['POST'])
def zatca_qr():
    """Base64(TLV) وصورة QR لفاتورة ضريبية مبسطة"""
    data = _json_body()
    settings = _renderer().settings

    if data.get('items'):
        record = InvoiceRecord.from_dict(data)
        fields = ZatcaFields.from_invoice(record, settings, breakdown_for(record, settings.vat_rate))
    else:
        for name in ('timestamp', 'total', 'vat_amount'):
            if data.get(name) is None or data.get(name) == '':
                raise ValueError(f"missing required field '{name}'")
        fields = ZatcaFields(
            seller_name=str(data.get('seller_name') or settings.seller_name),
            vat_number=validate_vat_number(str(data.get('vat_number') or settings.vat_number)),
            timestamp=format_zatca_timestamp(parse_datetime(data['timestamp']), settings.timezone),
            total_with_vat=format_money(to_decimal(data['total'])),
            vat_amount=format_money(to_decimal(data['vat_amount'])),
        )

    tlv_b64 = encode_tlv(fields)
    qr = safe_render_qr(tlv_b64, **get_qr_config('zatca'))
    return jsonify({
        'tlv_base64': tlv_b64,
        'qr_data_uri': qr,
        'fields': [{'tag': tag, 'value': value} for tag, value in decode_tlv(tlv_b64)],
    })
