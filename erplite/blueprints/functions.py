"""
Request handlers blueprint - Multi-Tenant.

Three stateless JSON endpoints: create a sale, mark attendance and the
sales report. Every handler validates its input first, then resolves the
caller, then checks the caller against the business, then touches data.
"""
from flask import Blueprint, request, jsonify, current_app
from erplite.database import get_session
from erplite.middleware import load_identity, load_tenant, cors_headers, preflight
from erplite.exceptions import ValidationError
from erplite.services.sales_service import validate_sale_request, create_sale
from erplite.services.attendance_service import validate_attendance_request, mark_attendance
from erplite.services.report_service import validate_report_request, get_sales_report
from erplite.utils.formatters import money

functions_bp = Blueprint('functions', __name__, url_prefix='/functions')

functions_bp.after_request(cors_headers)


def _json_body() -> dict:
    """Parse the request body as a JSON object."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Invalid JSON body')
    return data


@functions_bp.route('/create-sale', methods=['POST', 'OPTIONS'])
@preflight
def create_sale_handler():
    """Create a sale and its items for the caller's business."""
    data = _json_body()
    lines = validate_sale_request(data.get('items'), data.get('business_id'))

    user = load_identity()
    business = load_tenant(data['business_id'])

    result = create_sale(get_session(), lines, business.id, user.id)
    result['total_amount'] = money(result['total_amount'])
    return jsonify(result)


@functions_bp.route('/mark-attendance', methods=['POST', 'OPTIONS'])
@preflight
def mark_attendance_handler():
    """Mark (create or update) an employee's attendance for a day."""
    fields = validate_attendance_request(_json_body())

    load_identity()
    load_tenant(fields['business_id'])

    return jsonify(mark_attendance(get_session(), fields))


@functions_bp.route('/sales-report', methods=['GET', 'OPTIONS'])
@preflight
def sales_report_handler():
    """Summary, recent sales and top products of a business."""
    params = validate_report_request(
        request.args,
        default_limit=current_app.config.get('REPORT_DEFAULT_LIMIT', 50),
        max_limit=current_app.config.get('REPORT_MAX_LIMIT', 500)
    )

    load_identity()
    load_tenant(params['business_id'])

    report = get_sales_report(
        get_session(),
        params['business_id'],
        start=params['start'],
        end=params['end'],
        limit=params['limit'],
        top_n=current_app.config.get('REPORT_TOP_PRODUCTS', 10)
    )
    return jsonify(report)
