"""
Sales service with transactional logic - Multi-Tenant.
Records a sale header and its items as one unit, or leaves nothing behind.
"""
from decimal import Decimal
from typing import List, Dict, Any
from sqlalchemy.exc import SQLAlchemyError
from erplite.models import Product, Sale, SaleItem
from erplite.exceptions import ValidationError, PersistenceError
from erplite.utils.number_format import parse_amount, parse_quantity
import logging

logger = logging.getLogger(__name__)

SALE_CREATED_MESSAGE = 'Sale created successfully'

# Scale of sale_items.price and sales.total_amount
PRICE_PLACES = 2


def validate_sale_request(items, business_id) -> List[Dict[str, Any]]:
    """
    Validate a create-sale body before anything touches the database.

    Returns the cart as normalized lines:
    [{'product_id': str, 'quantity': int, 'price': Decimal}, ...]

    Raises:
        ValidationError: empty/missing items, malformed line or missing business_id
    """
    if not items or not isinstance(items, list):
        raise ValidationError('Invalid items array')

    if not business_id:
        raise ValidationError('business_id is required')

    lines = []
    for index, item in enumerate(items):
        if not isinstance(item, dict) or not item.get('product_id'):
            raise ValidationError(f'Invalid items array: item {index} needs a product_id')
        try:
            quantity = parse_quantity(item.get('quantity'))
            price = parse_amount(item.get('price'), places=PRICE_PLACES)
        except ValueError as e:
            raise ValidationError(f'Invalid items array: item {index}: {e}')

        lines.append({
            'product_id': str(item['product_id']),
            'quantity': quantity,
            'price': price,
        })
    return lines


def calculate_total(lines: List[Dict[str, Any]]) -> Decimal:
    """Sum of quantity x price over the cart, using the caller's values as given."""
    return sum((line['quantity'] * line['price'] for line in lines), Decimal('0'))


def create_sale(session, lines: List[Dict[str, Any]], business_id: str, user_id: str) -> Dict[str, Any]:
    """
    Persist one Sale plus its SaleItems (tenant-scoped).

    Both inserts share one transaction. If the item step fails the
    transaction is rolled back, and the header is then looked up and
    deleted if it survived (compensating delete).

    Args:
        session: SQLAlchemy session
        lines: Output of validate_sale_request
        business_id: Tenant the sale belongs to (already authorized)
        user_id: Caller identity

    Returns:
        dict: {'success', 'sale_id', 'total_amount', 'message'}

    Raises:
        PersistenceError: step='sale' or step='sale_items'
    """
    total_amount = calculate_total(lines)

    # 1. Sale header
    sale = Sale(
        business_id=business_id,
        user_id=user_id,
        total_amount=total_amount
    )
    try:
        session.add(sale)
        session.flush()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Sale creation error: {e}")
        raise PersistenceError('Failed to create sale', step='sale', details=str(e))

    sale_id = sale.id

    # 2. Sale items (the stock trigger runs on this flush)
    try:
        _check_products_belong_to_business(session, lines, business_id)
        session.add_all([
            SaleItem(
                sale_id=sale_id,
                product_id=line['product_id'],
                quantity=line['quantity'],
                price=line['price']
            )
            for line in lines
        ])
        session.flush()
        session.commit()
    except (SQLAlchemyError, PersistenceError) as e:
        details = e.details if isinstance(e, PersistenceError) else str(e)
        logger.error(f"Sale items error: {details}")
        _rollback_sale(session, sale_id)
        raise PersistenceError('Failed to create sale items', step='sale_items', details=details)

    logger.info(f"Sale created successfully: {sale_id}")
    _record_sale_metrics(total_amount)

    return {
        'success': True,
        'sale_id': sale_id,
        'total_amount': total_amount,
        'message': SALE_CREATED_MESSAGE,
    }


# =====================================================
# PRIVATE HELPERS
# =====================================================

def _check_products_belong_to_business(session, lines, business_id):
    """Every product on the cart must be a product of this business."""
    product_ids = {line['product_id'] for line in lines}
    found = {
        row[0] for row in session.query(Product.id).filter(
            Product.id.in_(product_ids),
            Product.business_id == business_id
        ).all()
    }
    missing = sorted(product_ids - found)
    if missing:
        raise PersistenceError(
            'Failed to create sale items',
            step='sale_items',
            details=f"Products not found for business {business_id}: {', '.join(missing)}"
        )


def _rollback_sale(session, sale_id):
    """
    Undo the sale header after a failed item insert.

    The transaction rollback removes the header. If it is still there
    (it was committed by someone else's flush or the backend has no
    multi-statement transactions) it is deleted by id. A failure of that
    delete is logged as an integrity incident and not raised.
    """
    session.rollback()
    try:
        leftover = session.get(Sale, sale_id)
        if leftover is not None:
            logger.warning(f"Sale {sale_id} survived rollback, issuing compensating delete")
            session.delete(leftover)
            session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.critical(
            f"DATA INTEGRITY: compensating delete of sale {sale_id} failed, "
            f"manual reconciliation required: {e}"
        )
        _record_rollback_failure()


def _record_sale_metrics(total_amount):
    from erplite.blueprints.metrics import sales_created_total, sales_amount_total
    sales_created_total.inc()
    sales_amount_total.inc(float(total_amount))


def _record_rollback_failure():
    from erplite.blueprints.metrics import sale_rollback_failures_total
    sale_rollback_failures_total.inc()
