"""
Sales report service for multi-tenant SaaS.
Provides the summary, recent sales and top products of one business.
"""
from datetime import datetime, date, time, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from erplite.models import Sale, SaleItem, Product, Profile
from erplite.exceptions import ValidationError, PersistenceError
from erplite.utils.formatters import money, iso
import logging

logger = logging.getLogger(__name__)


def validate_report_request(args, default_limit: int = 50, max_limit: int = 500) -> Dict[str, Any]:
    """
    Validate sales-report query parameters.

    Args:
        args: Mapping with business_id, start_date, end_date, limit
        default_limit: Limit used when none is given
        max_limit: Upper bound for limit

    Returns:
        dict with business_id, start (datetime|None), end (datetime|None), limit (int)

    Raises:
        ValidationError: missing business_id, bad limit or bad dates
    """
    business_id = args.get('business_id')
    if not business_id:
        raise ValidationError('business_id is required')

    raw_limit = args.get('limit')
    if raw_limit in (None, ''):
        limit = default_limit
    else:
        try:
            limit = int(raw_limit)
        except (TypeError, ValueError):
            raise ValidationError('limit must be a positive integer')
        if limit <= 0:
            raise ValidationError('limit must be a positive integer')
    limit = min(limit, max_limit)

    start = _parse_bound(args.get('start_date'), 'start_date', end_of_day=False)
    end = _parse_bound(args.get('end_date'), 'end_date', end_of_day=True)
    if start and end and start > end:
        raise ValidationError('start_date must be before end_date')

    return {
        'business_id': str(business_id),
        'start': start,
        'end': end,
        'limit': limit,
    }


def get_sales_report(session, business_id: str, start: Optional[datetime] = None,
                     end: Optional[datetime] = None, limit: int = 50, top_n: int = 10) -> Dict[str, Any]:
    """
    Build the sales report of a business (tenant-scoped).

    Args:
        session: SQLAlchemy session
        business_id: Business ID (REQUIRED for multi-tenant filtering)
        start: Inclusive lower bound on created_at
        end: Inclusive upper bound on created_at
        limit: Maximum number of sales considered
        top_n: Number of top products returned

    Returns:
        dict with keys:
            - success: True
            - summary: total_revenue, total_sales, average_sale
            - sales: most recent first, with the cashier's full name
            - top_products: by quantity sold, descending

    Raises:
        PersistenceError: the sales query failed
    """
    try:
        query = (
            session.query(Sale, Profile.full_name)
            .outerjoin(Profile, Profile.id == Sale.user_id)
            .filter(Sale.business_id == business_id)  # CRITICAL: tenant filter
        )
        if start is not None:
            query = query.filter(Sale.created_at >= start)
        if end is not None:
            query = query.filter(Sale.created_at <= end)
        rows = query.order_by(Sale.created_at.desc()).limit(limit).all()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Sales query error: {e}")
        raise PersistenceError('Failed to fetch sales', step='sales_query', details=str(e))

    sales = [
        {
            'id': sale.id,
            'total_amount': money(sale.total_amount),
            'created_at': iso(sale.created_at),
            'profiles': {'full_name': full_name} if full_name is not None else None,
        }
        for sale, full_name in rows
    ]

    top_products = _top_products(session, [sale.id for sale, _ in rows], top_n)

    total_revenue = sum((Decimal(str(sale.total_amount or 0)) for sale, _ in rows), Decimal('0'))
    total_sales = len(rows)

    logger.info(f"Sales report generated successfully: business={business_id}, sales={total_sales}")

    return {
        'success': True,
        'summary': {
            'total_revenue': money(total_revenue),
            'total_sales': total_sales,
            'average_sale': money(total_revenue / total_sales) if total_sales > 0 else 0,
        },
        'sales': sales,
        'top_products': top_products,
    }


# =====================================================
# PRIVATE HELPERS
# =====================================================

def _top_products(session, sale_ids: List[str], top_n: int) -> List[Dict[str, Any]]:
    """
    Aggregate the items of the given sales per product.

    A failure here only loses the top products block; the report itself
    is still returned.
    """
    if not sale_ids:
        return []

    try:
        rows = (
            session.query(SaleItem.product_id, SaleItem.quantity, SaleItem.price,
                          Product.name, Product.category)
            .outerjoin(Product, Product.id == SaleItem.product_id)
            .filter(SaleItem.sale_id.in_(sale_ids))
            .all()
        )
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Products query error: {e}")
        return []

    products = {}
    for product_id, quantity, price, name, category in rows:
        revenue = Decimal(str(price)) * quantity
        entry = products.get(product_id)
        if entry:
            entry['total_quantity'] += quantity
            entry['total_revenue'] += revenue
        else:
            products[product_id] = {
                'product_id': product_id,
                'product_name': name or 'Unknown',
                'category': category or 'Unknown',
                'total_quantity': quantity,
                'total_revenue': revenue,
            }

    ranked = sorted(products.values(), key=lambda p: p['total_quantity'], reverse=True)[:top_n]
    for entry in ranked:
        entry['total_revenue'] = money(entry['total_revenue'])
    return ranked


def _parse_bound(value, field: str, end_of_day: bool) -> Optional[datetime]:
    """
    Parse an ISO date or datetime query parameter.

    A date-only end bound covers the whole day. Aware datetimes are
    converted to naive UTC, the way created_at is stored.
    """
    if not value:
        return None
    try:
        if len(value) == 10:
            day = date.fromisoformat(value)
            if end_of_day:
                return datetime.combine(day, time.max)
            return datetime.combine(day, time.min)
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(f'Invalid {field}. Use YYYY-MM-DD or an ISO datetime')

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
