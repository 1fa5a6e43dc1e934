"""
Unit tests for SQLAlchemy models.
"""

import pytest
from datetime import date
from decimal import Decimal
from sqlalchemy.exc import IntegrityError
from erplite.models import Profile, Sale, SaleItem, Attendance


class TestBusinessModel:

    def test_owner_is_member(self, session, owner1, business1):
        assert business1.owner.id == owner1.id
        assert owner1.business.id == business1.id
        assert [p.id for p in business1.members] == [owner1.id]

    def test_profile_email_unique(self, session, owner1):
        session.add(Profile(email=owner1.email, full_name='Duplicate'))
        with pytest.raises(IntegrityError):
            session.commit()


class TestProductModel:

    def test_stock_cannot_go_negative(self, session, product_p1):
        product_p1.quantity = -1
        with pytest.raises(IntegrityError):
            session.commit()

    def test_low_stock_flag(self, session, product_low_stock, product_p1):
        assert product_low_stock.is_low_stock is True
        assert product_p1.is_low_stock is False


class TestSaleItemModel:

    def test_insert_decrements_stock(self, session, owner1, business1, product_p2):
        sale = Sale(business_id=business1.id, user_id=owner1.id, total_amount=Decimal('15.00'))
        session.add(sale)
        session.flush()
        session.add(SaleItem(sale_id=sale.id, product_id=product_p2.id, quantity=3, price=Decimal('5.00')))
        session.commit()

        session.refresh(product_p2)
        assert product_p2.quantity == 17
        assert sale.items[0].line_total == Decimal('15.00')

    def test_quantity_must_be_positive(self, session, owner1, business1, product_p1):
        sale = Sale(business_id=business1.id, user_id=owner1.id, total_amount=Decimal('0'))
        session.add(sale)
        session.flush()
        session.add(SaleItem(sale_id=sale.id, product_id=product_p1.id, quantity=0, price=Decimal('1')))
        with pytest.raises(IntegrityError):
            session.flush()

    def test_sale_total_cannot_be_negative(self, session, owner1, business1):
        session.add(Sale(business_id=business1.id, user_id=owner1.id, total_amount=Decimal('-1')))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_item_requires_existing_sale(self, session, product_p1):
        session.add(SaleItem(sale_id='missing-sale', product_id=product_p1.id, quantity=1, price=Decimal('1')))
        with pytest.raises(IntegrityError):
            session.commit()


class TestAttendanceModel:

    def test_one_record_per_employee_per_day(self, session, business1, employee1):
        for status in ('present', 'late'):
            session.add(Attendance(business_id=business1.id, employee_id=employee1.id,
                                   date=date(2024, 3, 5), status=status))
        with pytest.raises(IntegrityError):
            session.commit()


def test_models_are_queried_through_the_session(session):
    assert not hasattr(Sale, 'query')
    assert session.query(Sale).count() == 0
