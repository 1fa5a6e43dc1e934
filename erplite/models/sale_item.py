"""Sale Item model and the stock trigger it fires."""
from sqlalchemy import Column, String, Integer, Numeric, ForeignKey, CheckConstraint, event
from sqlalchemy.orm import relationship
from erplite.database import Base, new_id
from erplite.models.product import Product


class SaleItem(Base):
    """Sale Item (one cart line, price captured at sale time)."""

    __tablename__ = 'sale_items'
    __table_args__ = (
        CheckConstraint('quantity > 0', name='sale_items_quantity_positive'),
        CheckConstraint('price >= 0', name='sale_items_price_non_negative'),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    sale_id = Column(String(36), ForeignKey('sales.id', ondelete='CASCADE'), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey('products.id'), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)

    # Relationships
    sale = relationship('Sale', back_populates='items')
    product = relationship('Product')

    @property
    def line_total(self):
        return self.quantity * self.price

    def __repr__(self):
        return f"<SaleItem(id={self.id}, product_id={self.product_id}, quantity={self.quantity})>"


@event.listens_for(SaleItem, 'after_insert')
def decrement_product_stock(mapper, connection, target):
    """Stock trigger: every inserted sale item takes its quantity off the product.

    Runs on the flush connection, so a violated `quantity >= 0` check fails
    the item insert inside the same transaction.
    """
    products = Product.__table__
    connection.execute(
        products.update()
        .where(products.c.id == target.product_id)
        .values(quantity=products.c.quantity - target.quantity)
    )
