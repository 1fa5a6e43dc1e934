"""Product model."""
from sqlalchemy import Column, String, Text, Integer, Numeric, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from erplite.database import Base, new_id


class Product(Base):
    """Product with its stock on hand (`quantity`)."""

    __tablename__ = 'products'
    __table_args__ = (
        CheckConstraint('quantity >= 0', name='products_quantity_non_negative'),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    business_id = Column(String(36), ForeignKey('businesses.id'), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    sku = Column(String(100), nullable=True)
    category = Column(String(100), nullable=False, default='General')
    description = Column(Text, nullable=True)
    buying_price = Column(Numeric(12, 2), nullable=False, default=0)
    selling_price = Column(Numeric(12, 2), nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=0)
    low_stock_limit = Column(Integer, nullable=False, default=10)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    business = relationship('Business')

    @property
    def is_low_stock(self):
        return (self.quantity or 0) <= (self.low_stock_limit or 0)

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', quantity={self.quantity})>"
