"""Sale model."""
from datetime import datetime, timezone
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from erplite.database import Base, new_id


def _utcnow():
    return datetime.now(timezone.utc)


class Sale(Base):
    """Sale header: one row per checkout, immutable once created."""

    __tablename__ = 'sales'
    __table_args__ = (
        CheckConstraint('total_amount >= 0', name='sales_total_amount_non_negative'),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    business_id = Column(String(36), ForeignKey('businesses.id'), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey('profiles.id'), nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    # Relationships
    business = relationship('Business')
    user = relationship('Profile')
    items = relationship('SaleItem', back_populates='sale', cascade='all, delete-orphan')

    def __repr__(self):
        return f"<Sale(id={self.id}, total_amount={self.total_amount})>"
