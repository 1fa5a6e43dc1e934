"""Business model - the tenant; one business per owner account."""
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from erplite.database import Base, new_id


class Business(Base):
    """Business (tenant). Every tenant-owned row carries its id."""

    __tablename__ = 'businesses'

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False)
    owner_id = Column(String(36), ForeignKey('profiles.id'), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    owner = relationship('Profile', foreign_keys=[owner_id])
    members = relationship('Profile', foreign_keys='Profile.business_id', back_populates='business')

    def __repr__(self):
        return f"<Business(id={self.id}, name='{self.name}')>"
