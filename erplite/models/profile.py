"""Profile model - the authenticated caller identity."""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from erplite.database import Base, new_id


class Profile(Base):
    """Profile of a platform user (owner or staff of one business)."""

    __tablename__ = 'profiles'

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False, unique=True)
    full_name = Column(String(200), nullable=False)
    phone = Column(String(50), nullable=True)
    # Business the user works for; owners are linked through Business.owner_id too
    business_id = Column(
        String(36),
        ForeignKey('businesses.id', use_alter=True, name='profiles_business_id_fkey'),
        nullable=True,
    )
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    business = relationship('Business', foreign_keys=[business_id], back_populates='members', post_update=True)

    def __repr__(self):
        return f"<Profile(id={self.id}, email='{self.email}')>"
