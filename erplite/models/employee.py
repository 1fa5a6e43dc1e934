"""Employee model."""
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from erplite.database import Base, new_id


class Employee(Base):
    """Employee of a business (may or may not have a login profile)."""

    __tablename__ = 'employees'

    id = Column(String(36), primary_key=True, default=new_id)
    business_id = Column(String(36), ForeignKey('businesses.id'), nullable=False, index=True)
    full_name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    role = Column(String(50), nullable=True)
    status = Column(String(20), nullable=True, default='active')
    user_id = Column(String(36), ForeignKey('profiles.id'), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    business = relationship('Business')
    attendance = relationship('Attendance', back_populates='employee')

    def __repr__(self):
        return f"<Employee(id={self.id}, full_name='{self.full_name}')>"
