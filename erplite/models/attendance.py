"""Attendance model."""
import enum
from sqlalchemy import Column, String, Date, Time, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from erplite.database import Base, new_id
from erplite.utils.formatters import iso


class AttendanceStatus(str, enum.Enum):
    """Allowed attendance states."""
    PRESENT = 'present'
    ABSENT = 'absent'
    LATE = 'late'


class Attendance(Base):
    """One attendance record per employee per day."""

    __tablename__ = 'attendance'
    __table_args__ = (
        UniqueConstraint('employee_id', 'date', name='attendance_employee_date_key'),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    business_id = Column(String(36), ForeignKey('businesses.id'), nullable=False, index=True)
    employee_id = Column(String(36), ForeignKey('employees.id'), nullable=False)
    date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False)
    in_time = Column(Time, nullable=True)
    out_time = Column(Time, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    employee = relationship('Employee', back_populates='attendance')

    def to_dict(self):
        return {
            'id': self.id,
            'business_id': self.business_id,
            'employee_id': self.employee_id,
            'date': iso(self.date),
            'status': self.status,
            'in_time': iso(self.in_time),
            'out_time': iso(self.out_time),
            'created_at': iso(self.created_at),
        }

    def __repr__(self):
        return f"<Attendance(id={self.id}, employee_id={self.employee_id}, date={self.date}, status='{self.status}')>"
