"""Models package - exports all SQLAlchemy models."""
# Tenancy and identity
from erplite.models.profile import Profile
from erplite.models.business import Business

# Point of sale
from erplite.models.product import Product
from erplite.models.sale import Sale
from erplite.models.sale_item import SaleItem

# People
from erplite.models.employee import Employee
from erplite.models.attendance import Attendance, AttendanceStatus

__all__ = [
    'Profile', 'Business',
    'Product', 'Sale', 'SaleItem',
    'Employee', 'Attendance', 'AttendanceStatus',
]
