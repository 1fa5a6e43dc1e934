"""
Attendance service - Multi-Tenant.
Marks an employee's attendance for a day, creating or updating the record.
"""
from datetime import date, time, datetime, timezone
from typing import Any, Dict, Optional
from sqlalchemy.exc import SQLAlchemyError
from erplite.models import Attendance, AttendanceStatus, Employee
from erplite.exceptions import ValidationError, NotFoundError, PersistenceError
import logging

logger = logging.getLogger(__name__)

VALID_STATUSES = [s.value for s in AttendanceStatus]


def validate_attendance_request(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a mark-attendance body.

    Returns normalized fields: employee_id, business_id, status, date,
    in_time, out_time (date/time objects, times may be None).

    Raises:
        ValidationError: missing fields, unknown status, malformed date or time
    """
    employee_id = data.get('employee_id')
    business_id = data.get('business_id')
    status = data.get('status')

    if not employee_id or not business_id or not status:
        raise ValidationError('employee_id, business_id, and status are required')

    if status not in VALID_STATUSES:
        raise ValidationError('Invalid status. Must be present, absent, or late')

    return {
        'employee_id': str(employee_id),
        'business_id': str(business_id),
        'status': status,
        'date': _parse_date(data.get('date')),
        'in_time': _parse_time(data.get('in_time'), 'in_time'),
        'out_time': _parse_time(data.get('out_time'), 'out_time'),
    }


def mark_attendance(session, fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create or update the attendance record of an employee for a date.

    Args:
        session: SQLAlchemy session
        fields: Output of validate_attendance_request (business already authorized)

    Returns:
        dict: {'success', 'attendance', 'message'}

    Raises:
        NotFoundError: employee is not part of the business
        PersistenceError: lookup, update or insert failed
    """
    business_id = fields['business_id']
    employee_id = fields['employee_id']
    attendance_date = fields['date']

    try:
        employee = session.query(Employee).filter_by(id=employee_id, business_id=business_id).first()
        existing = None
        if employee is not None:
            existing = session.query(Attendance).filter_by(
                employee_id=employee_id,
                date=attendance_date
            ).first()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Check error: {e}")
        raise PersistenceError('Failed to check existing attendance', step='attendance_check', details=str(e))

    if employee is None:
        raise NotFoundError('Employee not found')

    if existing is not None:
        try:
            existing.status = fields['status']
            existing.in_time = fields['in_time']
            existing.out_time = fields['out_time']
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Update error: {e}")
            raise PersistenceError('Failed to update attendance', step='attendance_update', details=str(e))

        logger.info(f"Attendance updated: {existing.id}")
        return {
            'success': True,
            'attendance': existing.to_dict(),
            'message': 'Attendance updated successfully',
        }

    record = Attendance(
        employee_id=employee_id,
        business_id=business_id,
        date=attendance_date,
        status=fields['status'],
        in_time=fields['in_time'],
        out_time=fields['out_time']
    )
    try:
        session.add(record)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Insert error: {e}")
        raise PersistenceError('Failed to create attendance', step='attendance_insert', details=str(e))

    logger.info(f"Attendance created: {record.id}")
    return {
        'success': True,
        'attendance': record.to_dict(),
        'message': 'Attendance marked successfully',
    }


def _parse_date(value) -> date:
    """ISO date, defaulting to today (UTC) when absent."""
    if not value:
        return datetime.now(timezone.utc).date()
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError('Invalid date. Use YYYY-MM-DD')


def _parse_time(value, field: str) -> Optional[time]:
    """ISO time ("09:00" or "09:00:00"); empty means no time."""
    if not value:
        return None
    try:
        return time.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f'Invalid {field}. Use HH:MM or HH:MM:SS')
