"""Domain-specific exceptions for employee services."""
from apps.common.exceptions import NotFoundError, ConflictError


class EmployeeNotFound(NotFoundError):
    default_detail = 'Employee not found.'
    default_code = 'employee_not_found'


class EmployeeEmailConflict(ConflictError):
    default_detail = 'An employee with this email already exists.'
    default_code = 'employee_email_conflict'
