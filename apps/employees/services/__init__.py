"""Services for employee records."""

from .exceptions import EmployeeNotFound, EmployeeEmailConflict
from .employee_management import (
    create_employee,
    get_employee,
    update_employee,
    delete_employee,
)

__all__ = [
    # Exceptions
    'EmployeeNotFound',
    'EmployeeEmailConflict',
    # Services
    'create_employee',
    'get_employee',
    'update_employee',
    'delete_employee',
]
