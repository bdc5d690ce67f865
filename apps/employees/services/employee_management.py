"""Employee CRUD."""

import logging
from datetime import date
from uuid import UUID

from django.db import transaction, IntegrityError

from apps.employees.models import Employee
from .exceptions import EmployeeNotFound, EmployeeEmailConflict

logger = logging.getLogger(__name__)


def _email_taken(email: str, exclude_id=None) -> bool:
    queryset = Employee.objects.alive().filter(email=email)
    if exclude_id is not None:
        queryset = queryset.exclude(id=exclude_id)
    return queryset.exists()


@transaction.atomic
def create_employee(
    *,
    name: str,
    email: str,
    role: str,
    start_date: date,
    phone: str = '',
    address: str = '',
) -> Employee:
    """
    Create an employee.

    Raises:
        EmployeeEmailConflict: If a non-deleted employee has the email
    """
    email = email.strip().lower()
    if _email_taken(email):
        raise EmployeeEmailConflict()

    try:
        employee = Employee.objects.create(
            name=name.strip(),
            email=email,
            role=role,
            start_date=start_date,
            phone=phone,
            address=address,
        )
    except IntegrityError as e:
        raise EmployeeEmailConflict() from e

    logger.info("Employee created", extra={'employee_id': str(employee.id)})
    return employee


def get_employee(*, employee_id: UUID) -> Employee:
    try:
        return Employee.objects.alive().get(id=employee_id)
    except Employee.DoesNotExist:
        raise EmployeeNotFound()


@transaction.atomic
def update_employee(*, employee_id: UUID, **fields) -> Employee:
    """
    Apply a partial update.

    Raises:
        EmployeeNotFound: If missing or deleted
        EmployeeEmailConflict: If the new email belongs to another employee
    """
    employee = get_employee(employee_id=employee_id)

    if 'email' in fields:
        fields['email'] = fields['email'].strip().lower()
        if _email_taken(fields['email'], exclude_id=employee.id):
            raise EmployeeEmailConflict()

    for name, value in fields.items():
        setattr(employee, name, value)
    employee.save()
    return employee


@transaction.atomic
def delete_employee(*, employee_id: UUID) -> None:
    employee = get_employee(employee_id=employee_id)
    employee.soft_delete()
    logger.info("Employee deleted", extra={'employee_id': str(employee_id)})
