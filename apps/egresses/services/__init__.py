"""Services for cash egresses."""

from .exceptions import (
    EgressNotFound,
    EgressCannotBeUpdated,
    EgressCannotBeDeleted,
    InvalidEgressData,
)
from .egress_management import (
    next_egress_number,
    create_egress,
    get_egress,
    update_egress,
    delete_egress,
    complete_egress,
    cancel_egress,
    get_statistics,
)

__all__ = [
    # Exceptions
    'EgressNotFound',
    'EgressCannotBeUpdated',
    'EgressCannotBeDeleted',
    'InvalidEgressData',
    # Lifecycle
    'next_egress_number',
    'create_egress',
    'get_egress',
    'update_egress',
    'delete_egress',
    'complete_egress',
    'cancel_egress',
    'get_statistics',
]
