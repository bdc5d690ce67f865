"""Services for clients and their prepaid credit."""

from .exceptions import (
    ClientNotFound,
    ClientEmailConflict,
    ClientCuitConflict,
    PrepaidNotFound,
    PrepaidAlreadyConsumed,
)
from .prepaid_ledger import (
    consume_by_amount_fifo,
    consume_specific,
    restore,
    update_status,
    total_pending_for_client,
    create_prepaid,
    get_prepaid,
    client_prepaids,
)
from .client_management import (
    create_client,
    get_client,
    update_client,
    delete_client,
)

__all__ = [
    # Exceptions
    'ClientNotFound',
    'ClientEmailConflict',
    'ClientCuitConflict',
    'PrepaidNotFound',
    'PrepaidAlreadyConsumed',
    # Prepaid ledger
    'consume_by_amount_fifo',
    'consume_specific',
    'restore',
    'update_status',
    'total_pending_for_client',
    'create_prepaid',
    'get_prepaid',
    'client_prepaids',
    # Clients
    'create_client',
    'get_client',
    'update_client',
    'delete_client',
]
