"""Domain-specific exceptions for clients and the prepaid ledger."""
from apps.common.exceptions import NotFoundError, ConflictError, StateConflictError


class ClientNotFound(NotFoundError):
    default_detail = 'Client not found.'
    default_code = 'client_not_found'


class ClientEmailConflict(ConflictError):
    default_detail = 'A client with this email already exists.'
    default_code = 'client_email_conflict'


class ClientCuitConflict(ConflictError):
    default_detail = 'A client with this CUIT already exists.'
    default_code = 'client_cuit_conflict'


class PrepaidNotFound(NotFoundError):
    default_detail = 'Prepaid not found.'
    default_code = 'prepaid_not_found'


class PrepaidAlreadyConsumed(StateConflictError):
    default_detail = 'Prepaid has already been consumed.'
    default_code = 'prepaid_already_consumed'
