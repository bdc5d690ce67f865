"""Domain-specific exceptions for egresses."""
from apps.common.exceptions import NotFoundError, StateConflictError, InvalidInputError


class EgressNotFound(NotFoundError):
    default_detail = 'Egress not found.'
    default_code = 'egress_not_found'


class EgressCannotBeUpdated(StateConflictError):
    """Only PENDING egresses can be edited, completed or cancelled."""
    default_detail = 'Egress can no longer be modified.'
    default_code = 'egress_cannot_be_updated'


class EgressCannotBeDeleted(StateConflictError):
    default_detail = 'Only pending egresses can be deleted.'
    default_code = 'egress_cannot_be_deleted'


class InvalidEgressData(InvalidInputError):
    default_detail = 'Invalid egress data.'
    default_code = 'invalid_egress_data'
