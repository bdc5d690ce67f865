"""
Fire-and-forget audit recording.

record_audit() never raises: a failed write is logged and handed to the
optional ``on_error`` sink. Inside an atomic block the write waits for
commit, so rolled-back mutations leave no trace.
"""
import functools
import logging
from typing import Callable, Optional

from django.db import transaction
from rest_framework.request import Request

from .models import AuditLog

logger = logging.getLogger(__name__)


def client_ip(request) -> Optional[str]:
    """Best-effort caller address, honouring X-Forwarded-For."""
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip() or None
    return request.META.get('REMOTE_ADDR') or None


def record_audit(
    *,
    entity: str,
    action: str,
    entity_id='',
    actor=None,
    new_values: Optional[dict] = None,
    ip_address: Optional[str] = None,
    on_error: Optional[Callable[[Exception], None]] = None,
) -> None:
    """
    Schedule an audit entry for a completed mutation.

    Args:
        entity: Entity name, e.g. 'Sale'
        action: One of AuditAction
        entity_id: Primary key of the mutated row
        actor: Authenticated user performing the change, if any
        new_values: Resulting representation of the entity
        ip_address: Caller address
        on_error: Called with the exception if the write fails
    """
    if actor is not None and not getattr(actor, 'is_authenticated', False):
        actor = None

    values = {
        'entity': entity,
        'entity_id': str(entity_id or ''),
        'action': action,
        'user_id': getattr(actor, 'id', None),
        'user_email': getattr(actor, 'email', '') or '',
        'ip_address': ip_address,
        'new_values': dict(new_values or {}),
    }

    def _write():
        try:
            AuditLog.objects.create(**values)
        except Exception as exc:  # audit must never affect the caller
            logger.exception(
                "Audit log write failed",
                extra={'entity': entity, 'action': action, 'entity_id': values['entity_id']},
            )
            if on_error is not None:
                on_error(exc)

    transaction.on_commit(_write)


def _find_request(args) -> Optional[Request]:
    for arg in args:
        if isinstance(arg, Request):
            return arg
    return None


def audited(entity: str, action: str):
    """
    Record an audit entry after a handler returns a 2xx response.

    Works on @api_view functions and ViewSet methods. The entity id is
    taken from the response body's ``id`` or the ``pk`` URL kwarg.

        @audited('Product', AuditAction.UPDATE_STOCK)
        def add_stock(self, request, pk=None): ...
    """
    def decorator(handler):
        @functools.wraps(handler)
        def wrapper(*args, **kwargs):
            response = handler(*args, **kwargs)
            request = _find_request(args)
            if request is None or not 200 <= response.status_code < 300:
                return response

            data = response.data if isinstance(response.data, dict) else {}
            record_audit(
                entity=entity,
                action=action,
                entity_id=data.get('id') or kwargs.get('pk') or '',
                actor=request.user,
                new_values=data,
                ip_address=client_ip(request),
            )
            return response
        return wrapper
    return decorator
