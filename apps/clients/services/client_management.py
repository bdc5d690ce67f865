"""Client CRUD, including nested prepaid credit."""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction, IntegrityError

from apps.clients.models import Client, Prepaid
from .exceptions import ClientNotFound, ClientEmailConflict, ClientCuitConflict
from .prepaid_ledger import create_prepaid

logger = logging.getLogger(__name__)


def _normalize(email: Optional[str], cuit: Optional[str]):
    email = (email or '').strip().lower() or None
    cuit = (cuit or '').strip() or None
    return email, cuit


def _check_unique(*, email, cuit, exclude_id=None) -> None:
    alive = Client.objects.alive()
    if exclude_id is not None:
        alive = alive.exclude(id=exclude_id)
    if email and alive.filter(email=email).exists():
        raise ClientEmailConflict()
    if cuit and alive.filter(cuit=cuit).exists():
        raise ClientCuitConflict()


def _add_prepaids(client: Client, prepaids: list[dict]) -> None:
    for entry in prepaids:
        create_prepaid(
            client_id=client.id,
            amount=entry['amount'],
            notes=entry.get('notes', ''),
        )


@transaction.atomic
def create_client(
    *,
    full_name: str,
    phone: str = '',
    email: Optional[str] = None,
    cuit: Optional[str] = None,
    notes: str = '',
    prepaids: Optional[list[dict]] = None,
) -> Client:
    """
    Create a client, optionally with initial prepaid credit.

    Args:
        full_name: 2-100 characters
        phone: Optional phone
        email: Optional, unique among non-deleted clients
        cuit: Optional tax id, unique among non-deleted clients
        notes: Free text
        prepaids: Optional list of {amount, notes} created as PENDING

    Returns:
        Created Client

    Raises:
        ClientEmailConflict: If the email is taken
        ClientCuitConflict: If the CUIT is taken
    """
    email, cuit = _normalize(email, cuit)
    _check_unique(email=email, cuit=cuit)

    try:
        with transaction.atomic():
            client = Client.objects.create(
                full_name=full_name.strip(),
                phone=phone,
                email=email,
                cuit=cuit,
                notes=notes,
            )
    except IntegrityError as e:
        # Lost a race on one of the partial unique indexes
        if 'cuit' in str(e).lower():
            raise ClientCuitConflict() from e
        raise ClientEmailConflict() from e

    _add_prepaids(client, prepaids or [])

    logger.info("Client created", extra={'client_id': str(client.id)})
    return client


def get_client(*, client_id: UUID) -> Client:
    """Return a non-deleted client or raise ClientNotFound."""
    try:
        return Client.objects.alive().get(id=client_id)
    except Client.DoesNotExist:
        raise ClientNotFound()


@transaction.atomic
def update_client(
    *,
    client_id: UUID,
    prepaids: Optional[list[dict]] = None,
    **fields,
) -> Client:
    """
    Partially update a client.

    When ``prepaids`` is given the client's current prepaids are
    soft-deleted and replaced by the new list.

    Raises:
        ClientNotFound: If missing or deleted
        ClientEmailConflict / ClientCuitConflict: On duplicates
    """
    try:
        client = Client.objects.alive().select_for_update().get(id=client_id)
    except Client.DoesNotExist:
        raise ClientNotFound()

    if 'email' in fields or 'cuit' in fields:
        email, cuit = _normalize(fields.get('email', client.email), fields.get('cuit', client.cuit))
        _check_unique(email=email, cuit=cuit, exclude_id=client.id)
        fields['email'], fields['cuit'] = email, cuit

    for name, value in fields.items():
        setattr(client, name, value)
    client.save()

    if prepaids is not None:
        Prepaid.objects.alive().filter(client=client).soft_delete()
        _add_prepaids(client, prepaids)

    return client


@transaction.atomic
def delete_client(*, client_id: UUID) -> None:
    """Soft-delete a client and all its prepaids."""
    client = get_client(client_id=client_id)
    Prepaid.objects.alive().filter(client=client).soft_delete()
    client.soft_delete()
    logger.info("Client deleted", extra={'client_id': str(client_id)})
