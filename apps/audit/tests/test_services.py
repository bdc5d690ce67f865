"""
Audit side-channel tests.

Tests cover:
- Entries are written after commit and dropped on rollback
- Failures never reach the caller
- The @audited decorator only records successful responses
"""

import pytest
from unittest.mock import patch, Mock
from django.contrib.auth.models import AnonymousUser
from django.db import transaction, DatabaseError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response

from apps.audit.models import AuditLog, AuditAction
from apps.audit.services import audited, client_ip, record_audit


@pytest.mark.django_db
class TestRecordAudit:

    def test_writes_entry_on_commit(self, user, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            record_audit(
                entity='Product',
                action=AuditAction.UPDATE_STOCK,
                entity_id='abc',
                actor=user,
                new_values={'stock': 5},
                ip_address='10.0.0.1',
            )

        log = AuditLog.objects.get()
        assert log.entity == 'Product'
        assert log.action == AuditAction.UPDATE_STOCK
        assert log.user_id == user.id
        assert log.user_email == user.email
        assert log.ip_address == '10.0.0.1'
        assert log.new_values == {'stock': 5}

    def test_anonymous_actor_is_not_recorded(self, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            record_audit(entity='Sale', action=AuditAction.CREATE, actor=AnonymousUser())

        log = AuditLog.objects.get()
        assert log.user_id is None
        assert log.user_email == ''

    def test_rolled_back_mutation_leaves_no_entry(self, user, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            with pytest.raises(RuntimeError):
                with transaction.atomic():
                    record_audit(entity='Sale', action=AuditAction.CREATE, actor=user)
                    raise RuntimeError('boom')

        assert AuditLog.objects.count() == 0

    def test_write_failure_is_swallowed_and_reported(self, user, django_capture_on_commit_callbacks):
        on_error = Mock()
        with patch.object(AuditLog.objects, 'create', side_effect=DatabaseError('down')):
            with django_capture_on_commit_callbacks(execute=True):
                record_audit(entity='Sale', action=AuditAction.CREATE, actor=user, on_error=on_error)

        on_error.assert_called_once()
        assert isinstance(on_error.call_args.args[0], DatabaseError)


class TestClientIp:

    def test_prefers_forwarded_for(self, request_factory):
        request = request_factory.get('/', HTTP_X_FORWARDED_FOR='203.0.113.9, 10.0.0.2')

        assert client_ip(request) == '203.0.113.9'

    def test_falls_back_to_remote_addr(self, request_factory):
        request = request_factory.get('/', REMOTE_ADDR='192.0.2.1')

        assert client_ip(request) == '192.0.2.1'


@pytest.mark.django_db
class TestAuditedDecorator:

    class FakeView:
        @audited('Egress', AuditAction.UPDATE)
        def ok(self, request, pk=None):
            return Response({'id': 'from-body', 'status': 'COMPLETED'})

        @audited('Egress', AuditAction.DELETE)
        def no_body(self, request, pk=None):
            return Response(status=status.HTTP_204_NO_CONTENT)

        @audited('Egress', AuditAction.UPDATE)
        def rejected(self, request, pk=None):
            return Response({'detail': 'nope'}, status=status.HTTP_409_CONFLICT)

    def _request(self, request_factory, user):
        request = Request(request_factory.patch('/'))
        request.user = user
        return request

    def test_records_id_from_response(self, request_factory, user, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            self.FakeView().ok(self._request(request_factory, user), pk='from-url')

        assert AuditLog.objects.get().entity_id == 'from-body'

    def test_falls_back_to_pk(self, request_factory, user, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            self.FakeView().no_body(self._request(request_factory, user), pk='from-url')

        log = AuditLog.objects.get()
        assert log.entity_id == 'from-url'
        assert log.action == AuditAction.DELETE

    def test_skips_error_responses(self, request_factory, user, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            self.FakeView().rejected(self._request(request_factory, user), pk='x')

        assert AuditLog.objects.count() == 0
