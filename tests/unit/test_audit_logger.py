"""Tests for the audit logger and audit queries."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from starlette.datastructures import Headers

from neo_rbac.core.exceptions import InvalidAuditQueryError, ValidationFailedError
from neo_rbac.features.audit import (
    AuditAction,
    AuditActor,
    AuditLogEntry,
    AuditLogger,
    AuditLogQuery,
    AuditTargetType,
    get_ip_address_from_request,
)

from tests.helpers.fakes import FakeAuditRepository


def _request(headers=None, client_host="198.51.100.1"):
    request = MagicMock()
    request.headers = Headers(headers or {})
    request.client = MagicMock(host=client_host) if client_host else None
    return request


class TestAppend:
    @pytest.mark.asyncio
    async def test_append_persists(self, audit_logger, store):
        await audit_logger.append(
            AuditLogEntry(action=AuditAction.LOGOUT, target_type=AuditTargetType.USER, target_id=1)
        )

        assert len(store.audit_logs) == 1
        assert store.audit_logs[0].target_id == "1"

    @pytest.mark.asyncio
    async def test_append_never_raises(self, store, caplog):
        audit_logger = AuditLogger(FakeAuditRepository(store, fail=True))

        await audit_logger.log_role_assigned(None, "42", "role-1", "MODERATOR")

        assert store.audit_logs == []
        assert "Failed to write audit entry ROLE_ASSIGNED" in caplog.text

    @pytest.mark.asyncio
    async def test_append_swallows_unexpected_errors(self):
        repository = AsyncMock()
        repository.insert.side_effect = RuntimeError("disk on fire")
        audit_logger = AuditLogger(repository)

        await audit_logger.log_logout(AuditActor(id="1", username="u"))

        repository.insert.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_ip_address_dropped_when_capture_disabled(self, audit_repo, store):
        audit_logger = AuditLogger(audit_repo, capture_ip_address=False)

        await audit_logger.log_role_removed(AuditActor("1", "root", "203.0.113.7"), "42", "r1")

        assert store.audit_logs[0].ip_address is None
        assert store.audit_logs[0].actor_username == "root"

    def test_strings_truncated_to_column_width(self):
        entry = AuditLogEntry(
            action="ROLE_CREATED",
            target_type="ROLE",
            target_name="n" * 300,
            actor_username="u" * 256,
        )

        assert len(entry.target_name) == 255
        assert len(entry.actor_username) == 255
        assert entry.action == AuditAction.ROLE_CREATED

    def test_unknown_action_rejected(self):
        with pytest.raises(ValueError):
            AuditLogEntry(action="ROLE_EXPLODED", target_type="ROLE")


class TestTypedHelpers:
    @pytest.mark.asyncio
    async def test_bootstrap_entry_uses_system_actor(self, audit_logger, store):
        await audit_logger.log_bootstrap_super_admin(42, "admin@example.com", "role-1")

        entry = store.audit_logs[0]
        assert entry.action == AuditAction.BOOTSTRAP_SUPER_ADMIN
        assert entry.actor_id is None
        assert entry.actor_username == "SYSTEM"
        assert entry.target_id == "42"
        assert entry.target_name == "admin@example.com"
        assert entry.details["roleName"] == "SUPER_ADMIN"
        assert "reason" in entry.details

    @pytest.mark.asyncio
    async def test_authorization_denied(self, audit_logger, store):
        actor = AuditActor(id="7", username="bob", ip_address="192.0.2.10")

        await audit_logger.log_authorization_denied(actor, ["users:write"], path="/users", method="POST")

        entry = store.audit_logs[0]
        assert entry.action == AuditAction.AUTHORIZATION_DENIED
        assert entry.target_type == AuditTargetType.SYSTEM
        assert entry.success is False
        assert entry.details == {"requiredPermissions": ["users:write"], "path": "/users", "method": "POST"}

    @pytest.mark.asyncio
    async def test_login_events(self, audit_logger, store):
        actor = AuditActor(id="7", username="bob")

        await audit_logger.log_login(actor, success=True)
        await audit_logger.log_login(actor, success=False)

        assert [entry.action for entry in store.audit_logs] == [AuditAction.LOGIN_SUCCESS, AuditAction.LOGIN_FAILURE]
        assert [entry.success for entry in store.audit_logs] == [True, False]


class TestQuery:
    @pytest_asyncio.fixture
    async def populated(self, audit_logger, store):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        for index, action in enumerate([AuditAction.ROLE_CREATED, AuditAction.ROLE_ASSIGNED, AuditAction.ROLE_ASSIGNED]):
            await audit_logger.log_event(action, AuditTargetType.USER, actor=AuditActor(id="1", username="root"), target_id=index)
            store.audit_logs[-1].timestamp = base + timedelta(hours=index)
        return base

    @pytest.mark.asyncio
    async def test_newest_first(self, audit_logger, populated):
        entries = await audit_logger.query()

        assert [entry.target_id for entry in entries] == ["2", "1", "0"]

    @pytest.mark.asyncio
    async def test_filters_are_conjunctive(self, audit_logger, populated):
        entries = await audit_logger.query(action="ROLE_ASSIGNED", actorId="1", targetId="1")

        assert [entry.target_id for entry in entries] == ["1"]

    @pytest.mark.asyncio
    async def test_time_range(self, audit_logger, populated):
        entries = await audit_logger.query(start_date=populated + timedelta(minutes=30), end_date=populated + timedelta(hours=1))

        assert [entry.target_id for entry in entries] == ["1"]

    @pytest.mark.asyncio
    async def test_pagination(self, audit_logger, populated):
        entries = await audit_logger.query(limit=1, offset=1)

        assert [entry.target_id for entry in entries] == ["1"]

    @pytest.mark.asyncio
    async def test_reversed_range_rejected_before_store(self, audit_repo):
        audit_logger = AuditLogger(audit_repo)
        now = datetime.now(timezone.utc)

        with pytest.raises(InvalidAuditQueryError):
            await audit_logger.query(startDate=now, endDate=now - timedelta(days=1))

        assert audit_repo.query_calls == 0

    @pytest.mark.asyncio
    async def test_mixed_timezone_range_rejected_cleanly(self, audit_repo):
        audit_logger = AuditLogger(audit_repo)

        with pytest.raises(InvalidAuditQueryError):
            await audit_logger.query(startDate="2024-01-02T00:00:00Z", endDate="2024-01-01T00:00:00")

        assert audit_repo.query_calls == 0

    def test_naive_bounds_read_as_utc(self, audit_repo):
        query = AuditLogger(audit_repo).build_query(startDate="2024-01-01T00:00:00", endDate="2024-01-02T00:00:00Z")

        assert query.start_date == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert query.end_date.tzinfo is not None

    @pytest.mark.asyncio
    async def test_invalid_pagination_rejected(self, audit_logger):
        with pytest.raises(ValidationFailedError):
            await audit_logger.query(limit=0)
        with pytest.raises(ValidationFailedError):
            await audit_logger.query(offset=-1)

    @pytest.mark.asyncio
    async def test_unknown_filter_rejected(self, audit_logger):
        with pytest.raises(InvalidAuditQueryError):
            await audit_logger.query(tenant="acme")

    @pytest.mark.asyncio
    async def test_limit_clamped_to_cap(self):
        repository = AsyncMock()
        repository.query.return_value = []
        audit_logger = AuditLogger(repository, default_limit=100, max_limit=1000)

        await audit_logger.query(limit=5000)
        assert repository.query.call_args.kwargs["limit"] == 1000

        await audit_logger.query()
        assert repository.query.call_args.kwargs["limit"] == 100

    @pytest.mark.asyncio
    async def test_accepts_prebuilt_query(self):
        repository = AsyncMock()
        repository.query.return_value = []
        audit_logger = AuditLogger(repository)
        filters = AuditLogQuery(action=AuditAction.LOGOUT, offset=20)

        await audit_logger.query(filters)

        repository.query.assert_awaited_once_with(filters, limit=100, offset=20)


class TestIpAddress:
    def test_cloudflare_header_first(self):
        request = _request({"CF-Connecting-IP": "203.0.113.5", "X-Forwarded-For": "198.51.100.9"})
        assert get_ip_address_from_request(request) == "203.0.113.5"

    def test_first_forwarded_hop(self):
        request = _request({"X-Forwarded-For": "198.51.100.9, 10.0.0.1"})
        assert get_ip_address_from_request(request) == "198.51.100.9"

    def test_falls_back_to_peer(self):
        assert get_ip_address_from_request(_request()) == "198.51.100.1"

    def test_no_peer(self):
        assert get_ip_address_from_request(_request(client_host=None)) is None
