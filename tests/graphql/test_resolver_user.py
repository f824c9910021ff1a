"""
Tests for user GraphQL resolvers
"""

import threading
from unittest.mock import MagicMock, patch

import pytest
import strawberry

from bills.errors import ConflictError, ValidationError
from bills.graphql.resolvers.user import (
    create_user,
    parse_user_id,
    resolve_user_by_id,
    resolve_users,
)
from bills.graphql.types.user import Role, User


class TestResolveUsers:
    @pytest.mark.asyncio
    async def test_returns_all_users_in_order(self, mock_info):
        result = await resolve_users(mock_info)

        assert [u.name for u in result] == ["Pasha", "Ira"]
        assert all(isinstance(u, User) for u in result)
        assert result[0].id == "1"
        assert result[0].role is Role.SUPERADMIN

    @pytest.mark.asyncio
    async def test_empty_store_returns_empty_list(self, empty_store):
        info = MagicMock(spec=strawberry.Info)
        info.context = {"store": empty_store}

        assert await resolve_users(info) == []

    @pytest.mark.asyncio
    async def test_missing_store_in_context(self):
        info = MagicMock(spec=strawberry.Info)
        info.context = {}

        with pytest.raises(RuntimeError, match="Entity store"):
            await resolve_users(info)


class TestResolveUserById:
    """Tests for resolve_user_by_id function."""

    @pytest.mark.asyncio
    async def test_existing_user(self, mock_info):
        result = await resolve_user_by_id(mock_info, "1")

        assert result is not None
        assert result.id == "1"
        assert result.name == "Pasha"
        assert result.email == "pasha@gmail.com"
        assert result.token is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_id", ["3", "0", "-5", "abc", "", "1.5", "0_1", "1_0", "١"])
    async def test_absent_or_invalid_id_returns_none(self, mock_info, user_id):
        assert await resolve_user_by_id(mock_info, user_id) is None


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_creates_and_returns_user(self, mock_info, store):
        result = await create_user(mock_info, "Ann", "ann@x.com", "pw")

        assert result.id == "3"
        assert result.name == "Ann"
        assert result.role is Role.USER
        assert result.token is None
        assert len(store) == 3

    @pytest.mark.asyncio
    async def test_validation_error_propagates(self, mock_info, store):
        with pytest.raises(ValidationError):
            await create_user(mock_info, "", "a@b.com", "pw")

        assert len(store) == 2

    @pytest.mark.asyncio
    async def test_conflict_error_propagates(self, mock_info):
        with pytest.raises(ConflictError):
            await create_user(mock_info, "Ira Again", "ira@gmail.com", "pw")

    @pytest.mark.asyncio
    async def test_store_write_runs_off_the_event_loop_thread(self, mock_info, store):
        loop_thread = threading.get_ident()
        calls: list[int] = []
        original = store.create_user

        def record_thread(*args, **kwargs):
            calls.append(threading.get_ident())
            return original(*args, **kwargs)

        with patch.object(store, "create_user", side_effect=record_thread):
            result = await create_user(mock_info, "Ann", "ann@x.com", "pw")

        assert result.name == "Ann"
        assert len(calls) == 1
        assert calls[0] != loop_thread


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("1", 1),
        (" 2 ", 2),
        ("+2", 2),
        ("abc", None),
        ("", None),
        ("0_1", None),
        ("1_0", None),
        ("١", None),
    ],
)
def test_parse_user_id(raw, expected):
    assert parse_user_id(raw) == expected
