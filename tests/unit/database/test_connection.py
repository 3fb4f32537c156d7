# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for database connection management."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from src.infrastructure.database import connection
from src.infrastructure.database.connection import (
    DatabaseError,
    check_database_connection,
    get_engine,
    get_session,
)


@pytest.fixture
def mock_sessionmaker():
    """Patch the module sessionmaker with one yielding a mock session."""
    session = AsyncMock()
    maker = MagicMock()
    maker.return_value.__aenter__.return_value = session
    with patch.object(connection, "_sessionmaker", maker):
        yield session


class TestConnection:
    """Tests for the engine and session helpers."""

    def test_engine_requires_init(self):
        """Test the engine is unavailable before init_database."""
        with patch.object(connection, "_engine", None):
            with pytest.raises(DatabaseError):
                get_engine()

    @pytest.mark.asyncio
    async def test_check_without_engine(self):
        """Test an uninitialized database is reported unreachable."""
        with patch.object(connection, "_engine", None):
            assert await check_database_connection() is False

    @pytest.mark.asyncio
    async def test_session_commits(self, mock_sessionmaker):
        """Test a clean unit of work is committed."""
        async with get_session() as session:
            assert session is mock_sessionmaker

        mock_sessionmaker.commit.assert_awaited_once()
        mock_sessionmaker.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_session_wraps_sqlalchemy_errors(self, mock_sessionmaker):
        """Test SQLAlchemy errors roll back and surface as DatabaseError."""
        with pytest.raises(DatabaseError) as exc_info:
            async with get_session():
                raise OperationalError("SELECT 1", {}, Exception("server closed"))

        mock_sessionmaker.rollback.assert_awaited_once()
        assert isinstance(exc_info.value.original_error, OperationalError)

    @pytest.mark.asyncio
    async def test_session_passes_domain_errors(self, mock_sessionmaker):
        """Test other errors roll back and propagate unchanged."""
        with pytest.raises(KeyError):
            async with get_session():
                raise KeyError("unit")

        mock_sessionmaker.rollback.assert_awaited_once()
        mock_sessionmaker.commit.assert_not_awaited()
