# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest fixtures for database integration tests.

Runs against TEST_DATABASE_URL when set (for example a PostgreSQL test
database), otherwise against a throwaway SQLite file.
"""

import os
from typing import Any, AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.infrastructure.database.models import Base, Question, Topic, Unit, new_id
from src.models.question import DifficultyLevel

QUESTIONS_PER_TIER = 15


@pytest.fixture(scope="session")
def database_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Get database URL for tests."""
    default = f"sqlite+aiosqlite:///{tmp_path_factory.mktemp('db') / 'practice_test.db'}"
    return os.environ.get("TEST_DATABASE_URL", default)


@pytest_asyncio.fixture(scope="function")
async def db_engine(database_url: str):
    """Create async engine with a fresh schema."""
    engine = create_async_engine(database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory; each test request opens its own session from it."""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create async session for direct database checks."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def question_bank(session_factory) -> dict[str, Any]:
    """Seed one unit with two topics and an approved bank per tier.

    Every question's correct answer is "A". A second unit with its own
    question checks that answers never leak across units.

    Returns:
        IDs of the seeded unit, its first topic and the other unit, and
        the number of approved questions in the seeded unit.
    """
    unit = Unit(id=new_id(), unit_number=1, name="Primitive Types", is_active=True)
    topics = [
        Topic(id=new_id(), name="Arithmetic Expressions", order_index=0),
        Topic(id=new_id(), name="Casting and Ranges of Variables", order_index=1),
    ]
    unit.topics = topics
    other_unit = Unit(id=new_id(), unit_number=2, name="Using Objects", is_active=True)

    async with session_factory() as session:
        session.add_all([unit, other_unit])
        await session.flush()

        for difficulty in DifficultyLevel.ordered():
            for index in range(QUESTIONS_PER_TIER):
                topic = topics[index % 2]
                session.add(
                    Question(
                        id=new_id(),
                        unit_id=unit.id,
                        topic_id=topic.id,
                        type="MULTIPLE_CHOICE",
                        difficulty=difficulty.value,
                        question_text=f"{difficulty.value} question {index}",
                        options=["right", "wrong", "also wrong", "still wrong"],
                        correct_answer="A",
                        explanation="The first option is right.",
                        is_approved=True,
                    )
                )
        session.add(
            Question(
                id=new_id(),
                unit_id=other_unit.id,
                type="MULTIPLE_CHOICE",
                difficulty="EASY",
                question_text="Which class holds text?",
                options=["String", "int"],
                correct_answer="A",
                explanation="String holds text.",
                is_approved=True,
            )
        )
        await session.commit()

    return {
        "unit_id": unit.id,
        "topic_id": topics[0].id,
        "other_unit_id": other_unit.id,
        "bank_size": QUESTIONS_PER_TIER * len(DifficultyLevel.ordered()),
    }
