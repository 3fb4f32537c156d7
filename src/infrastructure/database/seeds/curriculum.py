# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Curriculum seed data.

This module provides seed data for the practice database:
- AP Computer Science A units and their topics
- A small set of approved starter questions for the first unit

Seeding is idempotent: units that already exist (by unit number) are
left untouched, and questions are only added to freshly created units.
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.models import Question, Topic, Unit, new_id
from src.utils.logging import get_logger

logger = get_logger(__name__)


UNITS_DATA: list[dict[str, Any]] = [
    {
        "unit_number": 1,
        "name": "Primitive Types",
        "description": "Variables, data types, arithmetic operators, and compound assignment",
        "icon": "🔢",
        "color": "#3B82F6",
        "topics": ["Variables and Data Types", "Arithmetic Expressions", "Compound Assignment Operators", "Casting and Ranges of Variables"],
    },
    {
        "unit_number": 2,
        "name": "Using Objects",
        "description": "Object instantiation, calling methods, String and Math classes",
        "icon": "📦",
        "color": "#10B981",
        "topics": ["Creating and Storing Objects", "Calling Methods", "String Methods", "Wrapper Classes", "Math Class"],
    },
    {
        "unit_number": 3,
        "name": "Boolean Expressions and if Statements",
        "description": "Boolean expressions, conditional statements, and compound booleans",
        "icon": "🔀",
        "color": "#F59E0B",
        "topics": ["Boolean Expressions", "if Statements", "Compound Boolean Expressions", "Comparing Objects"],
    },
    {
        "unit_number": 4,
        "name": "Iteration",
        "description": "While loops, for loops, and nested iteration",
        "icon": "🔄",
        "color": "#8B5CF6",
        "topics": ["while Loops", "for Loops", "String Algorithms", "Nested Iteration"],
    },
    {
        "unit_number": 5,
        "name": "Writing Classes",
        "description": "Class design, constructors, methods, encapsulation, and scope",
        "icon": "🏗️",
        "color": "#EC4899",
        "topics": ["Anatomy of a Class", "Constructors", "Accessor and Mutator Methods", "Static Variables and Methods", "Scope and Access"],
    },
    {
        "unit_number": 6,
        "name": "Array",
        "description": "One-dimensional arrays, array algorithms, and traversals",
        "icon": "📊",
        "color": "#06B6D4",
        "topics": ["Array Creation and Access", "Traversing Arrays", "Enhanced for Loop", "Array Algorithms"],
    },
    {
        "unit_number": 7,
        "name": "ArrayList",
        "description": "ArrayList class, methods, and algorithms",
        "icon": "📝",
        "color": "#14B8A6",
        "topics": ["ArrayList Methods", "Traversing ArrayLists", "Searching and Sorting"],
    },
    {
        "unit_number": 8,
        "name": "2D Array",
        "description": "Two-dimensional arrays and 2D array algorithms",
        "icon": "🎯",
        "color": "#F97316",
        "topics": ["2D Arrays", "Traversing 2D Arrays"],
    },
    {
        "unit_number": 9,
        "name": "Inheritance",
        "description": "Superclasses, subclasses, method overriding, and polymorphism",
        "icon": "🌳",
        "color": "#84CC16",
        "topics": ["Superclasses and Subclasses", "Overriding Methods", "super Keyword", "Polymorphism"],
    },
    {
        "unit_number": 10,
        "name": "Recursion",
        "description": "Recursive methods and recursive algorithms",
        "icon": "♾️",
        "color": "#A855F7",
        "topics": ["Recursive Methods", "Recursive Searching and Sorting"],
    },
]

# Starter questions keyed by unit number, each referencing a topic by name
QUESTIONS_DATA: dict[int, list[dict[str, Any]]] = {
    1: [
        {
            "topic": "Variables and Data Types",
            "type": "MULTIPLE_CHOICE",
            "difficulty": "EASY",
            "question_text": "Which of the following is a primitive type in Java?",
            "options": ["String", "int", "Integer", "ArrayList"],
            "correct_answer": "B",
            "explanation": "int is a primitive type. String, Integer and ArrayList are classes.",
        },
        {
            "topic": "Arithmetic Expressions",
            "type": "MULTIPLE_CHOICE",
            "difficulty": "EASY",
            "question_text": "What is the value of the expression 7 / 2 in Java?",
            "options": ["3.5", "3", "4", "3.0"],
            "correct_answer": "B",
            "explanation": "Both operands are int, so integer division truncates the result to 3.",
        },
        {
            "topic": "Arithmetic Expressions",
            "type": "MULTIPLE_CHOICE",
            "difficulty": "EASY",
            "question_text": "What is the value of 17 % 5?",
            "options": ["3", "2", "3.4", "0"],
            "correct_answer": "B",
            "explanation": "17 divided by 5 is 3 with a remainder of 2.",
        },
        {
            "topic": "Compound Assignment Operators",
            "type": "CODE_ANALYSIS",
            "difficulty": "MEDIUM",
            "question_text": "What is printed by the following code?",
            "code_snippet": "int x = 5;\nx += 3;\nx *= 2;\nx--;\nSystem.out.println(x);",
            "options": None,
            "correct_answer": "15",
            "explanation": "x becomes 8 after += 3, 16 after *= 2 and 15 after the decrement.",
        },
        {
            "topic": "Casting and Ranges of Variables",
            "type": "MULTIPLE_CHOICE",
            "difficulty": "MEDIUM",
            "question_text": "What is the value of (int) 3.99?",
            "options": ["4", "3", "3.99", "It does not compile"],
            "correct_answer": "B",
            "explanation": "Casting a double to int truncates toward zero.",
        },
        {
            "topic": "Casting and Ranges of Variables",
            "type": "MULTIPLE_CHOICE",
            "difficulty": "HARD",
            "question_text": "What is printed by System.out.println(Integer.MAX_VALUE + 1);?",
            "options": ["2147483648", "-2147483648", "An ArithmeticException is thrown", "0"],
            "correct_answer": "B",
            "explanation": "int arithmetic overflows silently and wraps around to Integer.MIN_VALUE.",
        },
        {
            "topic": "Arithmetic Expressions",
            "type": "MULTIPLE_CHOICE",
            "difficulty": "HARD",
            "question_text": "What is the value of 1 / 2 * 4.0 + 3 % 2?",
            "options": ["3.0", "1.0", "2.0", "0.0"],
            "correct_answer": "B",
            "explanation": "1 / 2 is 0 (integer division), 0 * 4.0 is 0.0 and 3 % 2 is 1, so the result is 1.0.",
        },
        {
            "topic": "Casting and Ranges of Variables",
            "type": "CODE_ANALYSIS",
            "difficulty": "EXPERT",
            "question_text": "What is printed by the following code?",
            "code_snippet": "double d = 7 / 2 + (double) 7 / 2;\nint i = (int) (d * 2) % 5;\nSystem.out.println(i);",
            "options": None,
            "correct_answer": "3",
            "explanation": "d is 3 + 3.5 = 6.5, d * 2 is 13.0, cast to 13, and 13 % 5 is 3.",
        },
    ],
}


async def seed_units(session: AsyncSession) -> list[Unit]:
    """Seed the curriculum units and their topics.

    Args:
        session: Database session.

    Returns:
        List of newly created units.
    """
    result = await session.execute(select(Unit.unit_number))
    existing = set(result.scalars().all())

    created: list[Unit] = []
    for unit_data in UNITS_DATA:
        if unit_data["unit_number"] in existing:
            continue

        unit = Unit(
            id=new_id(),
            unit_number=unit_data["unit_number"],
            name=unit_data["name"],
            description=unit_data["description"],
            icon=unit_data["icon"],
            color=unit_data["color"],
            is_active=True,
        )
        unit.topics = [
            Topic(id=new_id(), name=name, order_index=index)
            for index, name in enumerate(unit_data["topics"])
        ]
        session.add(unit)
        created.append(unit)

    await session.flush()
    logger.info("Seeded units", count=len(created))
    return created


async def seed_questions(session: AsyncSession, units: list[Unit]) -> int:
    """Seed approved starter questions for the given units.

    Args:
        session: Database session.
        units: Units whose topics are loaded.

    Returns:
        Number of questions created.
    """
    count = 0
    for unit in units:
        topics = {topic.name: topic for topic in unit.topics}
        for question_data in QUESTIONS_DATA.get(unit.unit_number, []):
            topic = topics.get(question_data["topic"])
            session.add(
                Question(
                    id=new_id(),
                    unit_id=unit.id,
                    topic_id=topic.id if topic else None,
                    type=question_data["type"],
                    difficulty=question_data["difficulty"],
                    question_text=question_data["question_text"],
                    code_snippet=question_data.get("code_snippet"),
                    options=question_data["options"],
                    correct_answer=question_data["correct_answer"],
                    explanation=question_data["explanation"],
                    is_approved=True,
                    is_ai_generated=False,
                )
            )
            count += 1

    await session.flush()
    logger.info("Seeded questions", count=count)
    return count


async def seed_curriculum(session: AsyncSession) -> None:
    """Seed units, topics and starter questions.

    Args:
        session: Database session. The caller commits.
    """
    units = await seed_units(session)
    await seed_questions(session, units)
