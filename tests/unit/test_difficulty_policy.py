# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the streak-based difficulty policy."""

import pytest

from src.domains.adaptive.policy import (
    DifficultyPolicy,
    ProgressState,
    calculate_mastery,
)
from src.models.question import DifficultyLevel


def _answer(policy: DifficultyPolicy, state: ProgressState, *results: bool) -> ProgressState:
    for was_correct in results:
        state = policy.apply(state, was_correct)
    return state


class TestDifficultyLevel:
    """Tests for tier ordering and movement."""

    def test_ordering(self) -> None:
        """Test tiers compare by declaration order."""
        assert DifficultyLevel.EASY < DifficultyLevel.MEDIUM < DifficultyLevel.HARD
        assert DifficultyLevel.EXPERT > DifficultyLevel.HARD

    def test_movement_saturates(self) -> None:
        """Test harder/easier stop at the ends."""
        assert DifficultyLevel.EXPERT.harder() is DifficultyLevel.EXPERT
        assert DifficultyLevel.EASY.easier() is DifficultyLevel.EASY
        assert DifficultyLevel.MEDIUM.harder() is DifficultyLevel.HARD
        assert DifficultyLevel.MEDIUM.easier() is DifficultyLevel.EASY


class TestDifficultyPolicy:
    """Tests for DifficultyPolicy.apply."""

    def test_three_correct_promotes(self) -> None:
        """Test three correct answers in a row move EASY to MEDIUM."""
        policy = DifficultyPolicy()

        state = _answer(policy, ProgressState(), True, True)
        assert state.difficulty == DifficultyLevel.EASY

        state = policy.apply(state, was_correct=True)
        assert state.difficulty == DifficultyLevel.MEDIUM
        assert state.consecutive_correct == 3

    def test_six_correct_promotes_twice(self) -> None:
        """Test the streak keeps counting across a promotion."""
        policy = DifficultyPolicy()

        state = _answer(policy, ProgressState(), *([True] * 6))

        assert state.difficulty == DifficultyLevel.HARD
        assert state.consecutive_correct == 6
        assert state.best_streak == 6

    def test_saturates_at_expert(self) -> None:
        """Test further streaks at EXPERT keep the tier."""
        policy = DifficultyPolicy()

        state = _answer(
            policy,
            ProgressState(difficulty=DifficultyLevel.EXPERT),
            *([True] * 3),
        )

        assert state.difficulty == DifficultyLevel.EXPERT

    def test_three_wrong_demotes(self) -> None:
        """Test three wrong answers in a row move one tier down."""
        policy = DifficultyPolicy()

        state = _answer(
            policy,
            ProgressState(difficulty=DifficultyLevel.HARD),
            False,
            False,
            False,
        )

        assert state.difficulty == DifficultyLevel.MEDIUM
        assert state.consecutive_wrong == 3
        assert state.consecutive_correct == 0

    def test_saturates_at_easy(self) -> None:
        """Test wrong streaks at EASY keep the tier."""
        policy = DifficultyPolicy()

        state = _answer(policy, ProgressState(), False, False, False)

        assert state.difficulty == DifficultyLevel.EASY

    def test_miss_breaks_streak(self) -> None:
        """Test a wrong answer resets the correct streak."""
        policy = DifficultyPolicy()

        state = _answer(policy, ProgressState(), True, True, False, True, True)

        assert state.difficulty == DifficultyLevel.EASY
        assert state.consecutive_correct == 2
        assert state.best_streak == 2

    def test_counters_and_time(self) -> None:
        """Test attempts, correct answers and time accumulate."""
        policy = DifficultyPolicy()

        state = policy.apply(ProgressState(), was_correct=True, time_spent=30)
        state = policy.apply(state, was_correct=False, time_spent=None)
        state = policy.apply(state, was_correct=True, time_spent=15)

        assert state.total_attempts == 3
        assert state.correct_attempts == 2
        assert state.total_time_spent == 45

    def test_does_not_mutate_input(self) -> None:
        """Test apply returns a new state."""
        policy = DifficultyPolicy()
        original = ProgressState()

        policy.apply(original, was_correct=True)

        assert original.total_attempts == 0

    def test_custom_thresholds(self) -> None:
        """Test promotion follows a configured streak length."""
        policy = DifficultyPolicy(promote_after=2, demote_after=1)

        state = _answer(policy, ProgressState(), True, True)
        assert state.difficulty == DifficultyLevel.MEDIUM

        state = policy.apply(state, was_correct=False)
        assert state.difficulty == DifficultyLevel.EASY

    @pytest.mark.parametrize("promote_after,demote_after", [(0, 3), (3, 0)])
    def test_invalid_thresholds(self, promote_after: int, demote_after: int) -> None:
        """Test thresholds below 1 are rejected."""
        with pytest.raises(ValueError):
            DifficultyPolicy(promote_after=promote_after, demote_after=demote_after)


class TestCalculateMastery:
    """Tests for the mastery score."""

    def test_no_attempts(self) -> None:
        """Test mastery is 0 without attempts."""
        assert calculate_mastery(ProgressState()) == 0

    def test_weighted_score(self) -> None:
        """Test accuracy, current streak and best streak weights."""
        state = ProgressState(
            total_attempts=10,
            correct_attempts=8,
            consecutive_correct=2,
            best_streak=4,
        )

        # 0.8 * 0.6 + 0.2 + 0.2 capped at 0.15
        assert calculate_mastery(state) == 83

    def test_capped_at_100(self) -> None:
        """Test a perfect record with long streaks caps at 100."""
        state = ProgressState(
            total_attempts=40,
            correct_attempts=40,
            consecutive_correct=40,
            best_streak=40,
        )

        assert calculate_mastery(state) == 100

    def test_apply_updates_mastery(self) -> None:
        """Test apply stores the recomputed mastery."""
        state = DifficultyPolicy().apply(ProgressState(), was_correct=True)

        # 1.0 * 0.6 + 0.1 + 0.05
        assert state.mastery_level == 75
