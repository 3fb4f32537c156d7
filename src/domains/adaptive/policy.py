# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Streak-based difficulty policy.

A learner's progress on a unit moves through the difficulty tiers
EASY -> MEDIUM -> HARD -> EXPERT. Each answer updates the streak counters;
every full promotion streak (3 correct in a row by default) moves one tier
up and every full demotion streak moves one tier down. Streaks keep
counting across a move, so 6 in a row from EASY ends at HARD. The tiers
saturate at EASY and EXPERT; there is no terminal
state.

Mastery is a 0-100 score weighted the same way as topic mastery in the
semantic memory layer:
- Accuracy (60% weight)
- Current streak bonus (up to 25%)
- Best streak bonus (up to 15%)

The policy is pure: it takes a ProgressState and returns a new one.
"""

from dataclasses import dataclass, replace

from src.models.question import DifficultyLevel

DEFAULT_PROMOTE_AFTER = 3
DEFAULT_DEMOTE_AFTER = 3


@dataclass(frozen=True)
class ProgressState:
    """Snapshot of a learner's adaptive progress on one unit/topic.

    Attributes:
        difficulty: Current recommended tier.
        consecutive_correct: Correct answers in a row since the last miss.
        consecutive_wrong: Wrong answers in a row since the last hit.
        best_streak: Longest correct run ever observed.
        total_attempts: Answers recorded.
        correct_attempts: Correct answers recorded.
        total_time_spent: Seconds spent across all answers.
        mastery_level: Derived 0-100 mastery score.
    """

    difficulty: DifficultyLevel = DifficultyLevel.EASY
    consecutive_correct: int = 0
    consecutive_wrong: int = 0
    best_streak: int = 0
    total_attempts: int = 0
    correct_attempts: int = 0
    total_time_spent: int = 0
    mastery_level: int = 0


class DifficultyPolicy:
    """Applies answers to a ProgressState.

    Attributes:
        promote_after: Correct streak that triggers a move up.
        demote_after: Wrong streak that triggers a move down.

    Example:
        >>> policy = DifficultyPolicy()
        >>> state = ProgressState()
        >>> for _ in range(3):
        ...     state = policy.apply(state, was_correct=True)
        >>> state.difficulty
        <DifficultyLevel.MEDIUM: 'MEDIUM'>
    """

    def __init__(
        self,
        promote_after: int = DEFAULT_PROMOTE_AFTER,
        demote_after: int = DEFAULT_DEMOTE_AFTER,
    ) -> None:
        if promote_after < 1 or demote_after < 1:
            raise ValueError("Streak thresholds must be at least 1")
        self.promote_after = promote_after
        self.demote_after = demote_after

    def apply(
        self,
        state: ProgressState,
        was_correct: bool,
        time_spent: int | None = None,
    ) -> ProgressState:
        """Record one answer and return the resulting state.

        Args:
            state: Progress before the answer.
            was_correct: Whether the answer was correct.
            time_spent: Seconds spent on the question, if known.

        Returns:
            Progress after the answer, with difficulty and mastery updated.
        """
        if was_correct:
            consecutive_correct = state.consecutive_correct + 1
            consecutive_wrong = 0
            correct_attempts = state.correct_attempts + 1
        else:
            consecutive_correct = 0
            consecutive_wrong = state.consecutive_wrong + 1
            correct_attempts = state.correct_attempts

        difficulty = state.difficulty
        if was_correct and consecutive_correct % self.promote_after == 0:
            difficulty = difficulty.harder()
        elif not was_correct and consecutive_wrong % self.demote_after == 0:
            difficulty = difficulty.easier()

        new_state = replace(
            state,
            difficulty=difficulty,
            consecutive_correct=consecutive_correct,
            consecutive_wrong=consecutive_wrong,
            best_streak=max(state.best_streak, consecutive_correct),
            total_attempts=state.total_attempts + 1,
            correct_attempts=correct_attempts,
            total_time_spent=state.total_time_spent + (time_spent or 0),
        )
        return replace(new_state, mastery_level=calculate_mastery(new_state))


def calculate_mastery(state: ProgressState) -> int:
    """Calculate the 0-100 mastery score of a progress state.

    Args:
        state: Progress whose counters are already up to date.

    Returns:
        Mastery percentage, 0 without attempts.
    """
    if state.total_attempts == 0:
        return 0

    accuracy = state.correct_attempts / state.total_attempts
    streak_bonus = min(state.consecutive_correct / 10, 0.25)
    best_streak_bonus = min(state.best_streak / 20, 0.15)

    mastery = (accuracy * 0.6) + streak_bonus + best_streak_bonus
    return round(max(0.0, min(1.0, mastery)) * 100)
