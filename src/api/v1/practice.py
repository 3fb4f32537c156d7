# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Practice session API endpoints.

This module provides endpoints for practice sessions:
- POST /start - Start a new practice session
- POST /next-question - Get the next question of a session
- POST /submit-answer - Submit an answer
- POST /{session_id}/end - End the session and get its summary

Example:
    POST /api/v1/practice/start
    {
        "userId": "user_2abc",
        "unitId": "5b0f...",
        "userEmail": "student@example.com"
    }
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_practice_service
from src.domains.practice import (
    PracticeService,
    SessionCompleteError,
    SessionNotFoundError,
    UnitNotFoundError,
)
from src.domains.question import QuestionGenerationError, QuestionNotFoundError
from src.models.practice import (
    AnswerResultResponse,
    EndSessionResponse,
    NextQuestionRequest,
    NextQuestionResponse,
    StartSessionRequest,
    StartSessionResponse,
    SubmitAnswerRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _generation_failed(e: QuestionGenerationError) -> HTTPException:
    logger.error("Question generation failed: %s", e.message)
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail="No question available and question generation failed",
    )


@router.post(
    "/start",
    response_model=StartSessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start practice session",
    description="Start a new practice session. Returns the session, its first question and the recommended difficulty.",
)
async def start_session(
    data: StartSessionRequest,
    service: PracticeService = Depends(get_practice_service),
) -> StartSessionResponse:
    """Start a new practice session.

    Args:
        data: User, unit and optional topic.
        service: Practice service.

    Returns:
        StartSessionResponse with the session and first question.

    Raises:
        HTTPException: If the unit is not found or no question can be served.
    """
    try:
        return await service.start_session(data)
    except UnitNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Unit not found",
        )
    except QuestionGenerationError as e:
        raise _generation_failed(e)


@router.post(
    "/next-question",
    response_model=NextQuestionResponse,
    summary="Get next question",
    description="Get the next unseen question at the recommended difficulty. Question is null once the session is complete.",
)
async def get_next_question(
    data: NextQuestionRequest,
    service: PracticeService = Depends(get_practice_service),
) -> NextQuestionResponse:
    """Get the next question for a session.

    Args:
        data: Session, unit and the question IDs answered in this session.
        service: Practice service.

    Returns:
        NextQuestionResponse with the question, or null when complete.

    Raises:
        HTTPException: If the session is not found or no question can be served.
    """
    try:
        question = await service.get_next_question(data)
    except SessionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Practice session not found",
        )
    except QuestionGenerationError as e:
        raise _generation_failed(e)

    return NextQuestionResponse(question=question, is_session_complete=question is None)


@router.post(
    "/submit-answer",
    response_model=AnswerResultResponse,
    summary="Submit answer",
    description="Submit an answer and get correctness, explanation and updated progress.",
)
async def submit_answer(
    data: SubmitAnswerRequest,
    service: PracticeService = Depends(get_practice_service),
) -> AnswerResultResponse:
    """Submit an answer for a question.

    Args:
        data: Session, question and answer.
        service: Practice service.

    Returns:
        AnswerResultResponse with feedback and progress.

    Raises:
        HTTPException: If the session or question is not found, or the
            session is already complete.
    """
    try:
        return await service.submit_answer(data)
    except SessionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Practice session not found",
        )
    except QuestionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Question not found",
        )
    except SessionCompleteError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Practice session is already complete",
        )


@router.post(
    "/{session_id}/end",
    response_model=EndSessionResponse,
    summary="End practice session",
    description="End the session and get its summary with topic and difficulty breakdowns.",
)
async def end_session(
    session_id: str,
    service: PracticeService = Depends(get_practice_service),
) -> EndSessionResponse:
    """End a practice session.

    Args:
        session_id: The session ID.
        service: Practice service.

    Returns:
        EndSessionResponse with the finalized session and summary.

    Raises:
        HTTPException: If the session is not found.
    """
    try:
        return await service.end_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Practice session not found",
        )
