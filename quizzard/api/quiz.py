"""
Quiz question and score submission API endpoints
"""
from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional
import logging

from quizzard.api.deps import AuthenticatedUser, get_current_user, get_trivia_service, client_address
from quizzard.database import get_db
from quizzard.schemas.quiz import QuizQuestionsResponse, QuizSubmission, QuizSubmitResponse
from quizzard.services.stats_service import stats_service
from quizzard.services.trivia_service import TriviaService
from quizzard.services.user_service import user_service

router = APIRouter(prefix="/quiz", tags=["quiz"])
logger = logging.getLogger(__name__)


@router.get("", response_model=QuizQuestionsResponse)
async def get_quiz_questions(
    request: Request,
    category: Optional[int] = Query(None, ge=1),
    difficulty: Optional[str] = Query(None, pattern="^(easy|medium|hard)$"),
    current: AuthenticatedUser = Depends(get_current_user),
    trivia: TriviaService = Depends(get_trivia_service)
):
    """
    Ten multiple-choice questions

    - Same batch for a user until they submit or it expires (30 min)
    - Falls back to cached or built-in questions when the provider fails
    """
    batch = await trivia.get_questions(
        identity=str(current.id),
        partition_key=client_address(request),
        category=category,
        difficulty=difficulty,
    )

    logger.info(f"Serving {len(batch.questions)} questions to {current.id} from {batch.source}")
    return QuizQuestionsResponse(questions=batch.questions, source=batch.source)


@router.post("/submit", response_model=QuizSubmitResponse)
async def submit_quiz(
    payload: Dict[str, Any] = Body(...),
    current: AuthenticatedUser = Depends(get_current_user),
    trivia: TriviaService = Depends(get_trivia_service),
    db: Session = Depends(get_db)
):
    """
    Submit a quiz result

    - Adds correctAnswers to mana
    - Sets mageMeter to this quiz's percentage
    - Records a Score for leaderboard totals
    """
    try:
        submission = QuizSubmission.model_validate(payload)
    except ValidationError as e:
        logger.info(f"Rejected quiz submission from {current.id}: {e.error_count()} errors")
        raise HTTPException(status_code=400, detail="Invalid quiz data")

    user = user_service.get_by_id(db, current.id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

    details = None
    if submission.questions is not None:
        details = [q.model_dump(by_alias=True) for q in submission.questions]

    result = stats_service.record_submission(
        db,
        user,
        category=submission.category,
        difficulty=submission.difficulty,
        question_count=submission.question_count,
        correct_answers=submission.correct_answers,
        questions=details,
    )

    # Next quiz for this user starts from a fresh batch
    trivia.forget(str(current.id))

    return QuizSubmitResponse(
        message="Score submitted successfully",
        user=result["user"],
        score=result["score"],
    )
