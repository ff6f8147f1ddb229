"""
答题API路由
获取下一题、提交答案、用户统计
"""
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from brainbolt.core.dependencies import get_quiz_service
from brainbolt.core.exceptions import (
    DuplicateSubmissionError,
    QuestionNotFoundError,
    QuizValidationError,
    StaleStateVersionError,
)
from brainbolt.services.quiz_service import QuizService


router = APIRouter(prefix="/quiz", tags=["答题"])


# Schemas
class NextQuestionResponse(BaseModel):
    """下一题响应"""
    question_id: str
    difficulty: int
    prompt: str
    choices: List[str]
    session_id: str
    state_version: int
    current_score: int
    current_streak: int


class AnswerRequest(BaseModel):
    """提交答案请求"""
    user_id: str
    question_id: str
    selected_answer: str
    state_version: int = Field(..., ge=0)
    idempotency_key: Optional[str] = None


class AnswerResponse(BaseModel):
    """答题结果响应"""
    correct: bool
    correct_answer: str
    new_difficulty: int
    new_streak: int
    score_delta: int
    total_score: int
    state_version: int
    leaderboard_rank_score: int
    leaderboard_rank_streak: int


class MetricsResponse(BaseModel):
    """用户统计响应"""
    current_difficulty: int
    streak: int
    max_streak: int
    total_score: int
    accuracy: float
    difficulty_histogram: Dict[int, int]
    recent_performance: float


# Endpoints
@router.get("/next", response_model=NextQuestionResponse)
async def next_question(
    user_id: Optional[str] = None,
    service: QuizService = Depends(get_quiz_service)
):
    """获取下一题（不传 user_id 时分配新ID）"""
    q = service.next_question(user_id)
    return NextQuestionResponse(
        question_id=q.question_id,
        difficulty=q.difficulty,
        prompt=q.prompt,
        choices=list(q.choices),
        session_id=q.session_id,
        state_version=q.state_version,
        current_score=q.current_score,
        current_streak=q.current_streak
    )


@router.post("/answer", response_model=AnswerResponse)
async def submit_answer(
    request: AnswerRequest,
    service: QuizService = Depends(get_quiz_service)
):
    """提交答案"""
    try:
        outcome = service.submit_answer(
            user_id=request.user_id,
            question_id=request.question_id,
            selected_answer=request.selected_answer,
            state_version=request.state_version,
            idempotency_key=request.idempotency_key
        )
    except QuizValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except QuestionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DuplicateSubmissionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except StaleStateVersionError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": str(e), "state_version": e.current}
        )

    return AnswerResponse(
        correct=outcome.correct,
        correct_answer=outcome.correct_answer,
        new_difficulty=outcome.new_difficulty,
        new_streak=outcome.new_streak,
        score_delta=outcome.score_delta,
        total_score=outcome.total_score,
        state_version=outcome.state_version,
        leaderboard_rank_score=outcome.score_rank,
        leaderboard_rank_streak=outcome.streak_rank
    )


@router.get("/metrics", response_model=MetricsResponse)
async def get_metrics(
    user_id: Optional[str] = None,
    service: QuizService = Depends(get_quiz_service)
):
    """获取用户统计"""
    try:
        metrics = service.metrics_for(user_id)
    except QuizValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return MetricsResponse(
        current_difficulty=metrics.current_difficulty,
        streak=metrics.streak,
        max_streak=metrics.max_streak,
        total_score=metrics.total_score,
        accuracy=metrics.accuracy,
        difficulty_histogram=metrics.difficulty_histogram,
        recent_performance=metrics.recent_performance
    )
