"""
排行榜API路由
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from brainbolt.core.dependencies import get_quiz_service
from brainbolt.models import UserProgress
from brainbolt.services.quiz_service import QuizService


router = APIRouter(prefix="/leaderboard", tags=["排行榜"])


class LeaderboardEntry(BaseModel):
    """排行榜条目"""
    user_id: str
    total_score: int
    max_streak: int
    streak: int
    current_difficulty: int


def _to_entries(users: List[UserProgress]) -> List[LeaderboardEntry]:
    return [
        LeaderboardEntry(
            user_id=u.user_id,
            total_score=u.total_score,
            max_streak=u.max_streak,
            streak=u.streak,
            current_difficulty=u.current_difficulty
        )
        for u in users
    ]


@router.get("/score", response_model=List[LeaderboardEntry])
async def leaderboard_by_score(
    limit: Optional[int] = Query(None, ge=1, le=100),
    service: QuizService = Depends(get_quiz_service)
):
    """总分排行榜"""
    return _to_entries(service.leaderboard_by_score(limit))


@router.get("/streak", response_model=List[LeaderboardEntry])
async def leaderboard_by_streak(
    limit: Optional[int] = Query(None, ge=1, le=100),
    service: QuizService = Depends(get_quiz_service)
):
    """最高连胜排行榜"""
    return _to_entries(service.leaderboard_by_streak(limit))
