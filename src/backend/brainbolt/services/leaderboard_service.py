"""
排行榜服务
按总分 / 最高连胜排序，同分按用户创建顺序
"""
from dataclasses import dataclass
from typing import Callable, List, Optional

from brainbolt.core.exceptions import QuizValidationError
from brainbolt.models import UserProgress
from brainbolt.services.progress_store import ProgressStore


@dataclass(frozen=True)
class UserRank:
    """用户排名（从 1 开始，0 表示用户不存在）"""
    score_rank: int
    streak_rank: int


def _by_score(p: UserProgress) -> int:
    return p.total_score


def _by_streak(p: UserProgress) -> int:
    return p.max_streak


class LeaderboardService:
    """排行榜服务"""

    def __init__(self, store: ProgressStore, default_size: int = 10):
        self._store = store
        self._default_size = default_size

    def _size(self, n: Optional[int]) -> int:
        if n is None:
            return self._default_size
        if n < 1:
            raise QuizValidationError(f"排行榜条数必须为正整数: {n}")
        return n

    def _ranked(self, key: Callable[[UserProgress], int]) -> List[UserProgress]:
        # sorted 是稳定排序，reverse 不改变同分用户的相对顺序
        return sorted(self._store.all(), key=key, reverse=True)

    def top_by_score(self, n: Optional[int] = None) -> List[UserProgress]:
        """总分排行榜（降序）"""
        return self._ranked(_by_score)[:self._size(n)]

    def top_by_streak(self, n: Optional[int] = None) -> List[UserProgress]:
        """最高连胜排行榜（降序）"""
        return self._ranked(_by_streak)[:self._size(n)]

    def rank_of(self, user_id: str) -> UserRank:
        """
        计算用户在全体用户中的排名

        每次调用全量排序，O(n log n)。
        """
        users = self._store.all()
        score_ids = [p.user_id for p in sorted(users, key=_by_score, reverse=True)]
        streak_ids = [p.user_id for p in sorted(users, key=_by_streak, reverse=True)]
        if user_id not in score_ids:
            return UserRank(score_rank=0, streak_rank=0)
        return UserRank(
            score_rank=score_ids.index(user_id) + 1,
            streak_rank=streak_ids.index(user_id) + 1,
        )
