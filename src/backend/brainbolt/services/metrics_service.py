"""
用户统计服务
"""
from dataclasses import dataclass, field
from typing import Dict

from brainbolt.services.answer_history import AnswerHistoryLog
from brainbolt.services.progress_store import ProgressStore


@dataclass(frozen=True)
class UserMetrics:
    current_difficulty: int
    streak: int
    max_streak: int
    total_score: int
    accuracy: float  # 0-1
    difficulty_histogram: Dict[int, int] = field(default_factory=dict)
    recent_performance: float = 0.0  # 最近几题正确率（百分比）


class MetricsService:
    """基于进度和答题历史计算用户统计"""

    def __init__(self, store: ProgressStore, history: AnswerHistoryLog, recent_window: int = 5):
        self._store = store
        self._history = history
        self._recent_window = recent_window

    def metrics_for(self, user_id: str) -> UserMetrics:
        """
        获取用户统计快照

        Args:
            user_id: 用户ID（不存在时按默认进度创建）

        Returns:
            UserMetrics: 当前难度、连胜、总分、正确率、难度分布、近期表现
        """
        progress = self._store.get(user_id)
        entries = self._history.entries_for(user_id)

        histogram: Dict[int, int] = {}
        for entry in entries:
            histogram[entry.difficulty] = histogram.get(entry.difficulty, 0) + 1

        recent = self._history.recent_for(user_id, self._recent_window)
        recent_performance = 0.0
        if recent:
            recent_performance = sum(1 for e in recent if e.correct) / len(recent) * 100

        return UserMetrics(
            current_difficulty=progress.current_difficulty,
            streak=progress.streak,
            max_streak=progress.max_streak,
            total_score=progress.total_score,
            accuracy=progress.accuracy,
            difficulty_histogram=histogram,
            recent_performance=recent_performance,
        )
