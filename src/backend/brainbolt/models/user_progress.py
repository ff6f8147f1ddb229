"""
用户进度模型
每个用户一条记录，首次访问时懒创建
"""
from dataclasses import dataclass
from datetime import datetime

DEFAULT_DIFFICULTY = 5


@dataclass
class UserProgress:
    """
    用户进度

    不变量：
    - current_difficulty 始终在 [1, 10]
    - max_streak >= streak >= 0，max_streak 单调不减
    - total_score 单调不减
    - correct_count <= total_attempts
    - state_version 每次成功答题恰好 +1，用作乐观并发令牌
    """
    user_id: str
    current_difficulty: int
    streak: int
    max_streak: int
    total_score: int
    correct_count: int
    total_attempts: int
    state_version: int
    last_answer_at: datetime

    @classmethod
    def new(cls, user_id: str, now: datetime) -> "UserProgress":
        """创建默认进度"""
        return cls(
            user_id=user_id,
            current_difficulty=DEFAULT_DIFFICULTY,
            streak=0,
            max_streak=0,
            total_score=0,
            correct_count=0,
            total_attempts=0,
            state_version=0,
            last_answer_at=now,
        )

    @property
    def accuracy(self) -> float:
        """总体正确率，无答题记录时为 0"""
        if self.total_attempts == 0:
            return 0.0
        return self.correct_count / self.total_attempts
