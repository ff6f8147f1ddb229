"""
自适应计分算法工具类
"""
import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from brainbolt.models import MAX_DIFFICULTY, MIN_DIFFICULTY, Question, UserProgress


@dataclass(frozen=True)
class ScoringResult:
    """单次答题的计分结果"""
    progress: UserProgress
    correct: bool
    score_delta: int


class ScoringEngine:
    """答题计分与难度调整"""

    DIFFICULTY_WEIGHT = 10       # 每级难度的基础分
    STREAK_BONUS = 0.1           # 每次连胜增加的倍率
    MAX_STREAK_MULTIPLIER = 2.0
    ACCURACY_BASE = 0.5          # 正确率系数 = 0.5 + 正确率
    RAMP_UP_STREAK = 2           # 连续答对 2 题才升级

    @classmethod
    def streak_multiplier(cls, streak: int) -> float:
        return min(1 + streak * cls.STREAK_BONUS, cls.MAX_STREAK_MULTIPLIER)

    @classmethod
    def score(
        cls,
        progress: UserProgress,
        question: Question,
        selected_answer: str,
        now: datetime,
    ) -> ScoringResult:
        """
        计算答题后的新进度

        纯函数，不修改传入的 progress。

        规则：
        - 答对：连胜 +1，按 难度权重 × 连胜倍率 × 正确率系数 计分（向下取整）；
          连胜 >= 2 时难度 +1（上限 10）
        - 答错：连胜清零，不得分，难度立即 -1（下限 1）

        Args:
            progress: 当前进度
            question: 所答题目
            selected_answer: 用户答案（逐字比较）
            now: 答题时间

        Returns:
            ScoringResult: 新进度、是否正确、得分
        """
        correct = selected_answer == question.correct_answer
        total_attempts = progress.total_attempts + 1

        if correct:
            correct_count = progress.correct_count + 1
            streak = progress.streak + 1
            accuracy = correct_count / total_attempts
            accuracy_factor = cls.ACCURACY_BASE + accuracy
            difficulty_weight = question.difficulty * cls.DIFFICULTY_WEIGHT
            score_delta = math.floor(difficulty_weight * cls.streak_multiplier(streak) * accuracy_factor)

            difficulty = progress.current_difficulty
            if streak >= cls.RAMP_UP_STREAK:
                difficulty = min(MAX_DIFFICULTY, difficulty + 1)

            updated = replace(
                progress,
                correct_count=correct_count,
                streak=streak,
                max_streak=max(progress.max_streak, streak),
                total_score=progress.total_score + score_delta,
                current_difficulty=difficulty,
            )
        else:
            score_delta = 0
            updated = replace(
                progress,
                streak=0,
                current_difficulty=max(MIN_DIFFICULTY, progress.current_difficulty - 1),
            )

        updated = replace(
            updated,
            total_attempts=total_attempts,
            last_answer_at=now,
            state_version=progress.state_version + 1,
        )
        return ScoringResult(progress=updated, correct=correct, score_delta=score_delta)


class StreakDecay:
    """长时间未答题的连胜衰减"""

    @staticmethod
    def is_due(progress: UserProgress, now: datetime, window: timedelta) -> bool:
        """
        判断是否需要衰减

        超过窗口时长未答题且当前有连胜时才衰减。
        """
        return progress.streak > 0 and now - progress.last_answer_at > window

    @classmethod
    def apply(cls, progress: UserProgress, now: datetime, window: timedelta):
        """
        计算衰减后的进度

        只清零连胜，不改变 state_version、总分和难度。

        Returns:
            tuple: (progress, decayed) 未衰减时返回原对象
        """
        if not cls.is_due(progress, now, window):
            return progress, False
        return replace(progress, streak=0), True
