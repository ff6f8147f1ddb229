"""
答题日志模型
每次成功计分的提交追加一条，永不修改
"""
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AnswerLogEntry:
    """答题日志条目"""
    id: str
    user_id: str
    question_id: str
    difficulty: int  # 所答题目的难度
    correct: bool
    score_delta: int
    streak_at_answer: int  # 计分后的连胜数
    answered_at: datetime
