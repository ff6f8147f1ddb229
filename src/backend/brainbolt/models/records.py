"""
SQL 存储后端的 ORM 记录
与领域模型（UserProgress / AnswerLogEntry）一一对应
"""
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from .answer_log import AnswerLogEntry
from .base import Base
from .user_progress import UserProgress


class UserProgressRecord(Base):
    """用户进度记录"""
    __tablename__ = "user_progress"

    seq = Column(Integer, primary_key=True, autoincrement=True)  # 创建顺序，排行榜同分时使用
    user_id = Column(String(64), unique=True, nullable=False, index=True)
    current_difficulty = Column(Integer, nullable=False)
    streak = Column(Integer, nullable=False, default=0)
    max_streak = Column(Integer, nullable=False, default=0)
    total_score = Column(Integer, nullable=False, default=0)
    correct_count = Column(Integer, nullable=False, default=0)
    total_attempts = Column(Integer, nullable=False, default=0)
    state_version = Column(Integer, nullable=False, default=0)
    last_answer_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def to_progress(self) -> UserProgress:
        return UserProgress(
            user_id=self.user_id,
            current_difficulty=self.current_difficulty,
            streak=self.streak,
            max_streak=self.max_streak,
            total_score=self.total_score,
            correct_count=self.correct_count,
            total_attempts=self.total_attempts,
            state_version=self.state_version,
            last_answer_at=self.last_answer_at,
        )

    def apply(self, progress: UserProgress) -> None:
        """用领域对象覆盖当前记录"""
        self.current_difficulty = progress.current_difficulty
        self.streak = progress.streak
        self.max_streak = progress.max_streak
        self.total_score = progress.total_score
        self.correct_count = progress.correct_count
        self.total_attempts = progress.total_attempts
        self.state_version = progress.state_version
        self.last_answer_at = progress.last_answer_at

    def __repr__(self):
        return f"<UserProgressRecord(user='{self.user_id}' score={self.total_score} v={self.state_version})>"


class AnswerHistoryRecord(Base):
    """
    答题历史记录（只追加，永不更新）
    """
    __tablename__ = "answer_history"

    seq = Column(Integer, primary_key=True, autoincrement=True)  # 追加顺序
    id = Column(String(36), unique=True, nullable=False)
    user_id = Column(String(64), nullable=False, index=True)
    question_id = Column(String(36), nullable=False)
    difficulty = Column(Integer, nullable=False)
    correct = Column(Boolean, nullable=False)
    score_delta = Column(Integer, nullable=False)
    streak_at_answer = Column(Integer, nullable=False)
    answered_at = Column(DateTime, nullable=False, index=True)

    @classmethod
    def from_entry(cls, entry: AnswerLogEntry) -> "AnswerHistoryRecord":
        return cls(
            id=entry.id,
            user_id=entry.user_id,
            question_id=entry.question_id,
            difficulty=entry.difficulty,
            correct=entry.correct,
            score_delta=entry.score_delta,
            streak_at_answer=entry.streak_at_answer,
            answered_at=entry.answered_at,
        )

    def to_entry(self) -> AnswerLogEntry:
        return AnswerLogEntry(
            id=self.id,
            user_id=self.user_id,
            question_id=self.question_id,
            difficulty=self.difficulty,
            correct=self.correct,
            score_delta=self.score_delta,
            streak_at_answer=self.streak_at_answer,
            answered_at=self.answered_at,
        )

    def __repr__(self):
        return f"<AnswerHistoryRecord(id='{self.id}' user='{self.user_id}' correct={self.correct})>"


class ConsumedKeyRecord(Base):
    """已使用的幂等键，主键约束保证只能插入一次"""
    __tablename__ = "consumed_idempotency_keys"

    key = Column(String(255), primary_key=True)
    consumed_at = Column(DateTime, default=datetime.utcnow, nullable=False)
