"""
Models package
Export all domain models and ORM records
"""

from .base import Base
from .question import Question, MIN_DIFFICULTY, MAX_DIFFICULTY, CHOICE_COUNT
from .user_progress import UserProgress, DEFAULT_DIFFICULTY
from .answer_log import AnswerLogEntry
from .records import UserProgressRecord, AnswerHistoryRecord, ConsumedKeyRecord

__all__ = [
    "Base",
    "Question",
    "MIN_DIFFICULTY",
    "MAX_DIFFICULTY",
    "CHOICE_COUNT",
    "UserProgress",
    "DEFAULT_DIFFICULTY",
    "AnswerLogEntry",
    "UserProgressRecord",
    "AnswerHistoryRecord",
    "ConsumedKeyRecord",
]


def init_db(engine):
    """初始化数据库"""
    # 创建所有表
    Base.metadata.create_all(bind=engine)
