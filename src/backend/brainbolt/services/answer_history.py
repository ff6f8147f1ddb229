"""
答题历史日志
每次成功计分的提交追加一条记录，供统计使用
"""
import threading
from abc import ABC, abstractmethod
from typing import List

from brainbolt.core.database import SessionFactory
from brainbolt.models import AnswerHistoryRecord, AnswerLogEntry


class AnswerHistoryLog(ABC):
    """答题历史抽象基类（只追加）"""

    @abstractmethod
    def append(self, entry: AnswerLogEntry) -> None:
        pass

    @abstractmethod
    def entries_for(self, user_id: str) -> List[AnswerLogEntry]:
        """按追加顺序返回该用户的全部记录"""
        pass

    def recent_for(self, user_id: str, limit: int) -> List[AnswerLogEntry]:
        """返回该用户最近 limit 条记录（按时间正序）"""
        if limit <= 0:
            return []
        return self.entries_for(user_id)[-limit:]


class InMemoryAnswerHistoryLog(AnswerHistoryLog):
    """内存日志（无淘汰策略）"""

    def __init__(self):
        self._entries: List[AnswerLogEntry] = []
        self._guard = threading.Lock()

    def append(self, entry: AnswerLogEntry) -> None:
        with self._guard:
            self._entries.append(entry)

    def entries_for(self, user_id: str) -> List[AnswerLogEntry]:
        with self._guard:
            return [e for e in self._entries if e.user_id == user_id]


class SqlAnswerHistoryLog(AnswerHistoryLog):
    """SQL 日志"""

    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    def append(self, entry: AnswerLogEntry) -> None:
        with self._session_factory() as db:
            db.add(AnswerHistoryRecord.from_entry(entry))
            db.commit()

    def entries_for(self, user_id: str) -> List[AnswerLogEntry]:
        with self._session_factory() as db:
            records = db.query(AnswerHistoryRecord).filter(
                AnswerHistoryRecord.user_id == user_id
            ).order_by(AnswerHistoryRecord.seq.asc()).all()
            return [r.to_entry() for r in records]

    def recent_for(self, user_id: str, limit: int) -> List[AnswerLogEntry]:
        if limit <= 0:
            return []
        with self._session_factory() as db:
            records = db.query(AnswerHistoryRecord).filter(
                AnswerHistoryRecord.user_id == user_id
            ).order_by(AnswerHistoryRecord.seq.desc()).limit(limit).all()
            return [r.to_entry() for r in reversed(records)]
