"""
用户进度存储
提供内存和 SQL 两种实现，并负责按用户串行化读改写
"""
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, List

from brainbolt.core.database import SessionFactory
from brainbolt.models import UserProgress, UserProgressRecord

logger = logging.getLogger(__name__)


class UserLockRegistry:
    """
    按用户分配互斥锁

    同一用户的 读取 → 衰减 → 计分 → 写回 必须在同一把锁内完成，
    否则并发提交会丢失 state_version / total_score 的更新。
    """

    def __init__(self):
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def lock_for(self, user_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[user_id] = lock
            return lock


class ProgressStore(ABC):
    """用户进度存储抽象基类"""

    def __init__(self, clock: Callable[[], datetime] = datetime.utcnow):
        self._clock = clock
        self._user_locks = UserLockRegistry()

    def lock(self, user_id: str) -> threading.Lock:
        """获取用户级互斥锁，用于 with 语句"""
        return self._user_locks.lock_for(user_id)

    @abstractmethod
    def get(self, user_id: str) -> UserProgress:
        """
        获取用户进度，不存在时以默认值创建

        返回副本，修改后需调用 put 写回。
        """
        pass

    @abstractmethod
    def put(self, progress: UserProgress) -> None:
        """覆盖 progress.user_id 对应的记录"""
        pass

    @abstractmethod
    def all(self) -> List[UserProgress]:
        """按创建顺序返回所有用户进度"""
        pass

    @abstractmethod
    def exists(self, user_id: str) -> bool:
        pass


class InMemoryProgressStore(ProgressStore):
    """内存存储（默认实现，进程退出即丢失）"""

    def __init__(self, clock: Callable[[], datetime] = datetime.utcnow):
        super().__init__(clock)
        self._records: Dict[str, UserProgress] = {}
        self._guard = threading.Lock()

    def get(self, user_id: str) -> UserProgress:
        with self._guard:
            progress = self._records.get(user_id)
            if progress is None:
                progress = UserProgress.new(user_id, self._clock())
                self._records[user_id] = progress
                logger.info(f"创建用户进度: {user_id}")
            return replace(progress)

    def put(self, progress: UserProgress) -> None:
        with self._guard:
            self._records[progress.user_id] = replace(progress)

    def all(self) -> List[UserProgress]:
        with self._guard:
            return [replace(p) for p in self._records.values()]

    def exists(self, user_id: str) -> bool:
        with self._guard:
            return user_id in self._records


class SqlProgressStore(ProgressStore):
    """SQLAlchemy 存储"""

    def __init__(self, session_factory: SessionFactory, clock: Callable[[], datetime] = datetime.utcnow):
        super().__init__(clock)
        self._session_factory = session_factory
        self._create_guard = threading.Lock()

    @staticmethod
    def _find(db, user_id: str):
        return db.query(UserProgressRecord).filter(UserProgressRecord.user_id == user_id).first()

    def get(self, user_id: str) -> UserProgress:
        with self._create_guard, self._session_factory() as db:
            record = self._find(db, user_id)
            if record is None:
                now = self._clock()
                record = UserProgressRecord(user_id=user_id, created_at=now)
                record.apply(UserProgress.new(user_id, now))
                db.add(record)
                db.commit()
                logger.info(f"创建用户进度: {user_id}")
            return record.to_progress()

    def put(self, progress: UserProgress) -> None:
        with self._session_factory() as db:
            record = self._find(db, progress.user_id)
            if record is None:
                record = UserProgressRecord(user_id=progress.user_id, created_at=self._clock())
                db.add(record)
            record.apply(progress)
            db.commit()

    def all(self) -> List[UserProgress]:
        with self._session_factory() as db:
            records = db.query(UserProgressRecord).order_by(UserProgressRecord.seq.asc()).all()
            return [r.to_progress() for r in records]

    def exists(self, user_id: str) -> bool:
        with self._session_factory() as db:
            return self._find(db, user_id) is not None
