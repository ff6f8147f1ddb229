"""
幂等键台账
记录已处理的答题幂等键，同一个键只能被消费一次
"""
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Set

from sqlalchemy.exc import IntegrityError

from brainbolt.core.database import SessionFactory
from brainbolt.models import ConsumedKeyRecord


class IdempotencyLedger(ABC):
    """幂等台账抽象基类"""

    @abstractmethod
    def try_consume(self, key: str) -> bool:
        """
        尝试消费幂等键

        Returns:
            bool: 首次出现返回 True 并记录；已消费过返回 False
        """
        pass


class InMemoryIdempotencyLedger(IdempotencyLedger):
    """内存台账（无过期策略）"""

    def __init__(self):
        self._keys: Set[str] = set()
        self._guard = threading.Lock()

    def try_consume(self, key: str) -> bool:
        with self._guard:
            if key in self._keys:
                return False
            self._keys.add(key)
            return True

    def __len__(self) -> int:
        with self._guard:
            return len(self._keys)


class SqlIdempotencyLedger(IdempotencyLedger):
    """SQL 台账，依赖主键约束保证原子性"""

    def __init__(self, session_factory: SessionFactory, clock: Callable[[], datetime] = datetime.utcnow):
        self._session_factory = session_factory
        self._clock = clock

    def try_consume(self, key: str) -> bool:
        with self._session_factory() as db:
            db.add(ConsumedKeyRecord(key=key, consumed_at=self._clock()))
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                return False
            return True
