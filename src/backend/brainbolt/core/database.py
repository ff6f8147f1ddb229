"""
数据库配置
支持SQLite（开发）和PostgreSQL（生产），仅 SQL 存储后端使用
"""
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, ContextManager, Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# 调用后得到可用于 with 语句的会话
SessionFactory = Callable[[], ContextManager[Session]]


def create_db_engine(database_url: str) -> Engine:
    """
    创建数据库引擎

    SQLite 内存库需要共享同一连接，否则每个会话看到的是不同的空库。

    Args:
        database_url: 数据库连接地址

    Returns:
        Engine: SQLAlchemy 引擎
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(database_url)

    if not url.database or url.database == ":memory:":
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    # 确保数据目录存在
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(database_url, connect_args={"check_same_thread": False})


class SerializedSessionFactory:
    """
    串行化会话工厂

    StaticPool 下所有会话共用一个连接，不同线程的 begin / commit / rollback
    会互相穿插，因此同一时刻只允许一个会话存在。
    """

    def __init__(self, factory: sessionmaker):
        self._factory = factory
        self._lock = threading.RLock()

    @contextmanager
    def __call__(self) -> Iterator[Session]:
        with self._lock, self._factory() as db:
            yield db


def create_session_factory(engine: Engine) -> SessionFactory:
    """创建会话工厂（共享单连接的引擎返回串行化版本）"""
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
    if isinstance(engine.pool, StaticPool):
        return SerializedSessionFactory(factory)
    return factory
