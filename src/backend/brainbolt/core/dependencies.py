"""
服务组装与依赖注入

所有组件在进程启动时构造一次，由 create_app 挂到 app.state 上，
路由通过 Depends(get_quiz_service) 获取。
"""
import logging
import random
from datetime import datetime, timedelta
from typing import Callable, Optional

from fastapi import Request

from brainbolt.core.config import QuizConfig
from brainbolt.core.database import create_db_engine, create_session_factory
from brainbolt.models import init_db
from brainbolt.services.answer_history import InMemoryAnswerHistoryLog, SqlAnswerHistoryLog
from brainbolt.services.idempotency import InMemoryIdempotencyLedger, SqlIdempotencyLedger
from brainbolt.services.leaderboard_service import LeaderboardService
from brainbolt.services.metrics_service import MetricsService
from brainbolt.services.progress_store import InMemoryProgressStore, SqlProgressStore
from brainbolt.services.question_catalog import QuestionCatalog
from brainbolt.services.quiz_service import QuizService

logger = logging.getLogger(__name__)


def build_quiz_service(
    config: QuizConfig,
    rng: Optional[random.Random] = None,
    clock: Callable[[], datetime] = datetime.utcnow,
) -> QuizService:
    """
    按配置构造答题服务

    Args:
        config: 服务配置
        rng: 题库随机源（默认按 config.random_seed 创建）
        clock: 时钟，返回 naive UTC 时间

    Returns:
        QuizService: 组装好的服务
    """
    if rng is None:
        rng = random.Random(config.random_seed)

    if config.store_backend == "sql":
        engine = create_db_engine(config.database_url)
        init_db(engine)
        session_factory = create_session_factory(engine)
        store = SqlProgressStore(session_factory, clock=clock)
        ledger = SqlIdempotencyLedger(session_factory, clock=clock)
        history = SqlAnswerHistoryLog(session_factory)
    else:
        store = InMemoryProgressStore(clock=clock)
        ledger = InMemoryIdempotencyLedger()
        history = InMemoryAnswerHistoryLog()
    logger.info(f"答题服务存储后端: {config.store_backend}")

    return QuizService(
        catalog=QuestionCatalog.seeded(rng),
        store=store,
        ledger=ledger,
        history=history,
        leaderboard=LeaderboardService(store, default_size=config.leaderboard_size),
        metrics=MetricsService(store, history, recent_window=config.recent_window),
        decay_window=timedelta(minutes=config.streak_decay_minutes),
        clock=clock,
    )


def get_quiz_service(request: Request) -> QuizService:
    """答题服务依赖注入"""
    return request.app.state.quiz_service
