"""
Pytest 配置和通用 Fixtures

提供固定时钟、固定随机源，以及内存 / SQL 两种存储后端的答题服务
"""
import os
import random
import sys
from dataclasses import replace
from datetime import datetime, timedelta

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from brainbolt.core.config import QuizConfig  # noqa: E402
from brainbolt.core.dependencies import build_quiz_service  # noqa: E402
from brainbolt.models import Question, UserProgress  # noqa: E402


# ==================== 固定时钟 ====================

class FakeClock:
    """可手动推进的时钟，返回 naive UTC 时间"""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return random.Random(42)


# ==================== 答题服务 ====================

def make_config(backend: str) -> QuizConfig:
    if backend == "sql":
        return QuizConfig(store_backend="sql", database_url="sqlite://")
    return QuizConfig(store_backend="memory")


@pytest.fixture(params=["memory", "sql"])
def quiz_service(request, clock, rng):
    """两种存储后端各跑一遍"""
    return build_quiz_service(make_config(request.param), rng=rng, clock=clock)


@pytest.fixture
def memory_service(clock, rng):
    return build_quiz_service(make_config("memory"), rng=rng, clock=clock)


# ==================== 测试辅助 ====================

def wrong_answer(question: Question) -> str:
    return next(c for c in question.choices if c != question.correct_answer)


def answer_next(service, user_id: str, correct: bool = True, key: str = None):
    """取下一题并作答"""
    nq = service.next_question(user_id)
    question = service.catalog.question_by_id(nq.question_id)
    selected = question.correct_answer if correct else wrong_answer(question)
    return service.submit_answer(
        user_id=user_id,
        question_id=question.id,
        selected_answer=selected,
        state_version=nq.state_version,
        idempotency_key=key,
    )


def seed_progress(service, user_id: str, **fields) -> UserProgress:
    """直接写入指定进度"""
    progress = replace(service.store.get(user_id), **fields)
    service.store.put(progress)
    return progress
