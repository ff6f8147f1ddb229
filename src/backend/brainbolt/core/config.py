"""
答题服务配置管理模块

统一管理存储后端、连胜衰减、排行榜等配置，支持环境变量。
配置优先级：环境变量 > 默认值
"""

import os
from dataclasses import dataclass
from typing import Optional


STORE_BACKENDS = ("memory", "sql")


@dataclass
class QuizConfig:
    """
    答题服务配置

    Attributes:
        store_backend: 存储后端（memory | sql）
        database_url: SQL 后端的数据库连接地址
        streak_decay_minutes: 连胜衰减窗口（分钟），超过该时长未答题则连胜清零
        leaderboard_size: 排行榜默认条数
        recent_window: "近期表现"统计的答题条数
        random_seed: 题库随机源种子（None 表示不固定）
    """
    store_backend: str = "memory"
    database_url: str = "sqlite:///./data/quiz.db"
    streak_decay_minutes: int = 30
    leaderboard_size: int = 10
    recent_window: int = 5
    random_seed: Optional[int] = None

    def __post_init__(self):
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(
                f"未知的存储后端: {self.store_backend}，可选值: {', '.join(STORE_BACKENDS)}"
            )
        for name in ("streak_decay_minutes", "leaderboard_size", "recent_window"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} 必须为正整数")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"环境变量 {name} 必须为整数，当前值: {raw!r}")


def get_quiz_config() -> QuizConfig:
    """
    从环境变量获取答题服务配置

    环境变量：
        QUIZ_STORE_BACKEND: 存储后端（memory | sql）
        DATABASE_URL: 数据库连接地址
        QUIZ_STREAK_DECAY_MINUTES: 连胜衰减窗口（分钟）
        QUIZ_LEADERBOARD_SIZE: 排行榜条数
        QUIZ_RECENT_WINDOW: 近期表现统计条数
        QUIZ_RANDOM_SEED: 随机种子（可选）

    Returns:
        QuizConfig 配置对象

    Raises:
        ValueError: 配置值非法时
    """
    seed_raw = os.getenv("QUIZ_RANDOM_SEED", "").strip()
    random_seed = _int_env("QUIZ_RANDOM_SEED", 0) if seed_raw else None

    return QuizConfig(
        store_backend=os.getenv("QUIZ_STORE_BACKEND", "memory").strip().lower(),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./data/quiz.db"),
        streak_decay_minutes=_int_env("QUIZ_STREAK_DECAY_MINUTES", 30),
        leaderboard_size=_int_env("QUIZ_LEADERBOARD_SIZE", 10),
        recent_window=_int_env("QUIZ_RECENT_WINDOW", 5),
        random_seed=random_seed,
    )
