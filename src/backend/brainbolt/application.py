"""
应用工厂
导入本模块不会创建应用，也不会读取环境变量
"""
import logging
import os
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from brainbolt.api import leaderboard, quiz
from brainbolt.core.config import QuizConfig, get_quiz_config
from brainbolt.core.dependencies import build_quiz_service

logger = logging.getLogger(__name__)


def _allowed_origins() -> List[str]:
    """ALLOWED_ORIGINS 逗号分隔，未设置时不允许跨域"""
    return [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "").split(",") if o.strip()]


def create_app(config: QuizConfig | None = None, **service_kwargs) -> FastAPI:
    """
    创建应用

    Args:
        config: 服务配置（默认从环境变量读取）
        **service_kwargs: 透传给 build_quiz_service（rng / clock，测试用）
    """
    config = config or get_quiz_config()

    app = FastAPI(
        title="Brainbolt API",
        description="Adaptive Quiz - Scoring, Streaks and Leaderboards",
        version="0.1.0"
    )
    app.state.quiz_service = build_quiz_service(config, **service_kwargs)

    origins = _allowed_origins()
    if origins:
        logger.info(f"CORS 允许的源: {origins}")
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(quiz.router, prefix="/v1")
    app.include_router(leaderboard.router, prefix="/v1")

    @app.get("/")
    async def root():
        """根路径"""
        return {"message": "Brainbolt API", "docs": "/docs"}

    @app.get("/health")
    async def health():
        """健康检查"""
        return {
            "status": "healthy",
            "store_backend": config.store_backend,
            "questions": len(app.state.quiz_service.catalog),
        }

    return app
