"""
自适应答题服务
串联题库、进度存储、幂等台账、计分、答题历史和排行榜
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Tuple

from brainbolt.core.exceptions import (
    DuplicateSubmissionError,
    QuestionNotFoundError,
    QuizValidationError,
    StaleStateVersionError,
)
from brainbolt.core.scoring import ScoringEngine, StreakDecay
from brainbolt.models import AnswerLogEntry, UserProgress
from brainbolt.services.answer_history import AnswerHistoryLog
from brainbolt.services.idempotency import IdempotencyLedger
from brainbolt.services.leaderboard_service import LeaderboardService
from brainbolt.services.metrics_service import MetricsService, UserMetrics
from brainbolt.services.progress_store import ProgressStore
from brainbolt.services.question_catalog import QuestionCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NextQuestion:
    question_id: str
    difficulty: int
    prompt: str
    choices: Tuple[str, ...]
    session_id: str  # 即 user_id，客户端后续请求需携带
    state_version: int
    current_score: int
    current_streak: int


@dataclass(frozen=True)
class AnswerOutcome:
    correct: bool
    correct_answer: str
    new_difficulty: int
    new_streak: int
    score_delta: int
    total_score: int
    state_version: int
    score_rank: int
    streak_rank: int


class QuizService:
    """自适应答题服务"""

    def __init__(
        self,
        catalog: QuestionCatalog,
        store: ProgressStore,
        ledger: IdempotencyLedger,
        history: AnswerHistoryLog,
        leaderboard: LeaderboardService,
        metrics: MetricsService,
        decay_window: timedelta = timedelta(minutes=30),
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.catalog = catalog
        self.store = store
        self.ledger = ledger
        self.history = history
        self.leaderboard = leaderboard
        self.metrics = metrics
        self.decay_window = decay_window
        self._clock = clock

    def next_question(self, user_id: Optional[str] = None) -> NextQuestion:
        """
        获取下一题

        Args:
            user_id: 用户ID（为空时生成新ID并返回给客户端）

        Returns:
            NextQuestion: 当前难度下随机抽取的题目及用户状态
        """
        if not user_id:
            user_id = str(uuid.uuid4())
            logger.info(f"分配新用户ID: {user_id}")

        progress = self.store.get(user_id)
        question = self.catalog.question_by_difficulty(progress.current_difficulty)

        return NextQuestion(
            question_id=question.id,
            difficulty=question.difficulty,
            prompt=question.prompt,
            choices=question.choices,
            session_id=user_id,
            state_version=progress.state_version,
            current_score=progress.total_score,
            current_streak=progress.streak,
        )

    @staticmethod
    def _validate_submission(user_id, question_id, selected_answer, state_version) -> None:
        missing = [
            name for name, value in (
                ("user_id", user_id),
                ("question_id", question_id),
                ("selected_answer", selected_answer),
                ("state_version", state_version),
            )
            if value is None or value == ""
        ]
        # 空字符串答案也是合法答案（只是不会答对）
        if selected_answer == "":
            missing.remove("selected_answer")
        if missing:
            raise QuizValidationError(f"缺少必填字段: {', '.join(missing)}")
        if not isinstance(selected_answer, str):
            raise QuizValidationError("selected_answer 必须为字符串")
        if isinstance(state_version, bool) or not isinstance(state_version, int) or state_version < 0:
            raise QuizValidationError("state_version 必须为非负整数")

    def submit_answer(
        self,
        user_id: str,
        question_id: str,
        selected_answer: str,
        state_version: int,
        idempotency_key: Optional[str] = None,
    ) -> AnswerOutcome:
        """
        提交答案

        流程：参数校验 → 查题 → 幂等检查 → （用户锁内）版本检查 → 连胜衰减 → 计分 → 写回 → 记录历史 → 计算排名

        Args:
            user_id: 用户ID
            question_id: 题目ID
            selected_answer: 用户答案
            state_version: 客户端最后看到的状态版本
            idempotency_key: 幂等键（可选，不传则跳过幂等检查）

        Returns:
            AnswerOutcome: 答题结果

        Raises:
            QuizValidationError: 缺少必填字段
            QuestionNotFoundError: 题目不存在
            DuplicateSubmissionError: 幂等键已被使用
            StaleStateVersionError: 状态版本不一致
        """
        self._validate_submission(user_id, question_id, selected_answer, state_version)

        question = self.catalog.question_by_id(question_id)
        if question is None:
            logger.warning(f"题目不存在: user={user_id} question={question_id}")
            raise QuestionNotFoundError(question_id)

        if idempotency_key and not self.ledger.try_consume(idempotency_key):
            logger.warning(f"重复提交: user={user_id} key={idempotency_key}")
            raise DuplicateSubmissionError(idempotency_key)

        with self.store.lock(user_id):
            progress = self.store.get(user_id)
            if progress.state_version != state_version:
                logger.warning(
                    f"状态版本不一致: user={user_id} 提交={state_version} 当前={progress.state_version}"
                )
                raise StaleStateVersionError(state_version, progress.state_version)

            now = self._clock()
            progress, decayed = StreakDecay.apply(progress, now, self.decay_window)
            if decayed:
                self.store.put(progress)
                logger.debug(f"连胜已衰减: user={user_id}")

            result = ScoringEngine.score(progress, question, selected_answer, now)
            updated = result.progress
            self.store.put(updated)

            self.history.append(AnswerLogEntry(
                id=str(uuid.uuid4()),
                user_id=user_id,
                question_id=question.id,
                difficulty=question.difficulty,
                correct=result.correct,
                score_delta=result.score_delta,
                streak_at_answer=updated.streak,
                answered_at=now,
            ))

        logger.info(
            f"答题已计分: user={user_id} correct={result.correct} delta={result.score_delta} "
            f"difficulty={updated.current_difficulty} v={updated.state_version}"
        )

        rank = self.leaderboard.rank_of(user_id)
        return AnswerOutcome(
            correct=result.correct,
            correct_answer=question.correct_answer,
            new_difficulty=updated.current_difficulty,
            new_streak=updated.streak,
            score_delta=result.score_delta,
            total_score=updated.total_score,
            state_version=updated.state_version,
            score_rank=rank.score_rank,
            streak_rank=rank.streak_rank,
        )

    def metrics_for(self, user_id: str) -> UserMetrics:
        if not user_id:
            raise QuizValidationError("缺少必填字段: user_id")
        return self.metrics.metrics_for(user_id)

    def leaderboard_by_score(self, n: Optional[int] = None) -> List[UserProgress]:
        return self.leaderboard.top_by_score(n)

    def leaderboard_by_streak(self, n: Optional[int] = None) -> List[UserProgress]:
        return self.leaderboard.top_by_streak(n)
