"""
题库服务
按难度分组的固定题目池，只读
"""
import logging
import random
import uuid
from typing import Dict, Iterable, List, Optional

from brainbolt.models import CHOICE_COUNT, MAX_DIFFICULTY, MIN_DIFFICULTY, Question

logger = logging.getLogger(__name__)

QUESTIONS_PER_LEVEL = 3


def build_seed_questions(per_level: int = QUESTIONS_PER_LEVEL) -> List[Question]:
    """
    生成默认题库

    每个难度 d（1-10）生成 per_level 道加法题，第 i 题答案为 d + i。
    干扰项依次取 答案+1、答案-1、d*i，去重后不足 4 个时从 答案+2 开始递增补齐。

    Args:
        per_level: 每个难度的题目数

    Returns:
        List[Question]: 题目列表
    """
    questions = []
    for d in range(MIN_DIFFICULTY, MAX_DIFFICULTY + 1):
        for i in range(1, per_level + 1):
            correct = d + i
            # dict 保持插入顺序并去重
            choices = dict.fromkeys(str(v) for v in (correct, correct + 1, correct - 1, d * i))
            offset = 2
            while len(choices) < CHOICE_COUNT:
                choices.setdefault(str(correct + offset))
                offset += 1

            questions.append(Question(
                id=str(uuid.uuid4()),
                difficulty=d,
                prompt=f"What is {d} + {i}?",
                choices=tuple(choices),
                correct_answer=str(correct),
            ))
    return questions


class QuestionCatalog:
    """题库（初始化后不可变）"""

    def __init__(self, questions: Iterable[Question], rng: Optional[random.Random] = None):
        self._questions: List[Question] = list(questions)
        if not self._questions:
            raise ValueError("题库不能为空")
        self._by_id: Dict[str, Question] = {q.id: q for q in self._questions}
        self._by_difficulty: Dict[int, List[Question]] = {}
        for q in self._questions:
            self._by_difficulty.setdefault(q.difficulty, []).append(q)
        self._rng = rng or random.Random()

    @classmethod
    def seeded(cls, rng: Optional[random.Random] = None) -> "QuestionCatalog":
        """使用默认题库创建"""
        catalog = cls(build_seed_questions(), rng=rng)
        logger.info(f"题库已初始化，共 {len(catalog)} 题")
        return catalog

    def __len__(self) -> int:
        return len(self._questions)

    def question_by_difficulty(self, difficulty: int) -> Question:
        """
        随机抽取指定难度的题目

        该难度没有题目时退回题库第一题（默认题库不会出现这种情况）。
        """
        pool = self._by_difficulty.get(difficulty)
        if not pool:
            logger.debug(f"难度 {difficulty} 没有题目，使用兜底题目")
            return self._questions[0]
        return self._rng.choice(pool)

    def question_by_id(self, question_id: str) -> Optional[Question]:
        return self._by_id.get(question_id)
