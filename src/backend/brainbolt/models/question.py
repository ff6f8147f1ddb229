"""
题目模型
题目在题库初始化时创建，之后不可变
"""
from dataclasses import dataclass
from typing import Tuple

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 10
CHOICE_COUNT = 4


@dataclass(frozen=True)
class Question:
    """四选一算术题"""
    id: str
    difficulty: int  # 1-10
    prompt: str
    choices: Tuple[str, ...]
    correct_answer: str  # 与提交答案逐字比较，区分大小写

    def __post_init__(self):
        if not MIN_DIFFICULTY <= self.difficulty <= MAX_DIFFICULTY:
            raise ValueError(f"题目难度超出范围: {self.difficulty}")
        if len(self.choices) != CHOICE_COUNT or len(set(self.choices)) != CHOICE_COUNT:
            raise ValueError(f"题目必须有 {CHOICE_COUNT} 个互不相同的选项: {self.choices}")
        if self.correct_answer not in self.choices:
            raise ValueError(f"正确答案不在选项中: {self.correct_answer}")

    def __repr__(self):
        return f"<Question(id='{self.id}' difficulty={self.difficulty} prompt='{self.prompt}')>"
