"""
答题服务异常定义

服务层抛出，API 层统一映射为 HTTP 状态码。
所有异常抛出时均未修改用户进度。
"""


class QuizError(ValueError):
    """答题服务异常基类"""


class QuizValidationError(QuizError):
    """请求参数缺失或格式错误"""


class QuestionNotFoundError(QuizError):
    """题目不存在"""

    def __init__(self, question_id: str):
        super().__init__(f"题目不存在: {question_id}")
        self.question_id = question_id


class DuplicateSubmissionError(QuizError):
    """幂等键已被使用（重复提交）"""

    def __init__(self, key: str):
        super().__init__("该答案已处理")
        self.key = key


class StaleStateVersionError(QuizError):
    """状态版本不一致，客户端需要重新获取题目"""

    def __init__(self, expected: int, current: int):
        super().__init__(f"状态版本不一致（提交 {expected}，当前 {current}），请重新获取题目")
        self.expected = expected
        self.current = current
