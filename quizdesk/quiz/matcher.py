"""
So khớp đáp án của user với đáp án đúng

- single_choice: so sánh chuỗi chính xác
- multiple_choice: so sánh tập hợp (không quan tâm thứ tự, bỏ qua phần tử trùng)

Không bao giờ raise với input lỗi - chỉ trả False.
"""

from quizdesk.models import SINGLE_CHOICE, MULTIPLE_CHOICE

SEQUENCE_TYPES = (list, tuple, set, frozenset)


class Solution:
    """Đáp án đúng đã deserialize, dạng theo question_type"""
    question_type = None

    @staticmethod
    def from_stored(question_type, raw):
        """
        Dựng Solution từ giá trị lưu trong cột JSON

        Args:
            question_type (str): single_choice | multiple_choice
            raw: str (single) hoặc list (multiple); single lưu dạng list 1 phần tử vẫn nhận

        Returns:
            SingleSolution | MultipleSolution

        Raises:
            ValueError: dữ liệu lưu không đúng dạng của loại câu hỏi
        """
        if question_type == SINGLE_CHOICE:
            if isinstance(raw, SEQUENCE_TYPES):
                values = list(raw)
                if len(values) != 1:
                    raise ValueError('single_choice solution must hold exactly one value')
                raw = values[0]
            if not isinstance(raw, str):
                raise ValueError('single_choice solution must be a string')
            return SingleSolution(raw)

        if question_type == MULTIPLE_CHOICE:
            if isinstance(raw, str):
                raw = [raw]
            if not isinstance(raw, SEQUENCE_TYPES) or not all(isinstance(v, str) for v in raw):
                raise ValueError('multiple_choice solution must be a list of strings')
            return MultipleSolution(raw)

        raise ValueError(f'Unknown question type: {question_type!r}')


class SingleSolution(Solution):
    question_type = SINGLE_CHOICE

    def __init__(self, value):
        self.value = value

    def matches(self, answer):
        return isinstance(answer, str) and answer == self.value

    def to_json(self):
        return self.value

    def __repr__(self):
        return f'<SingleSolution {self.value!r}>'


class MultipleSolution(Solution):
    question_type = MULTIPLE_CHOICE

    def __init__(self, values):
        # Giữ thứ tự admin nhập để hiển thị, bỏ trùng
        self.values = tuple(dict.fromkeys(values))
        self.value_set = frozenset(self.values)

    def matches(self, answer):
        if not isinstance(answer, SEQUENCE_TYPES):
            return False
        try:
            return set(answer) == self.value_set
        except TypeError:
            # Phần tử không hash được (vd: list lồng nhau)
            return False

    def to_json(self):
        return list(self.values)

    def __repr__(self):
        return f'<MultipleSolution {list(self.values)!r}>'


def is_correct(question_type, submitted_answer, solution):
    """
    Chấm 1 câu

    Args:
        question_type (str): loại câu hỏi
        submitted_answer: giá trị client gửi (None, str, list...) - chưa kiểm tra dạng
        solution (Solution): đáp án đúng đã deserialize

    Returns:
        bool: True nếu đúng
    """
    if submitted_answer is None or not isinstance(solution, Solution):
        return False
    if solution.question_type != question_type:
        return False
    return solution.matches(submitted_answer)
