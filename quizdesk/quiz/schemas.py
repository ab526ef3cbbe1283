from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, StrictStr, ValidationError

from quizdesk.quiz.errors import InvalidSubmissionError

# Mỗi câu: 1 lựa chọn (single_choice), list lựa chọn (multiple_choice) hoặc bỏ trống
AnswerValue = Optional[Union[StrictStr, List[StrictStr]]]


class QuizSubmission(BaseModel):
    answers: Dict[int, AnswerValue] = Field(default_factory=dict)
    nonce: Optional[str] = None


def parse_submission(payload):
    """
    Validate payload nộp bài

    Raises:
        InvalidSubmissionError: payload không phải object hoặc sai dạng answers
    """
    if not isinstance(payload, dict):
        raise InvalidSubmissionError('Submission body must be a JSON object')
    try:
        return QuizSubmission.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        location = '.'.join(str(part) for part in first.get('loc', ()))
        raise InvalidSubmissionError(f'Invalid answers payload at {location}: {first.get("msg")}') from e
