from typing import List, NamedTuple, Optional

from tutorx.core.exceptions import InvalidSubmissionError
from tutorx.schemas.quiz import Quiz
from tutorx.services.aggregation import percentage, round_half_up


class QuizGrade(NamedTuple):
    score: int
    correct_answers: int
    total_questions: int


def grade_quiz(quiz: Quiz, answers: List[Optional[int]]) -> QuizGrade:
    """按题目顺序比对作答，得分为正确率的百分比（四舍五入）

    未作答（None）或缺少的题目按答错处理。

    Raises:
        InvalidSubmissionError: 作答数量超过题目数，或选项下标越界
    """
    questions = quiz.questions
    if len(answers) > len(questions):
        raise InvalidSubmissionError(
            f"Quiz {quiz.id} has {len(questions)} questions but {len(answers)} answers were submitted"
        )

    correct = 0
    for index, (question, answer) in enumerate(zip(questions, answers)):
        if answer is None:
            continue
        if not 0 <= answer < len(question.options):
            raise InvalidSubmissionError(f"Answer {answer} is out of range for question {index + 1}")
        if answer == question.correct_answer:
            correct += 1

    return QuizGrade(
        score=round_half_up(percentage(correct, len(questions))),
        correct_answers=correct,
        total_questions=len(questions),
    )
