"""Scoring of a submitted answer set against a quiz's answer key.

Pure functions only: callers load the key and persist the outcome.
"""
from typing import Dict, Iterable, Mapping, Optional

from app.schemas.quiz import EvaluationResult, QuestionEvaluationResult, QuizAnswer, QuizContent


def build_answer_key(content: QuizContent) -> Dict[str, str]:
    """Ordered ``question_id -> correct option id`` mapping, first definition wins."""
    key: Dict[str, str] = {}
    for question in content.questions:
        key.setdefault(question.id, question.correct_answer_id)
    return key


def evaluate_answers(answer_key: Mapping[str, str], answers: Iterable[QuizAnswer]) -> EvaluationResult:
    """Grade ``answers`` against ``answer_key``.

    One result per keyed question, in key order. A keyed question with no
    answer counts as incorrect; answers to questions outside the key are
    ignored and do not change the denominator. If a question is answered more
    than once only the first answer counts.
    """
    submitted: Dict[str, str] = {}
    for answer in answers:
        if answer.question_id in answer_key:
            submitted.setdefault(answer.question_id, answer.selected_option_id)

    results = []
    for question_id, correct_option_id in answer_key.items():
        selected: Optional[str] = submitted.get(question_id)
        is_correct = selected is not None and selected == correct_option_id
        results.append(QuestionEvaluationResult(
            question_id=question_id,
            selected_option_id=selected,
            is_correct=is_correct,
            percentage=100 if is_correct else 0,
        ))

    correct_count = sum(1 for result in results if result.is_correct)
    total = len(answer_key)
    return EvaluationResult(
        questions=results,
        total_percentage=round(100 * correct_count / total) if total else 0,
        correct_count=correct_count,
        total_questions=total,
    )
