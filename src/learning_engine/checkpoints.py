"""
Checkpoint planning and evaluation.

Planner: places a checkpoint after every `interval` steps and synthesizes one
placeholder multiple-choice question per step in the window it covers.
Evaluator: scores submitted option indices and classifies the result.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

from learning_engine.errors import ValidationError
from learning_engine.models import Checkpoint, PerformanceData, Question, Step, utcnow
from learning_engine.progress import round_half_up

DEFAULT_PASSING_SCORE = 70
EXCELLENT_SCORE = 90
MAX_INTERVAL = 3

QUESTION_PREFIX = 'What is the main concept covered in "'
QUESTION_SUFFIX = '"?'


def checkpoint_interval(step_count: int) -> int:
    interval = step_count // 2 if step_count <= 5 else MAX_INTERVAL
    return max(interval, 1)


def build_checkpoint_questions(steps: Sequence[Step]) -> List[Question]:
    return [
        Question(
            question=f"{QUESTION_PREFIX}{step.title}{QUESTION_SUFFIX}",
            options=[
                f"The core principles of {step.title}",
                f"The history of {step.title}",
                f"Applications of {step.title}",
                f"Limitations of {step.title}",
            ],
            correct_answer_index=0,
            explanation=f"This question tests your understanding of the main concepts in {step.title}.",
            topic=step.title,
        )
        for step in steps
    ]


def plan_checkpoints(steps: Sequence[Step]) -> List[Checkpoint]:
    if not steps:
        return []
    interval = checkpoint_interval(len(steps))
    checkpoints: List[Checkpoint] = []
    i = interval
    while i < len(steps):
        checkpoints.append(
            Checkpoint(
                after_step=float(i),
                questions=build_checkpoint_questions(steps[i - interval:i]),
                passing_score=DEFAULT_PASSING_SCORE,
            )
        )
        i += interval
    return checkpoints


def question_topic(question: Question) -> str:
    """Structured topic label, or the title recovered from the placeholder template."""
    if question.topic:
        return question.topic
    text = question.question.strip()
    for prefix, suffix in ((QUESTION_PREFIX, QUESTION_SUFFIX), ("What is the main concept covered in '", "'?")):
        if text.startswith(prefix) and text.endswith(suffix):
            return text[len(prefix):len(text) - len(suffix)].strip()
    return text


def score_answers(questions: Sequence[Question], answers: Sequence[object]) -> tuple[int, List[str]]:
    """Return (correct count, incorrect areas). Missing answers count as incorrect."""
    correct = 0
    incorrect_areas: List[str] = []
    for idx, question in enumerate(questions):
        answer = answers[idx] if idx < len(answers) else None
        if isinstance(answer, int) and not isinstance(answer, bool) and answer == question.correct_answer_index:
            correct += 1
        else:
            incorrect_areas.append(question_topic(question))
    return correct, incorrect_areas


def classify(score: int, passing_score: int, incorrect_areas: List[str]) -> PerformanceData:
    return PerformanceData(
        score=score,
        incorrect_areas=incorrect_areas,
        needs_remediation=score < passing_score,
        excellent_performance=score > EXCELLENT_SCORE,
    )


def evaluate_checkpoint(
    checkpoint: Checkpoint,
    answers: Optional[Sequence[object]],
    now: Optional[datetime] = None,
) -> PerformanceData:
    """
    Score `answers` (selected option indices, one per question) and record the
    attempt on the checkpoint. Callers recompute path completion afterwards.
    """
    if answers is None or isinstance(answers, (str, bytes)) or not isinstance(answers, Sequence):
        raise ValidationError("answers must be a list of selected option indices")
    if not checkpoint.questions:
        raise ValidationError(f"Checkpoint {checkpoint.id} has no questions")
    if len(answers) > len(checkpoint.questions):
        raise ValidationError(
            f"Got {len(answers)} answers for {len(checkpoint.questions)} questions"
        )

    correct, incorrect_areas = score_answers(checkpoint.questions, answers)
    score = round_half_up(100 * correct / len(checkpoint.questions))
    performance = classify(score, checkpoint.passing_score, incorrect_areas)

    checkpoint.score = score
    checkpoint.completed = True
    checkpoint.completed_at = now or utcnow()
    checkpoint.performance_data = performance
    return performance
