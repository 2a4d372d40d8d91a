"""
Trends Aggregation Engine
Pure computations over question/answer rows that were already fetched:
distributions, temporal buckets, answer quality and overview statistics.
"""
from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

from app.core.database import as_utc

INTERVALS = ("daily", "weekly", "monthly")
DEFAULT_INTERVAL = "daily"

# Trend dimension -> (Question attribute, label used when the tag is missing)
DIMENSIONS: Dict[str, tuple] = {
    "languages": ("language", "unknown"),
    "topic-languages": ("topic_language", "general"),
    "frameworks": ("framework", "none"),
    "runtimes": ("runtime", "none"),
    "ides": ("source_ide", "unknown"),
    "repositories": ("github_repo", "none"),
}


def _rate(numerator: float, denominator: float, digits: int) -> float:
    if not denominator:
        return 0
    return round(numerator / denominator, digits)


def compute_distribution(values: Iterable[Optional[str]], fallback: str) -> Dict[str, Any]:
    """Ranked {category, count, percentage} rows for one categorical tag."""
    counts: Counter = Counter()
    for value in values:
        label = value.strip() if isinstance(value, str) else value
        counts[label or fallback] += 1

    total = sum(counts.values())
    # most_common() keeps first-seen order among equal counts.
    items = [
        {
            "category": category,
            "count": count,
            "percentage": round(count / total * 100, 1) if total > 0 else 0,
        }
        for category, count in counts.most_common()
    ]
    return {"total": total, "items": items}


def normalize_interval(interval: Optional[str]) -> str:
    value = (interval or "").strip().lower()
    return value if value in INTERVALS else DEFAULT_INTERVAL


def bucket_start(moment: datetime, interval: str) -> datetime:
    moment = as_utc(moment)
    day = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    if interval == "monthly":
        return day.replace(day=1)
    if interval == "weekly":
        # ISO weeks start on Monday.
        return day - timedelta(days=day.weekday())
    return day


def compute_temporal(timestamps: Iterable[datetime], interval: Optional[str]) -> Dict[str, Any]:
    selected = normalize_interval(interval)
    counts: Counter = Counter(bucket_start(ts, selected) for ts in timestamps)
    trends = [{"date": start, "count": counts[start]} for start in sorted(counts)]
    return {"interval": selected, "trends": trends}


def median(values: Sequence[float]) -> float:
    if not values:
        return 0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return ordered[mid]


def first_answer(answers: Sequence[Any]):
    """Earliest answer by created_at; identical timestamps resolve to the lowest id."""
    return min(answers, key=lambda a: (as_utc(a.created_at), str(a.id)))


def response_time_seconds(question: Any) -> Optional[float]:
    if not question.answers:
        return None
    answer = first_answer(question.answers)
    return (as_utc(answer.created_at) - as_utc(question.asked_at)).total_seconds()


def compute_answer_quality(questions: Sequence[Any]) -> Dict[str, Any]:
    """Answer coverage, correctness and response-time statistics.

    Each question needs `asked_at` and `answers`; each answer needs `id`,
    `created_at` and `is_correct`.
    """
    total_questions = len(questions)
    total_answers = 0
    correct_answers = 0
    questions_with_answers = 0
    questions_with_multiple_answers = 0
    questions_with_correct_answer = 0
    response_times: List[float] = []

    for question in questions:
        answers = list(question.answers or [])
        if not answers:
            continue

        questions_with_answers += 1
        total_answers += len(answers)
        if len(answers) > 1:
            questions_with_multiple_answers += 1

        correct = sum(1 for a in answers if a.is_correct)
        correct_answers += correct
        if correct:
            questions_with_correct_answer += 1

        response_times.append(response_time_seconds(question))

    avg_response = sum(response_times) / len(response_times) if response_times else 0

    return {
        "total_questions": total_questions,
        "questions_with_answers": questions_with_answers,
        "unanswered_questions": total_questions - questions_with_answers,
        "questions_with_multiple_answers": questions_with_multiple_answers,
        "questions_with_correct_answer": questions_with_correct_answer,
        "total_answers": total_answers,
        "correct_answers": correct_answers,
        "question_answer_rate": _rate(questions_with_answers, total_questions, 3),
        "correct_answer_rate": _rate(correct_answers, total_answers, 3),
        "avg_answers_per_question": _rate(total_answers, questions_with_answers, 2),
        "avg_response_time_seconds": round(avg_response, 2),
        "median_response_time_seconds": round(median(response_times), 2),
    }


def compute_overview(questions: Sequence[Any]) -> Dict[str, Any]:
    total_questions = len(questions)
    total_answers = 0
    correct_answers = 0
    asked: List[datetime] = []

    for question in questions:
        asked.append(as_utc(question.asked_at))
        for answer in question.answers or []:
            total_answers += 1
            if answer.is_correct:
                correct_answers += 1

    return {
        # Every capture stores one question together with its answer.
        "total_interactions": total_questions,
        "total_questions": total_questions,
        "total_answers": total_answers,
        "avg_answers_per_question": _rate(total_answers, total_questions, 2),
        "correct_answer_rate": _rate(correct_answers, total_answers, 3),
        "date_range": {
            "start": min(asked) if asked else None,
            "end": max(asked) if asked else None,
        },
    }
