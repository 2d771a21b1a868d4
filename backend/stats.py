from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from models import Task, TaskStats


def _as_aware(value: datetime) -> datetime:
    # Naive datetimes from clients are treated as UTC
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def is_overdue(task: Task, now: datetime) -> bool:
    return not task.completed and task.deadline is not None and _as_aware(task.deadline) < now


def compute_stats(tasks: Sequence[Task], now: Optional[datetime] = None) -> TaskStats:
    """Aggregate counts used by the stats endpoint and the insights prompt."""
    now = _as_aware(now or datetime.now(timezone.utc))
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    start_of_tomorrow = start_of_day + timedelta(days=1)

    active = [task for task in tasks if not task.completed]
    completed_count = len(tasks) - len(active)
    due_today = [
        task for task in active
        if task.deadline is not None and start_of_day <= _as_aware(task.deadline) < start_of_tomorrow
    ]

    return TaskStats(
        total=len(tasks),
        completed=completed_count,
        active=len(active),
        overdue=sum(1 for task in tasks if is_overdue(task, now)),
        due_today=len(due_today),
        completion_rate=round(completed_count / len(tasks) * 100) if tasks else 0,
        categories=dict(Counter(task.category.value for task in tasks)),
        priorities=dict(Counter(task.priority.value for task in tasks if task.priority)),
        active_priorities=dict(Counter(task.priority.value for task in active if task.priority)),
    )
