from typing import Iterable

from models import CategoryFilter, StatusFilter, Task


def matches_search(task: Task, query: str) -> bool:
    """Case-insensitive substring match on title or description."""
    needle = query.lower()
    if needle in task.title.lower():
        return True
    return task.description is not None and needle in task.description.lower()


def matches_category(task: Task, category: CategoryFilter) -> bool:
    return category == "all" or task.category.value == category


def matches_status(task: Task, status: StatusFilter) -> bool:
    if status == "active":
        return not task.completed
    if status == "completed":
        return task.completed
    return True


def filter_tasks(
    tasks: Iterable[Task],
    query: str = "",
    category: CategoryFilter = "all",
    status: StatusFilter = "all",
) -> list[Task]:
    """
    Filter tasks by search text, category and status, then order them.

    Incomplete tasks come first; within each group the newest created_at wins.
    sorted() is stable, so tasks with equal keys keep their input order.
    """
    matched = [
        task for task in tasks
        if matches_search(task, query)
        and matches_category(task, category)
        and matches_status(task, status)
    ]
    return sorted(matched, key=lambda task: (task.completed, -task.created_at.timestamp()))
