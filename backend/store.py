"""In-memory task collection for the lifetime of the process."""
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from models import Category, Priority, Task, TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

# Fields that cannot be cleared once set; an explicit null leaves them unchanged.
_REQUIRED_FIELDS = {"title", "completed", "category"}


class TaskStore:
    """
    Holds tasks in display order: newly added tasks go to the front.
    """

    def __init__(self) -> None:
        self._tasks: list[Task] = []

    def __len__(self) -> int:
        return len(self._tasks)

    def get_all_tasks(self) -> list[Task]:
        return list(self._tasks)

    def get_task(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def _new_id(self) -> str:
        task_id = str(uuid.uuid4())
        while self.get_task(task_id) is not None:
            task_id = str(uuid.uuid4())
        return task_id

    def create_task(self, task_data: TaskCreate, now: Optional[datetime] = None) -> Task:
        now = now or datetime.now(timezone.utc)
        task = Task(
            id=self._new_id(),
            created_at=now,
            updated_at=now,
            **task_data.model_dump(),
        )
        self._tasks.insert(0, task)
        logger.debug("Created task %s (%s)", task.id, task.category.value)
        return task

    def add_tasks(self, tasks: list[Task]) -> list[Task]:
        """
        Add already-built tasks (e.g. a generated preview) ahead of existing ones.
        Ids already present in the store are replaced with fresh ones.
        """
        added: list[Task] = []
        seen: set[str] = {task.id for task in self._tasks}
        for task in tasks:
            if task.id in seen:
                task = task.model_copy(update={"id": self._new_id()})
            seen.add(task.id)
            added.append(task)
        self._tasks[:0] = added
        logger.debug("Added %d tasks", len(added))
        return added

    def update_task(self, task_id: str, task_data: TaskUpdate, now: Optional[datetime] = None) -> Optional[Task]:
        """Apply only the fields the client sent; returns None when the id is unknown."""
        for index, task in enumerate(self._tasks):
            if task.id != task_id:
                continue

            changes = {
                field: value
                for field, value in task_data.model_dump(exclude_unset=True).items()
                if not (value is None and field in _REQUIRED_FIELDS)
            }
            if changes:
                changes["updated_at"] = now or datetime.now(timezone.utc)
                task = task.model_copy(update=changes)
                self._tasks[index] = task
            return task
        return None

    def delete_task(self, task_id: str) -> bool:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                del self._tasks[index]
                return True
        return False


def seed_sample_tasks(store: TaskStore, now: Optional[datetime] = None) -> list[Task]:
    """Populate a fresh store with the demo tasks shown on first start."""
    now = now or datetime.now(timezone.utc)

    def day(year: int, month: int, dom: int) -> datetime:
        return datetime(year, month, dom, tzinfo=timezone.utc)

    samples = [
        Task(
            id="1",
            title="Design new landing page",
            description="Create a modern, responsive design for the company website",
            category=Category.WORK,
            priority=Priority.HIGH,
            deadline=now + timedelta(days=2),
            created_at=day(2024, 1, 10),
            updated_at=day(2024, 1, 10),
        ),
        Task(
            id="2",
            title="Buy groceries",
            description="Milk, bread, eggs, and vegetables for the week",
            completed=True,
            category=Category.SHOPPING,
            priority=Priority.MEDIUM,
            created_at=day(2024, 1, 9),
            updated_at=day(2024, 1, 9),
        ),
        Task(
            id="3",
            title="Learn React hooks",
            description="Complete the advanced React course section on hooks",
            category=Category.LEARNING,
            priority=Priority.MEDIUM,
            deadline=now + timedelta(days=7),
            ai_generated=True,
            created_at=day(2024, 1, 8),
            updated_at=day(2024, 1, 8),
        ),
        Task(
            id="4",
            title="Morning workout routine",
            description="Complete 30-minute cardio and strength training session",
            category=Category.HEALTH,
            priority=Priority.HIGH,
            deadline=now - timedelta(days=1),
            created_at=day(2024, 1, 7),
            updated_at=day(2024, 1, 7),
        ),
    ]
    return store.add_tasks(samples)
