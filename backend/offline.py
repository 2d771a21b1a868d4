"""
Offline task generation.

Used when no AI key is configured or the AI call fails: picks categories from
keywords in the goal, then samples canned task templates for them.
"""
import random
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from models import Category, Priority, Task

TASK_TEMPLATES: dict[Category, list[tuple[str, str, Priority]]] = {
    Category.WORK: [
        ("Review emails", "Check and respond to important emails", Priority.MEDIUM),
        ("Prepare presentation", "Create slides for upcoming meeting", Priority.HIGH),
        ("Team standup meeting", "Daily team sync meeting", Priority.MEDIUM),
        ("Update project documentation", "Document recent changes and progress", Priority.LOW),
        ("Code review", "Review team member's pull request", Priority.MEDIUM),
    ],
    Category.PERSONAL: [
        ("Plan weekend activities", "Decide on activities for the weekend", Priority.LOW),
        ("Call family", "Catch up with family members", Priority.MEDIUM),
        ("Organize home office", "Clean and organize workspace", Priority.LOW),
        ("Pay bills", "Review and pay monthly bills", Priority.HIGH),
        ("Book appointment", "Schedule necessary appointments", Priority.MEDIUM),
    ],
    Category.SHOPPING: [
        ("Buy groceries", "Weekly grocery shopping", Priority.MEDIUM),
        ("Replace household items", "Buy necessary household supplies", Priority.LOW),
        ("Get gift for occasion", "Find and purchase appropriate gift", Priority.MEDIUM),
        ("Pharmacy pickup", "Collect prescriptions from pharmacy", Priority.HIGH),
    ],
    Category.HEALTH: [
        ("Schedule workout", "Plan and complete exercise routine", Priority.MEDIUM),
        ("Drink more water", "Stay hydrated throughout the day", Priority.LOW),
        ("Take vitamins", "Remember daily vitamin supplements", Priority.LOW),
        ("Prepare healthy meal", "Cook nutritious meal at home", Priority.MEDIUM),
        ("Get enough sleep", "Maintain healthy sleep schedule", Priority.HIGH),
    ],
    Category.LEARNING: [
        ("Read article/book", "Continue reading current book or article", Priority.LOW),
        ("Practice new skill", "Spend time practicing recently learned skill", Priority.MEDIUM),
        ("Take online course", "Complete next lesson in online course", Priority.MEDIUM),
        ("Research topic", "Learn about interesting new topic", Priority.LOW),
        ("Practice language", "Study foreign language for 30 minutes", Priority.MEDIUM),
    ],
}

# Checked in this order; personal is last because it doubles as the default.
CATEGORY_KEYWORDS: list[tuple[Category, tuple[str, ...]]] = [
    (Category.WORK, ("work", "job", "office", "meeting")),
    (Category.HEALTH, ("health", "fitness", "exercise", "workout")),
    (Category.LEARNING, ("learn", "study", "course", "skill")),
    (Category.SHOPPING, ("buy", "shop", "purchase", "groceries")),
    (Category.PERSONAL, ("personal", "family", "home")),
]

DEADLINE_OFFSET_DAYS = (1, 2, 3, 7, 14)
MIN_TASKS = 3
MAX_TASKS = 5


def relevant_categories(goal: str) -> list[Category]:
    """Map a goal to the categories whose keywords it mentions."""
    goal_lower = goal.lower()
    categories: list[Category] = []
    for category, keywords in CATEGORY_KEYWORDS:
        hit = any(keyword in goal_lower for keyword in keywords)
        # No earlier hit means the goal defaults to personal
        if category is Category.PERSONAL and not categories:
            hit = True
        if hit:
            categories.append(category)

    # Unreachable while personal is the default above; kept as a guard.
    if not categories:
        categories = list(Category)
    return categories


def _is_duplicate(title: str, existing_titles: Sequence[str]) -> bool:
    title_lower = title.lower()
    return any(existing in title_lower or title_lower in existing for existing in existing_titles)


def generate_offline_tasks(
    goal: str,
    existing_tasks: Sequence[Task],
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> list[Task]:
    """
    Build 3-5 candidate tasks for a goal without calling any external service.

    Candidates whose title overlaps an existing task title are dropped and not
    replaced, so fewer tasks than the drawn count can come back.
    """
    rng = rng or random.Random()
    now = now or datetime.now(timezone.utc)
    existing_titles = [task.title.lower() for task in existing_tasks]
    categories = relevant_categories(goal)

    generated: list[Task] = []
    task_count = rng.randint(MIN_TASKS, MAX_TASKS)
    for _ in range(task_count):
        category = rng.choice(categories)
        title, description, priority = rng.choice(TASK_TEMPLATES[category])

        if _is_duplicate(title, existing_titles):
            continue

        generated.append(Task(
            id=str(uuid.uuid4()),
            title=title,
            description=description,
            completed=False,
            category=category,
            priority=priority,
            deadline=now + timedelta(days=rng.choice(DEADLINE_OFFSET_DAYS)),
            ai_generated=True,
            created_at=now,
            updated_at=now,
        ))

    return generated
