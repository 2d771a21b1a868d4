# System prompts for the AI-assisted features.
# Every prompt except INSIGHTS_PROMPT asks for JSON only; replies are validated
# against the pydantic shapes in models.py before use.
CATEGORIES_LIST = "work, personal, shopping, health, learning"
PRIORITIES_LIST = "low, medium, high"

CATEGORIZE_PROMPT = f"""You are a task classification assistant. Analyze the task and respond with JSON only.

Respond with this exact JSON format:
{{
    "category": one of {CATEGORIES_LIST},
    "priority": one of {PRIORITIES_LIST},
    "deadline_days": integer number of days from now, or null if there is no clear deadline
}}

Be concise and accurate. Only respond with valid JSON, no other text."""

GENERATE_TASKS_PROMPT = f"""You are a productivity assistant. Generate 3-5 actionable tasks to help achieve the given goal.
Consider the existing tasks and do not duplicate them.

Respond with a JSON array only. Each element must have this format:
{{
    "title": "short task title",
    "description": "one sentence description",
    "category": one of {CATEGORIES_LIST},
    "priority": one of {PRIORITIES_LIST},
    "deadline_days": estimated deadline as integer days from now
}}

Only respond with valid JSON, no other text."""

INSIGHTS_PROMPT = """You are a productivity coach. Analyze the task statistics and provide 2-3 concise, actionable insights to improve productivity.
Be encouraging and specific. Respond in plain text."""

NEXT_ACTIONS_PROMPT = """You are a productivity coach. Based on the active tasks, suggest 2-3 specific next actions.
Prioritize overdue and high-priority tasks.

Respond with a JSON array of strings only, no other text."""

# Fallbacks used whenever the AI provider is unavailable or its reply is unusable
FALLBACK_INSIGHTS = "Focus on completing your high-priority tasks and maintaining steady progress on your goals."
FALLBACK_NEXT_ACTIONS = [
    "Review your high-priority tasks",
    "Complete overdue items first",
    "Plan your day ahead",
]


def generate_tasks_message(goal: str, existing_titles: list[str]) -> str:
    return f'Goal: "{goal}". Existing tasks: {", ".join(existing_titles) or "None"}'


def categorize_message(title: str, description: str | None = None) -> str:
    message = f'Task: "{title}"'
    if description:
        message += f" - {description}"
    return message
