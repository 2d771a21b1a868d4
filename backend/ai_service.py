"""
Client for the AI-assisted features.

Each public operation has a fixed fallback: when the key is missing, the
provider call fails, or the reply does not match the expected shape, the
failure is logged and the fallback is returned instead.
"""
import dataclasses
import json
import logging
import random
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Literal, Optional, Sequence

import anthropic
from pydantic import TypeAdapter, ValidationError

from config import AIConfig, normalize_api_key
from models import Category, CategorizeResult, GeneratedTaskSpec, Priority, Task
from offline import generate_offline_tasks
from prompts import (
    CATEGORIZE_PROMPT,
    FALLBACK_INSIGHTS,
    FALLBACK_NEXT_ACTIONS,
    GENERATE_TASKS_PROMPT,
    INSIGHTS_PROMPT,
    NEXT_ACTIONS_PROMPT,
    categorize_message,
    generate_tasks_message,
)
from stats import compute_stats, is_overdue

logger = logging.getLogger(__name__)

GenerationMode = Literal["ai", "offline"]

FALLBACK_CATEGORIZATION = CategorizeResult(category=Category.PERSONAL, priority=Priority.MEDIUM, deadline_days=None)

_generated_tasks_adapter = TypeAdapter(list[GeneratedTaskSpec])
_categorize_adapter = TypeAdapter(CategorizeResult)
_next_actions_adapter = TypeAdapter(list[str])


class AIServiceError(Exception):
    """Base class for anything that makes an AI reply unusable."""


class MissingAPIKeyError(AIServiceError):
    pass


class AIRequestError(AIServiceError):
    """Provider unreachable or returned a non-success status."""


class AIResponseError(AIServiceError):
    """Reply was empty, not JSON, or not in the expected shape."""


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` block if the model added one."""
    text = text.strip()
    if text.startswith("```"):
        text = text.removeprefix("```json").removeprefix("```")
    if text.endswith("```"):
        text = text.removesuffix("```")
    return text.strip()


def mask_api_key(key: Optional[str]) -> Optional[str]:
    if not key:
        return None
    if len(key) <= 8:
        return "*" * len(key)
    return f"{key[:4]}...{key[-4:]}"


class AIService:
    def __init__(self, config: AIConfig, client: Any = None):
        self.config = config
        # An injected client is kept across key changes (used by tests)
        self._injected_client = client
        self._client = client

    @property
    def api_key(self) -> Optional[str]:
        return self.config.api_key

    async def set_api_key(self, key: Optional[str]) -> None:
        self.config = dataclasses.replace(self.config, api_key=normalize_api_key(key))
        # The old client was built with the old key
        await self.aclose()
        logger.info("AI API key %s", "updated" if self.config.has_key else "cleared")

    async def aclose(self) -> None:
        """Close the provider client this service created; injected clients are left alone."""
        if self._client is not None and self._client is not self._injected_client:
            await self._client.close()
        self._client = self._injected_client

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(
                api_key=self.config.api_key,
                base_url=self.config.base_url,
                max_retries=0,
            )
        return self._client

    async def _complete(self, system_prompt: str, user_message: str, temperature: float) -> str:
        if not self.config.has_key:
            raise MissingAPIKeyError("AI API key not set")

        try:
            response = await self._get_client().messages.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                temperature=temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_message}],
            )
        except anthropic.APIError as e:
            raise AIRequestError(f"AI provider error: {e}") from e

        texts = [block.text for block in response.content if getattr(block, "type", None) == "text"]
        ai_text = "".join(texts).strip()
        if not ai_text:
            raise AIResponseError("AI provider returned no text")
        logger.debug("AI response: %s", ai_text)
        return ai_text

    async def _complete_json(self, system_prompt: str, user_message: str, temperature: float, adapter: TypeAdapter):
        ai_text = strip_code_fence(await self._complete(system_prompt, user_message, temperature))
        try:
            return adapter.validate_json(ai_text)
        except ValidationError as e:
            raise AIResponseError(f"Failed to parse AI response: {e.error_count()} error(s)") from e

    async def categorize(self, title: str, description: Optional[str] = None) -> CategorizeResult:
        try:
            return await self._complete_json(
                CATEGORIZE_PROMPT, categorize_message(title, description), 0.3, _categorize_adapter
            )
        except AIServiceError as e:
            logger.warning("Categorization failed, using defaults: %s", e)
            return FALLBACK_CATEGORIZATION

    async def generate_tasks(
        self,
        goal: str,
        existing_tasks: Sequence[Task],
        rng: Optional[random.Random] = None,
        now: Optional[datetime] = None,
    ) -> tuple[list[Task], GenerationMode]:
        """Ask the AI for tasks towards a goal; generate them offline if that fails."""
        now = now or datetime.now(timezone.utc)
        existing_titles = [task.title for task in existing_tasks]
        try:
            specs = await self._complete_json(
                GENERATE_TASKS_PROMPT, generate_tasks_message(goal, existing_titles), 0.8, _generated_tasks_adapter
            )
        except MissingAPIKeyError:
            logger.info("No AI API key, generating tasks offline")
            return generate_offline_tasks(goal, existing_tasks, rng=rng, now=now), "offline"
        except AIServiceError as e:
            logger.warning("AI generation failed, falling back to offline mode: %s", e)
            return generate_offline_tasks(goal, existing_tasks, rng=rng, now=now), "offline"

        tasks = [
            Task(
                id=str(uuid.uuid4()),
                title=spec.title,
                description=spec.description,
                completed=False,
                category=spec.category,
                priority=spec.priority,
                deadline=now + timedelta(days=spec.deadline_days) if spec.deadline_days else None,
                ai_generated=True,
                created_at=now,
                updated_at=now,
            )
            for spec in specs
        ]
        return tasks, "ai"

    async def generate_insights(self, tasks: Sequence[Task], now: Optional[datetime] = None) -> str:
        stats = compute_stats(tasks, now)
        payload = stats.model_dump_json(include={"total", "completed", "active", "overdue", "categories", "priorities"})
        try:
            return await self._complete(INSIGHTS_PROMPT, f"Task Statistics: {payload}", 0.6)
        except AIServiceError as e:
            logger.warning("Insights generation failed: %s", e)
            return FALLBACK_INSIGHTS

    async def suggest_next_actions(self, tasks: Sequence[Task], now: Optional[datetime] = None) -> list[str]:
        now = now or datetime.now(timezone.utc)
        active_tasks = [
            {
                "title": task.title,
                "priority": task.priority.value if task.priority else None,
                "deadline": task.deadline.isoformat() if task.deadline else None,
                "overdue": is_overdue(task, now),
            }
            for task in tasks
            if not task.completed
        ]
        try:
            return await self._complete_json(
                NEXT_ACTIONS_PROMPT, f"Active tasks: {json.dumps(active_tasks)}", 0.4, _next_actions_adapter
            )
        except AIServiceError as e:
            logger.warning("Next action suggestions failed: %s", e)
            return list(FALLBACK_NEXT_ACTIONS)
