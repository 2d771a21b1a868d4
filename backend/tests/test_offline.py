"""
Tests for offline.py - keyword categories, template sampling, deduplication.
"""
import random
import pytest
import sys
import os
from datetime import timedelta

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models import Category
from offline import (
    DEADLINE_OFFSET_DAYS,
    TASK_TEMPLATES,
    generate_offline_tasks,
    relevant_categories,
)

from conftest import NOW, make_task

SEEDS = range(40)


class TestRelevantCategories:
    def test_single_keyword(self):
        assert relevant_categories("Buy a new laptop") == [Category.SHOPPING]

    def test_multiple_categories_in_check_order(self):
        assert relevant_categories("Study for the job interview") == [Category.WORK, Category.LEARNING]

    def test_no_keyword_defaults_to_personal(self):
        assert relevant_categories("Launch my website") == [Category.PERSONAL]
        assert relevant_categories("") == [Category.PERSONAL]

    def test_personal_keyword_alongside_others(self):
        """'workout' also contains 'work'; 'home' adds personal."""
        assert relevant_categories("Workout at HOME") == [Category.WORK, Category.HEALTH, Category.PERSONAL]


class TestGenerateOfflineTasks:
    @pytest.mark.parametrize("seed", SEEDS)
    def test_personal_website_goal(self, seed):
        tasks = generate_offline_tasks("Launch my personal website", [], rng=random.Random(seed), now=NOW)

        assert 3 <= len(tasks) <= 5
        assert all(task.category == Category.PERSONAL for task in tasks)
        assert all(task.ai_generated for task in tasks)
        assert all(task.completed is False for task in tasks)

    def test_every_count_in_range_is_reachable(self):
        counts = {
            len(generate_offline_tasks("Launch my personal website", [], rng=random.Random(seed), now=NOW))
            for seed in range(200)
        }
        assert counts == {3, 4, 5}

    @pytest.mark.parametrize("seed", SEEDS)
    def test_tasks_come_from_templates(self, seed):
        tasks = generate_offline_tasks("Get fit and learn to cook", [], rng=random.Random(seed), now=NOW)

        for task in tasks:
            templates = {title: (description, priority) for title, description, priority in TASK_TEMPLATES[task.category]}
            assert task.title in templates
            assert (task.description, task.priority) == templates[task.title]

    @pytest.mark.parametrize("seed", SEEDS)
    def test_deadlines_use_fixed_offsets(self, seed):
        tasks = generate_offline_tasks("Prepare for the office meeting", [], rng=random.Random(seed), now=NOW)

        for task in tasks:
            assert task.created_at == NOW
            assert task.updated_at == NOW
            assert task.deadline - task.created_at in {timedelta(days=d) for d in DEADLINE_OFFSET_DAYS}

    @pytest.mark.parametrize("seed", SEEDS)
    def test_skips_titles_overlapping_existing(self, seed):
        existing = [make_task("1", "Buy groceries", category=Category.SHOPPING)]
        tasks = generate_offline_tasks("buy groceries for the week", existing, rng=random.Random(seed), now=NOW)

        assert len(tasks) <= 5
        for task in tasks:
            title = task.title.lower()
            assert "buy groceries" not in title
            assert title not in "buy groceries"

    def test_substring_match_works_both_ways(self):
        """An existing title that contains a template title also blocks it."""
        existing = [make_task("1", "Pay bills before Friday")]
        for seed in SEEDS:
            tasks = generate_offline_tasks("family stuff", existing, rng=random.Random(seed), now=NOW)
            assert "Pay bills" not in [task.title for task in tasks]

    def test_skipped_candidates_are_not_replaced(self):
        existing = [make_task(str(i), title) for i, (title, _, _) in enumerate(TASK_TEMPLATES[Category.PERSONAL])]

        assert generate_offline_tasks("Launch my website", existing, rng=random.Random(1), now=NOW) == []

    def test_same_seed_same_output(self):
        first = generate_offline_tasks("Learn a new skill", [], rng=random.Random(7), now=NOW)
        second = generate_offline_tasks("Learn a new skill", [], rng=random.Random(7), now=NOW)

        assert [(t.title, t.deadline) for t in first] == [(t.title, t.deadline) for t in second]

    def test_ids_are_unique(self):
        tasks = generate_offline_tasks("work health learn buy home", [], rng=random.Random(3), now=NOW)
        assert len({task.id for task in tasks}) == len(tasks)

    def test_defaults_without_rng_or_clock(self):
        tasks = generate_offline_tasks("Launch my personal website", [])
        assert 3 <= len(tasks) <= 5
        assert all(task.created_at.tzinfo is not None for task in tasks)
