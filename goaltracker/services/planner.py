"""
Plan and task suggestions for goals.

Both generators are pure: nothing is persisted, and the only input besides
the goal fields is the invocation time ``now`` (defaults to the current UTC
time), so two calls on different days give different due dates.
"""
import math
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from goaltracker.database.models import Goal
from goaltracker.utils.datetime_utils import to_naive_utc, utc_now

SUGGESTION_COUNT = 3

PLAN_MILESTONES = [
    {
        "title": "Research and planning",
        "description": "Gather information and outline the steps needed for \"{title}\".",
        "days": 7,
        "priority": "High",
    },
    {
        "title": "Build the foundation",
        "description": "Start the first concrete work towards \"{title}\".",
        "days": 14,
        "priority": "Medium",
    },
    {
        "title": "Review progress",
        "description": "Check how far \"{title}\" has come and adjust the approach.",
        "days": 21,
        "priority": "Medium",
    },
    {
        "title": "Final push",
        "description": "Finish the remaining work and wrap up \"{title}\".",
        "days": 28,
        "priority": "High",
    },
]

CATEGORY_SUGGESTIONS = {
    "Personal": [
        ("Reflect on motivation", "Write down why this goal matters to you.", "High"),
        ("Build a daily habit", "Schedule a small daily action that moves the goal forward.", "Medium"),
        ("Celebrate a milestone", "Review what you achieved so far and reward yourself.", "Low"),
    ],
    "Professional": [
        ("Identify required skills", "List the skills and resources needed to reach this goal.", "High"),
        ("Reach out for feedback", "Ask a mentor or colleague to review your progress.", "Medium"),
        ("Deliver a first result", "Ship a first tangible outcome and document lessons learned.", "High"),
    ],
}

DEFAULT_SUGGESTIONS = [
    ("Define next steps", "Break the goal into concrete, actionable steps.", "High"),
    ("Make steady progress", "Complete the most important open step.", "Medium"),
    ("Review and adjust", "Check progress against the target date and adjust the plan.", "Medium"),
]


def generate_plan(
    title: str,
    description: Optional[str],
    target_date: datetime,
    category: str,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Return a fixed four-milestone schedule starting from ``now``."""
    now = to_naive_utc(now) if now else utc_now()
    tasks = [
        {
            "title": milestone["title"],
            "description": milestone["description"].format(title=title),
            "due_date": now + timedelta(days=milestone["days"]),
            "priority": milestone["priority"],
        }
        for milestone in PLAN_MILESTONES
    ]
    return {
        "title": title,
        "description": description,
        "category": category,
        "target_date": to_naive_utc(target_date),
        "tasks": tasks,
    }


def suggestion_interval_days(target_date: datetime, now: datetime) -> int:
    """Spacing in whole days between suggested tasks, never below one."""
    days_difference = math.ceil((target_date - now).total_seconds() / 86400)
    return max(math.floor(days_difference / 4), 1)


def suggest_tasks(goal: Goal, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Return three non-persisted task suggestions for ``goal``."""
    now = to_naive_utc(now) if now else utc_now()
    interval = suggestion_interval_days(to_naive_utc(goal.target_date), now)
    templates = CATEGORY_SUGGESTIONS.get(goal.category, DEFAULT_SUGGESTIONS)

    return [
        {
            "title": title,
            "description": description,
            "due_date": now + timedelta(days=interval * step),
            "priority": priority,
        }
        for step, (title, description, priority) in enumerate(templates[:SUGGESTION_COUNT], start=1)
    ]
