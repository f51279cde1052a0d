"""Robot-category keyword filter.

This is the only place category membership is enforced; upstream queries are
never trusted to have applied it.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, Optional

from app.models.project import Project
from app.models.search import Category

CATEGORY_KEYWORDS: dict[Category, tuple[str, ...]] = {
    Category.HUMANOID: ("humanoid", "bipedal"),
    Category.MOBILE: ("mobile", "rover", "agv", "navigation"),
    Category.ROBOTIC_ARM: ("robotic-arm", "manipulator", "end-effector"),
    Category.LEGGED: ("legged-robot", "quadrupedal", "hexapod"),
    Category.DEXTEROUS_HAND: ("dexterous-hand", "gripper", "manipulation"),
    Category.DESKTOP: ("desktop-robot", "tiny-robot"),
    Category.PET: ("pet-robot", "companion-robot"),
    Category.EDUCATIONAL: ("educational-robot", "teaching-robot", "STEM"),
}

# Display labels used by the web client.
CATEGORY_LABELS: dict[str, Category] = {
    "人型机器人": Category.HUMANOID,
    "移动机器人": Category.MOBILE,
    "机械臂": Category.ROBOTIC_ARM,
    "足式机器人": Category.LEGGED,
    "灵巧手": Category.DEXTEROUS_HAND,
    "桌面机器人": Category.DESKTOP,
    "宠物机器人": Category.PET,
    "教育机器人": Category.EDUCATIONAL,
}


def resolve_category(value: Optional[str]) -> Optional[Category]:
    """Slug, enum name or display label -> Category. 'All', blank or unknown -> None."""
    raw = (value or "").strip()
    if not raw:
        return None
    if raw in CATEGORY_LABELS:
        return CATEGORY_LABELS[raw]
    slug = raw.lower().replace("-", "_").replace(" ", "_")
    for category in Category:
        if slug in (category.value, category.name.lower()):
            return category
    return None


@lru_cache(maxsize=None)
def category_pattern(category: Category) -> re.Pattern[str]:
    keywords = CATEGORY_KEYWORDS[category]
    return re.compile("|".join(re.escape(k) for k in keywords), re.IGNORECASE)


def matches_category(project: Project, pattern: re.Pattern[str]) -> bool:
    if pattern.search(project.name) or pattern.search(project.description):
        return True
    return any(pattern.search(tag) for tag in project.tags)


def filter_by_category(projects: Iterable[Project], category: Optional[Category]) -> list[Project]:
    items = list(projects)
    if category is None or category not in CATEGORY_KEYWORDS:
        return items
    pattern = category_pattern(category)
    return [p for p in items if matches_category(p, pattern)]
