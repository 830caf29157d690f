"""Keyword → category detection and category → calendar color tags."""

from __future__ import annotations

from voice2action.intent.types import Category

# Google Calendar colorId per category
CATEGORY_COLOR_MAP: dict[Category, str] = {
    Category.HOME: "10",       # Basil
    Category.WORK: "5",        # Banana
    Category.SPORT: "9",       # Blueberry
    Category.IMPORTANT: "11",  # Tomato
    Category.CASUAL: "7",      # Peacock
}

# Order matters: first matching category wins.
CATEGORY_KEYWORDS: tuple[tuple[Category, tuple[str, ...]], ...] = (
    (Category.HOME, ("дом", "домаш", "семь", "дет", "убор", "готов", "ремонт")),
    (Category.WORK, ("работ", "meeting", "job", "офис", "совещ", "проек", "коллег", "клиент")),
    (Category.SPORT, ("спорт", "тренир", "фитнес", "бег", "йога", "зал", "плаван", "футбол")),
    (Category.IMPORTANT, ("важн", "сроч", "дедлайн", "deadline", "критич", "экзамен")),
    (Category.CASUAL, ("еда", "ужин", "завтрак", "обед", "кафе", "кофе", "встреча с друзьями")),
)


def detect_category(text: str) -> Category:
    """Return the first category whose keywords occur in *text* (case-insensitive)."""
    lowered = text.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return Category.CASUAL


def parse_category(value: str | None) -> Category | None:
    """Map a backend-supplied label onto a known category, or None."""
    if not value:
        return None
    try:
        return Category(value.strip().lower())
    except ValueError:
        return None


def color_for(category: Category) -> str:
    return CATEGORY_COLOR_MAP.get(category, CATEGORY_COLOR_MAP[Category.CASUAL])
