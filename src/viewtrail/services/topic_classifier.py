"""
Topic classifier for watch records.

Maps a (title, channel) pair to coarse content categories by keyword
matching against a fixed, ordered table. This is deliberately not ML: the
same inputs always give the same labels in the same order.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

# Bucket used by aggregations for records with no topic
NO_TOPIC_LABEL = "Uncategorized"


def _keywords(*words: str) -> "re.Pattern[str]":
    # Whole words, optional plural
    alternation = "|".join(re.escape(word) for word in words)
    return re.compile(rf"\b(?:{alternation})s?\b", re.IGNORECASE)


TOPIC_PATTERNS: Tuple[Tuple[str, "re.Pattern[str]"], ...] = (
    (
        "Technology",
        _keywords(
            "tech", "software", "hardware", "coding", "programming", "developer",
            "javascript", "python", "react", "node", "api", "app", "mobile", "web",
            "ai", "machine learning", "ml", "data", "database", "cloud", "aws",
            "azure", "devops", "kubernetes", "docker",
        ),
    ),
    (
        "Finance",
        _keywords(
            "finance", "money", "invest", "investing", "stock", "crypto", "bitcoin",
            "ethereum", "trading", "market", "economy", "business", "startup",
            "entrepreneur", "wealth", "financial", "bank",
        ),
    ),
    (
        "Politics",
        _keywords(
            "politic", "politics", "election", "government", "president", "congress",
            "senate", "democrat", "republican", "policy", "vote", "campaign",
            "liberal", "conservative",
        ),
    ),
    (
        "Entertainment",
        _keywords(
            "movie", "film", "tv", "show", "series", "netflix", "disney", "marvel",
            "actor", "actress", "celebrity", "drama", "comedy", "entertainment",
        ),
    ),
    (
        "Education",
        _keywords(
            "learn", "learning", "education", "tutorial", "course", "lesson", "teach",
            "study", "university", "college", "school", "academic", "research",
            "science", "math", "history",
        ),
    ),
    (
        "Gaming",
        _keywords(
            "game", "gaming", "gamer", "playstation", "xbox", "nintendo", "steam",
            "esports", "minecraft", "fortnite", "valorant", "league", "overwatch",
            "rpg", "fps",
        ),
    ),
    (
        "Music",
        _keywords(
            "music", "song", "album", "artist", "band", "concert", "spotify",
            "hip hop", "rap", "rock", "pop", "jazz", "classical", "electronic", "dj",
            "producer",
        ),
    ),
    (
        "Sports",
        _keywords(
            "sport", "football", "basketball", "baseball", "soccer", "tennis", "golf",
            "nfl", "nba", "mlb", "fifa", "olympics", "athlete", "team", "championship",
        ),
    ),
    (
        "News",
        _keywords(
            "news", "breaking", "update", "report", "journalist", "media", "press",
            "headline", "story", "coverage", "current events",
        ),
    ),
    (
        "Science",
        _keywords(
            "science", "physics", "chemistry", "biology", "research", "experiment",
            "discovery", "space", "nasa", "quantum", "evolution", "climate",
        ),
    ),
    (
        "Cooking",
        _keywords(
            "cook", "cooking", "recipe", "food", "meal", "kitchen", "chef", "bake",
            "baking", "cuisine", "restaurant", "eat", "dish", "ingredient", "culinary",
        ),
    ),
    (
        "Travel",
        _keywords(
            "travel", "trip", "vacation", "tourist", "destination", "hotel", "flight",
            "adventure", "explore", "country", "city", "beach", "mountain",
        ),
    ),
    (
        "Health",
        _keywords(
            "health", "fitness", "workout", "exercise", "yoga", "nutrition", "diet",
            "medical", "doctor", "wellness", "meditation", "mental health",
        ),
    ),
)
"""Ordered (topic, pattern) table. Output order follows this table."""


def topic_labels() -> Tuple[str, ...]:
    """Return every label the classifier can emit, in table order."""
    return tuple(topic for topic, _ in TOPIC_PATTERNS)


def classify_topics(title: Optional[str], channel: Optional[str]) -> List[str]:
    """
    Classify a video into topics by keyword matching.

    Parameters
    ----------
    title : str | None
        Video title.
    channel : str | None
        Channel title.

    Returns
    -------
    List[str]
        Every matching topic in table order, or an empty list.

    Examples
    --------
    >>> classify_topics("Python tutorial for beginners", "Corey Schafer")
    ['Technology', 'Education']
    >>> classify_topics("", None)
    []
    """
    text = f"{title or ''} {channel or ''}".strip()
    if not text:
        return []
    return [topic for topic, pattern in TOPIC_PATTERNS if pattern.search(text)]
