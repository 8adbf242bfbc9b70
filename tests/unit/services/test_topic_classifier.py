"""
Tests for the keyword topic classifier.
"""

from __future__ import annotations

import pytest

from viewtrail.services.topic_classifier import (
    NO_TOPIC_LABEL,
    TOPIC_PATTERNS,
    classify_topics,
    topic_labels,
)

pytestmark = pytest.mark.unit


class TestClassifyTopics:
    """Tests for classify_topics."""

    def test_multiple_topics_in_table_order(self) -> None:
        """Every matching topic is returned in table order."""
        assert classify_topics("Python tutorial for beginners", "Corey Schafer") == [
            "Technology",
            "Education",
        ]

    def test_channel_name_counts(self) -> None:
        """Channel titles contribute keywords."""
        assert "Music" in classify_topics("Live at Wembley", "Queen Music")

    def test_whole_words_only(self) -> None:
        """Keywords do not match inside longer words."""
        assert classify_topics("Aidan's painting stream", None) == []

    def test_plural_forms(self) -> None:
        """Plural forms of keywords match."""
        assert "Cooking" in classify_topics("10 easy recipes", None)
        assert "Gaming" in classify_topics("Top games of the year", None)

    def test_case_insensitive(self) -> None:
        """Matching ignores case."""
        assert classify_topics("NBA FINALS", None) == ["Sports"]

    def test_no_match(self) -> None:
        """Unmatched text has no topics."""
        assert classify_topics("Daily vlog #12", "Vlog Life") == []

    @pytest.mark.parametrize(("title", "channel"), [(None, None), ("", ""), ("  ", None)])
    def test_empty_input(self, title: str, channel: str) -> None:
        """Missing text has no topics."""
        assert classify_topics(title, channel) == []

    def test_deterministic(self) -> None:
        """The same input always gives the same output."""
        first = classify_topics("Bitcoin market news", "Finance Daily")
        assert first == classify_topics("Bitcoin market news", "Finance Daily")
        assert first == ["Finance", "News"]


class TestTopicLabels:
    """Tests for topic_labels."""

    def test_labels_follow_table(self) -> None:
        """Labels come from the pattern table."""
        assert topic_labels() == tuple(topic for topic, _ in TOPIC_PATTERNS)

    def test_no_topic_label_is_not_a_topic(self) -> None:
        """The uncategorized bucket is never emitted by the classifier."""
        assert NO_TOPIC_LABEL not in topic_labels()
