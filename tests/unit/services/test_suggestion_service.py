"""Unit tests for keyword suggestions."""

import pytest

from domain.services.suggestion_service import (
    TaskSuggestions,
    default_suggestions,
    meaningful_words,
    suggest_task_details,
)


class TestDefaultSuggestions:
    @pytest.mark.parametrize("text", [None, "", "ab"])
    def test_short_input_gets_defaults(self, text: str | None) -> None:
        assert suggest_task_details(text) == default_suggestions()

    def test_default_set_shape(self) -> None:
        defaults = default_suggestions()

        assert len(defaults.titles) == 3
        assert len(defaults.descriptions) == 2
        assert defaults.tags == ["important", "pending", "action"]


class TestMeaningfulWords:
    def test_drops_short_words_and_stop_words(self) -> None:
        assert meaningful_words("Fix the bug in AND for our big release") == [
            "fix",
            "bug",
            "our",
            "big",
            "release",
        ]

    def test_splits_on_any_whitespace(self) -> None:
        assert meaningful_words("plan\tquarterly\n  budget") == ["plan", "quarterly", "budget"]


class TestSuggestTaskDetails:
    def test_builds_templates_from_keywords(self) -> None:
        result = suggest_task_details("urgent client proposal")

        assert result.titles == [
            "Complete urgent task",
            "Review urgent",
            "Work on urgent client",
        ]
        assert result.descriptions == [
            "Important task related to urgent, client, proposal",
            "Remember to focus on urgent completion",
        ]
        assert result.tags == ["urgent", "client", "proposal"]
        assert any("client" in title for title in result.titles)

    def test_single_keyword(self) -> None:
        result = suggest_task_details("laundry")

        assert result.titles[2] == "Work on laundry"
        assert result.tags == ["laundry"]

    def test_at_most_five_tags(self) -> None:
        result = suggest_task_details("alpha bravo charlie delta echo foxtrot golf")

        assert result.tags == ["alpha", "bravo", "charlie", "delta", "echo"]
        assert "golf" in result.descriptions[0]

    def test_all_words_filtered_gives_empty_lists_not_defaults(self) -> None:
        result = suggest_task_details("to the an of")

        assert result == TaskSuggestions(titles=[], descriptions=[], tags=[])
        assert result != default_suggestions()
