"""Keyword-based task detail suggestions."""

from dataclasses import dataclass, field

MIN_INPUT_LENGTH = 3
MIN_WORD_LENGTH = 3
MAX_TAGS = 5

STOP_WORDS = frozenset({"the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for"})


@dataclass(frozen=True)
class TaskSuggestions:
    titles: list[str] = field(default_factory=list)
    descriptions: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)


def default_suggestions() -> TaskSuggestions:
    return TaskSuggestions(
        titles=[
            "Complete important task",
            "Review pending items",
            "Follow up on action items",
        ],
        descriptions=[
            "This task requires your attention",
            "Set a realistic deadline for this task",
        ],
        tags=["important", "pending", "action"],
    )


def meaningful_words(text: str) -> list[str]:
    """Lowercased words longer than two characters that are not stop words."""
    return [
        word
        for word in text.lower().split()
        if len(word) >= MIN_WORD_LENGTH and word not in STOP_WORDS
    ]


def suggest_task_details(text: str | None) -> TaskSuggestions:
    """Build title, description and tag suggestions from free text.

    Input shorter than three characters gets the canned default set. Longer
    input whose words are all filtered out gets empty lists, not the
    defaults.
    """
    if not text or len(text) < MIN_INPUT_LENGTH:
        return default_suggestions()

    words = meaningful_words(text)
    if not words:
        return TaskSuggestions()

    first = words[0]
    return TaskSuggestions(
        titles=[
            f"Complete {first} task",
            f"Review {first}",
            f"Work on {' '.join(words[:2])}",
        ],
        descriptions=[
            f"Important task related to {', '.join(words)}",
            f"Remember to focus on {first} completion",
        ],
        tags=words[:MAX_TAGS],
    )
