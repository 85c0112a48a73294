"""Memory bank: per-context choice patterns, recent narrator interactions, story themes."""

from typing import Any

INTERACTION_LIMIT = 50


class MemorySystem:
    def __init__(self) -> None:
        self.choice_patterns: dict[str, str | None] = {}
        self.narrator_interactions: list[dict[str, Any]] = []
        self.story_themes: list[str] = []

    def record_choice(self, context: str | None, consequence: str | None) -> None:
        """Remember the latest consequence chosen in ``context``."""
        self.choice_patterns[context or ""] = consequence

    def get_choice_pattern(self, context: str | None) -> str | None:
        return self.choice_patterns.get(context or "")

    def add_interaction(self, interaction: dict[str, Any]) -> None:
        self.narrator_interactions.append(interaction)
        if len(self.narrator_interactions) > INTERACTION_LIMIT:
            self.narrator_interactions.pop(0)

    def add_theme(self, theme: str) -> None:
        if theme not in self.story_themes:
            self.story_themes.append(theme)

    def serialize(self) -> dict[str, Any]:
        return {
            "choicePatterns": [[k, v] for k, v in self.choice_patterns.items()],
            "storyThemes": list(self.story_themes),
            "narratorInteractions": self.narrator_interactions[-10:],
        }
