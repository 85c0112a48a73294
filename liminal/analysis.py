"""Story export and end-of-story analysis."""

import json
from datetime import datetime, timezone
from typing import Any

from .engine import StoryEngine
from .models import BehaviorProfile

ENDING_TEXT = "Your story comes to an end, shaped by the choices you made and the narrator who watched."

RELATIONSHIP_TIERS = [
    (70, "Beloved Protagonist"),
    (40, "Trusted Character"),
    (10, "Interesting Subject"),
    (-10, "Neutral Entity"),
    (-40, "Problematic Element"),
    (-70, "Narrative Disruption"),
]


def dominant_behavior_trait(profile: BehaviorProfile) -> str:
    """Highest counter; on a tie the later trait wins."""
    values = profile.model_dump()
    best = None
    for trait in values:
        if best is None or not values[best] > values[trait]:
            best = trait
    return best or "empathetic"


def relationship_level(relationship: int | float) -> str:
    for threshold, label in RELATIONSHIP_TIERS:
        if relationship > threshold:
            return label
    return "Story Virus"


class StoryAnalysis:
    def __init__(self, engine: StoryEngine) -> None:
        self.engine = engine

    def build_story_data(self) -> dict[str, Any]:
        """Full snapshot as a dict, keyed the way exported files are."""
        player = self.engine.player
        return {
            "playerName": player.name,
            "archetype": player.archetype,
            "day": player.day,
            "sanity": player.sanity,
            "narratorRelationship": player.narrator_relationship,
            "behaviorProfile": player.behavior_profile.model_dump(),
            "events": list(player.events),
            "autoplay": player.autoplay,
            "fullLog": [entry.model_dump() for entry in self.engine.story_log],
            "exportTime": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "ending": self.generate_ending(),
            "storyAnalysis": self.generate_story_analysis(),
        }

    def export_story(self) -> str:
        return json.dumps(self.build_story_data(), indent=2)

    def generate_ending(self) -> str:
        return ENDING_TEXT

    def generate_story_analysis(self) -> dict[str, Any]:
        return {
            "dominantTrait": dominant_behavior_trait(self.engine.player.behavior_profile),
            "narratorRelationshipLevel": relationship_level(self.engine.player.narrator_relationship),
            "storyComplexity": self.calculate_story_complexity(),
        }

    def calculate_story_complexity(self) -> float:
        counts = {"decision": 0, "consequence": 0, "random": 0}
        for entry in self.engine.story_log:
            if entry.type in counts:
                counts[entry.type] += 1
        score = (counts["decision"] * 3 + counts["consequence"] * 2 + counts["random"]) / 2
        return min(100.0, score)
