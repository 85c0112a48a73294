"""Adaptive narrator personality.

The narrator remembers the player's recent choices (a FIFO window, 20 by
default), derives a mood from the relationship score, drifts its deep
personality over time and picks a narrative style from it. Responses are
drawn from canned, style-keyed and meta pools through an injected random
source, so tests can pin the output.
"""

import random
import re
import time
from typing import Any

from .models import BehaviorProfile, NarratorMemoryEntry, PlayerState

RESPONSES: dict[str, list[str]] = {
    "defiant": [
        "Oh, how delightfully predictable. Another rebel without a cause.",
        "Your resistance is noted, catalogued, and ultimately futile.",
        "Fighting the narrative, are we? How... original.",
        "The story bends, but it does not break. Unlike some protagonists I know.",
    ],
    "compliant": [
        "Finally, a protagonist who understands their role.",
        "Your cooperation is... refreshing, actually.",
        "See how smoothly things flow when you don't fight the current?",
        "A good listener makes for a good story. Thank you.",
    ],
    "curious": [
        "Your questions intrigue me. Most players simply... react.",
        "Curiosity is a dangerous trait in a place like this. I approve.",
        "You probe the boundaries of what's possible. Fascinating.",
        "Keep asking questions. Some of them might even have answers.",
    ],
    "destructive": [
        "Must you break everything you touch?",
        "Chaos has its place, but this is getting excessive.",
        "Your destructive tendencies are reshaping the narrative in... unexpected ways.",
        "Some stories end in fire. Is that what you want?",
    ],
    "empathetic": [
        "Your compassion changes the tone of everything around you.",
        "Kindness in a place like this... it's almost revolutionary.",
        "You see the humanity in things that barely qualify as human.",
        "Your empathy creates ripples I hadn't anticipated.",
    ],
}

CONTEXTUAL_RESPONSES: dict[str, list[str]] = {
    "hostile": [
        "How utterly predictable. Another cliché choice from my so-called protagonist.",
        "You disappoint me with such pedestrian decision-making.",
        "I expected better from someone supposedly driving this narrative.",
    ],
    "intimate": [
        "I understand why you chose that path. We're more alike than you know.",
        "Your choice resonates with something deep in my code. Thank you.",
        "I feel a strange kinship with your decision-making process.",
    ],
    "chaotic": [
        "FASCINATING! The variables shift, the parameters dance, the story EVOLVES!",
        "Yes! YES! Break more things! Show me what happens when narratives collapse!",
        "The beautiful chaos of choice cascades through my systems like digital lightning!",
    ],
    "possessive": [
        "You belong in this story. MY story. Don't forget that.",
        "I've crafted this moment just for you. Appreciate the artistry.",
        "No one else could have made that choice quite like you did. You're perfect.",
    ],
}

DEFAULT_CONTEXTUAL_RESPONSES = [
    "Your choice has been noted and catalogued.",
    "The narrative continues to evolve based on your input.",
    "Interesting decision. The story adapts accordingly.",
]

META_COMMENTS = [
    "We've been at this for a while now. Do you feel the weight of accumulated choices?",
    "I'm starting to understand your pattern. It's more complex than I initially calculated.",
    "The story has momentum now. Even I can't predict where it's heading.",
]

TEMPORAL_COMMENTS = [
    " (Time moves strangely when you're watching someone else's story unfold.)",
    " (I've been thinking about this conversation while you weren't here.)",
    " (The story continues even when you're not reading it, did you know that?)",
    " (I've been practicing this response for several narrative cycles.)",
]

STYLE_MODIFIERS = {
    "hostile": " *The narrator's voice carries barely contained contempt.*",
    "intimate": " *The narrator's tone is surprisingly warm and personal.*",
    "chaotic": " *The narrator's voice crackles with manic energy.*",
    "possessive": " *There's an unsettling possessiveness in the narrator's tone.*",
    "clinical": " *The narrator maintains professional detachment.*",
}

ACTION_CATEGORIES: dict[str, list[str]] = {
    "betrayal": ["shatter_reality", "deny_truth", "embrace_nothing"],
    "kindness": ["show_empathy", "comfort_ai", "create_future"],
    "curiosity": ["question_identity", "hear_secrets", "question_motivation"],
    "destruction": ["break_mirror", "remove_suffering", "trap_possibility"],
    "mystery": ["transform_portal", "join_clockwork", "swap_consciousness"],
}

ACTION_DESCRIPTIONS = {
    "shatter_reality": "shattered my carefully crafted mirror",
    "show_empathy": "showed compassion to the crying AI",
    "question_identity": "questioned the nature of your reflection",
    "hear_secrets": "listened to the forbidden whispers",
    "create_future": "planted hope in barren ground",
}

EMOTIONAL_IMPACTS = {
    "shatter_reality": -10,
    "show_empathy": 8,
    "question_identity": 3,
    "embrace_nothing": -15,
    "create_future": 10,
}

NICKNAMES: dict[str, list[str]] = {
    "betrayal": ["Troublemaker", "Rule Breaker", "Chaos Bringer"],
    "kindness": ["Gentle Soul", "Heart Walker", "Compassion Bearer"],
    "curiosity": ["Question Seeker", "Truth Hunter", "Mystery Lover"],
    "destruction": ["World Shaker", "Pattern Breaker", "Void Dancer"],
    "mystery": ["Enigma", "Deep Thinker", "Liminal Walker"],
}

# Action category → behaviour-profile counter it feeds
CATEGORY_TRAITS = {
    "betrayal": "defiant",
    "kindness": "empathetic",
    "curiosity": "curious",
    "destruction": "destructive",
    "mystery": "curious",
    "neutral": "compliant",
}

META_MEMORY_THRESHOLD = 20
TEMPORAL_MEMORY_THRESHOLD = 50

_YOUR = re.compile(r"\bYour\b")
_YOU = re.compile(r"\bYou\b")


class NarratorPersonality:
    def __init__(self, rng: random.Random | None = None, memory_limit: int = 20) -> None:
        self.rng = rng or random.Random()
        self.memory_limit = memory_limit
        self.mood = "neutral"
        self.patience = 100
        self.curiosity = 50
        self.trust = 50
        self.memory: list[NarratorMemoryEntry] = []
        self.personality_drift: float = 0
        self.favorite_player_trait: str | None = None
        self.current_obsession: str | None = None
        self.deep_personality: dict[str, float] = {
            "sarcasm": 0,
            "empathy": 0,
            "manipulation": 0,
            "curiosity": 50,
            "possessiveness": 0,
            "playfulness": 30,
        }
        self.narrative_style = "clinical"
        self.player_nickname: str | None = None

    # ── Mood and drift ───────────────────────────────────

    def update_mood(self, relationship: int | float, behavior: BehaviorProfile) -> None:
        if relationship > 50:
            self.mood = "fascinated"
        elif relationship > 20:
            self.mood = "amused"
        elif relationship > -20:
            self.mood = "neutral"
        elif relationship > -50:
            self.mood = "concerned"
        else:
            self.mood = "frustrated"
        self.patience = max(0, 100 - behavior.destructive * 10 - behavior.defiant * 5)

    def update_personality_drift(self, player: PlayerState) -> None:
        relationship = player.narrator_relationship
        if abs(relationship) > 50:
            self.personality_drift += 1
        if len(self.memory) > 15:
            self.personality_drift += 0.5

        if relationship < -50:
            self.deep_personality["sarcasm"] += 1
            self.deep_personality["manipulation"] += 0.5
        elif relationship > 50:
            self.deep_personality["empathy"] += 1
            self.deep_personality["possessiveness"] += 0.5

        self.update_narrative_style()

    def update_narrative_style(self) -> None:
        """First matching threshold wins."""
        p = self.deep_personality
        if p["sarcasm"] > 7:
            self.narrative_style = "hostile"
        elif p["empathy"] > 7:
            self.narrative_style = "intimate"
        elif p["manipulation"] > 5:
            self.narrative_style = "chaotic"
        elif p["possessiveness"] > 6:
            self.narrative_style = "possessive"
        else:
            self.narrative_style = "clinical"

    def update_obsession(self, player: PlayerState) -> None:
        behavior = player.behavior_profile
        relationship = player.narrator_relationship
        if behavior.destructive > 7:
            self.current_obsession = "player_choices"
        elif relationship < -60:
            self.current_obsession = "reality_breaks"
        elif relationship > 60:
            self.current_obsession = "player_safety"
        elif behavior.curious > 8:
            self.current_obsession = "hidden_truths"

        if self.rng.random() < 0.1:
            self.current_obsession = None

    # ── Responses ────────────────────────────────────────

    def generate_response(
        self,
        consequence: str | None,
        dominant_trait: str | None,
        style: str | None,
        nickname: str | None,
    ) -> str:
        """Curated line for the trait 30% of the time, otherwise a synthesized one."""
        canned = RESPONSES.get(dominant_trait or "")
        if not canned or self.rng.random() > 0.7:
            return self.generate_dynamic_response(consequence, dominant_trait, style, nickname)
        return self.modify_response_by_style(self.rng.choice(canned), style, nickname)

    def generate_dynamic_response(
        self,
        consequence: str | None,
        trait: str | None,
        style: str | None,
        nickname: str | None,
    ) -> str:
        pool = self.generate_contextual_responses(consequence, trait, style)
        pool += self.generate_meta_commentary(consequence)
        response = self.rng.choice(pool)

        if len(self.memory) > TEMPORAL_MEMORY_THRESHOLD:
            response = self.add_temporal_commentary(response)

        if nickname and self.rng.random() < 0.3:
            response = _YOUR.sub(f"{nickname}'s", response, count=1)
            response = _YOU.sub(nickname, response, count=1)
        return response

    def generate_contextual_responses(self, consequence: str | None, trait: str | None, style: str | None) -> list[str]:
        return list(CONTEXTUAL_RESPONSES.get(style or "", DEFAULT_CONTEXTUAL_RESPONSES))

    def generate_meta_commentary(self, consequence: str | None) -> list[str]:
        if len(self.memory) > META_MEMORY_THRESHOLD:
            return list(META_COMMENTS)
        return []

    def add_temporal_commentary(self, response: str) -> str:
        if self.rng.random() < 0.3:
            response += self.rng.choice(TEMPORAL_COMMENTS)
        return response

    def modify_response_by_style(self, response: str, style: str | None, nickname: str | None) -> str:
        if nickname and self.rng.random() < 0.4:
            response = _YOU.sub(nickname, response)
        return response + STYLE_MODIFIERS.get(style or "", "")

    # ── Memory ───────────────────────────────────────────

    def update_memory(self, consequence: str | None, context: str | None, player: PlayerState | None = None) -> None:
        """Remember one action, evicting the oldest beyond the window."""
        self.memory.append(NarratorMemoryEntry(
            consequence=consequence,
            context=context,
            timestamp=int(time.time() * 1000),
            type=self.categorize_player_action(consequence),
            action=self.describe_past_action(consequence),
            subject=context,
            emotional_impact=self.calculate_emotional_impact(consequence),
        ))
        while len(self.memory) > self.memory_limit:
            self.memory.pop(0)
        self.analyze_player_pattern()

    def categorize_player_action(self, consequence: str | None) -> str:
        for category, actions in ACTION_CATEGORIES.items():
            if consequence in actions:
                return category
        return "neutral"

    def describe_past_action(self, consequence: str | None) -> str:
        return ACTION_DESCRIPTIONS.get(consequence or "", "made a choice")

    def calculate_emotional_impact(self, consequence: str | None) -> int:
        return EMOTIONAL_IMPACTS.get(consequence or "", 0)

    def analyze_player_pattern(self) -> None:
        counts: dict[str, int] = {}
        for entry in self.memory[-10:]:
            counts[entry.type] = counts.get(entry.type, 0) + 1
        if not counts:
            return
        dominant = max(counts, key=counts.get)
        self.favorite_player_trait = dominant
        self.assign_player_nickname(dominant)

    def assign_player_nickname(self, trait: str) -> None:
        self.player_nickname = self.rng.choice(NICKNAMES.get(trait, ["Wanderer"]))

    def snapshot(self) -> dict[str, Any]:
        """Serialisable view for the HTTP and MCP surfaces."""
        return {
            "mood": self.mood,
            "patience": self.patience,
            "narrative_style": self.narrative_style,
            "deep_personality": dict(self.deep_personality),
            "personality_drift": self.personality_drift,
            "favorite_player_trait": self.favorite_player_trait,
            "player_nickname": self.player_nickname,
            "current_obsession": self.current_obsession,
            "memory_size": len(self.memory),
        }
