"""Core domain models.

The engine, the content tables and the outer surfaces (HTTP, MCP, export)
all operate on these types. Pydantic is used for validation and
serialisation at every data boundary.

Story content keeps the camelCase keys of the game's data files
(``archetypeCondition``, ``setFlags`` ...) as aliases, so templates can be
written either way; Python code always uses the snake_case attribute names.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field


class Archetype(str, Enum):
    """Player personas. Values are the display strings stored on PlayerState."""

    UNDEFINED = "Undefined"
    SILENT_OBSERVER = "Silent Observer"
    AGENT_OF_CHAOS = "Agent of Chaos"
    EMOTION_ENGINE = "Emotion Engine"
    GOLDEN_MASKED_ORACLE = "Golden Masked Oracle"


def archetype_name(archetype: Archetype | str | None) -> str:
    """Normalise an Archetype member or raw string to its display string."""
    if isinstance(archetype, Archetype):
        return archetype.value
    return archetype or Archetype.UNDEFINED.value


def _field(name: str, camel: str, **kwargs: Any) -> Any:
    if "default_factory" not in kwargs:
        kwargs.setdefault("default", None)
    return Field(validation_alias=AliasChoices(name, camel), **kwargs)


# ---------------------------------------------------------------------------
# Narrative content
# ---------------------------------------------------------------------------

class EmotionCondition(BaseModel):
    """Decision gate: both the archetype and the current emotion must match."""

    archetype: str
    emotion: str


class Decision(BaseModel):
    """A choice offered to the player.

    Conditions left as None do not gate the decision on that axis.
    ``context`` is filled in with the originating event type when the
    decision is offered.
    """

    text: str
    consequence: str
    archetype_condition: str | None = _field("archetype_condition", "archetypeCondition")
    condition_flag: str | None = _field("condition_flag", "conditionFlag")
    emotion_condition: EmotionCondition | None = _field("emotion_condition", "emotionCondition")
    context: str | None = None


class NarrativeTemplate(BaseModel):
    """Story text for one event type: a single ``text`` or several ``texts``."""

    text: str | None = None
    texts: list[str] | None = None
    decisions: list[Decision] = Field(default_factory=list)
    effects: list[str] = Field(default_factory=list)

    def candidate_texts(self) -> list[str]:
        if self.texts:
            return list(self.texts)
        if self.text:
            return [self.text]
        return [""]


class ConsequenceEffects(BaseModel):
    """Declared side effects of a consequence, applied in a fixed order."""

    set_flags: dict[str, Any] = _field("set_flags", "setFlags", default_factory=dict)
    set_node_states: dict[str, dict[str, Any]] = _field(
        "set_node_states", "setNodeStates", default_factory=dict
    )
    change_sanity: int | float | None = _field("change_sanity", "changeSanity")
    emotion_engine_sanity_multiplier: int | float | None = _field(
        "emotion_engine_sanity_multiplier", "emotionEngineSanityMultiplier"
    )
    set_emotion: str | None = _field("set_emotion", "setEmotion")
    trigger_world_event: str | None = _field("trigger_world_event", "triggerWorldEvent")


class ConsequenceDefinition(BaseModel):
    """Narrated aftermath of a decision. ``effects`` is None for text-only outcomes."""

    text: str
    effects: ConsequenceEffects | None = None


# ---------------------------------------------------------------------------
# Player state
# ---------------------------------------------------------------------------

class BehaviorProfile(BaseModel):
    defiant: int = 0
    compliant: int = 0
    curious: int = 0
    destructive: int = 0
    empathetic: int = 0


class PlayerState(BaseModel):
    """Mutable record of one player's progress through the story."""

    name: str = "Unknown"
    archetype: str = Archetype.UNDEFINED.value
    day: int = 1
    sanity: int | float = 100
    current_emotion: str | None = None
    events: list[str] = Field(default_factory=list)
    decisions: list[str] = Field(default_factory=list)
    autoplay: bool = False
    narrator_relationship: int | float = 0
    behavior_profile: BehaviorProfile = Field(default_factory=BehaviorProfile)
    story_flags: dict[str, Any] = Field(default_factory=dict)
    node_states: dict[str, Any] = Field(default_factory=dict)

    def has_flag(self, name: str) -> bool:
        """Absent flags read as False."""
        return bool(self.story_flags.get(name))


# ---------------------------------------------------------------------------
# Engine I/O
# ---------------------------------------------------------------------------

class LogEntry(BaseModel):
    """A single entry in the append-only story log."""

    content: str
    type: str
    timestamp: int  # epoch milliseconds
    day: int
    sanity: int | float


class StoryUpdate(BaseModel):
    """Payload delivered to the narration sink."""

    text: str
    effects: list[str] = Field(default_factory=list)


class EnvironmentChange(BaseModel):
    """Payload delivered to the environment-change sink."""

    type: Literal["story_change"] = "story_change"
    consequence: str | None
    intensity: float


class NarratorMemoryEntry(BaseModel):
    """One remembered player action in the narrator's rolling memory."""

    consequence: str | None
    context: str | None
    timestamp: int
    type: str
    action: str
    subject: str | None
    emotional_impact: int


class EngineSettings(BaseModel):
    """Tunable pacing and probability constants."""

    consequence_delay: float = 1.0
    ambient_delay_min: float = 2.0
    ambient_delay_max: float = 5.0
    corruption_sanity_threshold: int = 40
    scramble_chance: float = 0.4
    phrase_chance: float = 0.7  # cumulative with scramble_chance
    scramble_word_ratio: float = 0.25
    oracle_glimpse_chance: float = 0.25
    narrator_memory_limit: int = 20
    sanity_min: int = 0
    sanity_max: int = 100
