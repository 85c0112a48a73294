"""Event dispatch: world interaction → narration + candidate decisions.

trigger_event() runs the pipeline for one interaction:

  1. look up the template (unknown event types are a silent no-op)
  2. pick a text, copy the decisions
  3. puzzle lock on ``locked_door_main`` until ``lever_alpha_pulled``
  4. gate decisions on archetype, story flag and emotion
  5. apply flag-triggered content rules (deduplicated by consequence id)
  6. archetype flavour, then sanity-driven corruption
  7. narrate, log, observer insight, enter AwaitingChoice
  8. record the event type on the player

Every random draw goes through the engine's ``rng``.
"""

import logging
import random
import re
from dataclasses import dataclass, field

from .engine import StoryEngine
from .models import Archetype, Decision, EngineSettings, PlayerState
from .templates import apply_archetype_filter

logger = logging.getLogger(__name__)

LOCKED_DOOR_EVENT = "locked_door_main"
LOCKED_DOOR_FLAG = "lever_alpha_pulled"
LOCKED_DOOR_TEXT = "The massive door is bolted shut. Perhaps a nearby mechanism controls it."

SCRAMBLE_PREFIX = "[Your thoughts feel scrambled] "
UNSETTLING_PHRASES = [
    "...are you sure?",
    "...it's all unreal...",
    "...they're watching...",
    "...can't trust it...",
]

OBSERVER_INSIGHTS = {
    "mirror": "You notice a faint inscription on the mirror's frame, almost invisible to a casual glance. "
    "It seems to be a warning.",
    "tree": "The shifting binary code on the tree bark occasionally forms patterns resembling ancient star charts.",
}


@dataclass
class ContentRule:
    """Augment an event's text and decisions while a story flag is set."""

    event_type: str
    flag: str
    prefix: str = ""
    decisions: list[Decision] = field(default_factory=list)

    def applies(self, event_type: str, player: PlayerState) -> bool:
        return event_type == self.event_type and player.story_flags.get(self.flag) is True

    def apply(self, text: str, decisions: list[Decision]) -> str:
        present = {d.consequence for d in decisions}
        for extra in self.decisions:
            if extra.consequence not in present:
                decisions.append(extra.model_copy(deep=True))
                present.add(extra.consequence)
        return self.prefix + text


DEFAULT_CONTENT_RULES = [
    ContentRule(
        event_type="tree",
        flag="mirrorAltered",
        prefix="The tree shimmers with a faint, reflected light. ",
        decisions=[Decision(text="Touch the shimmering bark", consequence="tree_mirror_touch")],
    ),
]


def decision_allowed(decision: Decision, player: PlayerState) -> bool:
    """True when every condition declared on the decision holds."""
    if decision.archetype_condition is not None and decision.archetype_condition != player.archetype:
        return False
    if decision.condition_flag is not None and not player.has_flag(decision.condition_flag):
        return False
    condition = decision.emotion_condition
    if condition is not None:
        if condition.archetype != player.archetype or condition.emotion != player.current_emotion:
            return False
    return True


_WORD = re.compile(r"\w{4,}")


def _scramble_word(word: str, rng: random.Random) -> str:
    interior = list(word[1:-1])
    original = list(interior)
    rng.shuffle(interior)
    if interior == original and len(set(original)) > 1:
        interior = original[1:] + original[:1]
    return word[0] + "".join(interior) + word[-1]


def scramble_words(text: str, rng: random.Random, ratio: float = 0.25) -> str:
    """Shuffle the interior letters of roughly ``ratio`` of the words longer than 3 characters."""
    def repl(match: re.Match) -> str:
        word = match.group(0)
        if rng.random() < ratio:
            return _scramble_word(word, rng)
        return word

    return _WORD.sub(repl, text)


def corrupt_text(text: str, sanity: int | float, rng: random.Random, settings: EngineSettings) -> str:
    """Degrade narration when sanity drops below the corruption threshold."""
    if sanity >= settings.corruption_sanity_threshold:
        return text
    roll = rng.random()
    if roll < settings.scramble_chance:
        return SCRAMBLE_PREFIX + scramble_words(text, rng, settings.scramble_word_ratio)
    if roll < settings.phrase_chance:
        return f"{text} {rng.choice(UNSETTLING_PHRASES)}"
    return text


class EventHandler:
    def __init__(self, engine: StoryEngine, rules: list[ContentRule] | None = None) -> None:
        self.engine = engine
        self.rules = list(DEFAULT_CONTENT_RULES if rules is None else rules)

    def trigger_event(self, event_type: str, title: str) -> str | None:
        """Resolve a world interaction. Returns the narrated text, or None for unknown events."""
        engine = self.engine
        template = engine.templates.get(event_type)
        if template is None:
            logger.debug(f"No template for event {event_type!r}")
            return None

        player = engine.player
        text = ""
        try:
            text = engine.rng.choice(template.candidate_texts())
            decisions = [d.model_copy(deep=True) for d in template.decisions]

            if event_type == LOCKED_DOOR_EVENT and player.story_flags.get(LOCKED_DOOR_FLAG) is not True:
                text = LOCKED_DOOR_TEXT
                decisions = []

            decisions = [d for d in decisions if decision_allowed(d, player)]

            for rule in self.rules:
                if rule.applies(event_type, player):
                    text = rule.apply(text, decisions)

            text = apply_archetype_filter(text, event_type, player.archetype)
            text = corrupt_text(text, player.sanity, engine.rng, engine.settings)

            engine.update_story(text, template.effects)
            engine.log_event(f"Interacted with: {title}", "event")

            if player.archetype == Archetype.SILENT_OBSERVER.value and event_type in OBSERVER_INSIGHTS:
                engine.log_event(OBSERVER_INSIGHTS[event_type], "observer_insight")

            if decisions:
                self.show_decisions(decisions, event_type)
        except Exception as e:
            logger.warning(f"Error dispatching event {event_type!r}: {e}")

        player.events.append(event_type)
        return text

    def show_decisions(self, decisions: list[Decision], context: str | None) -> None:
        engine = self.engine
        if not engine.await_choice(decisions, context):
            return
        if (
            engine.player.archetype == Archetype.GOLDEN_MASKED_ORACLE.value
            and engine.rng.random() < engine.settings.oracle_glimpse_chance
        ):
            glimpse = engine.rng.choice(engine.available_decisions)
            engine.log_event(
                f"Through your mask you glimpse a thread of fate: '{glimpse.text}' leads to {glimpse.consequence}.",
                "oracle_glimpse",
            )
