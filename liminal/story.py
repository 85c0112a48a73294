"""StoryManager: one story session wired together.

Owns the StoryEngine and the systems acting on it (events, decisions,
analysis), the narrator personality and the memory bank. After every
valid decision the narrator is fed: it remembers the action, the
player's behaviour profile and relationship move, and a narrator
comment is logged.
"""

import logging
import random
from collections.abc import Callable

from .analysis import StoryAnalysis, dominant_behavior_trait
from .decisions import DecisionSystem
from .engine import StoryEngine
from .events import EventHandler
from .memory import MemorySystem
from .models import Archetype, Decision, EngineSettings, EnvironmentChange, LogEntry, PlayerState, StoryUpdate
from .narrator import CATEGORY_TRAITS, NarratorPersonality
from .scheduler import ScheduledTask, Scheduler
from .templates import NarrativeTemplates

logger = logging.getLogger(__name__)


class StoryManager:
    def __init__(
        self,
        scheduler: Scheduler | None = None,
        rng: random.Random | None = None,
        settings: EngineSettings | None = None,
        templates: NarrativeTemplates | None = None,
    ) -> None:
        self.settings = settings or EngineSettings()
        self.rng = rng or random.Random()
        self.engine = StoryEngine(
            templates=templates,
            scheduler=scheduler,
            rng=self.rng,
            settings=self.settings,
        )
        self.decision_system = DecisionSystem(self.engine)
        self.story_analysis = StoryAnalysis(self.engine)
        self.event_handler = EventHandler(self.engine)
        self.narrator = NarratorPersonality(rng=self.rng, memory_limit=self.settings.narrator_memory_limit)
        self.memory_bank = MemorySystem()

    # ── Engine views ─────────────────────────────────────

    @property
    def player(self) -> PlayerState:
        return self.engine.player

    @property
    def story_log(self) -> list[LogEntry]:
        return self.engine.story_log

    @property
    def is_waiting_for_decision(self) -> bool:
        return self.engine.is_waiting_for_decision

    @property
    def available_decisions(self) -> list[Decision]:
        return self.engine.available_decisions

    def set_sinks(
        self,
        on_story_update: Callable[[StoryUpdate], None] | None = None,
        on_decision_required: Callable[[list[Decision]], None] | None = None,
        on_environment_change: Callable[[EnvironmentChange], None] | None = None,
        on_world_event_required: Callable[[str], None] | None = None,
    ) -> None:
        self.engine.on_story_update = on_story_update
        self.engine.on_decision_required = on_decision_required
        self.engine.on_environment_change = on_environment_change
        self.engine.on_world_event_required = on_world_event_required

    # ── Delegation ───────────────────────────────────────

    def log_event(self, content: str, type: str = "event") -> LogEntry | None:
        return self.engine.log_event(content, type)

    def update_story(self, text: str, effects: list[str] | None = None) -> None:
        self.engine.update_story(text, effects)

    def set_player_archetype(self, archetype: Archetype | str) -> None:
        self.engine.set_player_archetype(archetype)

    def begin_story(self) -> None:
        self.engine.begin_story()

    def can_advance(self) -> bool:
        return self.engine.can_advance()

    def advance(self) -> ScheduledTask | None:
        return self.engine.advance()

    def update_flag(self, flag_name: str, value) -> None:
        self.engine.update_flag(flag_name, value)

    def trigger_event(self, event_type: str, title: str) -> str | None:
        return self.event_handler.trigger_event(event_type, title)

    def export_story(self) -> str:
        return self.story_analysis.export_story()

    def close(self) -> int:
        """Cancel deferred narration still pending. Returns how many tasks were cancelled."""
        return self.engine.cancel_pending()

    # ── Decisions + narrator ─────────────────────────────

    def make_decision(self, decision_index: int) -> Decision | None:
        decision = self.decision_system.make_decision(decision_index)
        if decision is None:
            return None
        try:
            self._feed_narrator(decision)
        except Exception as e:
            logger.warning(f"Error updating narrator after {decision.consequence!r}: {e}")
        return decision

    def _feed_narrator(self, decision: Decision) -> None:
        player = self.player
        narrator = self.narrator
        player.decisions.append(decision.consequence)

        narrator.update_memory(decision.consequence, decision.context, player)
        remembered = narrator.memory[-1]
        trait = CATEGORY_TRAITS.get(remembered.type, "compliant")
        profile = player.behavior_profile
        setattr(profile, trait, getattr(profile, trait) + 1)
        player.narrator_relationship += remembered.emotional_impact

        narrator.update_mood(player.narrator_relationship, profile)
        narrator.update_personality_drift(player)
        narrator.update_obsession(player)

        comment = narrator.generate_response(
            decision.consequence,
            dominant_behavior_trait(profile),
            narrator.narrative_style,
            narrator.player_nickname,
        )
        self.engine.log_event(comment, "narrator_comment")

        self.memory_bank.record_choice(decision.context, decision.consequence)
        self.memory_bank.add_interaction({
            "consequence": decision.consequence,
            "context": decision.context,
            "mood": narrator.mood,
            "response": comment,
        })
        if remembered.type != "neutral":
            self.memory_bank.add_theme(remembered.type)
