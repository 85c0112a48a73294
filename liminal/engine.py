"""Story state machine: player state, story log, narration sinks and the decision gate.

States:
  Idle            accepting advance() or world interaction
  AwaitingChoice  a non-empty decision list is pending

``choice_epoch`` counts entries into AwaitingChoice. Deferred callbacks
capture it when scheduled and drop themselves if it moved on, so stale
narration is never delivered after the player reached a new decision.

Sinks (all optional, all plain callables):
  on_story_update(StoryUpdate)
  on_decision_required(list[Decision])
  on_environment_change(EnvironmentChange)
  on_world_event_required(str)
  log_listeners: each called with every new LogEntry

Sink failures are logged as warnings and never reach the caller.

Deferred work goes through schedule(), which tracks the task until it
fires so cancel_pending() can drop everything when a story is closed.
The default AsyncioScheduler needs a running event loop; a scheduling
failure is logged and only the deferred part is lost.
"""

import logging
import random
import time
from collections.abc import Callable
from typing import Any

from .models import (
    Archetype,
    Decision,
    EngineSettings,
    EnvironmentChange,
    LogEntry,
    PlayerState,
    StoryUpdate,
    archetype_name,
)
from .scheduler import AsyncioScheduler, ScheduledTask, Scheduler
from .templates import BEGINNING_FALLBACK_TEXT, NarrativeTemplates

logger = logging.getLogger(__name__)

RANDOM_EVENTS = [
    "The narrator forgets your name for a moment and calls you 'Character #1'.",
    "You notice you're casting a shadow that belongs to someone else.",
    "The fourth wall flickers. For a second, you see the code that generates this world.",
    "Reality glitches slightly. You feel like you're being watched.",
    "The narrator pauses mid-sentence, as if distracted by something else.",
    "You hear the sound of typing, but there's no keyboard visible.",
]


def _now_ms() -> int:
    return int(time.time() * 1000)


def format_value(value: Any) -> str:
    """Render a flag value or number the way the story log prints it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class StoryEngine:
    def __init__(
        self,
        templates: NarrativeTemplates | None = None,
        scheduler: Scheduler | None = None,
        rng: random.Random | None = None,
        settings: EngineSettings | None = None,
        player: PlayerState | None = None,
    ) -> None:
        self.player = player or PlayerState()
        self.templates = templates or NarrativeTemplates()
        self.scheduler = scheduler or AsyncioScheduler()
        self.rng = rng or random.Random()
        self.settings = settings or EngineSettings()

        self.current_story_state = "beginning"
        self.story_log: list[LogEntry] = []
        self.available_decisions: list[Decision] = []
        self.is_waiting_for_decision = False
        self.autoplay_enabled = False
        self.choice_epoch = 0
        self._pending: list[ScheduledTask] = []

        self.on_story_update: Callable[[StoryUpdate], None] | None = None
        self.on_decision_required: Callable[[list[Decision]], None] | None = None
        self.on_environment_change: Callable[[EnvironmentChange], None] | None = None
        self.on_world_event_required: Callable[[str], None] | None = None
        self.log_listeners: list[Callable[[LogEntry], None]] = []

    # ── Log and narration ────────────────────────────────

    def log_event(self, content: str, type: str = "event") -> LogEntry | None:
        """Append to the story log and notify listeners. Never raises."""
        try:
            entry = LogEntry(
                content=content,
                type=type,
                timestamp=_now_ms(),
                day=self.player.day,
                sanity=self.player.sanity,
            )
        except Exception as e:
            logger.warning(f"Error logging event: {e}")
            return None
        self.story_log.append(entry)
        for listener in list(self.log_listeners):
            try:
                listener(entry)
            except Exception as e:
                logger.warning(f"Error dispatching story log event: {e}")
        return entry

    def update_story(self, text: str, effects: list[str] | None = None) -> None:
        """Hand narration to the story sink, if one is registered."""
        if not callable(self.on_story_update):
            return
        try:
            self.on_story_update(StoryUpdate(text=text, effects=list(effects or [])))
        except Exception as e:
            logger.warning(f"Error updating story: {e}")

    # ── Lifecycle ────────────────────────────────────────

    def set_player_archetype(self, archetype: Archetype | str) -> None:
        self.player.archetype = archetype_name(archetype)
        self.log_event(f"Player archetype set: {self.player.archetype}", "system")

    def begin_story(self) -> None:
        template = self.templates.get("beginning")
        if template is None:
            logger.warning("No 'beginning' template; using fallback narration")
            self.update_story(BEGINNING_FALLBACK_TEXT, [])
            return
        self.update_story(template.candidate_texts()[0], template.effects)
        self.log_event("Story begins", "narrator")

    def can_advance(self) -> bool:
        return not self.is_waiting_for_decision

    def advance(self) -> ScheduledTask | None:
        """Queue an ambient flavour event. Ignored while a choice is pending."""
        if not self.can_advance():
            return None
        return self.trigger_random_event()

    def trigger_random_event(self) -> ScheduledTask | None:
        event = self.rng.choice(RANDOM_EVENTS)
        delay = self.rng.uniform(self.settings.ambient_delay_min, self.settings.ambient_delay_max)
        epoch = self.choice_epoch

        def deliver() -> None:
            try:
                # Dropped if a decision arrived while we waited
                if self.is_waiting_for_decision or epoch != self.choice_epoch:
                    logger.debug("Ambient event dropped: state changed during delay")
                    return
                self.update_story(event, ["glitch"])
                self.log_event(event, "random")
            except Exception as e:
                logger.warning(f"Error triggering random event: {e}")

        try:
            return self.schedule(delay, deliver)
        except Exception as e:
            logger.warning(f"Could not schedule ambient event: {e}")
            return None

    # ── Deferred work ────────────────────────────────────

    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        """Hand ``callback`` to the scheduler and track it until it fires.

        Scheduler errors (e.g. SchedulerError) propagate to the caller.
        """
        task: ScheduledTask | None = None

        def run() -> None:
            if task in self._pending:
                self._pending.remove(task)
            callback()

        task = self.scheduler.call_later(delay, run)
        self._pending.append(task)
        return task

    @property
    def pending_tasks(self) -> list[ScheduledTask]:
        return [t for t in self._pending if not t.cancelled]

    def cancel_pending(self) -> int:
        """Cancel every deferred callback still waiting. Returns how many were cancelled."""
        tasks, self._pending = self._pending, []
        count = 0
        for task in tasks:
            if not task.cancelled:
                task.cancel()
                count += 1
        # Anything that slips through sees a new epoch and drops itself
        self.choice_epoch += 1
        return count

    # ── Decision gate ────────────────────────────────────

    def await_choice(self, decisions: list[Decision], context: str | None) -> bool:
        """Enter AwaitingChoice with ``decisions`` tagged by ``context``.

        An empty list leaves the engine Idle. Returns True when the gate closed.
        """
        if not decisions:
            return False
        self.available_decisions = [d.model_copy(update={"context": context}) for d in decisions]
        self.is_waiting_for_decision = True
        self.choice_epoch += 1
        if callable(self.on_decision_required):
            try:
                self.on_decision_required(list(self.available_decisions))
            except Exception as e:
                logger.warning(f"Error notifying decision sink: {e}")
        return True

    def clear_choice(self) -> None:
        self.is_waiting_for_decision = False
        self.available_decisions = []

    # ── State mutation helpers ───────────────────────────

    def update_sanity(self, change: Any) -> None:
        """Shift sanity by ``change``, clamped to the configured range."""
        if not _is_number(change):
            return
        low, high = self.settings.sanity_min, self.settings.sanity_max
        sanity = max(low, min(high, self.player.sanity + change))
        if isinstance(sanity, float) and sanity.is_integer():
            sanity = int(sanity)
        self.player.sanity = sanity
        sign = "+" if change > 0 else ""
        self.log_event(
            f"Sanity changed by {sign}{format_value(change)}. Current sanity: {format_value(sanity)}",
            "system_internal",
        )

    def update_flag(self, flag_name: Any, value: Any) -> None:
        if not isinstance(flag_name, str):
            return
        self.player.story_flags[flag_name] = value
        self.log_event(f"Flag '{flag_name}' set to {format_value(value)}", "system_internal")

    def dispatch_world_event(self, event_id: Any) -> None:
        if not callable(self.on_world_event_required) or not isinstance(event_id, str):
            return
        try:
            self.on_world_event_required(event_id)
        except Exception as e:
            logger.warning(f"Error dispatching world event {event_id!r}: {e}")
            return
        self.log_event(f"World event dispatched: {event_id}", "system_internal")

    def trigger_environment_change(self, consequence: str | None) -> None:
        if not callable(self.on_environment_change):
            return
        try:
            change = EnvironmentChange(
                consequence=consequence,
                intensity=self.rng.random() * 0.5 + 0.5,
            )
            self.on_environment_change(change)
        except Exception as e:
            logger.warning(f"Error triggering environment change: {e}")
