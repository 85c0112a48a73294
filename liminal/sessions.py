"""In-memory story sessions for the HTTP and MCP surfaces.

Each session owns a StoryManager whose sinks push into an outbox; clients
drain it to receive narration, decision prompts, environment changes and
world events, including those delivered later by the scheduler. World
objects a client can touch (levers, lore fragments) live on the session
and are driven through an InteractionSystem.

Sessions are not persisted. Only exports are (see storage.exports).
At most MAX_SESSIONS are kept; the oldest is closed and evicted first.
Closing a session cancels its pending deferred callbacks.
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from . import storage
from .interaction import InteractionSystem, Lever, LoreFragment
from .models import Archetype, Decision, EnvironmentChange, StoryUpdate
from .scheduler import AsyncioScheduler, Scheduler
from .story import StoryManager

logger = logging.getLogger(__name__)

MAX_SESSIONS = 100


@dataclass
class Session:
    id: str
    story: StoryManager
    outbox: list[dict[str, Any]] = field(default_factory=list)
    levers: dict[str, Lever] = field(default_factory=dict)
    lore: dict[str, LoreFragment] = field(default_factory=dict)
    interaction: InteractionSystem = field(init=False)

    def __post_init__(self) -> None:
        self.interaction = InteractionSystem(self.story)

    def drain(self) -> list[dict[str, Any]]:
        updates, self.outbox = self.outbox, []
        return updates

    def pull_lever(self, lever_id: str) -> Lever:
        """Toggle the lever ``lever_id``, creating it in the off position on first use."""
        lever = self.levers.setdefault(lever_id, Lever(id=lever_id))
        self.interaction.interact(lever)
        return lever

    def discover_lore(self, title: str, lore_text: str) -> bool:
        """Read a lore fragment. False if it was already discovered."""
        fragment = self.lore.setdefault(title, LoreFragment(title=title, lore_text=lore_text))
        return self.interaction.interact(fragment) is not None

    def close(self) -> None:
        cancelled = self.story.close()
        logger.debug(f"Session {self.id} closed ({cancelled} pending callbacks cancelled)")

    def state(self) -> dict[str, Any]:
        story = self.story
        return {
            "id": self.id,
            "player": story.player.model_dump(),
            "waiting_for_decision": story.is_waiting_for_decision,
            "decisions": [d.model_dump() for d in story.available_decisions],
            "narrator": story.narrator.snapshot(),
            "memory": story.memory_bank.serialize(),
            "levers": {lever_id: lever.state for lever_id, lever in self.levers.items()},
            "log_size": len(story.story_log),
        }


_sessions: dict[str, Session] = {}
_scheduler_factory: Callable[[], Scheduler] = AsyncioScheduler


def set_scheduler_factory(factory: Callable[[], Scheduler]) -> None:
    """Replace the scheduler used by new sessions (used in tests)."""
    global _scheduler_factory
    _scheduler_factory = factory


def _wire_outbox(session: Session) -> None:
    def on_story_update(update: StoryUpdate) -> None:
        session.outbox.append({"kind": "story", **update.model_dump()})

    def on_decision_required(decisions: list[Decision]) -> None:
        session.outbox.append({"kind": "decisions", "decisions": [d.model_dump() for d in decisions]})

    def on_environment_change(change: EnvironmentChange) -> None:
        session.outbox.append({"kind": "environment", **change.model_dump()})

    def on_world_event_required(event_id: str) -> None:
        session.outbox.append({"kind": "world_event", "id": event_id})

    session.story.set_sinks(
        on_story_update=on_story_update,
        on_decision_required=on_decision_required,
        on_environment_change=on_environment_change,
        on_world_event_required=on_world_event_required,
    )


def create_session(player_name: str = "", archetype: Archetype | str | None = None) -> Session:
    """Start a new story: name the player, set the archetype, narrate the beginning."""
    config = storage.get_config()
    story = StoryManager(scheduler=_scheduler_factory(), settings=storage.get_engine_settings())
    session = Session(id=uuid.uuid4().hex, story=story)
    _wire_outbox(session)

    if player_name:
        story.player.name = player_name
    story.set_player_archetype(archetype or config["default_archetype"])
    story.begin_story()

    while len(_sessions) >= MAX_SESSIONS:
        oldest = next(iter(_sessions))
        logger.info(f"Evicting session {oldest}: limit of {MAX_SESSIONS} reached")
        delete_session(oldest)

    _sessions[session.id] = session
    logger.debug(f"Session {session.id} started ({story.player.archetype})")
    return session


def get_session(session_id: str) -> Session | None:
    return _sessions.get(session_id)


def delete_session(session_id: str) -> bool:
    session = _sessions.pop(session_id, None)
    if session is None:
        return False
    session.close()
    return True


def clear_sessions() -> None:
    for session in list(_sessions.values()):
        session.close()
    _sessions.clear()
