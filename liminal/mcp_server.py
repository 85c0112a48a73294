"""FastMCP server exposing one story session as MCP tools.

Tools:
  - start_story(player_name, archetype)  start a fresh session
  - trigger_event(event_type, title)     interact with a world object
  - make_decision(index)                 choose a pending decision
  - pull_lever(lever_id)                 toggle a lever (sets "{id}_pulled")
  - discover_lore(title, lore_text)      read a lore fragment
  - get_state()                          player, decisions, narrator, memory
  - export_story()                       full JSON snapshot

Narration delivered by the engine is returned in each tool result under
"updates". The active session is module state, replaced by start_story()
or set_session() in tests.

Usage:
    python -m liminal.mcp_server
"""

from typing import Any

from mcp.server.fastmcp import FastMCP

from liminal import sessions
from liminal.sessions import Session

mcp = FastMCP("liminal-story")

_session: Session | None = None


def set_session(session: Session | None) -> None:
    """Replace the active session (used in tests)."""
    global _session
    _session = session


def get_session() -> Session | None:
    """Return the active session (used in tests to inspect state)."""
    return _session


def _active() -> Session:
    if _session is None:
        raise ValueError("No story in progress; call start_story first")
    return _session


@mcp.tool()
def start_story(player_name: str = "", archetype: str = "Undefined") -> dict[str, Any]:
    """Begin a new story for the given player and archetype."""
    if _session is not None:
        sessions.delete_session(_session.id)
    set_session(sessions.create_session(player_name, archetype))
    session = _active()
    return {**session.state(), "updates": session.drain()}


@mcp.tool()
def trigger_event(event_type: str, title: str = "") -> dict[str, Any]:
    """Interact with a world object (mirror, tree, door, clock, geode, ...)."""
    session = _active()
    session.story.trigger_event(event_type, title or event_type)
    return {**session.state(), "updates": session.drain()}


@mcp.tool()
def make_decision(index: int) -> dict[str, Any]:
    """Choose one of the pending decisions by index."""
    session = _active()
    decision = session.story.make_decision(index)
    return {**session.state(), "accepted": decision is not None, "updates": session.drain()}


@mcp.tool()
def pull_lever(lever_id: str) -> dict[str, Any]:
    """Toggle a lever in the world. Levers unlock doors and mechanisms."""
    session = _active()
    lever = session.pull_lever(lever_id)
    return {**session.state(), "lever": {"id": lever.id, "state": lever.state}, "updates": session.drain()}


@mcp.tool()
def discover_lore(title: str, lore_text: str) -> dict[str, Any]:
    """Read a lore fragment found in the world."""
    session = _active()
    discovered = session.discover_lore(title, lore_text)
    return {**session.state(), "discovered": discovered, "updates": session.drain()}


@mcp.tool()
def get_state() -> dict[str, Any]:
    """Current player state, pending decisions and narrator snapshot."""
    session = _active()
    return {**session.state(), "updates": session.drain()}


@mcp.tool()
def export_story() -> str:
    """Export the story as a JSON document."""
    return _active().story.export_story()


if __name__ == "__main__":
    import os
    from pathlib import Path

    from liminal import storage

    storage.init_storage(Path(os.getenv("DATA_DIR", "data")))
    mcp.run()
