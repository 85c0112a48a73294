"""Story session endpoints: start, interact, decide, advance, export."""

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse

from liminal import sessions, storage
from liminal.sessions import Session
from liminal.transcript import TranscriptError, render_transcript

from .models import CreateSession, LoreBody, TriggerEventBody

router = APIRouter()


def _require(session_id: str) -> Session:
    session = sessions.get_session(session_id)
    if not session:
        raise HTTPException(404, "Session not found")
    return session


@router.post("/sessions", status_code=201)
async def create_session(body: CreateSession):
    """Start a story and narrate its beginning."""
    session = sessions.create_session(body.player_name, body.archetype)
    return {**session.state(), "updates": session.drain()}


@router.get("/sessions/{session_id}")
async def get_session(session_id: str):
    """Current player state, pending decisions and narrator snapshot."""
    return _require(session_id).state()


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str):
    if not sessions.delete_session(session_id):
        raise HTTPException(404, "Session not found")
    return {"ok": True}


@router.post("/sessions/{session_id}/events")
async def trigger_event(session_id: str, body: TriggerEventBody):
    """Interact with a world object. Unknown event types change nothing."""
    session = _require(session_id)
    session.story.trigger_event(body.event_type, body.title or body.event_type)
    return {**session.state(), "updates": session.drain()}


@router.post("/sessions/{session_id}/decisions/{index}")
async def make_decision(session_id: str, index: int):
    """Choose a pending decision. Invalid choices are ignored (accepted: false)."""
    session = _require(session_id)
    decision = session.story.make_decision(index)
    return {
        **session.state(),
        "accepted": decision is not None,
        "updates": session.drain(),
    }


@router.post("/sessions/{session_id}/advance")
async def advance(session_id: str):
    """Queue an ambient event unless a decision is pending."""
    session = _require(session_id)
    scheduled = session.interaction.advance_story() is not None
    return {"scheduled": scheduled}


@router.post("/sessions/{session_id}/levers/{lever_id}")
async def pull_lever(session_id: str, lever_id: str):
    """Toggle a lever. Sets the story flag "{lever_id}_pulled" to the new position."""
    session = _require(session_id)
    lever = session.pull_lever(lever_id)
    return {
        **session.state(),
        "lever": {"id": lever.id, "state": lever.state},
        "updates": session.drain(),
    }


@router.post("/sessions/{session_id}/lore")
async def discover_lore(session_id: str, body: LoreBody):
    """Read a lore fragment. Each title is only logged the first time."""
    session = _require(session_id)
    discovered = session.discover_lore(body.title, body.lore_text)
    return {**session.state(), "discovered": discovered, "updates": session.drain()}


@router.get("/sessions/{session_id}/updates")
async def drain_updates(session_id: str):
    """Narration and prompts queued since the last call."""
    return _require(session_id).drain()


@router.get("/sessions/{session_id}/export")
async def export_story(session_id: str):
    """Full story snapshot with analysis."""
    return _require(session_id).story.story_analysis.build_story_data()


@router.post("/sessions/{session_id}/export", status_code=201)
async def save_export(session_id: str):
    """Persist the story snapshot under data/exports/."""
    session = _require(session_id)
    story_json = session.story.export_story()
    slug = storage.save_export(f"{session.story.player.name} {session.id[:8]}", story_json)
    return {"slug": slug}


@router.get("/sessions/{session_id}/transcript", response_class=PlainTextResponse)
async def transcript(session_id: str):
    """Markdown transcript of the story so far."""
    session = _require(session_id)
    template = storage.get_config()["transcript_template"] or None
    try:
        return render_transcript(session.story.story_analysis.build_story_data(), template)
    except TranscriptError as e:
        raise HTTPException(400, str(e))


@router.get("/exports")
async def list_exports():
    return storage.list_exports()


@router.get("/exports/{slug}")
async def get_export(slug: str):
    data = storage.get_export(slug)
    if data is None:
        raise HTTPException(404, "Export not found")
    return data


@router.delete("/exports/{slug}")
async def delete_export(slug: str):
    if not storage.delete_export(slug):
        raise HTTPException(404, "Export not found")
    return {"ok": True}
