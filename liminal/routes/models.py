"""Pydantic request/response models for API endpoints."""

from pydantic import BaseModel

from liminal.models import Archetype


class CreateSession(BaseModel):
    player_name: str = ""
    archetype: Archetype | None = None


class TriggerEventBody(BaseModel):
    event_type: str
    title: str = ""


class LoreBody(BaseModel):
    title: str
    lore_text: str
