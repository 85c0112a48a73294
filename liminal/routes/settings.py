"""Health check and settings endpoints."""

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from liminal import storage

router = APIRouter()


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.get("/settings")
async def get_settings():
    """Get global app settings (engine tunables, default archetype, transcript template)."""
    return storage.get_config()


@router.patch("/settings")
async def update_settings(body: dict):
    """Update global app settings (partial merge)."""
    try:
        return storage.update_config(body)
    except ValidationError as e:
        raise HTTPException(400, f"Invalid settings: {e.errors()[0]['msg']}")
