from typing import Any, Mapping
from fastapi import APIRouter, Depends
from server.schemas import ChannelStatusResponse
from server.dependencies import get_channel, get_reminder_scheduler

router = APIRouter()


@router.get("/health")
def health() -> Mapping[str, Any]:
    return {"status": "ok"}


@router.get("/status", response_model=ChannelStatusResponse)
def channel_status(channel=Depends(get_channel), scheduler=Depends(get_reminder_scheduler)):
    """WhatsApp connection state, plus whether reminders are running yet."""
    return {
        "connected": channel.is_connected(),
        "logged_out": getattr(channel, "logged_out", False),
        "scheduler_armed": bool(scheduler and scheduler.armed),
    }
