"""History endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from capture_narrator.api.dependencies import get_container, require_session
from capture_narrator.api.models import (
    HistoryItemPayload,
    HistoryResponse,
    NotificationPayload,
    RegenerationResponse,
    VoiceRequest,
)
from capture_narrator.containers import AppContainer
from capture_narrator.domain.models import CurrentSession
from capture_narrator.services.notifications import EventBuffer

router = APIRouter(prefix="/history", tags=["history"])


@router.get("")
async def list_history(
    session: CurrentSession = Depends(require_session),
    container: AppContainer = Depends(get_container),
) -> HistoryResponse:
    """Return the signed-in user's entries, newest first."""
    entries = container.history_service.get_history(session.user.id)
    regeneration = container.regeneration_service
    return HistoryResponse(
        entries=[
            HistoryItemPayload.from_view(regeneration.view_for(entry))
            for entry in entries
        ]
    )


@router.put("/{entry_id}/voice")
async def change_voice(
    entry_id: UUID,
    payload: VoiceRequest,
    session: CurrentSession = Depends(require_session),
    container: AppContainer = Depends(get_container),
) -> RegenerationResponse:
    """Regenerate an entry's narration in another voice."""
    entry = container.history_service.get_entry(session.user.id, entry_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    regeneration = container.regeneration_service
    view = regeneration.view_for(entry)
    events = EventBuffer()
    accepted = await regeneration.regenerate(session, view, payload.voice, events)
    notifications, playback = events.drain()
    return RegenerationResponse(
        accepted=accepted,
        entry=HistoryItemPayload.from_view(view),
        notifications=[NotificationPayload.from_domain(n) for n in notifications],
        play_audio=playback,
    )
