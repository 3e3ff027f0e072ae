"""Capture session endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from capture_narrator.api.dependencies import get_container, require_session
from capture_narrator.api.models import (
    CameraRequest,
    CaptureSnapshot,
    LocationRequest,
    VoiceRequest,
)
from capture_narrator.containers import AppContainer
from capture_narrator.domain.models import CurrentSession
from capture_narrator.services.notifications import EventBuffer
from capture_narrator.services.registry import CaptureSessionHandle

router = APIRouter(prefix="/captures", tags=["captures"])


def _get_handle(
    session_id: UUID,
    session: CurrentSession = Depends(require_session),
    container: AppContainer = Depends(get_container),
) -> CaptureSessionHandle:
    handle = container.capture_sessions.get(session_id, session.user.id)
    if handle is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return handle


@router.post("", status_code=status.HTTP_201_CREATED)
async def mount_capture(
    payload: LocationRequest,
    session: CurrentSession = Depends(require_session),
    container: AppContainer = Depends(get_container),
) -> CaptureSnapshot:
    """Mount a capture session: open the camera and resolve the location."""
    events = EventBuffer()
    pipeline = container.pipeline_factory(session, events)
    handle = container.capture_sessions.register(pipeline, events)
    await pipeline.mount(payload.to_domain())
    return CaptureSnapshot.from_handle(handle)


@router.get("/{session_id}")
async def get_capture(
    handle: CaptureSessionHandle = Depends(_get_handle),
) -> CaptureSnapshot:
    return CaptureSnapshot.from_handle(handle)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_capture(
    session_id: UUID,
    session: CurrentSession = Depends(require_session),
    container: AppContainer = Depends(get_container),
) -> None:
    """Tear down the session and release its camera."""
    if not container.capture_sessions.close(session_id, session.user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)


@router.post("/{session_id}/camera")
async def set_camera(
    payload: CameraRequest,
    handle: CaptureSessionHandle = Depends(_get_handle),
) -> CaptureSnapshot:
    accepted = handle.pipeline.set_camera(payload.enabled)
    return CaptureSnapshot.from_handle(handle, accepted=accepted)


@router.post("/{session_id}/camera/facing")
async def toggle_facing(
    handle: CaptureSessionHandle = Depends(_get_handle),
) -> CaptureSnapshot:
    handle.pipeline.toggle_facing()
    return CaptureSnapshot.from_handle(handle)


@router.post("/{session_id}/capture")
async def capture_frame(
    handle: CaptureSessionHandle = Depends(_get_handle),
) -> CaptureSnapshot:
    accepted = handle.pipeline.capture()
    return CaptureSnapshot.from_handle(handle, accepted=accepted)


@router.post("/{session_id}/location")
async def locate(
    payload: LocationRequest,
    handle: CaptureSessionHandle = Depends(_get_handle),
) -> CaptureSnapshot:
    accepted = await handle.pipeline.locate(payload.to_domain())
    return CaptureSnapshot.from_handle(handle, accepted=accepted)


@router.put("/{session_id}/voice")
async def select_voice(
    payload: VoiceRequest,
    handle: CaptureSessionHandle = Depends(_get_handle),
) -> CaptureSnapshot:
    handle.pipeline.select_voice(payload.voice)
    return CaptureSnapshot.from_handle(handle)


@router.post("/{session_id}/submit")
async def submit(
    handle: CaptureSessionHandle = Depends(_get_handle),
) -> CaptureSnapshot:
    """Describe, narrate and save the captured frame."""
    accepted = await handle.pipeline.submit()
    return CaptureSnapshot.from_handle(handle, accepted=accepted)


@router.post("/{session_id}/reset")
async def reset(
    handle: CaptureSessionHandle = Depends(_get_handle),
) -> CaptureSnapshot:
    accepted = handle.pipeline.reset()
    return CaptureSnapshot.from_handle(handle, accepted=accepted)
