"""Tests for the capture session registry."""

import asyncio
from uuid import uuid4

from capture_narrator.domain.pipeline import Coordinates, PipelineStatus
from capture_narrator.services.capture import CapturePipeline
from capture_narrator.services.notifications import EventBuffer
from capture_narrator.services.registry import CaptureSessionRegistry
from tests.conftest import FakeCameraDevice


def test_register_and_get_checks_owner(pipeline: CapturePipeline, ui: EventBuffer) -> None:
    registry = CaptureSessionRegistry()

    handle = registry.register(pipeline, ui)

    assert registry.get(handle.id, pipeline.session.user.id) is handle
    assert registry.get(handle.id, uuid4()) is None
    assert registry.get(uuid4(), pipeline.session.user.id) is None
    assert len(registry) == 1


def test_close_tears_down_pipeline(
    pipeline: CapturePipeline, ui: EventBuffer, camera: FakeCameraDevice
) -> None:
    registry = CaptureSessionRegistry()
    asyncio.run(pipeline.mount(Coordinates(latitude=14.65, longitude=121.03)))
    handle = registry.register(pipeline, ui)

    assert not registry.close(handle.id, uuid4())
    assert registry.close(handle.id, pipeline.session.user.id)

    assert camera.live_streams == 0
    assert len(registry) == 0
    assert not registry.close(handle.id, pipeline.session.user.id)


def test_close_all_releases_every_camera(container, current_session, camera) -> None:
    registry = container.capture_sessions
    for _ in range(2):
        events = EventBuffer()
        pipeline = container.pipeline_factory(current_session, events)
        pipeline.media.start()
        registry.register(pipeline, events)
    assert camera.live_streams == 2

    registry.close_all()

    assert camera.live_streams == 0
    assert len(registry) == 0


def test_idle_sessions_expire_and_release_camera(
    pipeline: CapturePipeline, ui: EventBuffer, camera: FakeCameraDevice
) -> None:
    now = [0.0]
    registry = CaptureSessionRegistry(idle_ttl_seconds=60, clock=lambda: now[0])
    asyncio.run(pipeline.mount(Coordinates(latitude=14.65, longitude=121.03)))
    handle = registry.register(pipeline, ui)

    now[0] = 30.0
    assert registry.get(handle.id, pipeline.session.user.id) is handle
    now[0] = 89.0
    assert len(registry) == 1
    assert registry.get(uuid4(), pipeline.session.user.id) is None
    assert camera.live_streams == 1

    now[0] = 90.0
    assert registry.get(handle.id, pipeline.session.user.id) is None
    assert len(registry) == 0
    assert camera.live_streams == 0


def test_busy_sessions_are_not_expired(
    pipeline: CapturePipeline, ui: EventBuffer, camera: FakeCameraDevice
) -> None:
    now = [0.0]
    registry = CaptureSessionRegistry(idle_ttl_seconds=60, clock=lambda: now[0])
    pipeline.media.start()
    handle = registry.register(pipeline, ui)
    pipeline.state.status = PipelineStatus.GENERATING_AUDIO

    now[0] = 600.0

    assert registry.get(handle.id, pipeline.session.user.id) is handle
    assert camera.live_streams == 1
