"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from capture_narrator.adapters.nominatim_client import HttpxNominatimClient
from capture_narrator.adapters.openai_description_client import (
    OpenAIDescriptionClient,
)
from capture_narrator.adapters.openai_speech_client import OpenAISpeechClient
from capture_narrator.adapters.opencv_camera import OpenCvCameraDevice
from capture_narrator.adapters.supabase_history_repository import (
    SupabaseHistoryRepository,
)
from capture_narrator.adapters.supabase_identity_provider import (
    SupabaseIdentityProvider,
)
from capture_narrator.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from capture_narrator.config import Settings
from capture_narrator.domain.models import CurrentSession
from capture_narrator.services.cache import InMemorySessionCache
from capture_narrator.services.capture import CapturePipeline
from capture_narrator.services.description import DescriptionService
from capture_narrator.services.history import HistoryService
from capture_narrator.services.location import LocationResolver
from capture_narrator.services.media import CameraDevice, MediaAcquisition
from capture_narrator.services.notifications import UiChannel
from capture_narrator.services.preferences import PreferencesService
from capture_narrator.services.regeneration import VoiceRegenerationService
from capture_narrator.services.registry import CaptureSessionRegistry
from capture_narrator.services.speech import SpeechService
from capture_narrator.services.users import UserService

PipelineFactory = Callable[[CurrentSession, UiChannel], CapturePipeline]


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    preferences_service: PreferencesService
    history_service: HistoryService
    regeneration_service: VoiceRegenerationService
    capture_sessions: CaptureSessionRegistry
    pipeline_factory: PipelineFactory
    close_resources: Callable[[], Awaitable[None]]


def pipeline_factory_for(  # noqa: PLR0913
    camera: CameraDevice,
    location_resolver: LocationResolver,
    description_service: DescriptionService,
    speech_service: SpeechService,
    history_service: HistoryService,
    preferences_service: PreferencesService,
) -> PipelineFactory:
    """Return a factory that builds a pipeline per mounted session."""

    def create(session: CurrentSession, ui: UiChannel) -> CapturePipeline:
        return CapturePipeline(
            session=session,
            media=MediaAcquisition(camera),
            location_resolver=location_resolver,
            description_service=description_service,
            speech_service=speech_service,
            history_service=history_service,
            preferences_service=preferences_service,
            ui=ui,
        )

    return create


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    auth_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    profile_repository = SupabaseProfileRepository(supabase_client)
    history_repository = SupabaseHistoryRepository(supabase_client)
    preferences_service = PreferencesService(profile_repository)
    history_service = HistoryService(history_repository)
    user_service = UserService(
        identity=SupabaseIdentityProvider(auth_client),
        profiles=profile_repository,
        preferences_service=preferences_service,
        sessions=InMemorySessionCache(
            ttl_seconds=resolved_settings.session_cache_ttl_seconds
        ),
    )
    description_service = DescriptionService(
        client=OpenAIDescriptionClient.create(resolved_settings.openai_api_key),
        model=resolved_settings.openai_description_model,
        store=resolved_settings.openai_store,
    )
    speech_service = SpeechService(
        client=OpenAISpeechClient.create(resolved_settings.openai_api_key),
        model=resolved_settings.openai_speech_model,
        voice_names=resolved_settings.voice_names(),
    )
    geocoding_client = HttpxNominatimClient.create(
        base_url=resolved_settings.geocoding_base_url,
        user_agent=resolved_settings.geocoding_user_agent,
    )
    camera = OpenCvCameraDevice(
        user_index=resolved_settings.camera_user_index,
        environment_index=resolved_settings.camera_environment_index,
        jpeg_quality=resolved_settings.jpeg_quality,
    )
    capture_sessions = CaptureSessionRegistry(
        idle_ttl_seconds=resolved_settings.capture_session_ttl_seconds
    )
    regeneration_service = VoiceRegenerationService(
        speech_service=speech_service,
        history_service=history_service,
        preferences_service=preferences_service,
    )

    async def close_resources() -> None:
        capture_sessions.close_all()
        await geocoding_client.close()

    return AppContainer(
        settings=resolved_settings,
        user_service=user_service,
        preferences_service=preferences_service,
        history_service=history_service,
        regeneration_service=regeneration_service,
        capture_sessions=capture_sessions,
        pipeline_factory=pipeline_factory_for(
            camera=camera,
            location_resolver=LocationResolver(geocoding_client),
            description_service=description_service,
            speech_service=speech_service,
            history_service=history_service,
            preferences_service=preferences_service,
        ),
        close_resources=close_resources,
    )
