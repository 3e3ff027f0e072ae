"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from capture_narrator.config import Settings
from capture_narrator.containers import AppContainer, pipeline_factory_for
from capture_narrator.domain.history import HistoryEntry, NewHistoryEntry
from capture_narrator.domain.models import (
    CurrentSession,
    FacingMode,
    UserPreferences,
    UserRecord,
    Voice,
)
from capture_narrator.services.cache import InMemorySessionCache
from capture_narrator.services.capture import CapturePipeline
from capture_narrator.services.description import DescriptionClient, DescriptionService
from capture_narrator.services.history import HistoryRepository, HistoryService
from capture_narrator.services.location import GeocodingClient, LocationResolver
from capture_narrator.services.media import (
    CameraDevice,
    CameraPermissionError,
    MediaAcquisition,
)
from capture_narrator.services.notifications import EventBuffer
from capture_narrator.services.preferences import (
    PreferencesRepository,
    PreferencesService,
)
from capture_narrator.services.regeneration import VoiceRegenerationService
from capture_narrator.services.registry import CaptureSessionRegistry
from capture_narrator.services.speech import SpeechClient, SpeechService
from capture_narrator.services.users import (
    AuthenticationError,
    AuthResult,
    IdentityProvider,
    ProfileRepository,
    UserService,
)

FAKE_JPEG = b"\xff\xd8\xff\xe0fake-jpeg-frame"
FAKE_WAV = b"RIFF\x24\x00\x00\x00WAVEfmt fake-audio"
MANILA_PAYLOAD: dict[str, object] = {
    "display_name": "Somewhere, Quezon City, Metro Manila, Philippines",
    "address": {
        "suburb": "Brgy. Uno",
        "city": "Quezon City",
        "state": "Metro Manila",
        "country": "Philippines",
    },
}


@dataclass
class FakeCameraStream:
    """Fake stream that returns a fixed frame."""

    frame: bytes | None
    stopped: bool = False

    def read_frame(self) -> bytes | None:
        return self.frame

    def stop(self) -> None:
        self.stopped = True


@dataclass
class FakeCameraDevice(CameraDevice):
    """Fake camera that records every stream it opens."""

    deny: bool = False
    frame: bytes | None = FAKE_JPEG
    opened: list[FacingMode] = field(default_factory=list)
    streams: list[FakeCameraStream] = field(default_factory=list)

    def open(self, facing_mode: FacingMode) -> FakeCameraStream:
        if self.deny:
            raise CameraPermissionError("Permission denied")
        stream = FakeCameraStream(frame=self.frame)
        self.opened.append(facing_mode)
        self.streams.append(stream)
        return stream

    @property
    def live_streams(self) -> int:
        return sum(1 for stream in self.streams if not stream.stopped)


@dataclass
class FakeGeocodingClient(GeocodingClient):
    """Fake reverse-geocoder returning a fixed payload."""

    payload: dict[str, object] | None = field(
        default_factory=lambda: dict(MANILA_PAYLOAD)
    )
    error: Exception | None = None
    calls: list[tuple[float, float]] = field(default_factory=list)

    async def reverse(
        self, latitude: float, longitude: float
    ) -> dict[str, object] | None:
        self.calls.append((latitude, longitude))
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class FakeDescriptionClient(DescriptionClient):
    """Fake description model; yields to the loop like a real network call."""

    text: str = "A busy street market."
    error: Exception | None = None
    calls: list[str] = field(default_factory=list)

    async def describe(
        self,
        *,
        model: str,
        store: bool,
        image_data_url: str,
        prompt: str,
    ) -> str:
        self.calls.append(image_data_url)
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.text


@dataclass
class FakeSpeechClient(SpeechClient):
    """Fake speech model returning fixed WAV bytes."""

    audio: bytes = FAKE_WAV
    error: Exception | None = None
    calls: list[tuple[str, str]] = field(default_factory=list)

    async def synthesize(self, *, model: str, voice_name: str, text: str) -> bytes:
        self.calls.append((voice_name, text))
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.audio


@dataclass
class InMemoryHistoryRepository(HistoryRepository):
    """In-memory history store for tests."""

    entries: dict[UUID, HistoryEntry] = field(default_factory=dict)
    writes: list[NewHistoryEntry] = field(default_factory=list)
    audio_updates: list[tuple[UUID, str, Voice]] = field(default_factory=list)
    add_error: Exception | None = None
    update_error: Exception | None = None

    def add_entry(self, user_id: UUID, entry: NewHistoryEntry) -> None:
        if self.add_error is not None:
            raise self.add_error
        self.writes.append(entry)
        created = HistoryEntry(
            id=uuid4(),
            user_id=user_id,
            image_url=entry.image_url,
            description=entry.description,
            audio_url=entry.audio_url,
            location=entry.location,
            timestamp=datetime.now(tz=UTC) + timedelta(microseconds=len(self.writes)),
            voice_used=entry.voice_used,
        )
        self.entries[created.id] = created

    def list_for_user(self, user_id: UUID) -> list[HistoryEntry]:
        owned = [entry for entry in self.entries.values() if entry.user_id == user_id]
        return sorted(
            owned,
            key=lambda entry: entry.timestamp or datetime.min.replace(tzinfo=UTC),
            reverse=True,
        )

    def get_entry(self, entry_id: UUID) -> HistoryEntry | None:
        return self.entries.get(entry_id)

    def update_audio(self, entry_id: UUID, audio_url: str, voice: Voice) -> None:
        if self.update_error is not None:
            raise self.update_error
        self.audio_updates.append((entry_id, audio_url, voice))
        current = self.entries[entry_id]
        self.entries[entry_id] = HistoryEntry(
            id=current.id,
            user_id=current.user_id,
            image_url=current.image_url,
            description=current.description,
            audio_url=audio_url,
            location=current.location,
            timestamp=current.timestamp,
            voice_used=voice,
        )

    def seed(self, user_id: UUID, voice: Voice = Voice.FEMALE) -> HistoryEntry:
        entry = HistoryEntry(
            id=uuid4(),
            user_id=user_id,
            image_url="data:image/jpeg;base64,/9j/",
            description="A quiet park at dusk.",
            audio_url="data:audio/wav;base64,UklGRg==",
            location="Brgy. Uno, Quezon City, Metro Manila",
            timestamp=datetime.now(tz=UTC) - timedelta(hours=2),
            voice_used=voice,
        )
        self.entries[entry.id] = entry
        return entry


@dataclass
class InMemoryProfileRepository(ProfileRepository, PreferencesRepository):
    """In-memory profile store for tests."""

    profiles: dict[UUID, dict[str, object]] = field(default_factory=dict)
    preference_writes: list[dict[str, str]] = field(default_factory=list)
    update_error: Exception | None = None

    def profile_exists(self, user_id: UUID) -> bool:
        return user_id in self.profiles

    def create_profile(
        self,
        user: UserRecord,
        first_name: str,
        last_name: str,
        preferences: dict[str, str],
    ) -> None:
        self.profiles[user.id] = {
            "email": user.email,
            "first_name": first_name,
            "last_name": last_name,
            "preferences": dict(preferences),
        }

    def get_preferences(self, user_id: UUID) -> dict[str, object] | None:
        profile = self.profiles.get(user_id)
        if profile is None:
            return None
        return profile.get("preferences")

    def update_preferences(self, user_id: UUID, preferences: dict[str, str]) -> None:
        if self.update_error is not None:
            raise self.update_error
        self.preference_writes.append(dict(preferences))
        self.profiles.setdefault(user_id, {})["preferences"] = dict(preferences)


@dataclass
class FakeIdentityProvider(IdentityProvider):
    """Fake identity provider keyed by email and token."""

    accounts: dict[str, tuple[str, UserRecord]] = field(default_factory=dict)
    tokens: dict[str, UserRecord] = field(default_factory=dict)
    revoked: list[str] = field(default_factory=list)
    lookups: int = 0

    def sign_up(
        self, email: str, password: str, metadata: dict[str, str]
    ) -> AuthResult:
        if email in self.accounts:
            raise AuthenticationError("User already registered")
        user = UserRecord(id=uuid4(), email=email)
        self.accounts[email] = (password, user)
        return AuthResult(user=user, access_token=self.issue_token(user))

    def sign_in(self, email: str, password: str) -> AuthResult:
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise AuthenticationError("Invalid login credentials")
        return AuthResult(user=account[1], access_token=self.issue_token(account[1]))

    def sign_out(self, access_token: str) -> None:
        self.tokens.pop(access_token, None)
        self.revoked.append(access_token)

    def get_user(self, access_token: str) -> UserRecord | None:
        self.lookups += 1
        return self.tokens.get(access_token)

    def issue_token(self, user: UserRecord) -> str:
        token = f"token-{uuid4()}"
        self.tokens[token] = user
        return token


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
        openai_api_key="openai-key",
    )


@pytest.fixture
def user() -> UserRecord:
    return UserRecord(id=uuid4(), email="ana@example.com")


@pytest.fixture
def current_session(user: UserRecord) -> CurrentSession:
    return CurrentSession(
        user=user,
        access_token="token-ana",
        preferences=UserPreferences(voice=Voice.MALE),
    )


@pytest.fixture
def camera() -> FakeCameraDevice:
    return FakeCameraDevice()


@pytest.fixture
def geocoding_client() -> FakeGeocodingClient:
    return FakeGeocodingClient()


@pytest.fixture
def description_client() -> FakeDescriptionClient:
    return FakeDescriptionClient()


@pytest.fixture
def speech_client() -> FakeSpeechClient:
    return FakeSpeechClient()


@pytest.fixture
def history_repository() -> InMemoryHistoryRepository:
    return InMemoryHistoryRepository()


@pytest.fixture
def profile_repository(user: UserRecord) -> InMemoryProfileRepository:
    repository = InMemoryProfileRepository()
    repository.create_profile(
        user,
        first_name="Ana",
        last_name="Santos",
        preferences={"theme": "dark", "voice": "male"},
    )
    return repository


@pytest.fixture
def identity(user: UserRecord) -> FakeIdentityProvider:
    provider = FakeIdentityProvider()
    provider.accounts[user.email or ""] = ("secret-pass", user)
    return provider


@pytest.fixture
def description_service(
    settings: Settings, description_client: FakeDescriptionClient
) -> DescriptionService:
    return DescriptionService(
        client=description_client,
        model=settings.openai_description_model,
        store=settings.openai_store,
    )


@pytest.fixture
def speech_service(
    settings: Settings, speech_client: FakeSpeechClient
) -> SpeechService:
    return SpeechService(
        client=speech_client,
        model=settings.openai_speech_model,
        voice_names=settings.voice_names(),
    )


@pytest.fixture
def history_service(history_repository: InMemoryHistoryRepository) -> HistoryService:
    return HistoryService(history_repository)


@pytest.fixture
def preferences_service(
    profile_repository: InMemoryProfileRepository,
) -> PreferencesService:
    return PreferencesService(profile_repository)


@pytest.fixture
def ui() -> EventBuffer:
    return EventBuffer()


@pytest.fixture
def pipeline(  # noqa: PLR0913
    current_session: CurrentSession,
    camera: FakeCameraDevice,
    geocoding_client: FakeGeocodingClient,
    description_service: DescriptionService,
    speech_service: SpeechService,
    history_service: HistoryService,
    preferences_service: PreferencesService,
    ui: EventBuffer,
) -> CapturePipeline:
    return CapturePipeline(
        session=current_session,
        media=MediaAcquisition(camera),
        location_resolver=LocationResolver(geocoding_client),
        description_service=description_service,
        speech_service=speech_service,
        history_service=history_service,
        preferences_service=preferences_service,
        ui=ui,
    )


@pytest.fixture
def regeneration_service(
    speech_service: SpeechService,
    history_service: HistoryService,
    preferences_service: PreferencesService,
) -> VoiceRegenerationService:
    return VoiceRegenerationService(
        speech_service=speech_service,
        history_service=history_service,
        preferences_service=preferences_service,
    )


@pytest.fixture
def user_service(
    identity: FakeIdentityProvider,
    profile_repository: InMemoryProfileRepository,
    preferences_service: PreferencesService,
) -> UserService:
    return UserService(
        identity=identity,
        profiles=profile_repository,
        preferences_service=preferences_service,
        sessions=InMemorySessionCache(),
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    camera: FakeCameraDevice,
    geocoding_client: FakeGeocodingClient,
    description_service: DescriptionService,
    speech_service: SpeechService,
    history_service: HistoryService,
    preferences_service: PreferencesService,
    regeneration_service: VoiceRegenerationService,
    user_service: UserService,
) -> AppContainer:
    capture_sessions = CaptureSessionRegistry()

    async def close_resources() -> None:
        capture_sessions.close_all()

    return AppContainer(
        settings=settings,
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


@pytest.fixture
def auth_headers(identity: FakeIdentityProvider, user: UserRecord) -> dict[str, str]:
    token = identity.issue_token(user)
    return {"Authorization": f"Bearer {token}"}
