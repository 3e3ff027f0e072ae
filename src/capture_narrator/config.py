"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from capture_narrator.domain.models import Voice

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str
    openai_description_model: str = "gpt-4o-mini"
    openai_speech_model: str = "gpt-4o-mini-tts"
    openai_store: bool = False
    male_voice_name: str = "onyx"
    female_voice_name: str = "nova"
    geocoding_base_url: str = "https://nominatim.openstreetmap.org"
    geocoding_user_agent: str = "capture-narrator/0.1"
    camera_user_index: int = 0
    camera_environment_index: int = 1
    jpeg_quality: int = 90
    session_cache_ttl_seconds: int = 300
    capture_session_ttl_seconds: int = 900
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def voice_names(self) -> dict[Voice, str]:
        """Map voice selectors to provider voice names."""
        return {
            Voice.MALE: self.male_voice_name,
            Voice.FEMALE: self.female_voice_name,
        }
