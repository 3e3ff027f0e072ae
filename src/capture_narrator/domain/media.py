"""Models for generated media payloads and data URI helpers."""

import base64
import binascii

from pydantic import BaseModel, Field


class DescriptionResult(BaseModel):
    """Output of the description generator."""

    description: str = Field(min_length=1)


class SpeechResult(BaseModel):
    """Output of the speech synthesizer."""

    audio_url: str = Field(min_length=1)


def to_data_url(payload: bytes, mime_type: str) -> str:
    """Encode bytes as a base64 data URL."""
    encoded = base64.b64encode(payload).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def parse_data_url(data_url: str) -> tuple[str, bytes]:
    """Split a base64 data URL into its MIME type and decoded bytes."""
    if not data_url.startswith("data:"):
        raise ValueError("Not a data URL")
    header, _, encoded = data_url.partition(",")
    if not header.endswith(";base64") or not encoded:
        raise ValueError("Data URL is not base64 encoded")
    mime_type = header[len("data:") : -len(";base64")]
    try:
        payload = base64.b64decode(encoded, validate=True)
    except binascii.Error as exc:
        raise ValueError("Data URL payload is not valid base64") from exc
    return mime_type, payload


def detect_image_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
