"""ASGI entrypoint for the capture narrator API."""

from capture_narrator.api.app import create_app
from capture_narrator.containers import build_container

app = create_app(build_container())
