"""Camera stream lifecycle and still-frame capture."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from capture_narrator.domain.media import detect_image_mime_type, to_data_url
from capture_narrator.domain.models import FacingMode

logger = logging.getLogger(__name__)


class CameraPermissionError(Exception):
    """Raised when the camera cannot be opened or access is refused."""


class CameraStream(Protocol):
    """A live, exclusively held camera stream."""

    def read_frame(self) -> bytes | None:
        """Return the current frame as encoded image bytes, if available."""

    def stop(self) -> None:
        """Release every track held by the stream."""


class CameraDevice(Protocol):
    """Source of camera streams."""

    def open(self, facing_mode: FacingMode) -> CameraStream:
        """Open a stream for the facing mode or raise CameraPermissionError."""


@dataclass
class MediaAcquisition:
    """Owns at most one live camera stream at a time."""

    device: CameraDevice
    facing_mode: FacingMode = FacingMode.ENVIRONMENT
    permission_denied: bool = False
    _stream: CameraStream | None = field(default=None, init=False, repr=False)

    @property
    def is_on(self) -> bool:
        return self._stream is not None

    def start(self, facing_mode: FacingMode | None = None) -> bool:
        """Acquire a stream, releasing any held one first."""
        self.stop()
        mode = facing_mode or self.facing_mode
        try:
            stream = self.device.open(mode)
        except CameraPermissionError:
            logger.warning("Camera access denied", extra={"facing_mode": mode.value})
            self.permission_denied = True
            return False
        self._stream = stream
        self.facing_mode = mode
        self.permission_denied = False
        return True

    def stop(self) -> None:
        """Release the held stream, if any."""
        stream, self._stream = self._stream, None
        if stream is not None:
            stream.stop()

    def toggle_facing(self) -> FacingMode:
        """Flip front/back and re-acquire only when the camera is on."""
        new_mode = self.facing_mode.flipped()
        if self.is_on:
            self.start(new_mode)
        else:
            self.facing_mode = new_mode
        return self.facing_mode

    def capture_frame(self) -> str | None:
        """Encode the current frame as a data URI; None without a live stream."""
        if self._stream is None:
            return None
        frame = self._stream.read_frame()
        if not frame:
            return None
        return to_data_url(frame, detect_image_mime_type(frame))
