"""OpenCV-backed camera device."""

from collections.abc import Callable
from dataclasses import dataclass, field

import cv2

from capture_narrator.domain.models import FacingMode
from capture_narrator.services.media import (
    CameraDevice,
    CameraPermissionError,
    CameraStream,
)


@dataclass
class OpenCvCameraStream(CameraStream):
    """Stream over an opened ``cv2.VideoCapture``."""

    capture: cv2.VideoCapture
    jpeg_quality: int = 90

    def read_frame(self) -> bytes | None:
        """Grab the current frame at native resolution and encode it as JPEG."""
        ok, frame = self.capture.read()
        if not ok or frame is None:
            return None
        ok, buffer = cv2.imencode(
            ".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), self.jpeg_quality]
        )
        if not ok:
            return None
        return buffer.tobytes()

    def stop(self) -> None:
        """Release the capture device."""
        self.capture.release()


@dataclass
class OpenCvCameraDevice(CameraDevice):
    """Maps facing modes onto local camera indices."""

    user_index: int = 0
    environment_index: int = 1
    jpeg_quality: int = 90
    capture_factory: Callable[[int], cv2.VideoCapture] = field(
        default=cv2.VideoCapture, repr=False
    )

    def open(self, facing_mode: FacingMode) -> CameraStream:
        """Open the camera for the facing mode."""
        index = (
            self.user_index
            if facing_mode is FacingMode.USER
            else self.environment_index
        )
        capture = self.capture_factory(index)
        if not capture.isOpened():
            capture.release()
            raise CameraPermissionError(f"Camera {index} could not be opened")
        return OpenCvCameraStream(capture=capture, jpeg_quality=self.jpeg_quality)
