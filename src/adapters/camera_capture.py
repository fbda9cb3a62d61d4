"""Webcam evidence adapter.

Implements the core EvidencePort by grabbing a single frame with ffmpeg.
Every failure is logged and reported as "no capture" so an alert still goes
out without a photo.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
from datetime import datetime
from typing import Callable, Optional

from core.config import CameraConfig

LOGGER = logging.getLogger(__name__)


def ffmpeg_available() -> bool:
    return shutil.which("ffmpeg") is not None


def v4l2_ctl_available() -> bool:
    return shutil.which("v4l2-ctl") is not None


class FfmpegCameraCapture:
    """Capture one JPEG frame from a V4L2 device."""

    def __init__(self, config: CameraConfig, clock: Callable[[], datetime] = datetime.now) -> None:
        self._config = config
        self._clock = clock

    @property
    def device_path(self) -> str:
        return f"/dev/video{self._config.device}"

    def image_path(self) -> str:
        timestamp = self._clock().strftime("%Y%m%d_%H%M%S")
        return os.path.join(self._config.save_dir, f"security_{timestamp}.jpg")

    def ffmpeg_args(self, image_path: str) -> list[str]:
        return [
            "-loglevel", "quiet",
            "-y",
            "-f", "video4linux2",
            "-input_format", "mjpeg",
            "-i", self.device_path,
            "-frames:v", "1",
            "-q:v", "2",
            image_path,
        ]

    async def capture(self) -> Optional[str]:
        """Return the path of the captured image, or None."""

        image_path = self.image_path()
        os.makedirs(self._config.save_dir, exist_ok=True)

        if self._config.stealth_mode:
            await self._disable_led()

        try:
            process = await asyncio.create_subprocess_exec(
                "ffmpeg",
                *self.ffmpeg_args(image_path),
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as exc:
            LOGGER.warning("Failed to start ffmpeg: %s", exc)
            return None

        try:
            returncode = await asyncio.wait_for(process.wait(), timeout=self._config.timeout_seconds)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            LOGGER.warning("ffmpeg timed out after %ss", self._config.timeout_seconds)
            return None

        if returncode != 0:
            LOGGER.warning("ffmpeg exited with status %s", returncode)
            return None
        if not os.path.exists(image_path):
            LOGGER.warning("Image file was not created: %s", image_path)
            return None

        LOGGER.info("Image captured: %s", image_path)
        return image_path

    async def _disable_led(self) -> None:
        # Best effort: many webcams do not expose an LED control at all.
        if not os.path.exists(self.device_path):
            LOGGER.warning("Camera device %s does not exist", self.device_path)
            return
        try:
            process = await asyncio.create_subprocess_exec(
                "v4l2-ctl",
                "--device",
                self.device_path,
                "--set-ctrl=led1_mode=0",
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            returncode = await process.wait()
        except OSError as exc:
            LOGGER.warning("Failed to disable camera LED: %s", exc)
            return
        if returncode != 0:
            LOGGER.warning("Failed to disable camera LED: v4l2-ctl exited with %s", returncode)
        else:
            LOGGER.info("Attempted to disable camera LED for device %s", self.device_path)
