from __future__ import annotations

import asyncio
from datetime import datetime
from pathlib import Path

from adapters import camera_capture
from adapters.camera_capture import FfmpegCameraCapture
from core.config import CameraConfig


def _camera(tmp_path: Path, **overrides) -> FfmpegCameraCapture:
    values = dict(enabled=True, device=2, save_dir=str(tmp_path), stealth_mode=False, timeout_seconds=0.5)
    values.update(overrides)
    return FfmpegCameraCapture(CameraConfig(**values), clock=lambda: datetime(2024, 5, 6, 7, 8, 9))


class FakeProcess:
    def __init__(self, returncode: int, on_wait=None) -> None:
        self.returncode = returncode
        self._on_wait = on_wait

    async def wait(self) -> int:
        if self._on_wait:
            self._on_wait()
        return self.returncode


def test_image_path_and_ffmpeg_args(tmp_path: Path) -> None:
    camera = _camera(tmp_path)
    image_path = camera.image_path()

    assert image_path == str(tmp_path / "security_20240506_070809.jpg")
    args = camera.ffmpeg_args(image_path)
    assert args[args.index("-i") + 1] == "/dev/video2"
    assert args[args.index("-frames:v") + 1] == "1"
    assert args[-1] == image_path


def test_capture_returns_none_when_ffmpeg_is_missing(tmp_path: Path, monkeypatch) -> None:
    async def missing(*args, **kwargs):
        raise FileNotFoundError("ffmpeg")

    monkeypatch.setattr(camera_capture.asyncio, "create_subprocess_exec", missing)

    assert asyncio.run(_camera(tmp_path).capture()) is None


def test_capture_returns_path_when_frame_is_written(tmp_path: Path, monkeypatch) -> None:
    camera = _camera(tmp_path)
    expected = Path(camera.image_path())

    async def fake_exec(*args, **kwargs):
        return FakeProcess(0, on_wait=lambda: expected.write_bytes(b"jpeg"))

    monkeypatch.setattr(camera_capture.asyncio, "create_subprocess_exec", fake_exec)

    assert asyncio.run(camera.capture()) == str(expected)


def test_capture_returns_none_on_ffmpeg_error(tmp_path: Path, monkeypatch) -> None:
    async def fake_exec(*args, **kwargs):
        return FakeProcess(1)

    monkeypatch.setattr(camera_capture.asyncio, "create_subprocess_exec", fake_exec)

    assert asyncio.run(_camera(tmp_path).capture()) is None
