"""Shared pytest fixtures for Banana Studio tests."""

import logging
import sys
from io import BytesIO
from pathlib import Path
from typing import List

import pytest
from PIL import Image

from banana_studio import logging_utils
from banana_studio.api import credentials
from banana_studio.core.models import RawInputs, ReferenceImage


def _png_bytes(color: str) -> bytes:
    buf = BytesIO()
    Image.new("RGB", (4, 4), color).save(buf, format="PNG")
    return buf.getvalue()


class DelayRecorder:
    """Stand-in for the executor's delay: records milliseconds, never sleeps."""

    def __init__(self) -> None:
        self.calls: List[int] = []

    async def __call__(self, milliseconds: int) -> None:
        self.calls.append(milliseconds)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch) -> Path:
    """Point the config file at a temp path and clear API key env vars.

    Returns:
        Path of the (not yet existing) config file
    """
    config_path = tmp_path / "banana_studio_config.json"
    monkeypatch.setattr(credentials, "CONFIG_PATH", config_path)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    return config_path


@pytest.fixture(autouse=True)
def fresh_logging(tmp_path: Path, monkeypatch):
    """Start every test with an unconfigured logger and the original excepthook.

    Yields:
        Path the log file would be written to
    """
    log_dir = tmp_path / "logs"
    monkeypatch.setattr(logging_utils, "_logger", None)
    monkeypatch.setattr(logging_utils, "_initialized", False)
    monkeypatch.setattr(logging_utils, "LOG_DIR", log_dir)
    monkeypatch.setattr(logging_utils, "LOG_FILE", log_dir / "banana_studio.log")
    # setattr to itself so monkeypatch restores whatever setup_logging installs
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    yield log_dir / "banana_studio.log"
    logger = logging.getLogger(logging_utils.LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


@pytest.fixture
def style_image() -> ReferenceImage:
    return ReferenceImage(data=_png_bytes("blue"), mime_type="image/png")


@pytest.fixture
def subject_image() -> ReferenceImage:
    return ReferenceImage(data=b"\xff\xd8\xff\xe0subject-jpeg", mime_type="image/jpeg")


@pytest.fixture
def face_image() -> ReferenceImage:
    return ReferenceImage(data=b"face-bytes", mime_type="image/webp")


@pytest.fixture
def target_image() -> ReferenceImage:
    return ReferenceImage(data=b"target-bytes", mime_type="image/png")


@pytest.fixture
def png_file(tmp_path: Path) -> Path:
    """A real PNG on disk."""
    path = tmp_path / "photo.png"
    path.write_bytes(_png_bytes("red"))
    return path


@pytest.fixture
def empty_inputs() -> RawInputs:
    return RawInputs()


@pytest.fixture
def delay_recorder() -> DelayRecorder:
    return DelayRecorder()
