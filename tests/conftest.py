"""Shared test fixtures for the ID card extraction test suite."""

from pathlib import Path

import cv2
import numpy as np
import pytest

from idcard.detection.face_detector import FaceRegion
from idcard.storage.temp_store import StoredImage


class FakeFaceDetector:
    """Face detector returning a fixed list of regions."""

    def __init__(self, regions: list[FaceRegion] | None = None) -> None:
        self.regions = regions or []
        self.calls = 0
        self.last_shape: tuple[int, ...] | None = None

    def detect(self, gray: np.ndarray) -> list[FaceRegion]:
        self.calls += 1
        self.last_shape = gray.shape
        return list(self.regions)

    def is_available(self) -> bool:
        return True


@pytest.fixture
def sample_color_image() -> np.ndarray:
    """Create a 200x300 BGR image with a distinct pixel at every position."""
    rows = np.arange(200, dtype=np.uint8).reshape(200, 1)
    cols = np.arange(300, dtype=np.uint16).reshape(1, 300)
    image = np.zeros((200, 300, 3), dtype=np.uint8)
    image[:, :, 0] = rows
    image[:, :, 1] = (cols % 256).astype(np.uint8)
    image[:, :, 2] = 128
    return image


@pytest.fixture
def card_image_path(tmp_path: Path, sample_color_image: np.ndarray) -> Path:
    """Write the sample image to a PNG file."""
    path = tmp_path / "card.png"
    cv2.imwrite(str(path), sample_color_image)
    return path


@pytest.fixture
def stored_card(card_image_path: Path) -> StoredImage:
    """Wrap the sample PNG in a stored-image handle."""
    return StoredImage(
        path=card_image_path,
        size=card_image_path.stat().st_size,
        content_type="image/png",
    )


@pytest.fixture
def card_png_bytes(card_image_path: Path) -> bytes:
    """Return the sample card image as PNG bytes."""
    return card_image_path.read_bytes()


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def make_detector():
    """Return a factory for fake face detectors."""
    return FakeFaceDetector
