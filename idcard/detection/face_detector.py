"""Frontal face detection with an OpenCV Haar cascade."""

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import cv2
import numpy as np

from idcard.exceptions import FaceModelError
from idcard.utils.logger import get_logger

logger = get_logger(__name__)

CASCADE_FILENAME = "haarcascade_frontalface_default.xml"


@dataclass(frozen=True)
class FaceRegion:
    """Axis-aligned face bounding box in source pixel coordinates."""

    x: int
    y: int
    width: int
    height: int


class FaceDetector(Protocol):
    """Anything that finds faces in a grayscale frame."""

    def detect(self, gray: np.ndarray) -> list[FaceRegion]: ...


def default_cascade_path() -> Path:
    """Return the frontal-face cascade bundled with opencv-python."""
    return Path(cv2.data.haarcascades) / CASCADE_FILENAME


class HaarCascadeFaceDetector:
    """Haar cascade face detector tuned for precision over recall.

    The cascade is loaded on first use, so a missing model only fails
    face detection and not service start-up.

    Args:
        cascade_path: Path to the cascade XML. ``None`` uses the copy
            shipped with OpenCV.
        scale_factor: Image pyramid scale step for ``detectMultiScale``.
        min_neighbors: Neighbour votes required to keep a detection.
    """

    def __init__(
        self,
        cascade_path: str | Path | None = None,
        scale_factor: float = 1.1,
        min_neighbors: int = 10,
    ) -> None:
        self.cascade_path = (
            Path(cascade_path) if cascade_path else default_cascade_path()
        )
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self._cascade: cv2.CascadeClassifier | None = None
        self._lock = threading.Lock()

    def is_available(self) -> bool:
        """Return whether the cascade file exists on disk."""
        return self.cascade_path.is_file()

    def _ensure_cascade(self) -> cv2.CascadeClassifier:
        # Caller holds self._lock.
        if self._cascade is not None:
            return self._cascade

        if not self.cascade_path.is_file():
            raise FaceModelError(f"Face cascade not found: {self.cascade_path}")

        cascade = cv2.CascadeClassifier()
        try:
            loaded = cascade.load(str(self.cascade_path))
        except cv2.error as exc:
            raise FaceModelError(f"Cannot load face cascade: {exc}") from exc
        if not loaded or cascade.empty():
            raise FaceModelError(f"Face cascade is empty: {self.cascade_path}")

        logger.info("Loaded face cascade from %s", self.cascade_path)
        self._cascade = cascade
        return cascade

    def detect(self, gray: np.ndarray) -> list[FaceRegion]:
        """Detect faces in a grayscale frame.

        Calls on one detector are serialised; the cascade is shared
        between worker threads.

        Args:
            gray: Single-channel image.

        Returns:
            Detected regions in the cascade's own order.

        Raises:
            FaceModelError: If the cascade cannot be loaded.
        """
        with self._lock:
            cascade = self._ensure_cascade()
            faces = cascade.detectMultiScale(
                gray,
                scaleFactor=self.scale_factor,
                minNeighbors=self.min_neighbors,
            )
        regions = [FaceRegion(int(x), int(y), int(w), int(h)) for x, y, w, h in faces]
        logger.debug("Detected %d face regions", len(regions))
        return regions
