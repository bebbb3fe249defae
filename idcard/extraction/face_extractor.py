"""Portrait extraction from ID card images.

Finds the holder's face, pads the region by a fixed margin, crops it
from the colour image and returns the crop as a base64-encoded image.
"""

from typing import Literal

import cv2
import numpy as np

from idcard.detection.face_detector import FaceDetector, FaceRegion
from idcard.exceptions import InvalidCropError
from idcard.storage.temp_store import StoredImage
from idcard.utils.image_codec import encode_image_base64
from idcard.utils.logger import get_logger

from .result import StageResult

logger = get_logger(__name__)

DEFAULT_MARGIN = 42

ClampMode = Literal["legacy", "bounded"]


def expand_region(
    region: FaceRegion,
    image_width: int,
    image_height: int,
    margin: int = DEFAULT_MARGIN,
    clamp_mode: ClampMode = "legacy",
) -> FaceRegion:
    """Grow a face region by ``margin`` pixels on every side.

    The top-left corner is clamped at 0 in both modes. In ``legacy`` mode
    the size is capped at ``image_width - x + margin`` (likewise for the
    height), measured from the face's own left/top edge. That cap is not
    the image bound: with a face close to the left or top edge the
    rectangle can run past the right or bottom of the image, and
    :func:`crop_region` rejects it. ``bounded`` mode clamps the
    right/bottom edges to the image instead.

    Args:
        region: Detected face region.
        image_width: Source image width in pixels.
        image_height: Source image height in pixels.
        margin: Padding added on each side.
        clamp_mode: ``"legacy"`` or ``"bounded"``.

    Returns:
        The expanded region.
    """
    x = max(region.x - margin, 0)
    y = max(region.y - margin, 0)

    if clamp_mode == "legacy":
        width = min(region.width + 2 * margin, image_width - region.x + margin)
        height = min(region.height + 2 * margin, image_height - region.y + margin)
    elif clamp_mode == "bounded":
        width = min(region.x + region.width + margin, image_width) - x
        height = min(region.y + region.height + margin, image_height) - y
    else:
        raise ValueError(f"Unknown clamp mode: {clamp_mode}")

    return FaceRegion(x=x, y=y, width=width, height=height)


def crop_region(image: np.ndarray, region: FaceRegion) -> np.ndarray:
    """Crop a region out of an image.

    Raises:
        InvalidCropError: If the region is empty or extends past the image.
    """
    height, width = image.shape[:2]
    if (
        region.width <= 0
        or region.height <= 0
        or region.x < 0
        or region.y < 0
        or region.x + region.width > width
        or region.y + region.height > height
    ):
        raise InvalidCropError(
            f"Crop {region} does not fit inside a {width}x{height} image"
        )
    bottom = region.y + region.height
    right = region.x + region.width
    return image[region.y : bottom, region.x : right]


class FaceExtractor:
    """Detects the card holder's face and returns a base64 crop.

    Args:
        detector: Face detector run on the grayscale image.
        margin: Padding in pixels added around the detected face.
        clamp_mode: Edge clamping rule, see :func:`expand_region`.
        image_format: Extension of the encoded crop, e.g. ``".png"``.
    """

    def __init__(
        self,
        detector: FaceDetector,
        margin: int = DEFAULT_MARGIN,
        clamp_mode: ClampMode = "legacy",
        image_format: str = ".png",
    ) -> None:
        self.detector = detector
        self.margin = margin
        self.clamp_mode = clamp_mode
        self.image_format = image_format

    def extract(self, image: StoredImage) -> StageResult:
        """Extract the face crop from a stored image.

        Never raises: detection and cropping errors are reported as a
        failed result.
        """
        try:
            return self._extract(image)
        except Exception as exc:
            logger.warning("Face extraction failed for %s: %s", image.path, exc)
            return StageResult.failed(str(exc))

    def _extract(self, image: StoredImage) -> StageResult:
        color = cv2.imread(str(image.path), cv2.IMREAD_COLOR)
        if color is None:
            raise ValueError(f"Cannot read image {image.path}")

        gray = cv2.cvtColor(color, cv2.COLOR_BGR2GRAY)
        faces = self.detector.detect(gray)
        if not faces:
            logger.info("No face detected in %s", image.path)
            return StageResult.not_found()

        height, width = color.shape[:2]
        expanded = expand_region(faces[0], width, height, self.margin, self.clamp_mode)
        crop = crop_region(color, expanded)
        logger.debug("Cropped face %s from %dx%d image", expanded, width, height)
        return StageResult.ok(encode_image_base64(crop, self.image_format))
