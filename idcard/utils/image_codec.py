"""Base64 image encoding helpers.

Face crops travel as base64-encoded image files. These helpers encode
OpenCV images and turn base64 text (plain or data URL) back into pixels.
"""

import base64
import binascii

import cv2
import numpy as np


def encode_image_base64(image: np.ndarray, ext: str = ".png") -> str:
    """Encode an image as a base64 image file.

    Args:
        image: BGR or grayscale image.
        ext: Target format extension understood by ``cv2.imencode``.

    Returns:
        ASCII base64 text of the encoded file.

    Raises:
        ValueError: If OpenCV cannot encode the image.
    """
    try:
        ok, buffer = cv2.imencode(ext, image)
    except cv2.error as exc:
        raise ValueError(f"Could not encode image as {ext}: {exc}") from exc
    if not ok:
        raise ValueError(f"Could not encode image as {ext}")
    return base64.b64encode(buffer.tobytes()).decode("ascii")


def decode_base64_image(text: str) -> np.ndarray:
    """Decode base64 image text back into a BGR image.

    A ``data:image/png;base64,`` style prefix is stripped first.

    Raises:
        ValueError: If the text is not base64 or not an image.
    """
    if "," in text:
        text = text[text.index(",") + 1 :]

    try:
        raw = base64.b64decode(text, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"Invalid base64 image data: {exc}") from exc

    image = cv2.imdecode(np.frombuffer(raw, dtype=np.uint8), cv2.IMREAD_COLOR)
    if image is None:
        raise ValueError("Base64 data is not a decodable image")
    return image
