"""Tesseract OCR engine wrapper for ID card text extraction.

Maps an image to the raw text Tesseract reads from it. Interpreting
that text is left to the extractors.
"""

import shutil
from pathlib import Path

import numpy as np
import pytesseract
from PIL import Image

from idcard.exceptions import OCRError
from idcard.utils.logger import get_logger

logger = get_logger(__name__)


class TesseractEngine:
    """Wrapper around Tesseract OCR for card text extraction.

    Args:
        tesseract_cmd: Path to the Tesseract executable.
            If ``None``, uses the system default.
        default_lang: Default OCR language code.
        psm: Tesseract page segmentation mode.
    """

    def __init__(
        self,
        tesseract_cmd: str | None = None,
        default_lang: str = "eng",
        psm: int = 3,
    ) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.tesseract_cmd = tesseract_cmd
        self.default_lang = default_lang
        self.psm = psm

    def is_available(self) -> bool:
        """Return whether the Tesseract executable can be found."""
        return shutil.which(self.tesseract_cmd or "tesseract") is not None

    def extract_text(
        self,
        image: Image.Image | np.ndarray,
        lang: str | None = None,
    ) -> str:
        """Extract plain text from an image.

        Args:
            image: Input image as a PIL image or numpy array.
            lang: OCR language code. Defaults to the engine default.

        Returns:
            Raw text with Tesseract's line structure preserved.

        Raises:
            OCRError: If Tesseract is missing or fails on the image.
        """
        lang = lang or self.default_lang
        if isinstance(image, np.ndarray):
            image = Image.fromarray(image)

        try:
            text = pytesseract.image_to_string(
                image, lang=lang, config=f"--psm {self.psm}"
            )
        except (pytesseract.TesseractNotFoundError, pytesseract.TesseractError) as exc:
            raise OCRError(f"Tesseract failed: {exc}") from exc

        logger.debug("OCR extracted %d characters (lang=%s)", len(text), lang)
        return text

    def extract_text_from_file(self, path: Path, lang: str | None = None) -> str:
        """Load an image file with Pillow and extract its text."""
        with Image.open(path) as img:
            img.load()
            return self.extract_text(img, lang=lang)
