"""Holder name extraction from OCR text.

The name is picked by position: on the supported card layout the third
and fourth text lines hold the first and last name. This is a fixed
layout rule, not a name parser; labels, multi-word names and other field
orders are not recognised.
"""

import re

from idcard.ocr.tesseract_engine import TesseractEngine
from idcard.storage.temp_store import StoredImage
from idcard.utils.logger import get_logger

from .result import StageResult

logger = get_logger(__name__)

_LINE_BREAK = re.compile(r"[\r\n]")
_FIRST_NAME_LINE = 2
_LAST_NAME_LINE = 3


def split_lines(text: str) -> list[str]:
    """Split OCR text on CR and LF, dropping zero-length entries.

    Whitespace-only lines are kept so that line positions match what
    Tesseract laid out.
    """
    return [line for line in _LINE_BREAK.split(text) if line]


def parse_name(text: str) -> str | None:
    """Pick the holder name out of OCR text.

    Args:
        text: Raw OCR output.

    Returns:
        ``"<first> <last>"`` built from lines 2 and 3 (0-based), or
        ``None`` when fewer than four lines are present.
    """
    lines = split_lines(text)
    if len(lines) <= _LAST_NAME_LINE:
        return None
    first_name = lines[_FIRST_NAME_LINE].strip()
    last_name = lines[_LAST_NAME_LINE].strip()
    return f"{first_name} {last_name}"


class NameExtractor:
    """Runs OCR over a stored card image and extracts the holder name.

    Args:
        ocr_engine: Engine used to read text from the image.
        lang: OCR language code. Defaults to the engine default.
    """

    def __init__(self, ocr_engine: TesseractEngine, lang: str | None = None) -> None:
        self.ocr_engine = ocr_engine
        self.lang = lang

    def extract(self, image: StoredImage) -> StageResult:
        """Extract the holder name from a stored image.

        Never raises: OCR failures are reported as a failed result.
        """
        try:
            text = self.ocr_engine.extract_text_from_file(image.path, lang=self.lang)
        except Exception as exc:
            logger.warning("Name extraction failed for %s: %s", image.path, exc)
            return StageResult.failed(str(exc))

        name = parse_name(text)
        if name is None:
            logger.info("OCR text has too few lines to locate a name")
            return StageResult.not_found()
        return StageResult.ok(name)
