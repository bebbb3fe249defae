"""ID card extraction pipeline.

Stores one uploaded image, runs the name, barcode and face stages
against it and assembles the combined result. The stages share nothing
but the read-only stored file, so they can run in any order or in
parallel. A stage that fails only affects its own field.
"""

import asyncio

from idcard.detection.face_detector import HaarCascadeFaceDetector
from idcard.exceptions import EmptyUploadError
from idcard.extraction.barcode_extractor import BarcodeExtractor
from idcard.extraction.face_extractor import FaceExtractor
from idcard.extraction.name_extractor import NameExtractor
from idcard.extraction.result import ExtractionResult
from idcard.ocr.tesseract_engine import TesseractEngine
from idcard.storage.temp_store import StoredImage, TemporaryImageStore
from idcard.utils.config import AppConfig
from idcard.utils.logger import get_logger

logger = get_logger(__name__)


class IDCardPipeline:
    """Runs the three extraction stages over one uploaded card image.

    Args:
        name_extractor: OCR-based holder name stage.
        barcode_extractor: Barcode decoding stage.
        face_extractor: Face crop stage.
        store: Temporary storage for the uploaded bytes.
    """

    def __init__(
        self,
        name_extractor: NameExtractor,
        barcode_extractor: BarcodeExtractor,
        face_extractor: FaceExtractor,
        store: TemporaryImageStore | None = None,
    ) -> None:
        self.name_extractor = name_extractor
        self.barcode_extractor = barcode_extractor
        self.face_extractor = face_extractor
        self.store = store or TemporaryImageStore()

    @staticmethod
    def validate(data: bytes | None) -> bytes:
        """Reject missing or empty uploads before any work is done.

        Raises:
            EmptyUploadError: If ``data`` is ``None`` or empty.
        """
        if not data:
            raise EmptyUploadError("Please upload an image file.")
        return data

    def run_stages(self, image: StoredImage) -> ExtractionResult:
        """Run all stages sequentially against an already stored image."""
        name = self.name_extractor.extract(image)
        barcode = self.barcode_extractor.extract(image)
        face = self.face_extractor.extract(image)
        logger.info(
            "Stage outcomes: name=%s barcode=%s face=%s",
            name.status,
            barcode.status,
            face.status,
        )
        return ExtractionResult.from_stages(name, barcode, face)

    def process(
        self, data: bytes | None, content_type: str | None = None
    ) -> ExtractionResult:
        """Process an uploaded image synchronously.

        Args:
            data: Raw uploaded image bytes.
            content_type: Declared media type of the upload.

        Returns:
            Combined result with a value or sentinel for every field.

        Raises:
            EmptyUploadError: If the upload is missing or empty.
            ImageStorageError: If the upload cannot be stored.
        """
        data = self.validate(data)
        logger.info("Processing ID card image (%d bytes)", len(data))
        with self.store.stored(data, content_type) as image:
            return self.run_stages(image)

    async def process_async(
        self, data: bytes | None, content_type: str | None = None
    ) -> ExtractionResult:
        """Process an uploaded image with each stage on a worker thread.

        All three stages are joined before the result is assembled. The
        stored image is released even if the caller is cancelled.
        """
        data = self.validate(data)
        logger.info("Processing ID card image (%d bytes)", len(data))
        image = self.store.store(data, content_type)
        try:
            outcomes = await asyncio.gather(
                asyncio.to_thread(self.name_extractor.extract, image),
                asyncio.to_thread(self.barcode_extractor.extract, image),
                asyncio.to_thread(self.face_extractor.extract, image),
                return_exceptions=True,
            )
        finally:
            self.store.release(image)

        # Stages absorb their own errors, so only unexpected ones reach here.
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
        name, barcode, face = outcomes

        logger.info(
            "Stage outcomes: name=%s barcode=%s face=%s",
            name.status,
            barcode.status,
            face.status,
        )
        return ExtractionResult.from_stages(name, barcode, face)


def build_pipeline(config: AppConfig) -> IDCardPipeline:
    """Wire a pipeline with the real OCR, barcode and face collaborators.

    Args:
        config: Application configuration.
    """
    ocr_engine = TesseractEngine(
        tesseract_cmd=config.ocr.tesseract_cmd,
        default_lang=config.ocr.default_lang,
        psm=config.ocr.psm,
    )
    detector = HaarCascadeFaceDetector(
        cascade_path=config.face.cascade_path,
        scale_factor=config.face.scale_factor,
        min_neighbors=config.face.min_neighbors,
    )
    return IDCardPipeline(
        name_extractor=NameExtractor(ocr_engine),
        barcode_extractor=BarcodeExtractor(config.barcode.symbols),
        face_extractor=FaceExtractor(
            detector,
            margin=config.face.margin,
            clamp_mode=config.face.clamp_mode,
            image_format=config.face.image_format,
        ),
        store=TemporaryImageStore(config.storage.temp_dir),
    )
