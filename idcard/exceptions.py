"""Exception hierarchy for the ID card extraction service.

Client input errors and pipeline-fatal errors cross the orchestrator
boundary. Stage errors never do: each extractor converts them into a
failed :class:`~idcard.extraction.result.StageResult`.
"""


class IDCardError(Exception):
    """Base exception for all ID card extraction errors."""


class ClientInputError(IDCardError):
    """Raised when the uploaded input cannot be processed at all."""


class EmptyUploadError(ClientInputError):
    """Raised when no image was uploaded or the upload is empty."""


class PipelineFatalError(IDCardError):
    """Raised when shared pipeline infrastructure fails."""


class ImageStorageError(PipelineFatalError):
    """Raised when the uploaded bytes cannot be persisted for the stages."""


class StageError(IDCardError):
    """Base exception for failures inside a single extraction stage."""


class OCRError(StageError):
    """Raised when the OCR engine cannot process an image."""


class BarcodeDecodeError(StageError):
    """Raised when an image cannot be prepared for barcode decoding."""


class FaceModelError(StageError):
    """Raised when the face detection model is missing or unusable."""


class InvalidCropError(StageError):
    """Raised when an expanded face region does not fit inside the image."""
