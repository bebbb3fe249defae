"""Stage outcomes and the combined extraction result.

Each extraction stage reports a tagged :class:`StageResult`. The tags are
turned into the fixed sentinel strings only when the final
:class:`ExtractionResult` is assembled.
"""

from dataclasses import dataclass
from enum import StrEnum

NAME_NOT_FOUND = "Name not found"
BARCODE_NOT_FOUND = "Barcode not found"
NO_FACE_DETECTED = "No face detected"
FACE_DETECTION_FAILED = "Face detection failed"


class StageStatus(StrEnum):
    """Outcome tag of a single extraction stage."""

    OK = "ok"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class StageResult:
    """Outcome of one extraction stage."""

    status: StageStatus
    value: str | None = None
    reason: str | None = None

    @classmethod
    def ok(cls, value: str) -> "StageResult":
        return cls(StageStatus.OK, value=value)

    @classmethod
    def not_found(cls) -> "StageResult":
        return cls(StageStatus.NOT_FOUND)

    @classmethod
    def failed(cls, reason: str) -> "StageResult":
        return cls(StageStatus.FAILED, reason=reason)

    def to_field(self, not_found: str, failed: str) -> str:
        """Map the outcome to the string reported to clients.

        Args:
            not_found: Sentinel for a stage that ran but found nothing.
            failed: Sentinel for a stage that failed internally.
        """
        if self.status is StageStatus.OK and self.value is not None:
            return self.value
        if self.status is StageStatus.FAILED:
            return failed
        return not_found


@dataclass(frozen=True)
class ExtractionResult:
    """Combined output of the three extraction stages."""

    name: str
    barcode: str
    image_base64: str

    @classmethod
    def from_stages(
        cls, name: StageResult, barcode: StageResult, face: StageResult
    ) -> "ExtractionResult":
        """Assemble the result, substituting sentinels for missing values."""
        return cls(
            name=name.to_field(NAME_NOT_FOUND, NAME_NOT_FOUND),
            barcode=barcode.to_field(BARCODE_NOT_FOUND, BARCODE_NOT_FOUND),
            image_base64=face.to_field(NO_FACE_DETECTED, FACE_DETECTION_FAILED),
        )

    def to_dict(self) -> dict[str, str]:
        """Return the result keyed by its wire field names."""
        return {
            "Name": self.name,
            "Barcode": self.barcode,
            "ImageBase64": self.image_base64,
        }
