"""Pydantic response schemas for the FastAPI endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from idcard.extraction.result import ExtractionResult


class IDCardResponse(BaseModel):
    """Response schema for an ID card extraction request."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(alias="Name")
    barcode: str = Field(alias="Barcode")
    image_base64: str = Field(alias="ImageBase64")

    @classmethod
    def from_result(cls, result: ExtractionResult) -> "IDCardResponse":
        return cls(
            name=result.name,
            barcode=result.barcode,
            image_base64=result.image_base64,
        )


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    tesseract_available: bool
    face_model_available: bool
    barcode_available: bool
