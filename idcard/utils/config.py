"""Configuration management for the ID card extraction service.

Loads and validates YAML configuration with sensible defaults
for OCR, barcode decoding, face cropping, and temporary storage.
"""

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class OCRConfig(BaseModel):
    """Configuration for the Tesseract OCR engine."""

    tesseract_cmd: str | None = None
    default_lang: str = "eng"
    psm: int = 3


class BarcodeConfig(BaseModel):
    """Configuration for the ZBar barcode decoder.

    ``symbols`` narrows decoding to the named ZBar symbologies
    (e.g. ``["QRCODE", "CODE128"]``); ``None`` lets ZBar auto-detect.
    """

    symbols: list[str] | None = None


class FaceConfig(BaseModel):
    """Configuration for face detection and cropping."""

    cascade_path: str | None = None
    scale_factor: float = 1.1
    min_neighbors: int = 10
    margin: int = 42
    clamp_mode: Literal["legacy", "bounded"] = "legacy"
    image_format: str = ".png"


class StorageConfig(BaseModel):
    """Configuration for request-scoped temporary image storage."""

    temp_dir: str | None = None


class ServerConfig(BaseModel):
    """Configuration for the uvicorn server."""

    host: str = "0.0.0.0"
    port: int = 8000


class AppConfig(BaseModel):
    """Top-level application configuration."""

    ocr: OCRConfig = Field(default_factory=OCRConfig)
    barcode: BarcodeConfig = Field(default_factory=BarcodeConfig)
    face: FaceConfig = Field(default_factory=FaceConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        return AppConfig(**raw)

    logger.info("No config file found at %s, using defaults", path)
    return AppConfig()
