"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from idcard.utils.config import (
    AppConfig,
    BarcodeConfig,
    FaceConfig,
    OCRConfig,
    ServerConfig,
    StorageConfig,
    load_config,
)


class TestOCRConfig:
    """Tests for OCRConfig defaults and overrides."""

    def test_defaults(self) -> None:
        cfg = OCRConfig()
        assert cfg.default_lang == "eng"
        assert cfg.psm == 3
        assert cfg.tesseract_cmd is None

    def test_custom_lang(self) -> None:
        cfg = OCRConfig(default_lang="fra", psm=6)
        assert cfg.default_lang == "fra"
        assert cfg.psm == 6


class TestFaceConfig:
    """Tests for FaceConfig defaults and validation."""

    def test_defaults(self) -> None:
        cfg = FaceConfig()
        assert cfg.cascade_path is None
        assert cfg.scale_factor == 1.1
        assert cfg.min_neighbors == 10
        assert cfg.margin == 42
        assert cfg.clamp_mode == "legacy"
        assert cfg.image_format == ".png"

    def test_bounded_clamp_mode(self) -> None:
        assert FaceConfig(clamp_mode="bounded").clamp_mode == "bounded"

    def test_rejects_unknown_clamp_mode(self) -> None:
        with pytest.raises(ValidationError):
            FaceConfig(clamp_mode="symmetric")


class TestAppConfig:
    """Tests for the top-level AppConfig."""

    def test_defaults(self) -> None:
        cfg = AppConfig()
        assert isinstance(cfg.ocr, OCRConfig)
        assert isinstance(cfg.barcode, BarcodeConfig)
        assert isinstance(cfg.face, FaceConfig)
        assert isinstance(cfg.storage, StorageConfig)
        assert isinstance(cfg.server, ServerConfig)
        assert cfg.barcode.symbols is None
        assert cfg.storage.temp_dir is None
        assert cfg.server.port == 8000
        assert cfg.log_level == "INFO"

    def test_nested_override(self) -> None:
        cfg = AppConfig(face=FaceConfig(margin=10), log_level="DEBUG")
        assert cfg.face.margin == 10
        assert cfg.log_level == "DEBUG"


class TestLoadConfig:
    """Tests for the load_config function."""

    def test_load_shipped_config(self, project_root: Path) -> None:
        cfg = load_config(project_root / "configs" / "config.yaml")
        assert isinstance(cfg, AppConfig)
        assert cfg.ocr.default_lang == "eng"
        assert cfg.face.margin == 42
        assert cfg.face.clamp_mode == "legacy"

    def test_load_missing_file_returns_defaults(self) -> None:
        cfg = load_config(Path("/nonexistent/path/config.yaml"))
        assert isinstance(cfg, AppConfig)
        assert cfg.ocr.default_lang == "eng"

    def test_load_custom_yaml(self, tmp_path: Path) -> None:
        config_data = {
            "ocr": {"default_lang": "deu", "psm": 6},
            "barcode": {"symbols": ["QRCODE"]},
            "face": {"clamp_mode": "bounded", "min_neighbors": 5},
            "log_level": "DEBUG",
        }
        config_file = tmp_path / "config.yaml"
        with open(config_file, "w") as f:
            yaml.dump(config_data, f)

        cfg = load_config(config_file)
        assert cfg.ocr.default_lang == "deu"
        assert cfg.ocr.psm == 6
        assert cfg.barcode.symbols == ["QRCODE"]
        assert cfg.face.clamp_mode == "bounded"
        assert cfg.face.min_neighbors == 5
        assert cfg.log_level == "DEBUG"

    def test_load_empty_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        cfg = load_config(config_file)
        assert isinstance(cfg, AppConfig)
