"""Tests for the positional holder name extraction."""

from unittest.mock import MagicMock

from idcard.exceptions import OCRError
from idcard.extraction.name_extractor import NameExtractor, parse_name, split_lines
from idcard.extraction.result import StageStatus
from idcard.storage.temp_store import StoredImage


def _make_extractor(
    text: str | None = None, error: Exception | None = None
) -> NameExtractor:
    """Create a NameExtractor backed by a mocked OCR engine."""
    engine = MagicMock()
    if error is not None:
        engine.extract_text_from_file.side_effect = error
    else:
        engine.extract_text_from_file.return_value = text
    return NameExtractor(engine)


class TestSplitLines:
    """Tests for OCR text line splitting."""

    def test_splits_on_lf_and_cr(self) -> None:
        assert split_lines("a\nb\rc\r\nd") == ["a", "b", "c", "d"]

    def test_drops_empty_lines(self) -> None:
        assert split_lines("\n\nfirst\n\n\nsecond\n") == ["first", "second"]

    def test_keeps_whitespace_only_lines(self) -> None:
        assert split_lines("a\n  \nb") == ["a", "  ", "b"]

    def test_empty_text(self) -> None:
        assert split_lines("") == []


class TestParseName:
    """Tests for the fixed-index name heuristic."""

    def test_example_card_layout(self) -> None:
        text = "ID CARD\nRepublic X\nJOHN\nSMITH\nDOB 01/01/1990"
        assert parse_name(text) == "JOHN SMITH"

    def test_exactly_four_lines(self) -> None:
        assert parse_name("a\nb\nJane\nDoe") == "Jane Doe"

    def test_trims_name_lines(self) -> None:
        assert parse_name("a\nb\n  JOHN \n\tSMITH  ") == "JOHN SMITH"

    def test_blank_lines_do_not_count(self) -> None:
        text = "ID CARD\n\n\nRepublic X\r\n\r\nJOHN\n\nSMITH\n"
        assert parse_name(text) == "JOHN SMITH"

    def test_fewer_than_four_lines(self) -> None:
        assert parse_name("ID CARD\nRepublic X\nJOHN") is None

    def test_empty_text(self) -> None:
        assert parse_name("") is None

    def test_multi_word_lines_are_taken_verbatim(self) -> None:
        text = "ID CARD\nRepublic X\nMARY ANN\nVAN DYKE"
        assert parse_name(text) == "MARY ANN VAN DYKE"


class TestNameExtractor:
    """Tests for the NameExtractor stage."""

    def test_found(self, stored_card: StoredImage) -> None:
        extractor = _make_extractor("ID CARD\nRepublic X\nJOHN\nSMITH\n")
        result = extractor.extract(stored_card)
        assert result.status is StageStatus.OK
        assert result.value == "JOHN SMITH"

    def test_reads_stored_path(self, stored_card: StoredImage) -> None:
        extractor = _make_extractor("x")
        extractor.lang = "deu"
        extractor.extract(stored_card)
        extractor.ocr_engine.extract_text_from_file.assert_called_once_with(
            stored_card.path, lang="deu"
        )

    def test_not_found(self, stored_card: StoredImage) -> None:
        result = _make_extractor("ID CARD\nJOHN").extract(stored_card)
        assert result.status is StageStatus.NOT_FOUND

    def test_ocr_error_is_absorbed(self, stored_card: StoredImage) -> None:
        extractor = _make_extractor(error=OCRError("tesseract missing"))
        result = extractor.extract(stored_card)
        assert result.status is StageStatus.FAILED
        assert "tesseract missing" in result.reason

    def test_unexpected_error_is_absorbed(self, stored_card: StoredImage) -> None:
        result = _make_extractor(error=KeyError("page")).extract(stored_card)
        assert result.status is StageStatus.FAILED
