"""Barcode payload extraction using ZBar.

pyzbar is imported lazily: it needs the native zbar library, and a
missing library should only fail the barcode stage.
"""

from pathlib import Path

from PIL import Image

from idcard.exceptions import BarcodeDecodeError
from idcard.storage.temp_store import StoredImage
from idcard.utils.logger import get_logger

from .result import StageResult

logger = get_logger(__name__)


def payload_text(data: bytes) -> str:
    """Decode a barcode payload as UTF-8, falling back to Latin-1.

    Many 1D symbologies and older QR encoders carry ISO-8859-1 bytes.
    Latin-1 maps every byte, so the fallback cannot fail.
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def _load_pyzbar():
    """Import ``pyzbar.pyzbar``, raising a stage error if zbar is missing."""
    try:
        from pyzbar import pyzbar
    except (ImportError, OSError) as exc:
        raise BarcodeDecodeError(f"zbar is not available: {exc}") from exc
    return pyzbar


def zbar_available() -> bool:
    """Return whether pyzbar and the native zbar library can be loaded."""
    try:
        _load_pyzbar()
    except BarcodeDecodeError:
        return False
    return True


def resolve_symbols(names: list[str] | None) -> list | None:
    """Translate symbology names such as ``"QRCODE"`` to ZBar symbols.

    Raises:
        BarcodeDecodeError: If a name is not a ZBar symbology.
    """
    if not names:
        return None
    pyzbar = _load_pyzbar()
    try:
        return [pyzbar.ZBarSymbol[name.upper()] for name in names]
    except KeyError as exc:
        raise BarcodeDecodeError(f"Unknown barcode symbology: {exc.args[0]}") from exc


class BarcodeExtractor:
    """Decodes the first barcode found anywhere in a card image.

    Args:
        symbols: ZBar symbology names to look for. ``None`` decodes
            every 1D and 2D format ZBar supports.
    """

    def __init__(self, symbols: list[str] | None = None) -> None:
        self.symbols = symbols

    def decode_file(self, path: Path) -> str | None:
        """Return the payload of the first barcode in an image file."""
        pyzbar = _load_pyzbar()
        symbols = resolve_symbols(self.symbols)
        with Image.open(path) as img:
            img.load()
            results = pyzbar.decode(img, symbols=symbols)
        if not results:
            return None
        first = results[0]
        logger.debug("Decoded %s barcode from %s", first.type, path)
        return payload_text(first.data)

    def extract(self, image: StoredImage) -> StageResult:
        """Extract the barcode payload from a stored image.

        Never raises: decoding failures are reported as a failed result.
        """
        try:
            payload = self.decode_file(image.path)
        except Exception as exc:
            logger.warning("Barcode extraction failed for %s: %s", image.path, exc)
            return StageResult.failed(str(exc))

        if payload is None:
            logger.info("No barcode found in %s", image.path)
            return StageResult.not_found()
        return StageResult.ok(payload)
