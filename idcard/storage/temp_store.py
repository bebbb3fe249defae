"""Request-scoped temporary storage for uploaded ID card images.

The uploaded bytes are written once to a temporary file so that the OCR,
barcode, and face stages can each open the same image by path. The file
is removed when the request ends, whatever the outcome.
"""

import mimetypes
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from idcard.exceptions import ImageStorageError
from idcard.utils.logger import get_logger

logger = get_logger(__name__)

_DEFAULT_SUFFIX = ".img"


@dataclass
class StoredImage:
    """Handle to an uploaded image materialized on disk."""

    path: Path
    size: int
    content_type: str | None = None
    released: bool = False


def suffix_for(content_type: str | None) -> str:
    """Guess a file suffix for a declared media type.

    Args:
        content_type: MIME type such as ``image/png``.

    Returns:
        Suffix including the leading dot, or ``.img`` when unknown.
    """
    if not content_type:
        return _DEFAULT_SUFFIX
    suffix = mimetypes.guess_extension(content_type.split(";")[0].strip())
    return suffix or _DEFAULT_SUFFIX


class TemporaryImageStore:
    """Persists uploaded image bytes for the lifetime of one request.

    Args:
        temp_dir: Directory for temporary files. ``None`` uses the
            platform default.
    """

    def __init__(self, temp_dir: str | Path | None = None) -> None:
        self.temp_dir = str(temp_dir) if temp_dir is not None else None

    def store(self, data: bytes, content_type: str | None = None) -> StoredImage:
        """Write image bytes to a fresh temporary file.

        Args:
            data: Raw uploaded image bytes.
            content_type: Declared media type of the upload.

        Returns:
            Handle pointing at the stored file.

        Raises:
            ImageStorageError: If the bytes cannot be written.
        """
        try:
            fd, name = tempfile.mkstemp(
                suffix=suffix_for(content_type), dir=self.temp_dir
            )
        except OSError as exc:
            raise ImageStorageError(f"Cannot create temporary file: {exc}") from exc

        path = Path(name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
        except OSError as exc:
            path.unlink(missing_ok=True)
            raise ImageStorageError(f"Cannot write uploaded image: {exc}") from exc

        logger.debug("Stored %d bytes at %s", len(data), path)
        return StoredImage(path=path, size=len(data), content_type=content_type)

    def release(self, image: StoredImage) -> None:
        """Delete a stored image. Releasing twice is a no-op."""
        if image.released:
            return
        try:
            image.path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Failed to remove temporary image %s: %s", image.path, exc)
        image.released = True
        logger.debug("Released temporary image %s", image.path)

    @contextmanager
    def stored(
        self, data: bytes, content_type: str | None = None
    ) -> Iterator[StoredImage]:
        """Store image bytes for the duration of a ``with`` block."""
        image = self.store(data, content_type)
        try:
            yield image
        finally:
            self.release(image)
