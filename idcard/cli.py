"""Command-line interface for extracting data from a single ID card image.

Runs the same pipeline as the HTTP API on a local file and prints the
three-field result as JSON, optionally saving the face crop to disk.
"""

import argparse
import json
import mimetypes
import sys
from pathlib import Path

import cv2

from idcard.exceptions import ClientInputError
from idcard.pipeline.orchestrator import build_pipeline
from idcard.utils.config import load_config
from idcard.utils.image_codec import decode_base64_image
from idcard.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def extract_single(file_path: Path, config_path: Path | None = None) -> dict[str, str]:
    """Process a single ID card image and return the wire-format result.

    Args:
        file_path: Path to the card image.
        config_path: Optional YAML configuration file.

    Returns:
        Dictionary with ``Name``, ``Barcode`` and ``ImageBase64`` keys.

    Raises:
        EmptyUploadError: If the file is empty.
    """
    config = load_config(config_path)
    pipeline = build_pipeline(config)
    content_type, _ = mimetypes.guess_type(file_path.name)
    result = pipeline.process(file_path.read_bytes(), content_type)
    return result.to_dict()


def save_face(image_base64: str, output_path: Path) -> bool:
    """Write a base64 face crop to an image file.

    Args:
        image_base64: Encoded crop, or a sentinel string.
        output_path: Destination file; its suffix selects the format.

    Returns:
        Whether a face image was written.
    """
    try:
        image = decode_base64_image(image_base64)
    except ValueError:
        logger.warning("No face image to save: %s", image_base64)
        return False

    output_path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(output_path), image):
        logger.error("Could not write face image to %s", output_path)
        return False
    return True


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="ID Card Extractor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=Path, help="YAML configuration file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    single_parser = subparsers.add_parser("extract", help="Process a single card image")
    single_parser.add_argument("file", type=Path, help="Card image to process")
    single_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")
    single_parser.add_argument(
        "--save-face", type=Path, help="Write the cropped face to this image file"
    )

    args = parser.parse_args(argv)

    setup_logging(load_config(args.config).log_level)

    if args.command != "extract":
        parser.print_help()
        sys.exit(0)

    if not args.file.exists():
        print(f"Error: {args.file} does not exist", file=sys.stderr)
        sys.exit(1)

    try:
        result = extract_single(args.file, args.config)
    except ClientInputError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    output_str = json.dumps(result, indent=2)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output_str)
        print(f"Output written to {args.output}")
    else:
        print(output_str)

    if args.save_face and save_face(result["ImageBase64"], args.save_face):
        print(f"Face image written to {args.save_face}")


if __name__ == "__main__":
    main()
