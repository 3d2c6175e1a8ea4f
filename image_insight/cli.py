"""Command-line interface for OCR and image analysis on local files.

Provides subcommands for extracting text from an image, describing an
image with the vision model, listing the OCR presets, and starting the
web server.
"""

import argparse
import sys
from pathlib import Path

from image_insight.errors import ImageInsightError, UnsupportedFormatError
from image_insight.ocr.formats import UNSUPPORTED_FORMAT_MESSAGE, is_supported_format
from image_insight.ocr.options import PRESETS, OcrOptions
from image_insight.ocr.service import OcrService
from image_insight.upload import Upload
from image_insight.utils.config import load_config
from image_insight.utils.logger import get_logger, setup_logging
from image_insight.vision.analyzer import VisionAnalyzer

logger = get_logger(__name__)


def extract_file(file_path: Path, mode: str = "default") -> str:
    """Extract text from an image file.

    Args:
        file_path: Path to the image.
        mode: Name of the OCR preset to apply.

    Returns:
        Extracted text.

    Raises:
        UnsupportedFormatError: If the file type is not an accepted image format.
    """
    config = load_config()
    upload = Upload.from_path(file_path)
    if not is_supported_format(upload.content_type):
        raise UnsupportedFormatError(UNSUPPORTED_FORMAT_MESSAGE, upload.filename)
    return OcrService(config).extract_text(upload, OcrOptions.from_preset(mode))


def describe_file(file_path: Path, question: str | None = None) -> str:
    """Describe an image file, or answer a question about it.

    Args:
        file_path: Path to the image.
        question: Optional question about the image.

    Returns:
        The vision model's response.
    """
    config = load_config()
    upload = Upload.from_path(file_path)
    return VisionAnalyzer(config.vision).analyze(upload, question)


def _print_presets() -> None:
    for name, factory in PRESETS.items():
        print(f"{name:<18} {factory().describe()}")


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="Image Insight: OCR and image analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    ocr_parser = subparsers.add_parser("ocr", help="Extract text from an image")
    ocr_parser.add_argument("file", type=Path, help="Image file to process")
    ocr_parser.add_argument(
        "-m",
        "--mode",
        choices=list(PRESETS),
        default="default",
        help="OCR preset (default: default)",
    )
    ocr_parser.add_argument("-o", "--output", type=Path, help="Output text file")

    describe_parser = subparsers.add_parser(
        "describe", help="Describe an image with the vision model"
    )
    describe_parser.add_argument("file", type=Path, help="Image file to analyze")
    describe_parser.add_argument(
        "-q", "--question", help="Question to ask about the image"
    )

    subparsers.add_parser("presets", help="List the OCR presets")
    subparsers.add_parser("serve", help="Start the web server")

    args = parser.parse_args(argv)

    setup_logging(load_config().log_level)

    if args.command in ("ocr", "describe") and not args.file.is_file():
        print(f"Error: {args.file} does not exist", file=sys.stderr)
        sys.exit(1)

    try:
        if args.command == "ocr":
            text = extract_file(args.file, args.mode)
            if args.output:
                args.output.parent.mkdir(parents=True, exist_ok=True)
                args.output.write_text(text)
                print(f"Output written to {args.output}")
            else:
                print(text)
        elif args.command == "describe":
            print(describe_file(args.file, args.question))
        elif args.command == "presets":
            _print_presets()
        elif args.command == "serve":
            from image_insight.main import main as serve

            serve()
        else:
            parser.print_help()
            sys.exit(0)
    except ImageInsightError as exc:
        logger.error("Processing failed for %s: %s", exc.filename, exc.message)
        print(f"Error: {exc.message}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
