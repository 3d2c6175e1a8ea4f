"""OCR service: decode an upload, preprocess it, and recognize its text."""

import io

import cv2
import numpy as np
import pytesseract
from PIL import Image

from image_insight.errors import EngineFailureError, InvalidImageError
from image_insight.preprocessing.pipeline import PreprocessingPipeline
from image_insight.upload import Upload, check_upload
from image_insight.utils.config import AppConfig
from image_insight.utils.logger import get_logger

from .options import OcrOptions
from .tesseract_engine import TesseractEngine

logger = get_logger(__name__)


_HIGH_DEPTH_GRAY_MODES = frozenset({"I;16", "I;16B", "I;16L", "I"})


def _to_8bit_gray(img: Image.Image) -> np.ndarray:
    values = np.clip(np.array(img), 0, 65535).astype(np.uint16)
    return (values >> 8).astype(np.uint8)


def _flatten_on_white(img: Image.Image) -> Image.Image:
    rgba = img.convert("RGBA")
    background = Image.new("RGB", rgba.size, "white")
    background.paste(rgba, mask=rgba.getchannel("A"))
    return background


def _has_transparency(img: Image.Image) -> bool:
    return img.mode in ("RGBA", "LA", "PA") or "transparency" in img.info


def decode_image(data: bytes) -> np.ndarray:
    """Decode image bytes into a numpy array.

    Colour images come back as BGR, grayscale sources stay single-channel.
    16-bit grayscale is scaled down to 8 bits, transparent areas are
    flattened onto white, and animated GIFs yield their first frame.

    Args:
        data: Encoded image bytes (JPEG, PNG, BMP, TIFF or GIF).

    Returns:
        Decoded image.

    Raises:
        InvalidImageError: If the bytes are not a readable image.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            if img.mode == "L":
                return np.array(img)
            if img.mode in _HIGH_DEPTH_GRAY_MODES:
                return _to_8bit_gray(img)
            if _has_transparency(img):
                img = _flatten_on_white(img)
            rgb = np.array(img.convert("RGB"))
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
        raise InvalidImageError(f"Invalid image format: {exc}") from exc
    return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)


class OcrService:
    """Extracts text from uploaded images.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self.pipeline = PreprocessingPipeline(config.preprocessing)
        self.engine = TesseractEngine(
            tesseract_cmd=config.ocr.tesseract_cmd,
            data_path=config.ocr.data_path,
            language=config.ocr.language,
        )

    def extract_text(self, upload: Upload, options: OcrOptions | None = None) -> str:
        """Extract text from an uploaded image.

        Args:
            upload: The uploaded image.
            options: OCR options; the default preset when omitted.

        Returns:
            Recognized text with surrounding whitespace removed, or an
            empty string when nothing was recognized.

        Raises:
            EmptyInputError: If the upload has no content.
            InvalidImageError: If the bytes do not decode to an image.
            EngineFailureError: If Tesseract fails during recognition.
        """
        options = options or OcrOptions.default()
        check_upload(upload)

        logger.info(
            "Starting OCR for file: %s (size: %d bytes)", upload.filename, upload.size
        )

        try:
            image = decode_image(upload.data)
        except InvalidImageError as exc:
            exc.filename = upload.filename
            raise

        logger.info("Original image size: %dx%d", image.shape[1], image.shape[0])
        logger.debug("Using %s", options.describe())

        processed = self.pipeline.process(image, options)

        try:
            text = self.engine.recognize(processed, options)
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as exc:
            logger.error("OCR failed for file: %s: %s", upload.filename, exc)
            raise EngineFailureError(
                f"OCR processing failed: {exc}", upload.filename
            ) from exc

        text = (text or "").strip()
        logger.info("OCR completed successfully. Extracted %d characters", len(text))
        return text

    def extract_document(self, upload: Upload) -> str:
        return self.extract_text(upload, OcrOptions.document())

    def extract_single_block(self, upload: Upload) -> str:
        return self.extract_text(upload, OcrOptions.single_text_block())

    def extract_high_accuracy(self, upload: Upload) -> str:
        return self.extract_text(upload, OcrOptions.high_accuracy())

    def extract_numbers_only(self, upload: Upload) -> str:
        return self.extract_text(upload, OcrOptions.numbers_only())

    def is_available(self) -> bool:
        return self.engine.is_available()
