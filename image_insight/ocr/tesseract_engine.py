"""Tesseract OCR engine wrapper.

Each recognition call passes its own configuration string to a new
Tesseract process, so per-call overrides never leak between calls.
"""

import shlex
from pathlib import Path

import cv2
import numpy as np
import pytesseract
from PIL import Image

from image_insight.utils.logger import get_logger

from .options import OcrOptions

logger = get_logger(__name__)


def build_config(options: OcrOptions, data_path: str | None = None) -> str:
    """Translate OCR options into a Tesseract command-line configuration.

    Only options that are set produce flags; everything else keeps the
    engine default.

    Args:
        options: Per-call OCR options.
        data_path: Tesseract data directory, if not the system default.

    Returns:
        Configuration string for ``pytesseract``.
    """
    parts: list[str] = []
    if data_path:
        parts.append(f"--tessdata-dir {shlex.quote(data_path)}")
    if options.page_seg_mode is not None:
        parts.append(f"--psm {int(options.page_seg_mode)}")
    if options.engine_mode is not None:
        parts.append(f"--oem {int(options.engine_mode)}")
    if options.dpi is not None:
        parts.append(f"-c user_defined_dpi={int(options.dpi)}")
    if options.preserve_interword_spaces:
        parts.append("-c preserve_interword_spaces=1")
    if options.char_whitelist:
        parts.append(
            "-c " + shlex.quote(f"tessedit_char_whitelist={options.char_whitelist}")
        )
    return " ".join(parts)


class TesseractEngine:
    """Wrapper around Tesseract OCR for plain text extraction.

    Args:
        tesseract_cmd: Path to the Tesseract executable.
            If ``None``, uses the system default.
        data_path: Directory holding the ``.traineddata`` files. Ignored
            with a warning when it does not exist.
        language: Tesseract language code, e.g. ``"eng"`` or ``"kor+eng"``.
    """

    def __init__(
        self,
        tesseract_cmd: str | None = None,
        data_path: str | None = None,
        language: str = "eng",
    ) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

        self.data_path: str | None = None
        if data_path:
            if Path(data_path).is_dir():
                self.data_path = data_path
                logger.info("Tesseract data path set to: %s", data_path)
            else:
                logger.warning(
                    "Tesseract data path not found: %s. Using system default.",
                    data_path,
                )
        self.language = language

    def recognize(self, image: np.ndarray, options: OcrOptions) -> str:
        """Run OCR on an image with the given per-call options.

        Args:
            image: Input image as a numpy array (BGR or grayscale).
            options: OCR options supplying the engine overrides.

        Returns:
            Raw text as reported by Tesseract.

        Raises:
            pytesseract.TesseractError: If recognition fails.
        """
        config = build_config(options, self.data_path)
        logger.debug("Running Tesseract with lang=%s config=%r", self.language, config)

        pil_image = Image.fromarray(_to_rgb(image))
        return pytesseract.image_to_string(pil_image, lang=self.language, config=config)

    def is_available(self) -> bool:
        """Return whether the Tesseract binary can be executed."""
        try:
            pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError:
            return False
        return True


def _to_rgb(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        return image
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
