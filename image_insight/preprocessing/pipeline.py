"""Image preprocessing pipeline applied before OCR.

Runs resize, grayscale, contrast, denoise and sharpen in that fixed order,
each step consuming the previous step's output.
"""

import numpy as np

from image_insight.ocr.options import OcrOptions
from image_insight.utils.config import PreprocessingConfig
from image_insight.utils.logger import get_logger

from .color import enhance_contrast, to_grayscale
from .convolution import denoise, sharpen
from .resize import resize_to_threshold

logger = get_logger(__name__)


class PreprocessingPipeline:
    """Configurable image preprocessing pipeline.

    Resizing is governed by the configuration; the remaining steps are
    toggled per call by ``OcrOptions``.

    Args:
        config: Preprocessing configuration (global switch and resize threshold).
    """

    def __init__(self, config: PreprocessingConfig) -> None:
        self.config = config

    def process(self, image: np.ndarray, options: OcrOptions) -> np.ndarray:
        """Run the preprocessing steps enabled for this call.

        Args:
            image: Decoded input image (BGR or grayscale).
            options: OCR options selecting the optional steps.

        Returns:
            The transformed image, or the input itself when preprocessing
            is disabled.
        """
        if not self.config.enabled:
            return image

        applied: list[str] = []
        result = image.copy()

        height, width = result.shape[:2]
        threshold = self.config.resize_threshold
        if width > threshold or height > threshold:
            result = resize_to_threshold(result, threshold)
            applied.append("resize")

        if options.grayscale:
            result = to_grayscale(result)
            applied.append("grayscale")

        if options.enhance_contrast:
            result = enhance_contrast(result, options.contrast_factor)
            applied.append("contrast")

        if options.denoise:
            result = denoise(result)
            applied.append("denoise")

        if options.sharpen:
            result = sharpen(result)
            applied.append("sharpen")

        logger.info(
            "Preprocessing complete: steps=[%s], size %dx%d",
            ", ".join(applied),
            result.shape[1],
            result.shape[0],
        )
        return result
