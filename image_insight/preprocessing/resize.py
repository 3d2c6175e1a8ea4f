"""Downscaling of oversized images before OCR."""

import cv2
import numpy as np

from image_insight.utils.logger import get_logger

logger = get_logger(__name__)


def resize_to_threshold(image: np.ndarray, threshold: int) -> np.ndarray:
    """Shrink an image so that its larger side equals ``threshold``.

    Aspect ratio is preserved and bicubic interpolation is used. Images
    already within the threshold are returned as an unchanged copy; the
    image is never enlarged.

    Args:
        image: Input image (BGR or grayscale).
        threshold: Maximum allowed size in pixels for either side.

    Returns:
        Resized image.
    """
    height, width = image.shape[:2]
    scale = min(threshold / width, threshold / height, 1.0)
    if scale >= 1.0:
        return image.copy()

    if width >= height:
        new_width = threshold
        new_height = max(1, int(height * scale))
    else:
        new_height = threshold
        new_width = max(1, int(width * scale))

    result = cv2.resize(image, (new_width, new_height), interpolation=cv2.INTER_CUBIC)
    logger.debug(
        "Resized image from %dx%d to %dx%d", width, height, new_width, new_height
    )
    return result
