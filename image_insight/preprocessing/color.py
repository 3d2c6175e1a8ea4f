"""Intensity transforms: grayscale conversion and contrast rescaling."""

import cv2
import numpy as np

from image_insight.utils.logger import get_logger

logger = get_logger(__name__)


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Convert a BGR or BGRA image to single-channel luminance.

    Args:
        image: Input image. Grayscale input is returned as a copy.

    Returns:
        Single-channel image.
    """
    if image.ndim == 2:
        return image.copy()
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)


def enhance_contrast(image: np.ndarray, factor: float) -> np.ndarray:
    """Multiply every pixel intensity by ``factor``.

    Results are rounded and clipped to the 0-255 range, channel by channel.

    Args:
        image: Input image (BGR or grayscale).
        factor: Contrast multiplier.

    Returns:
        Rescaled image.
    """
    result = cv2.convertScaleAbs(image, alpha=factor, beta=0)
    logger.debug("Rescaled intensities by %.2f", factor)
    return result
