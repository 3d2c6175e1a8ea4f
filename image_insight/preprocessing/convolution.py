"""3x3 convolution filters for noise reduction and sharpening.

Pixels on the outer one-pixel border are copied from the input unchanged,
since the kernel would extend past the image there.
"""

import cv2
import numpy as np

from image_insight.utils.logger import get_logger

logger = get_logger(__name__)

BOX_KERNEL = np.full((3, 3), 1.0 / 9.0, dtype=np.float32)

SHARPEN_KERNEL = np.array(
    [
        [0.0, -1.0, 0.0],
        [-1.0, 5.0, -1.0],
        [0.0, -1.0, 0.0],
    ],
    dtype=np.float32,
)


def convolve(image: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """Convolve an image with a 3x3 kernel, leaving border pixels untouched.

    Args:
        image: Input image (BGR or grayscale, uint8).
        kernel: 3x3 float kernel.

    Returns:
        Filtered image with the same shape and dtype.
    """
    height, width = image.shape[:2]
    if height < 3 or width < 3:
        return image.copy()

    result = cv2.filter2D(image, -1, kernel, borderType=cv2.BORDER_REPLICATE)
    result[0, :] = image[0, :]
    result[-1, :] = image[-1, :]
    result[:, 0] = image[:, 0]
    result[:, -1] = image[:, -1]
    return result


def denoise(image: np.ndarray) -> np.ndarray:
    """Smooth an image with a uniform 3x3 box blur."""
    result = convolve(image, BOX_KERNEL)
    logger.debug("Applied box blur denoise")
    return result


def sharpen(image: np.ndarray) -> np.ndarray:
    """Sharpen an image with a 3x3 Laplacian-based kernel."""
    result = convolve(image, SHARPEN_KERNEL)
    logger.debug("Applied sharpen kernel")
    return result
