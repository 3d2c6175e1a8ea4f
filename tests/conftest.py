"""Shared test fixtures for the image insight test suite."""

import io
from collections.abc import Callable
from pathlib import Path

import numpy as np
import pytest
from PIL import Image


def _encode(array: np.ndarray, fmt: str = "PNG") -> bytes:
    buf = io.BytesIO()
    Image.fromarray(array).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def encode_image() -> Callable[..., bytes]:
    """Return a helper encoding a numpy array (RGB or grayscale) as image bytes."""
    return _encode


@pytest.fixture
def sample_image() -> np.ndarray:
    """Create a simple synthetic grayscale test image."""
    image = np.zeros((200, 300), dtype=np.uint8)
    image[50:150, 50:250] = 255
    return image


@pytest.fixture
def sample_color_image() -> np.ndarray:
    """Create a simple synthetic BGR test image."""
    image = np.zeros((200, 300, 3), dtype=np.uint8)
    image[50:150, 50:250] = (40, 120, 200)
    return image


@pytest.fixture
def png_bytes() -> bytes:
    """A small RGB PNG image as bytes."""
    image = np.zeros((100, 200, 3), dtype=np.uint8)
    image[20:80, 40:160] = (255, 255, 255)
    return _encode(image)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent
