"""Tests for the image preprocessing transforms and pipeline."""

import cv2
import numpy as np
import pytest

from image_insight.ocr.options import OcrOptions
from image_insight.preprocessing.color import enhance_contrast, to_grayscale
from image_insight.preprocessing.convolution import (
    BOX_KERNEL,
    SHARPEN_KERNEL,
    convolve,
    denoise,
    sharpen,
)
from image_insight.preprocessing.pipeline import PreprocessingPipeline
from image_insight.preprocessing.resize import resize_to_threshold
from image_insight.utils.config import PreprocessingConfig


def _make_spike_image(size: int = 9, background: int = 100) -> np.ndarray:
    """A single bright pixel in the middle of a flat field."""
    image = np.full((size, size), background, dtype=np.uint8)
    image[size // 2, size // 2] = 255
    return image


def _make_random_image(height: int = 12, width: int = 16) -> np.ndarray:
    rng = np.random.default_rng(7)
    return rng.integers(0, 256, size=(height, width), dtype=np.uint8)


class TestResize:
    """Tests for threshold-based downscaling."""

    def test_landscape_image_downscaled(self) -> None:
        image = np.zeros((300, 400, 3), dtype=np.uint8)
        result = resize_to_threshold(image, 200)
        assert result.shape == (150, 200, 3)

    def test_portrait_image_downscaled(self) -> None:
        image = np.zeros((500, 250), dtype=np.uint8)
        result = resize_to_threshold(image, 200)
        assert result.shape == (200, 100)

    def test_aspect_ratio_preserved(self) -> None:
        image = np.zeros((3000, 4000), dtype=np.uint8)
        result = resize_to_threshold(image, 2000)
        height, width = result.shape
        assert max(height, width) == 2000
        assert width / height == pytest.approx(4000 / 3000, rel=0.01)

    def test_one_side_over_threshold(self) -> None:
        image = np.zeros((100, 300), dtype=np.uint8)
        result = resize_to_threshold(image, 200)
        assert result.shape[1] == 200
        assert result.shape[0] == 66

    def test_small_image_unchanged(self, sample_color_image: np.ndarray) -> None:
        result = resize_to_threshold(sample_color_image, 2000)
        assert result is not sample_color_image
        assert np.array_equal(result, sample_color_image)

    def test_image_at_threshold_unchanged(self) -> None:
        image = np.ones((200, 200), dtype=np.uint8)
        result = resize_to_threshold(image, 200)
        assert np.array_equal(result, image)

    def test_uses_bicubic_interpolation(self) -> None:
        image = _make_random_image(40, 60)
        expected = cv2.resize(image, (30, 20), interpolation=cv2.INTER_CUBIC)
        result = resize_to_threshold(image, 30)
        assert np.array_equal(result, expected)


class TestColorTransforms:
    """Tests for grayscale conversion and contrast rescaling."""

    def test_grayscale_from_color(self, sample_color_image: np.ndarray) -> None:
        result = to_grayscale(sample_color_image)
        assert result.ndim == 2
        assert result.shape == sample_color_image.shape[:2]
        expected = cv2.cvtColor(sample_color_image, cv2.COLOR_BGR2GRAY)
        assert np.array_equal(result, expected)

    def test_grayscale_from_bgra(self) -> None:
        image = np.zeros((10, 10, 4), dtype=np.uint8)
        image[..., 3] = 255
        assert to_grayscale(image).shape == (10, 10)

    def test_grayscale_passthrough(self, sample_image: np.ndarray) -> None:
        result = to_grayscale(sample_image)
        assert result is not sample_image
        assert np.array_equal(result, sample_image)

    def test_contrast_scales_intensities(self) -> None:
        image = np.array([[0, 50, 100], [120, 170, 200]], dtype=np.uint8)
        result = enhance_contrast(image, 1.5)
        expected = np.array([[0, 75, 150], [180, 255, 255]], dtype=np.uint8)
        assert np.array_equal(result, expected)

    def test_contrast_preserves_shape_and_dtype(
        self, sample_color_image: np.ndarray
    ) -> None:
        result = enhance_contrast(sample_color_image, 1.2)
        assert result.shape == sample_color_image.shape
        assert result.dtype == np.uint8

    def test_contrast_factor_one_is_identity(self, sample_image: np.ndarray) -> None:
        assert np.array_equal(enhance_contrast(sample_image, 1.0), sample_image)


class TestConvolution:
    """Tests for the 3x3 denoise and sharpen filters."""

    def test_kernels(self) -> None:
        assert BOX_KERNEL.sum() == pytest.approx(1.0)
        assert SHARPEN_KERNEL.sum() == pytest.approx(1.0)
        assert SHARPEN_KERNEL[1, 1] == 5.0

    def test_border_pixels_untouched(self) -> None:
        image = _make_random_image()
        for result in (denoise(image), sharpen(image)):
            assert np.array_equal(result[0, :], image[0, :])
            assert np.array_equal(result[-1, :], image[-1, :])
            assert np.array_equal(result[:, 0], image[:, 0])
            assert np.array_equal(result[:, -1], image[:, -1])

    def test_denoise_interior_is_box_mean(self) -> None:
        image = _make_random_image()
        result = denoise(image)
        window = image[4:7, 5:8].astype(np.float64)
        assert result[5, 6] == int(np.round(window.mean()))

    def test_sharpen_flat_field_unchanged(self) -> None:
        image = np.full((6, 6), 90, dtype=np.uint8)
        assert np.array_equal(sharpen(image), image)

    def test_sharpen_clips_to_valid_range(self) -> None:
        result = sharpen(_make_spike_image())
        assert result[4, 4] == 255
        assert result[4, 5] == 0

    def test_color_image_supported(self, sample_color_image: np.ndarray) -> None:
        result = denoise(sample_color_image)
        assert result.shape == sample_color_image.shape

    def test_tiny_image_passthrough(self) -> None:
        image = np.array([[10, 200], [30, 40]], dtype=np.uint8)
        assert np.array_equal(convolve(image, SHARPEN_KERNEL), image)

    def test_returns_new_array(self) -> None:
        image = _make_random_image()
        original = image.copy()
        denoise(image)
        sharpen(image)
        assert np.array_equal(image, original)


class TestPreprocessingPipeline:
    """Tests for the ordered preprocessing pipeline."""

    def test_disabled_returns_input(self, sample_color_image: np.ndarray) -> None:
        pipeline = PreprocessingPipeline(PreprocessingConfig(enabled=False))
        options = OcrOptions(grayscale=True, sharpen=True)
        assert pipeline.process(sample_color_image, options) is sample_color_image

    def test_no_steps_returns_equal_copy(self, sample_color_image: np.ndarray) -> None:
        pipeline = PreprocessingPipeline(PreprocessingConfig())
        result = pipeline.process(sample_color_image, OcrOptions.default())
        assert result is not sample_color_image
        assert np.array_equal(result, sample_color_image)

    def test_resizes_above_threshold(self) -> None:
        pipeline = PreprocessingPipeline(PreprocessingConfig(resize_threshold=50))
        image = np.zeros((100, 200), dtype=np.uint8)
        result = pipeline.process(image, OcrOptions.default())
        assert result.shape == (25, 50)

    def test_grayscale_option(self, sample_color_image: np.ndarray) -> None:
        pipeline = PreprocessingPipeline(PreprocessingConfig())
        result = pipeline.process(sample_color_image, OcrOptions.fast())
        assert result.ndim == 2

    def test_grayscale_then_contrast(self, sample_color_image: np.ndarray) -> None:
        pipeline = PreprocessingPipeline(PreprocessingConfig())
        options = OcrOptions(grayscale=True, enhance_contrast=True, contrast_factor=1.5)
        result = pipeline.process(sample_color_image, options)
        expected = enhance_contrast(to_grayscale(sample_color_image), 1.5)
        assert np.array_equal(result, expected)

    def test_denoise_runs_before_sharpen(self) -> None:
        image = _make_spike_image()
        pipeline = PreprocessingPipeline(PreprocessingConfig())
        result = pipeline.process(image, OcrOptions(denoise=True, sharpen=True))

        denoise_first = sharpen(denoise(image))
        sharpen_first = denoise(sharpen(image))
        assert not np.array_equal(denoise_first, sharpen_first)
        assert np.array_equal(result, denoise_first)
        assert result[4, 4] == 117

    def test_contrast_uses_option_factor(self, sample_image: np.ndarray) -> None:
        pipeline = PreprocessingPipeline(PreprocessingConfig())
        result = pipeline.process(sample_image // 2, OcrOptions.document())
        expected = denoise(enhance_contrast(sample_image // 2, 1.3))
        assert np.array_equal(result, expected)

    def test_input_not_mutated(self, sample_color_image: np.ndarray) -> None:
        original = sample_color_image.copy()
        pipeline = PreprocessingPipeline(PreprocessingConfig(resize_threshold=100))
        pipeline.process(sample_color_image, OcrOptions.high_accuracy())
        assert np.array_equal(sample_color_image, original)
