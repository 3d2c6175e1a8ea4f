"""OCR option sets and named presets.

An ``OcrOptions`` value describes how one image is preprocessed and which
Tesseract settings apply to its recognition. Optional fields left as
``None`` keep the engine default.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum


class PageSegMode(IntEnum):
    """Tesseract page segmentation modes used by the presets."""

    AUTO_OSD = 1
    AUTO = 3
    SINGLE_BLOCK = 6
    SINGLE_LINE = 7
    SINGLE_WORD = 8


class EngineMode(IntEnum):
    """Tesseract OCR engine modes used by the presets."""

    LEGACY = 0
    LSTM_LEGACY = 1


DIGITS_WHITELIST = "0123456789.,"
ENGLISH_WHITELIST = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz "


@dataclass(frozen=True)
class OcrOptions:
    """Preprocessing toggles and engine overrides for a single OCR call."""

    page_seg_mode: int | None = None
    engine_mode: int | None = None
    dpi: int | None = None
    grayscale: bool = False
    enhance_contrast: bool = False
    denoise: bool = False
    sharpen: bool = False
    contrast_factor: float = 1.2
    preserve_interword_spaces: bool = False
    char_whitelist: str | None = None

    @classmethod
    def default(cls) -> "OcrOptions":
        return cls()

    @classmethod
    def document(cls) -> "OcrOptions":
        """Scanned pages such as A4 documents."""
        return cls(
            page_seg_mode=PageSegMode.AUTO_OSD,
            enhance_contrast=True,
            contrast_factor=1.3,
            denoise=True,
        )

    @classmethod
    def single_text_block(cls) -> "OcrOptions":
        """A single uniform block of text, e.g. signs and labels."""
        return cls(
            page_seg_mode=PageSegMode.SINGLE_BLOCK,
            sharpen=True,
            contrast_factor=1.4,
        )

    @classmethod
    def single_line(cls) -> "OcrOptions":
        """One line of text such as a title."""
        return cls(page_seg_mode=PageSegMode.SINGLE_LINE, sharpen=True)

    @classmethod
    def single_word(cls) -> "OcrOptions":
        """A single word, e.g. a licence plate."""
        return cls(
            page_seg_mode=PageSegMode.SINGLE_WORD,
            sharpen=True,
            contrast_factor=1.5,
        )

    @classmethod
    def high_accuracy(cls) -> "OcrOptions":
        """Slower, more thorough recognition for important documents."""
        return cls(
            page_seg_mode=PageSegMode.AUTO_OSD,
            engine_mode=EngineMode.LSTM_LEGACY,
            dpi=300,
            contrast_factor=1.4,
            sharpen=True,
            denoise=True,
        )

    @classmethod
    def fast(cls) -> "OcrOptions":
        """Legacy engine on a grayscale image, trading accuracy for speed."""
        return cls(
            page_seg_mode=PageSegMode.SINGLE_BLOCK,
            engine_mode=EngineMode.LEGACY,
            grayscale=True,
        )

    @classmethod
    def numbers_only(cls) -> "OcrOptions":
        """Digits and separators only, e.g. receipt amounts."""
        return cls(
            page_seg_mode=PageSegMode.SINGLE_BLOCK,
            char_whitelist=DIGITS_WHITELIST,
            contrast_factor=1.5,
            sharpen=True,
        )

    @classmethod
    def english_only(cls) -> "OcrOptions":
        """ASCII letters and spaces only."""
        return cls(
            page_seg_mode=PageSegMode.SINGLE_BLOCK,
            char_whitelist=ENGLISH_WHITELIST,
        )

    @classmethod
    def from_preset(cls, name: str) -> "OcrOptions":
        """Build the options for a named preset.

        Args:
            name: One of the keys of ``PRESETS``.

        Returns:
            The preset's options.

        Raises:
            ValueError: If the preset name is unknown.
        """
        try:
            factory = PRESETS[name]
        except KeyError:
            raise ValueError(f"Unknown OCR preset: {name}") from None
        return factory()

    def describe(self) -> str:
        return (
            f"OcrOptions(page_seg_mode={self.page_seg_mode}, "
            f"engine_mode={self.engine_mode}, dpi={self.dpi}, "
            f"contrast={self.contrast_factor:.1f})"
        )


PRESETS: dict[str, Callable[[], OcrOptions]] = {
    "default": OcrOptions.default,
    "document": OcrOptions.document,
    "single_text_block": OcrOptions.single_text_block,
    "single_line": OcrOptions.single_line,
    "single_word": OcrOptions.single_word,
    "high_accuracy": OcrOptions.high_accuracy,
    "fast": OcrOptions.fast,
    "numbers_only": OcrOptions.numbers_only,
    "english_only": OcrOptions.english_only,
}
