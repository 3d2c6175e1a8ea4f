"""Pydantic response schemas for the JSON endpoints."""

from pydantic import BaseModel


class OcrResponse(BaseModel):
    """Response schema for an OCR request."""

    success: bool
    filename: str | None
    file_size: str
    mode: str
    text: str
    processing_time_ms: float


class VisionResponse(BaseModel):
    """Response schema for an image analysis request."""

    success: bool
    filename: str | None
    file_size: str
    question: str | None = None
    analysis: str
    processing_time_ms: float


class PresetInfo(BaseModel):
    """Option values of a named OCR preset."""

    name: str
    page_seg_mode: int | None
    engine_mode: int | None
    dpi: int | None
    grayscale: bool
    enhance_contrast: bool
    denoise: bool
    sharpen: bool
    contrast_factor: float
    preserve_interword_spaces: bool
    char_whitelist: str | None


class PresetsResponse(BaseModel):
    """Response schema listing the OCR presets."""

    presets: list[PresetInfo]


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    tesseract_available: bool
    vision_available: bool
