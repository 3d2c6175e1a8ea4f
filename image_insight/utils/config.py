"""Configuration management for the image insight service.

Loads and validates YAML configuration with sensible defaults for the
OCR engine, preprocessing, the vision model, uploads, and the web server.
"""

import logging
import tempfile
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class OCRConfig(BaseModel):
    """Configuration for the Tesseract OCR engine."""

    tesseract_cmd: str | None = None
    data_path: str | None = None
    language: str = "eng"


class PreprocessingConfig(BaseModel):
    """Configuration for the image preprocessing pipeline."""

    enabled: bool = True
    resize_threshold: int = Field(default=2000, gt=0)


class VisionConfig(BaseModel):
    """Configuration for the Ollama-served vision model."""

    host: str = "http://localhost:11434"
    model: str = "llava"
    language: str = "English"
    health_timeout: float = Field(default=5.0, gt=0)


class UploadConfig(BaseModel):
    """Configuration for uploaded files."""

    directory: str = "uploads"
    max_size_mb: float = Field(default=10.0, gt=0)


class ServerConfig(BaseModel):
    """Configuration for the HTTP server."""

    host: str = "0.0.0.0"
    port: int = 8000
    secret_key: str = "change-me"


class AppConfig(BaseModel):
    """Top-level application configuration."""

    ocr: OCRConfig = Field(default_factory=OCRConfig)
    preprocessing: PreprocessingConfig = Field(default_factory=PreprocessingConfig)
    vision: VisionConfig = Field(default_factory=VisionConfig)
    upload: UploadConfig = Field(default_factory=UploadConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        return AppConfig(**raw)

    logger.info("No config file found at %s, using defaults", path)
    return AppConfig()


def ensure_upload_directory(directory: str) -> Path:
    """Create the upload directory if needed.

    Falls back to the system temporary directory when the configured
    one cannot be created.

    Args:
        directory: Configured upload directory.

    Returns:
        The directory that uploads should use.
    """
    path = Path(directory)
    try:
        if not path.exists():
            path.mkdir(parents=True)
            logger.info("Created upload directory: %s", path)
        return path
    except OSError as exc:
        logger.error("Failed to create upload directory %s: %s", path, exc)
        return Path(tempfile.gettempdir())
