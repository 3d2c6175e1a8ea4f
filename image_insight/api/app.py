"""FastAPI application for the Image Insight service.

Serves the HTML pages for OCR and image analysis, plus a small JSON API
exposing the same operations, the OCR presets, and a health check.
"""

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from pathlib import Path
from typing import Annotated

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette.concurrency import run_in_threadpool
from starlette.middleware.sessions import SessionMiddleware

from image_insight import __version__
from image_insight.errors import (
    EmptyInputError,
    EngineFailureError,
    FileTooLargeError,
    ImageInsightError,
    InvalidImageError,
    ModelFailureError,
    UnsupportedFormatError,
)
from image_insight.ocr.formats import UNSUPPORTED_FORMAT_MESSAGE, is_supported_format
from image_insight.ocr.options import PRESETS, OcrOptions
from image_insight.ocr.service import OcrService
from image_insight.upload import Upload, check_size, check_upload
from image_insight.utils.config import AppConfig, ensure_upload_directory, load_config
from image_insight.utils.logger import get_logger
from image_insight.vision.analyzer import VisionAnalyzer

from .schemas import (
    HealthResponse,
    OcrResponse,
    PresetInfo,
    PresetsResponse,
    VisionResponse,
)

logger = get_logger(__name__)

_settings = load_config()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    app.state.upload_dir = ensure_upload_directory(_settings.upload.directory)
    yield


app = FastAPI(
    title="Image Insight",
    description="Extract text from images and describe them with a vision model",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(SessionMiddleware, secret_key=_settings.server.secret_key)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

_FLASH_KEY = "error"

_STATUS_CODES: dict[type[ImageInsightError], int] = {
    EmptyInputError: 400,
    UnsupportedFormatError: 400,
    InvalidImageError: 400,
    FileTooLargeError: 413,
    EngineFailureError: 502,
    ModelFailureError: 502,
}


def _get_services() -> tuple[AppConfig, OcrService, VisionAnalyzer]:
    """Initialize and return the processing services.

    Returns:
        Tuple of (config, ocr_service, vision_analyzer).
    """
    config = load_config()
    return config, OcrService(config), VisionAnalyzer(config.vision)


async def _read_upload(file: UploadFile | None, max_size_mb: float) -> Upload:
    """Read an uploaded file, refusing oversized ones before loading them."""
    if file is None:
        return Upload(filename=None, content_type=None, data=b"")
    if file.size is not None:
        check_size(file.size, max_size_mb, file.filename)
    data = await file.read()
    return Upload(filename=file.filename, content_type=file.content_type, data=data)


def _validate_for_ocr(upload: Upload, config: AppConfig) -> None:
    """Reject uploads that must not reach the OCR engine."""
    check_upload(upload, config.upload.max_size_mb)
    if not is_supported_format(upload.content_type):
        raise UnsupportedFormatError(UNSUPPORTED_FORMAT_MESSAGE, upload.filename)


def _error_message(exc: ImageInsightError, action: str) -> str:
    if isinstance(exc, EmptyInputError):
        return "Please select an image file."
    if isinstance(exc, (UnsupportedFormatError, FileTooLargeError)):
        return exc.message
    return f"An error occurred while {action}: {exc.message}"


def _redirect_with_error(request: Request, url: str, message: str) -> RedirectResponse:
    request.session[_FLASH_KEY] = message
    return RedirectResponse(url=url, status_code=303)


def _http_error(exc: ImageInsightError) -> HTTPException:
    status_code = _STATUS_CODES.get(type(exc), 500)
    return HTTPException(status_code=status_code, detail=exc.message)


@app.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "index.html")


@app.get("/ocr", response_class=HTMLResponse)
async def ocr_page(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "ocr.html",
        {"error": request.session.pop(_FLASH_KEY, None), "presets": list(PRESETS)},
    )


@app.post("/ocr/process", response_class=HTMLResponse, response_model=None)
async def process_ocr(
    request: Request,
    image: Annotated[UploadFile | None, File()] = None,
    mode: Annotated[str, Form()] = "default",
) -> HTMLResponse | RedirectResponse:
    """Run OCR on an uploaded image and render the extracted text."""
    if mode not in PRESETS:
        return _redirect_with_error(request, "/ocr", f"Unknown OCR mode: {mode}")

    config, ocr_service, _ = _get_services()
    try:
        upload = await _read_upload(image, config.upload.max_size_mb)
        _validate_for_ocr(upload, config)
        text = await run_in_threadpool(
            ocr_service.extract_text, upload, OcrOptions.from_preset(mode)
        )
    except ImageInsightError as exc:
        logger.error("OCR processing failed for %s: %s", exc.filename, exc.message)
        return _redirect_with_error(
            request, "/ocr", _error_message(exc, "extracting text")
        )

    return templates.TemplateResponse(
        request,
        "ocr.html",
        {
            "extracted_text": text,
            "file_name": upload.filename,
            "file_size": upload.display_size,
            "mode": mode,
            "presets": list(PRESETS),
        },
    )


@app.get("/vision", response_class=HTMLResponse)
async def vision_page(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(
        request, "vision.html", {"error": request.session.pop(_FLASH_KEY, None)}
    )


@app.post("/vision/analyze", response_class=HTMLResponse, response_model=None)
async def analyze_image(
    request: Request,
    image: Annotated[UploadFile | None, File()] = None,
    question: Annotated[str | None, Form()] = None,
) -> HTMLResponse | RedirectResponse:
    """Describe an uploaded image, or answer a question about it."""
    question = question.strip() if question and question.strip() else None

    config, _, analyzer = _get_services()
    try:
        upload = await _read_upload(image, config.upload.max_size_mb)
        check_upload(upload, config.upload.max_size_mb)
        analysis = await run_in_threadpool(analyzer.analyze, upload, question)
    except ImageInsightError as exc:
        logger.error("Image analysis failed for %s: %s", exc.filename, exc.message)
        return _redirect_with_error(
            request, "/vision", _error_message(exc, "analyzing the image")
        )

    return templates.TemplateResponse(
        request,
        "vision.html",
        {
            "analysis": analysis,
            "question": question,
            "file_name": upload.filename,
            "file_size": upload.display_size,
        },
    )


@app.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return service health and the availability of external engines."""
    _, ocr_service, analyzer = _get_services()
    return HealthResponse(
        status="healthy",
        version=__version__,
        tesseract_available=ocr_service.is_available(),
        vision_available=analyzer.is_available(),
    )


@app.get("/api/presets", response_model=PresetsResponse)
async def list_presets() -> PresetsResponse:
    """List the OCR presets with their option values."""
    return PresetsResponse(
        presets=[
            PresetInfo(name=name, **asdict(factory()))
            for name, factory in PRESETS.items()
        ]
    )


@app.post("/api/ocr", response_model=OcrResponse)
async def api_ocr(
    image: Annotated[UploadFile | None, File()] = None,
    mode: Annotated[str, Form()] = "default",
) -> OcrResponse:
    """Extract text from an uploaded image.

    Args:
        image: Uploaded image (JPEG, PNG, BMP, TIFF or GIF).
        mode: Name of the OCR preset to apply.

    Returns:
        The extracted text with request metadata.
    """
    start_time = time.time()

    if mode not in PRESETS:
        raise HTTPException(status_code=400, detail=f"Unknown OCR mode: {mode}")

    config, ocr_service, _ = _get_services()
    try:
        upload = await _read_upload(image, config.upload.max_size_mb)
        _validate_for_ocr(upload, config)
        text = await run_in_threadpool(
            ocr_service.extract_text, upload, OcrOptions.from_preset(mode)
        )
    except ImageInsightError as exc:
        logger.error("OCR processing failed for %s: %s", exc.filename, exc.message)
        raise _http_error(exc) from exc

    return OcrResponse(
        success=True,
        filename=upload.filename,
        file_size=upload.display_size,
        mode=mode,
        text=text,
        processing_time_ms=(time.time() - start_time) * 1000,
    )


@app.post("/api/vision", response_model=VisionResponse)
async def api_vision(
    image: Annotated[UploadFile | None, File()] = None,
    question: Annotated[str | None, Form()] = None,
) -> VisionResponse:
    """Describe an uploaded image, or answer a question about it.

    Args:
        image: Uploaded image.
        question: Optional question about the image.

    Returns:
        The model's analysis with request metadata.
    """
    start_time = time.time()
    question = question.strip() if question and question.strip() else None

    config, _, analyzer = _get_services()
    try:
        upload = await _read_upload(image, config.upload.max_size_mb)
        check_upload(upload, config.upload.max_size_mb)
        analysis = await run_in_threadpool(analyzer.analyze, upload, question)
    except ImageInsightError as exc:
        logger.error("Image analysis failed for %s: %s", exc.filename, exc.message)
        raise _http_error(exc) from exc

    return VisionResponse(
        success=True,
        filename=upload.filename,
        file_size=upload.display_size,
        question=question,
        analysis=analysis,
        processing_time_ms=(time.time() - start_time) * 1000,
    )
