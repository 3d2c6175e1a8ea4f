"""Image description and question answering through an Ollama vision model."""

import ollama

from image_insight.errors import ModelFailureError
from image_insight.upload import Upload, check_upload
from image_insight.utils.config import VisionConfig
from image_insight.utils.logger import get_logger

from .prompts import build_prompt

logger = get_logger(__name__)


class VisionAnalyzer:
    """Sends an image and a prompt to a multimodal chat model.

    The image bytes are forwarded as uploaded, without decoding or
    preprocessing. Each call is a single-turn request and is never retried.

    Args:
        config: Vision model configuration.
        client: Ollama client to use for both chat and the availability
            check. Built from ``config.host`` when omitted, with a separate
            client bounded by ``config.health_timeout`` for the check.
    """

    def __init__(
        self, config: VisionConfig, client: ollama.Client | None = None
    ) -> None:
        self.config = config
        self.client = client or ollama.Client(host=config.host)
        self.health_client = client or ollama.Client(
            host=config.host, timeout=config.health_timeout
        )

    def analyze(self, upload: Upload, question: str | None = None) -> str:
        """Describe an image, or answer a question about it.

        Args:
            upload: The uploaded image.
            question: Optional question about the image.

        Returns:
            The model's response text, unmodified.

        Raises:
            EmptyInputError: If the upload has no content.
            ModelFailureError: If the model call fails or returns no text.
        """
        check_upload(upload)

        if question and question.strip():
            logger.info(
                "Starting targeted image analysis for file: %s with question: %s",
                upload.filename,
                question,
            )
        else:
            logger.info(
                "Starting image analysis for file: %s (size: %d bytes, type: %s)",
                upload.filename,
                upload.size,
                upload.content_type,
            )

        prompt = build_prompt(question, self.config.language)

        try:
            response = self.client.chat(
                model=self.config.model,
                messages=[
                    {
                        "role": "user",
                        "content": prompt,
                        "images": [upload.data],
                    }
                ],
            )
        except Exception as exc:
            logger.error("Image analysis failed for file: %s: %s", upload.filename, exc)
            raise ModelFailureError(
                f"Image analysis failed: {exc}", upload.filename
            ) from exc

        analysis = _response_text(response)
        if analysis is None:
            logger.error(
                "Image analysis returned no text for file: %s", upload.filename
            )
            raise ModelFailureError(
                "Image analysis failed: the model returned no text", upload.filename
            )

        logger.info(
            "Image analysis completed successfully. Response length: %d characters",
            len(analysis),
        )
        return analysis

    def is_available(self) -> bool:
        """Return whether the Ollama server answers."""
        try:
            self.health_client.list()
        except Exception as exc:
            logger.warning("Vision model host unreachable: %s", exc)
            return False
        return True


def _response_text(response: object) -> str | None:
    try:
        content = response["message"]["content"]
    except (KeyError, TypeError):
        return None
    return content if isinstance(content, str) else None
