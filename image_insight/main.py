"""Application entry point for the Image Insight web server."""

import uvicorn

from image_insight.api.app import app
from image_insight.utils.config import load_config
from image_insight.utils.logger import setup_logging


def main() -> None:
    """Start the FastAPI application server."""
    config = load_config()
    setup_logging(config.log_level)
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
