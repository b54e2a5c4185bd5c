import logging

import uvicorn

from email_analyzer import create_app
from email_analyzer.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger("email_analyzer")

app = create_app()

if __name__ == "__main__":
    logger.info(f"Server running on port {settings.port}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Response mode: {settings.response_mode}")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
