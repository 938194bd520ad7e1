import os

import uvicorn

from constants import ENVIRONMENT
from logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def main():
    # Configure logging before the app module is imported by uvicorn
    setup_logging(log_level=os.getenv("LOG_LEVEL", "INFO"), log_file=os.getenv("LOG_FILE", None))

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", 8000))
    reload = ENVIRONMENT != "production"
    logger.info(f"Starting room gate on {host}:{port} (environment={ENVIRONMENT}, reload={reload})")
    uvicorn.run("app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    main()
