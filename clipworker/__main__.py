import logging
import sys

import uvicorn
from pydantic import ValidationError

from clipworker.core.config import get_settings
from clipworker.core.logging import configure_logging

logger = logging.getLogger("clipworker")


def main() -> None:
    try:
        settings = get_settings()
    except ValidationError as e:
        configure_logging()
        logger.error("Missing Supabase credentials in environment variables.\n%s", e)
        sys.exit(1)

    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "clipworker.app:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
