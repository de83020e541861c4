"""Launch the Media Catalog API with uvicorn."""
import logging

import uvicorn
from fastapi.routing import APIRoute

from media_catalog.core.config import settings
from media_catalog.core.logging_config import configure_logging
from media_catalog.main import app

logger = logging.getLogger(__name__)


def list_endpoints() -> list[tuple[str, str]]:
    """(methods, path) for every API route, in registration order."""
    return [
        (",".join(sorted(route.methods)), route.path)
        for route in app.routes
        if isinstance(route, APIRoute)
    ]


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    for methods, path in list_endpoints():
        logger.info("%-12s %s", methods, path)
    logger.info("Server running on: http://localhost:%d/", settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
