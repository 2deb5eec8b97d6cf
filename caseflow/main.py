"""Process entry point for the case management API.

    caseflow                                  # console script
    uvicorn caseflow.main:app --reload        # any ASGI server
"""

import structlog
import uvicorn

from caseflow.api.app import create_app
from caseflow.api.dependencies import get_settings

app = create_app()

logger: structlog.stdlib.BoundLogger = structlog.get_logger()


def main() -> None:
    """Serve the API with uvicorn using host, port and log level from Settings."""
    settings = get_settings()
    logger.info(
        "serving",
        host=settings.api_host,
        port=settings.api_port,
        prefix=settings.api_prefix,
    )
    uvicorn.run(
        "caseflow.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        reload=settings.debug,
        proxy_headers=True,
    )


if __name__ == "__main__":
    main()
