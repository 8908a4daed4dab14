"""Run the service with uvicorn: ``python -m demo_service``."""

import uvicorn

from demo_service.config.settings import get_settings
from demo_service.main import app


def main() -> None:
    settings = get_settings()
    # The request middleware already writes one access record per request.
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None, access_log=False)


if __name__ == "__main__":
    main()
