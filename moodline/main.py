from __future__ import annotations

import uvicorn

from moodline.app.core.config import get_settings
from moodline.app.core.logging import configure_logging
from moodline.app.main import app


def run() -> None:
    """Serve Moodline on ``HOST``/``PORT`` with the JSON log handlers.

    uvicorn's own logging config is disabled so its access and error lines
    go through the same root handlers as the application.
    """

    settings = get_settings()
    configure_logging()
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
