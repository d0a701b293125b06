"""FastAPI application: API router plus the static viewer page."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from sciviz import config
from sciviz.api.routes import router

# Configure logging on import, before anything else logs
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)-5s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger(__name__)

app = FastAPI(title="SciViz", description="Interactive scientific visualizations from text and images")

app.include_router(router)

_static_dir = Path(__file__).resolve().parent.parent / "static"


@app.get("/", include_in_schema=False)
def index():
    return FileResponse(_static_dir / "index.html")


# Must be mounted after all API routes
app.mount("/static", StaticFiles(directory=str(_static_dir)), name="static")


def main() -> None:
    import uvicorn

    if not config.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY is not set; generation requests will fail until it is")
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
