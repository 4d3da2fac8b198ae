"""
HTTP serving layer: triggers a crawl and streams back the results file.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse

from . import __version__
from .crawler.scheduler import CrawlerScheduler
from .crawler.traversal import Fetcher
from .storage.results import ResultsWriter, ResultsError
from .utils.config import Config
from .utils.monitoring import CrawlerMonitor

logger = logging.getLogger(__name__)


def create_app(config: Config, fetcher: Optional[Fetcher] = None,
               monitor: Optional[CrawlerMonitor] = None) -> FastAPI:
    """Build the API application around a loaded configuration."""
    app = FastAPI(title="product_crawler API", version=__version__)
    writer = ResultsWriter()

    @app.get("/")
    async def crawl() -> FileResponse:
        output_file = Path(config.crawler.output_file)
        try:
            scheduler = CrawlerScheduler(config.crawler, fetcher=fetcher, monitor=monitor)
            results = await scheduler.crawl()
            writer.save(results, output_file)
        except ResultsError as exc:
            logger.error(f"Could not save crawl results: {exc}")
            raise HTTPException(status_code=500, detail=str(exc))
        except Exception as exc:
            logger.error(f"Crawl failed: {exc}", exc_info=True)
            raise HTTPException(status_code=500, detail="Crawl failed")

        if not output_file.exists():
            raise HTTPException(status_code=404, detail="Results file not found")

        return FileResponse(output_file, media_type="application/json",
                            filename=output_file.name)

    @app.get("/home")
    async def home() -> Dict[str, str]:
        return {"message": "Hi there. This is the Product Crawler API."}

    @app.get("/health")
    async def health() -> Dict[str, str]:
        return {"status": "ok"}

    return app


def serve(config: Config, monitor: Optional[CrawlerMonitor] = None):
    """Run the API with uvicorn until interrupted."""
    import uvicorn

    app = create_app(config, monitor=monitor)
    logger.info(f"Serving on {config.server.host}:{config.server.port}")
    uvicorn.run(app, host=config.server.host, port=config.server.port,
                log_config=None)
