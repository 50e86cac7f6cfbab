from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from version_watch.api import info as info_router
from version_watch.core.config import settings
from version_watch.core.logging_config import configure_logging

_log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler: configure logging and announce the served version."""
    configure_logging(settings.log_level)
    _log.info("serving version=%s", settings.version)
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)

# The info endpoint lives at the root so clients can poll http://host:port/info
app.include_router(info_router.router)


@app.get('/')
async def root():
    return {'status': 'ok', 'app': settings.app_name}
