from __future__ import annotations
from version_watch.core.config import settings
from version_watch.core.logging_config import configure_logging


def main():  # pragma: no cover
    configure_logging(settings.log_level)
    print(f"[dev-entrypoint] starting dev server version={settings.version} log_level={settings.log_level}", flush=True)
    import uvicorn
    uvicorn.run(
        'version_watch.main:app',
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


if __name__ == '__main__':
    main()
