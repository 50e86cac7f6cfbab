from __future__ import annotations
from version_watch.core.config import settings
from version_watch.core.logging_config import configure_logging


def main():
    configure_logging(settings.log_level)
    print(f"[entrypoint] starting (prod) version={settings.version} log_level={settings.log_level}", flush=True)
    import uvicorn
    from uvicorn.config import LOGGING_CONFIG
    print(f"[entrypoint] launching uvicorn on {settings.host}:{settings.port}", flush=True)
    try:
        uvicorn.run(
            'version_watch.main:app',
            host=settings.host,
            port=settings.port,
            reload=False,
            log_level=settings.log_level.lower(),
            # Use uvicorn's default logging config to surface startup errors
            log_config=LOGGING_CONFIG,
        )
    except BaseException as exc:  # catch SystemExit too
        import traceback
        print(f"[entrypoint] uvicorn crashed: {exc}", flush=True)
        traceback.print_exc()
        raise
    finally:
        print("[entrypoint] uvicorn stopped", flush=True)


if __name__ == '__main__':  # pragma: no cover
    main()
