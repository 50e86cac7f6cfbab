from __future__ import annotations
import argparse
import asyncio
import logging
import signal
import sys
from typing import Optional, Sequence

import httpx

from version_watch.client.checker import CheckResult
from version_watch.client.http import InfoClient
from version_watch.client.poller import VersionPoller
from version_watch.core.compat import RangeConstraint, parse_range
from version_watch.core.config import ClientSettings
from version_watch.core.errors import ConfigError
from version_watch.core.logging_config import configure_logging

_log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INCOMPATIBLE = 1
EXIT_CONFIG = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='version-watch-client',
        description='Poll a server /info endpoint and check its version against SUPPORTED_VERSIONS.',
    )
    parser.add_argument('--once', action='store_true', help='run a single check and exit (0 = compatible)')
    return parser


def _log_configuration(settings: ClientSettings) -> None:
    _log.info("Starting client with configuration:")
    _log.info("  Server URL: %s", settings.target_url)
    _log.info("  Supported versions: %s", settings.supported_versions)
    _log.info("  Poll interval: %ss", settings.poll_interval)
    _log.info("  Fetch timeout: %ss", settings.fetch_timeout)


async def run_once(
    settings: ClientSettings,
    constraint: RangeConstraint,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CheckResult:
    async with InfoClient(settings.target_url, timeout=settings.fetch_timeout, transport=transport) as client:
        poller = VersionPoller(client.fetch_version, constraint, interval=settings.poll_interval)
        return await poller.tick()


async def run_forever(
    settings: ClientSettings,
    constraint: RangeConstraint,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    async with InfoClient(settings.target_url, timeout=settings.fetch_timeout, transport=transport) as client:
        poller = VersionPoller(client.fetch_version, constraint, interval=settings.poll_interval)
        loop = asyncio.get_running_loop()
        installed = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, poller.stop)
            except (NotImplementedError, RuntimeError):  # pragma: no cover - Windows / non-main thread
                continue
            installed.append(sig)
        try:
            await poller.start()
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        settings = ClientSettings.from_env()
    except ConfigError as exc:
        configure_logging('INFO')
        _log.critical("%s", exc)
        return EXIT_CONFIG
    configure_logging(settings.log_level)

    try:
        constraint = parse_range(settings.supported_versions)
    except ConfigError as exc:
        _log.critical("Invalid version range '%s': %s", settings.supported_versions, exc)
        return EXIT_CONFIG

    _log_configuration(settings)

    if args.once:
        result = asyncio.run(run_once(settings, constraint))
        return EXIT_OK if result.compatible else EXIT_INCOMPATIBLE

    try:
        asyncio.run(run_forever(settings, constraint))
    except KeyboardInterrupt:  # pragma: no cover
        pass
    _log.info("client stopped")
    return EXIT_OK


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
