#!/usr/bin/env python3
"""
Main / entry point for the cable modem watchdog.

Meant to be run on a schedule (cron, k8s CronJob ...); each invocation checks once and exits.
"""
import asyncio
import os
import sys
from collections.abc import Mapping, Sequence

import structlog
from aiohttp import ClientError, ClientSession
from err.exceptions import ConfigError, ModemNotOkError
from surfboard.metrics import WatchdogMetrics
from surfboard.parse import count_errors, get_extractor
from surfboard.scrape import fetch_status_page, remediate
from util.config import Config, load_config
from util.const import LogLevel

log = structlog.get_logger(__name__)


def configure_logging(log_level: LogLevel) -> None:
    # stdout is reserved for the handful of lines that cron mails / callers grep for
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(log_level.value),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )


async def watch(config: Config, metrics: WatchdogMetrics) -> int:
    """Fetch, count, maybe reboot. Returns the process exit code."""
    metrics.g_threshold.set(config.uncorrectable_threshold)
    extractor = get_extractor(config.extractor)

    log.debug("Setting up connection to modem...", base_url=config.base_url)
    async with ClientSession(base_url=config.base_url) as client:
        try:
            page = await fetch_status_page(client, metrics)
        except ModemNotOkError as e:
            log.error("Caught ModemNotOkError", error=e)
            return 1
        except (ClientError, asyncio.TimeoutError) as e:
            log.error("Failed to reach modem", base_url=config.base_url, error=e)
            return 1

        count = count_errors(extractor.extract_rows(page))
        metrics.g_uncorrectable.set(count.uncorrectable)
        metrics.g_correctable.set(count.correctable)
        metrics.g_channels.set(count.channels)

        print(f"found {count.uncorrectable} uncorrectable errors")
        log.info(
            "Counted errors on Locked QAM256 channels",
            correctable=count.correctable,
            channels=count.channels,
        )

        await remediate(client, count, config, metrics)
    return 0


async def run(argv: Sequence[str], environ: Mapping[str, str]) -> int:
    try:
        config = load_config(argv, environ)
    except ConfigError as e:
        configure_logging(LogLevel.WARNING)
        log.error("Invalid configuration", setting=e.setting, value=e.value, error=e)
        return 2

    configure_logging(config.log_level)
    if environ.get("LOG_LEVEL") and environ["LOG_LEVEL"] not in LogLevel.__members__:
        log.warning("Unknown LOG_LEVEL, defaulting", level=config.log_level.name)

    metrics = WatchdogMetrics()
    try:
        return await watch(config, metrics)
    finally:
        if config.metrics_textfile:
            metrics.write(config.metrics_textfile)


def main() -> None:
    """Main entry point."""
    sys.exit(asyncio.run(run(sys.argv[1:], os.environ)))


if __name__ == "__main__":
    main()
