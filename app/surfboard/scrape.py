"""
Talking to the modem: fetch the status page, and (maybe) tell it to reboot.
"""

import asyncio

import structlog
from aiohttp import ClientError, ClientSession
from err.exceptions import ModemNotOkError
from surfboard.metrics import WatchdogMetrics
from surfboard.parse import ErrorCount
from util.config import Config
from util.const import STATUS_REQUEST_HEADERS

log = structlog.get_logger(__name__)

STATUS_ENDPOINT = "/"
REBOOT_ENDPOINT = "/goform/RgConfiguration.pl"


async def fetch_status_page(cs: ClientSession, metrics: WatchdogMetrics) -> str:
    """
    GET the modem root page, which is where the downstream channel table lives.

    Anything other than a 2xx is fatal; so is any network error, which is left to propagate.
    """
    with metrics.s_request_time.labels("status").time():
        async with cs.get(STATUS_ENDPOINT, headers=STATUS_REQUEST_HEADERS) as resp:
            metrics.c_request_result.labels(resp.status, "status").inc()
            if not 200 <= resp.status < 300:
                _e = f"Failed to get modem status page. Status={resp.status}."
                raise ModemNotOkError(_e, status_code=resp.status)
            return await resp.text()


def should_reboot(count: ErrorCount, config: Config) -> bool:
    """Strictly greater than the threshold; sitting right on it is fine."""
    if count.uncorrectable > config.uncorrectable_threshold:
        return True
    if config.correctable_threshold is not None:
        return count.correctable > config.correctable_threshold
    return False


async def reboot_modem(cs: ClientSession, config: Config, metrics: WatchdogMetrics) -> bool:
    """
    Best-effort reboot request. Returns True if the modem answered, False otherwise.

    The modem will often drop the connection as it goes down for the reboot, so errors here are
        logged and swallowed. A failed reboot request must never fail the run.
    """
    form = {
        "Rebooting": "1",
        "RestoreFactoryDefault": "1" if config.restore_factory_defaults else "0",
    }
    try:
        with metrics.s_request_time.labels("reboot").time():
            async with cs.post(REBOOT_ENDPOINT, data=form) as resp:
                metrics.c_request_result.labels(resp.status, "reboot").inc()
                # Response body is meaningless to us; just note what came back
                log.info("Reboot request sent", status=resp.status)
    except (ClientError, asyncio.TimeoutError) as e:
        metrics.c_request_result.labels("error", "reboot").inc()
        log.warning("Reboot request did not complete; ignoring", error=e)
        return False
    return True


async def remediate(
    cs: ClientSession, count: ErrorCount, config: Config, metrics: WatchdogMetrics
) -> bool:
    """Decide whether to reboot and do it unless this is a dry run. Returns True if a reboot was warranted."""
    if not should_reboot(count, config):
        log.info(
            "Error count within threshold",
            uncorrectable=count.uncorrectable,
            threshold=config.uncorrectable_threshold,
        )
        metrics.g_reboot.labels(config.dry_run).set(0)
        return False

    metrics.g_reboot.labels(config.dry_run).set(1)
    if config.dry_run:
        print("would issue modem reboot")
        return True

    print("issuing modem reboot")
    if config.reboot_delay_seconds > 0:
        log.warning("Pausing before reboot", seconds=config.reboot_delay_seconds)
        await asyncio.sleep(config.reboot_delay_seconds)
    await reboot_modem(cs, config, metrics)
    return True
