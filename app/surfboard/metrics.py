"""All the boiler plate / init code for defining metrics.

The watchdog is a one-shot process, so there's nothing for Prometheus to scrape.
Instead, everything goes into a registry that is written out as a text file at the end of the run
    for node_exporter's textfile collector to pick up.
"""

import structlog
from prometheus_client import (CollectorRegistry, Counter, Gauge, Summary,
                               disable_created_metrics, write_to_textfile)

log = structlog.get_logger(__name__)

# Having the unix epoch time of when the metric was created isn't that useful for us
#   so we'll disable it.
disable_created_metrics()

METRICS_NS = "modem_watchdog"
META_NS = "meta"


class WatchdogMetrics:
    """One run's worth of metrics, on a registry of its own so repeated runs (tests) don't collide."""

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry if registry is not None else CollectorRegistry()

        self.g_uncorrectable = Gauge(
            f"{METRICS_NS}_uncorrectable_errors",
            "Uncorrectable errors summed over Locked QAM256 downstream channels",
            registry=self.registry,
        )
        self.g_correctable = Gauge(
            f"{METRICS_NS}_correctable_errors",
            "Correctable errors summed over Locked QAM256 downstream channels",
            registry=self.registry,
        )
        self.g_channels = Gauge(
            f"{METRICS_NS}_counted_channels",
            "Number of downstream channels that were Locked and QAM256",
            registry=self.registry,
        )
        self.g_threshold = Gauge(
            f"{METRICS_NS}_uncorrectable_threshold",
            "Uncorrectable error count above which the modem is rebooted",
            registry=self.registry,
        )
        # 1 if the run decided the modem needed a reboot, whether or not it was a dry run
        self.g_reboot = Gauge(
            f"{METRICS_NS}_reboot_triggered",
            "Whether this run decided to reboot the modem",
            labelnames=["dry_run"],
            registry=self.registry,
        )

        # summary comes with both a count and a sum so we don't need to count requests ourselves
        self.s_request_time = Summary(
            f"{META_NS}_request_duration_seconds",
            "Time spent waiting for modem to respond",
            labelnames=["scrape_target"],
            registry=self.registry,
        )
        # http_code is "error" when no response came back at all
        self.c_request_result = Counter(
            f"{META_NS}_request_result",
            "Count of modem requests by outcome",
            labelnames=["http_code", "scrape_target"],
            registry=self.registry,
        )

    def write(self, path: str) -> bool:
        """Dump the registry to `path`. Failure is logged, not raised; metrics are best-effort."""
        try:
            write_to_textfile(path, self.registry)
        except OSError as e:
            log.warning("Failed to write metrics textfile", path=path, error=e)
            return False
        log.debug("Wrote metrics textfile", path=path)
        return True
