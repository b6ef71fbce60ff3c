"""
Run configuration.

cfg-file is overkill for the few things that need to be configured; cron and k8s both make it
    trivial to set env-vars so those are the primary source. A handful of short flags can override them.
Everything is resolved once, up front, into a frozen Config that gets passed around explicitly.
"""

import argparse
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from err.exceptions import ConfigError
from util.const import DEFAULT_MODEM_ADDRESS, DEFAULT_UNCORRECTABLE_THRESHOLD, LogLevel

EXTRACTORS = ("pattern", "soup")


@dataclass(frozen=True)
class Config:
    modem_address: str = DEFAULT_MODEM_ADDRESS
    dry_run: bool = False
    restore_factory_defaults: bool = False
    uncorrectable_threshold: int = DEFAULT_UNCORRECTABLE_THRESHOLD
    # None disables the correctable check entirely
    correctable_threshold: int | None = None
    reboot_delay_seconds: float = 0.0
    extractor: str = "pattern"
    metrics_textfile: str | None = None
    log_level: LogLevel = LogLevel.WARNING

    @property
    def base_url(self) -> str:
        return f"http://{self.modem_address}"


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modem-watchdog",
        description="Reboot the cable modem when it reports too many uncorrectable errors.",
    )
    parser.add_argument("-n", dest="dry_run", action="store_true", help="dry run")
    parser.add_argument(
        "-r",
        dest="restore_factory_defaults",
        action="store_true",
        help="factory reset the modem if sending a reboot command",
    )
    parser.add_argument("-m", "--modem", dest="modem_address", help="modem address")
    parser.add_argument(
        "-c",
        "--count",
        dest="uncorrectable_threshold",
        help="threshold count of uncorrectable errors",
    )
    parser.add_argument(
        "--correct-count",
        dest="correctable_threshold",
        help="threshold count of correctable errors",
    )
    parser.add_argument(
        "--delay",
        dest="reboot_delay_seconds",
        help="seconds to pause before sending the reboot, so it can be cancelled",
    )
    return parser


def _flag(value: str | None) -> bool:
    # FACTORY_DEFAULTS defaults to "0", so treat that the same as unset
    return value is not None and value.strip() not in ("", "0")


def _int(setting: str, value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as e:
        raise ConfigError(f"{setting} must be an integer", setting, value) from e
    if parsed < 0:
        raise ConfigError(f"{setting} must not be negative", setting, value)
    return parsed


def _float(setting: str, value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as e:
        raise ConfigError(f"{setting} must be a number", setting, value) from e
    if parsed < 0:
        raise ConfigError(f"{setting} must not be negative", setting, value)
    return parsed


def load_config(argv: Sequence[str], environ: Mapping[str, str]) -> Config:
    """Resolve env-vars, then flags, into a Config.

    Unknown flags are ignored rather than treated as an error.
    Raises ConfigError for values that can't be used.
    """
    args, _unknown = build_arg_parser().parse_known_args(list(argv))

    modem_address = args.modem_address or environ.get("MODEM_ADDRESS") or DEFAULT_MODEM_ADDRESS

    _uthreshold = args.uncorrectable_threshold or environ.get("UNCORRECTABLE_THRESHOLD")
    uncorrectable_threshold = (
        DEFAULT_UNCORRECTABLE_THRESHOLD
        if not _uthreshold
        else _int("UNCORRECTABLE_THRESHOLD", _uthreshold)
    )

    _cthreshold = args.correctable_threshold or environ.get("CORRECTABLE_THRESHOLD")
    correctable_threshold = _int("CORRECTABLE_THRESHOLD", _cthreshold) if _cthreshold else None

    _delay = args.reboot_delay_seconds or environ.get("REBOOT_DELAY_SECONDS")
    reboot_delay_seconds = _float("REBOOT_DELAY_SECONDS", _delay) if _delay else 0.0

    extractor = environ.get("ROW_EXTRACTOR") or "pattern"
    if extractor not in EXTRACTORS:
        raise ConfigError(f"ROW_EXTRACTOR must be one of {EXTRACTORS}", "ROW_EXTRACTOR", extractor)

    _level = environ.get("LOG_LEVEL")
    log_level = LogLevel[_level] if _level in LogLevel.__members__ else LogLevel.WARNING

    return Config(
        modem_address=modem_address,
        dry_run=args.dry_run or bool(environ.get("DRY_RUN")),
        restore_factory_defaults=args.restore_factory_defaults
        or _flag(environ.get("FACTORY_DEFAULTS")),
        uncorrectable_threshold=uncorrectable_threshold,
        correctable_threshold=correctable_threshold,
        reboot_delay_seconds=reboot_delay_seconds,
        extractor=extractor,
        metrics_textfile=environ.get("METRICS_TEXTFILE") or None,
        log_level=log_level,
    )
