import logging
from enum import Enum

# Modem ignores the UA but it's easy enough to pretend to be a browser just in case
STATUS_REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64; rv:123.4) Gecko/20100101 Firefox/123.4",
    "Accept": "text/html",
}

DEFAULT_MODEM_ADDRESS = "192.168.100.1"
DEFAULT_UNCORRECTABLE_THRESHOLD = 1000

# Lock status and modulation that a row must report to be counted
LOCKED = "Locked"
QAM256 = "QAM256"


class LogLevel(Enum):
    """Simple enum of supported log levels for easy validation"""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL
