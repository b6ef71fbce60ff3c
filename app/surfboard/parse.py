"""
Pull downstream channel rows out of the modem's status page and total up the error counters.
    Only tested against the SURFboard style status page, the one served from the modem root.

"""

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Protocol

import structlog
from bs4 import BeautifulSoup
from util.const import LOCKED, QAM256

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ChannelRow:
    lock_status: str
    modulation: str
    uncorrectables: int
    correctables: int = 0


@dataclass(frozen=True)
class ErrorCount:
    uncorrectable: int = 0
    correctable: int = 0
    # Number of rows that were Locked + QAM256
    channels: int = 0


class RowExtractor(Protocol):
    """Anything that can turn the status page into channel rows.

    Implementations must be lenient: a row that doesn't look like a channel is skipped, never raised.
    """

    def extract_rows(self, html: str) -> Iterable[ChannelRow]: ...


def _parse_count(value: str) -> int | None:
    value = value.strip()
    # int() would happily take "-5" or " +5"; counters are never negative
    if not value.isdecimal():
        return None
    return int(value)


# Of course the modem returns hand-formatted HTML. Each channel is on a single line that looks like:
#
#   <tr><td>1</td><td>Locked</td><td>QAM256</td><td>555000000 Hz</td>...<td>12</td><td>3</td></tr>
#
# Splitting on every pair of adjacent row/cell tags gives us:
#
#   ['', '1', 'Locked', 'QAM256', '555000000 Hz', ..., '12', '3', '']
#
# so the 3rd field is lock status, the 4th is modulation and the 2nd-to-last is uncorrectables.
# Header rows (<th>), section titles and anything else that doesn't split like this simply
#   won't match and gets dropped.
##
ROW_DELIMITER = re.compile(r"</?t[rd]></?t[rd]>")


class PatternRowExtractor:
    """Line-by-line split on the row/cell tags. Brittle, but it's what the modem page actually looks like."""

    def __init__(self, delimiter: re.Pattern[str] = ROW_DELIMITER):
        self.delimiter = delimiter

    def extract_rows(self, html: str) -> Iterator[ChannelRow]:
        for line_no, line in enumerate(html.splitlines(), start=1):
            fields = self.delimiter.split(line)
            if len(fields) < 4:
                continue
            uncorrectables = _parse_count(fields[-2])
            if uncorrectables is None:
                log.debug("Skipping row without a usable count", line=line_no, fields=fields)
                continue
            correctables = _parse_count(fields[-3]) if len(fields) > 4 else None
            yield ChannelRow(
                lock_status=fields[2],
                modulation=fields[3],
                uncorrectables=uncorrectables,
                correctables=correctables or 0,
            )


class SoupRowExtractor:
    """Structural alternative; walks every <tr> with BeautifulSoup.

    Uses the same column positions as the pattern extractor:
        lock status is cell 1, modulation is cell 2, uncorrectables is the last cell.
    These positions are tied to one vendor layout. Nothing validates them against the table headers.
    """

    def extract_rows(self, html: str) -> Iterator[ChannelRow]:
        soup = BeautifulSoup(html, "html.parser")
        for idx, tr in enumerate(soup.find_all("tr")):
            cells = [td.text.strip() for td in tr.find_all("td", recursive=False)]
            if len(cells) < 3:
                continue
            uncorrectables = _parse_count(cells[-1])
            if uncorrectables is None:
                log.debug("Skipping row without a usable count", row_idx=idx, cells=cells)
                continue
            correctables = _parse_count(cells[-2]) if len(cells) > 3 else None
            yield ChannelRow(
                lock_status=cells[1],
                modulation=cells[2],
                uncorrectables=uncorrectables,
                correctables=correctables or 0,
            )


EXTRACTORS: dict[str, type[RowExtractor]] = {
    "pattern": PatternRowExtractor,
    "soup": SoupRowExtractor,
}


def get_extractor(name: str) -> RowExtractor:
    return EXTRACTORS[name]()


def count_errors(rows: Iterable[ChannelRow]) -> ErrorCount:
    """Sum the counters of every Locked + QAM256 row. Exact match on both."""
    uncorrectable = correctable = channels = 0
    for row in rows:
        if row.lock_status == LOCKED and row.modulation == QAM256:
            uncorrectable += row.uncorrectables
            correctable += row.correctables
            channels += 1
    log.debug(
        "Counted errors",
        uncorrectable=uncorrectable,
        correctable=correctable,
        channels=channels,
    )
    return ErrorCount(uncorrectable=uncorrectable, correctable=correctable, channels=channels)
