"""Tests for surfboard/parse.py."""

from __future__ import annotations

import pytest
from pages import channel_line, load_fixture, status_page

from surfboard.parse import (
    ChannelRow,
    ErrorCount,
    PatternRowExtractor,
    SoupRowExtractor,
    count_errors,
    get_extractor,
)

EXTRACTORS = [PatternRowExtractor, SoupRowExtractor]


def _count(extractor_cls, html: str) -> ErrorCount:
    return count_errors(extractor_cls().extract_rows(html))


class TestPatternRowExtractor:
    """Tests for the line-splitting extractor."""

    def test_field_positions(self):
        """Lock status is the 3rd field, modulation the 4th, uncorrectables the 2nd-to-last."""
        rows = list(PatternRowExtractor().extract_rows(channel_line(1, "Locked", "QAM256", 7, corrected=12)))

        assert rows == [ChannelRow("Locked", "QAM256", uncorrectables=7, correctables=12)]

    def test_header_and_title_rows_are_skipped(self):
        """Rows whose count column isn't a number never become ChannelRows."""
        rows = list(PatternRowExtractor().extract_rows(load_fixture("cmstatus.html")))

        assert all(isinstance(r.uncorrectables, int) for r in rows)
        assert "Lock Status" not in [r.lock_status for r in rows]

    def test_short_lines_are_skipped(self):
        """Lines with fewer than four fields are ignored."""
        html = "<tr><td>Locked</td></tr>\n<td>5</td>\nplain text 5"

        assert list(PatternRowExtractor().extract_rows(html)) == []

    def test_unparseable_correctables_count_as_zero(self):
        """A junk corrected column doesn't drop the row."""
        rows = list(PatternRowExtractor().extract_rows(channel_line(1, "Locked", "QAM256", 3, corrected="--")))

        assert rows == [ChannelRow("Locked", "QAM256", uncorrectables=3, correctables=0)]


class TestSoupRowExtractor:
    """Tests for the BeautifulSoup extractor."""

    def test_rows_split_across_lines(self):
        """Unlike the pattern extractor, formatting of the markup doesn't matter."""
        html = """
        <table>
          <tr>
            <td>1</td>
            <td>Locked</td>
            <td>QAM256</td>
            <td>17</td>
            <td>5</td>
            <td>42</td>
          </tr>
        </table>
        """

        assert list(SoupRowExtractor().extract_rows(html)) == [
            ChannelRow("Locked", "QAM256", uncorrectables=42, correctables=5)
        ]

    def test_th_rows_are_skipped(self):
        """Section title rows only hold <th> cells."""
        assert list(SoupRowExtractor().extract_rows(status_page())) == []


class TestCountErrors:
    """Tests for summing the matching rows."""

    @pytest.mark.parametrize("extractor_cls", EXTRACTORS)
    def test_no_matching_rows_is_zero(self, extractor_cls):
        """A page with nothing Locked + QAM256 counts 0."""
        html = status_page(
            channel_line(1, "Not Locked", "QAM256", 50),
            channel_line(2, "Locked", "QAM64", 50),
        )

        assert _count(extractor_cls, html) == ErrorCount(0, 0, 0)

    @pytest.mark.parametrize("extractor_cls", EXTRACTORS)
    def test_empty_page(self, extractor_cls):
        """No table at all still counts 0."""
        assert _count(extractor_cls, "").uncorrectable == 0

    @pytest.mark.parametrize("extractor_cls", EXTRACTORS)
    def test_matching_rows_are_summed(self, extractor_cls):
        """Non-matching rows in between don't affect the total."""
        html = status_page(
            channel_line(1, "Locked", "QAM256", 500),
            channel_line(2, "Locked", "QAM64", 9999),
            channel_line(3, "Not Locked", "QAM256", 9999),
            channel_line(4, "Locked", "QAM256", 600),
        )

        count = _count(extractor_cls, html)

        assert count.uncorrectable == 1100
        assert count.channels == 2

    @pytest.mark.parametrize("extractor_cls", EXTRACTORS)
    def test_modulation_is_exact_match(self, extractor_cls):
        """QAM64, qam256 and padded values are all different modulations."""
        html = status_page(
            channel_line(1, "Locked", "QAM64", 10),
            channel_line(2, "Locked", "qam256", 10),
            channel_line(3, "Locked", "QAM2560", 10),
        )

        assert _count(extractor_cls, html).uncorrectable == 0

    @pytest.mark.parametrize("extractor_cls", EXTRACTORS)
    @pytest.mark.parametrize("bad", ["N/A", "", "-3", "1.5", "12abc"])
    def test_non_integer_counts_contribute_nothing(self, extractor_cls, bad):
        """Junk in the count column is skipped, not raised."""
        html = status_page(
            channel_line(1, "Locked", "QAM256", bad),
            channel_line(2, "Locked", "QAM256", 4),
        )

        count = _count(extractor_cls, html)

        assert count.uncorrectable == 4
        assert count.channels == 1

    @pytest.mark.parametrize("extractor_cls", EXTRACTORS)
    def test_fixture_page(self, extractor_cls):
        """Both extractors agree on a captured-style status page."""
        count = _count(extractor_cls, load_fixture("cmstatus.html"))

        assert count == ErrorCount(uncorrectable=253, correctable=2533, channels=3)

    def test_rows_directly(self):
        """count_errors works on any iterable of rows."""
        rows = [
            ChannelRow("Locked", "QAM256", 1, 2),
            ChannelRow("Locked", "QAM256", 3, 4),
            ChannelRow("Locked", "OFDM PLC", 100, 100),
        ]

        assert count_errors(rows) == ErrorCount(uncorrectable=4, correctable=6, channels=2)


class TestGetExtractor:
    """Tests for looking up an extractor by name."""

    def test_known_names(self):
        """Both configured names resolve."""
        assert isinstance(get_extractor("pattern"), PatternRowExtractor)
        assert isinstance(get_extractor("soup"), SoupRowExtractor)
