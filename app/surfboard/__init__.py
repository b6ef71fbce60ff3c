"""Everything that knows about the SURFboard status page and reboot form lives here.

There's only the one page layout; other modem families are out of scope.
The row extraction is behind a small interface (see parse.RowExtractor) so a different strategy can be
swapped in without touching the threshold / reboot logic.
"""
