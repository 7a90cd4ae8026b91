"""
Quote Line Formatter
====================

Renders quotes as single text lines:

    <capture-seconds> <HH:MM:SS.ff> <ISIN> <bid5> .. <bid1> <ask1> .. <ask5>

Each level prints as quantity@price. Bids run from level 5 up to the best
bid so the line reads as one price ladder into the asks.
"""

from typing import Iterable, TextIO

from quote_models import Quote


def format_quote(quote: Quote) -> str:
    fields = [str(quote.capture_time), quote.acceptance_time, quote.instrument_id]
    fields.extend(str(level) for level in reversed(quote.bid_levels))
    fields.extend(str(level) for level in quote.ask_levels)
    return ' '.join(fields)


def write_quotes(quotes: Iterable[Quote], stream: TextIO) -> int:
    """
    Write one line per quote.

    Args:
        quotes: Quotes in output order
        stream: Text stream (stdout in the CLI)

    Returns:
        Number of lines written
    """
    count = 0
    for quote in quotes:
        stream.write(format_quote(quote) + '\n')
        count += 1
    return count
