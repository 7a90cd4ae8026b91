"""
Quote Collector Module
======================

Accumulates decoded quotes for the whole run and hands them back either in
arrival order or sorted by exchange acceptance time.

Chronological order is a stable sort on the 'HH:MM:SS.ff' text: the fixed
zero-padded format makes string order equal time order within one trading
day, and quotes accepted at the same instant keep their arrival order.
"""

import logging
from typing import Iterator, List

from quote_models import Quote

logger = logging.getLogger(__name__)


class QuoteCollector:
    """Arrival-ordered store of decoded quotes."""

    def __init__(self):
        self._quotes: List[Quote] = []

    def add(self, quote: Quote):
        self._quotes.append(quote)

    def __len__(self) -> int:
        return len(self._quotes)

    def __iter__(self) -> Iterator[Quote]:
        return iter(self._quotes)

    def quotes(self, chronological: bool = False) -> List[Quote]:
        """
        Get collected quotes.

        Args:
            chronological: If True, sort by acceptance time (stable)

        Returns:
            New list of quotes; the collector itself is not reordered
        """
        if not chronological:
            return list(self._quotes)

        logger.debug(f"Sorting {len(self._quotes)} quotes by acceptance time")
        return sorted(self._quotes, key=lambda quote: quote.acceptance_time)
