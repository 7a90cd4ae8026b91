"""
Quote Data Model
================

Immutable record for one decoded B6034 quote message.

Fields:
- capture_time: capture timestamp of the carrying frame, whole seconds
- acceptance_time: exchange acceptance time as 'HH:MM:SS.ff'
- instrument_id: validated 12-character ISIN
- bid_levels / ask_levels: 5 (quantity, price) levels each, in wire order
  (level 1 first)
"""

from dataclasses import dataclass
from typing import NamedTuple, Tuple

BOOK_DEPTH = 5


class Level(NamedTuple):
    """One (quantity, price) pair at a book level."""
    quantity: int
    price: int

    def __str__(self) -> str:
        return f"{self.quantity}@{self.price}"


@dataclass(frozen=True)
class Quote:
    """Five-level bid/ask snapshot for one instrument."""

    capture_time: int
    acceptance_time: str
    instrument_id: str
    bid_levels: Tuple[Level, ...]
    ask_levels: Tuple[Level, ...]

    def __post_init__(self):
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, 'bid_levels', tuple(Level(*lvl) for lvl in self.bid_levels))
        object.__setattr__(self, 'ask_levels', tuple(Level(*lvl) for lvl in self.ask_levels))

        if len(self.bid_levels) != BOOK_DEPTH or len(self.ask_levels) != BOOK_DEPTH:
            raise ValueError(f"Quote needs {BOOK_DEPTH} bid and {BOOK_DEPTH} ask levels, "
                             f"got {len(self.bid_levels)} and {len(self.ask_levels)}")
