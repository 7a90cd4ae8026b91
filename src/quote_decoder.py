"""
KRX Quote Decoder Module
========================

Decodes KRX B6034 quote messages (5-level bid/ask book) from UDP payloads.

Message Layout (absolute payload offsets):
- Offset 34-38:   Message marker, ASCII "B6034"
- Offset 39-50:   Instrument code, 12 ASCII characters (ISIN)
- Offset 51-62:   Reserved, not interpreted
- Offset 63-112:  Bid levels 1..5, 10 bytes each:
                  [Price uint32 BE][Quantity uint48 BE]
- Offset 113-162: Ask levels 1..5, same 10-byte shape
- Offset 240-247: Acceptance time, 8 ASCII digits HHMMSSff

Payloads shorter than 143 bytes are never decoded. The acceptance time sits
beyond the minimum size, so payloads between 143 and 247 bytes are rejected
when the time field is read.

Note: each level is stored as (quantity, price) even though price comes
first on the wire.
"""

import logging
from typing import Dict, List, Optional

from stdnum import isin
from stdnum.exceptions import ValidationError

from byte_cursor import ByteCursor, TruncatedPayloadError
from config import build_config
from quote_models import Level, Quote

logger = logging.getLogger(__name__)

INSTRUMENT_CODE_SIZE = 12
RESERVED_SIZE = 12
ACCEPT_TIME_SIZE = 8


class QuoteDecoder:
    """
    Decoder for B6034 quote payloads.

    decode() returns a Quote or None. The cause of a rejection is only
    visible through get_stats() and DEBUG logging.
    """

    def __init__(self, config: Optional[Dict] = None):
        """Initialize decoder with statistics tracking."""
        self.config = build_config(config)
        self.marker = self.config['quote_marker']
        self.marker_offset = self.config['marker_offset']
        self.min_size = self.config['min_payload_size']
        self.accept_time_offset = self.config['accept_time_offset']
        self.depth = self.config['book_depth']

        self.stats = {
            'payloads_seen': 0,
            'too_short': 0,
            'bad_marker': 0,
            'bad_instrument': 0,
            'truncated': 0,
            'bad_accept_time': 0,
            'quotes_decoded': 0
        }
        logger.info(f"QuoteDecoder initialized - marker={self.marker!r}")

    def decode(self, payload: bytes, capture_time: int) -> Optional[Quote]:
        """
        Decode one UDP payload into a Quote.

        Args:
            payload: UDP payload bytes
            capture_time: Frame capture time in whole seconds

        Returns:
            Quote, or None if the payload is not a decodable B6034 message
        """
        self.stats['payloads_seen'] += 1

        if len(payload) < self.min_size:
            self.stats['too_short'] += 1
            logger.debug(f"Payload too short: {len(payload)} < {self.min_size} bytes")
            return None

        marker_end = self.marker_offset + len(self.marker)
        if payload[self.marker_offset:marker_end] != self.marker:
            self.stats['bad_marker'] += 1
            logger.debug(f"Marker mismatch: {bytes(payload[self.marker_offset:marker_end])!r}")
            return None

        cursor = ByteCursor(payload, marker_end)
        try:
            raw_code = cursor.read_text(INSTRUMENT_CODE_SIZE)
            try:
                instrument_id = isin.validate(raw_code)
            except ValidationError as e:
                self.stats['bad_instrument'] += 1
                logger.debug(f"Rejected instrument code {raw_code!r}: {e}")
                return None

            cursor.skip(RESERVED_SIZE)
            bids = self._read_levels(cursor)
            asks = self._read_levels(cursor)

            # Acceptance time is at a fixed offset, not after the ask levels
            cursor.seek(self.accept_time_offset)
            digits = cursor.read_text(ACCEPT_TIME_SIZE, encoding='ascii')

        except TruncatedPayloadError as e:
            self.stats['truncated'] += 1
            logger.debug(f"Truncated quote payload: {e}")
            return None

        if not digits.isdigit():
            self.stats['bad_accept_time'] += 1
            logger.debug(f"Acceptance time is not 8 digits: {digits!r}")
            return None
        accept_time = self._format_accept_time(digits)

        quote = Quote(
            capture_time=capture_time,
            acceptance_time=accept_time,
            instrument_id=instrument_id,
            bid_levels=tuple(bids),
            ask_levels=tuple(asks)
        )
        self.stats['quotes_decoded'] += 1
        logger.debug(f"Decoded quote: {instrument_id} at {accept_time}")
        return quote

    def _read_levels(self, cursor: ByteCursor) -> List[Level]:
        """Read one side of the book: price (u32) then quantity (u48) per level."""
        levels = []
        for _ in range(self.depth):
            price = cursor.read_u32()
            quantity = cursor.read_u48()
            levels.append(Level(quantity, price))
        return levels

    @staticmethod
    def _format_accept_time(digits: str) -> str:
        """'09301234' -> '09:30:12.34'"""
        return f"{digits[0:2]}:{digits[2:4]}:{digits[4:6]}.{digits[6:8]}"

    def get_stats(self) -> Dict:
        """Get decoder statistics."""
        return self.stats.copy()

    def reset_stats(self):
        """Reset statistics counters."""
        for key in self.stats:
            self.stats[key] = 0
        logger.info("Decoder statistics reset")
