"""
Unit Tests for KRX Quote Decoder
================================

Tests B6034 payload decoding.

Test Coverage:
- Minimum payload size (143 bytes)
- Marker check at offset 34
- ISIN validation and normalization
- Bid/ask level decoding with (quantity, price) storage order
- Acceptance time at fixed offset 240, including short payloads
- Statistics tracking per rejection cause
"""

import unittest
import sys
from pathlib import Path

# Add src and tests directories to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))
sys.path.insert(0, str(Path(__file__).parent))

from quote_decoder import QuoteDecoder
from quote_models import Level, Quote
from payload_builder import (build_quote_payload, SAMSUNG, SK_HYNIX,
                             SCENARIO_BIDS, SCENARIO_ASKS)


class TestQuoteDecoding(unittest.TestCase):
    """Well-formed payloads decode to exactly the encoded values."""

    def setUp(self):
        self.decoder = QuoteDecoder()

    def test_scenario_payload(self):
        quote = self.decoder.decode(build_quote_payload(), 1700000000)

        self.assertIsInstance(quote, Quote)
        self.assertEqual(quote.capture_time, 1700000000)
        self.assertEqual(quote.acceptance_time, '09:30:12.34')
        self.assertEqual(quote.instrument_id, SAMSUNG)
        self.assertEqual(list(quote.bid_levels), SCENARIO_BIDS)
        self.assertEqual(list(quote.ask_levels), SCENARIO_ASKS)

    def test_levels_store_quantity_first(self):
        quote = self.decoder.decode(build_quote_payload(), 0)
        self.assertEqual(quote.bid_levels[0], Level(quantity=10, price=70000))
        self.assertEqual(quote.ask_levels[4].quantity, 55)
        self.assertEqual(quote.ask_levels[4].price, 70500)

    def test_wide_quantity_field(self):
        bids = [(2 ** 48 - 1, 2 ** 32 - 1)] + SCENARIO_BIDS[1:]
        quote = self.decoder.decode(build_quote_payload(bids=bids), 0)
        self.assertEqual(quote.bid_levels[0], (2 ** 48 - 1, 2 ** 32 - 1))

    def test_levels_kept_in_wire_order(self):
        # Decoder does not sort by price
        bids = [(1, 100), (2, 300), (3, 200), (4, 500), (5, 400)]
        quote = self.decoder.decode(build_quote_payload(bids=bids), 0)
        self.assertEqual([level.price for level in quote.bid_levels], [100, 300, 200, 500, 400])

    def test_longer_payload(self):
        payload = build_quote_payload(size=400)
        quote = self.decoder.decode(payload, 5)
        self.assertIsNotNone(quote)
        self.assertEqual(quote.acceptance_time, '09:30:12.34')

    def test_lowercase_isin_is_normalized(self):
        payload = build_quote_payload(isin=SK_HYNIX.lower())
        quote = self.decoder.decode(payload, 0)
        self.assertEqual(quote.instrument_id, SK_HYNIX)

    def test_bytearray_payload(self):
        quote = self.decoder.decode(bytearray(build_quote_payload()), 0)
        self.assertEqual(quote.instrument_id, SAMSUNG)

    def test_quote_is_immutable(self):
        quote = self.decoder.decode(build_quote_payload(), 0)
        with self.assertRaises(AttributeError):
            quote.acceptance_time = '10:00:00.00'


class TestQuoteRejection(unittest.TestCase):
    """Anything that is not a complete B6034 message decodes to None."""

    def setUp(self):
        self.decoder = QuoteDecoder()

    def test_short_payloads_rejected(self):
        valid = build_quote_payload()
        for size in (0, 1, 34, 39, 100, 142):
            with self.subTest(size=size):
                self.assertIsNone(self.decoder.decode(valid[:size], 0))
        self.assertEqual(self.decoder.get_stats()['too_short'], 6)

    def test_wrong_marker_rejected(self):
        for marker in (b'B6012', b'A3034', b'b6034', b'\x00' * 5):
            with self.subTest(marker=marker):
                payload = build_quote_payload(marker=marker)
                self.assertIsNone(self.decoder.decode(payload, 0))
        self.assertEqual(self.decoder.get_stats()['bad_marker'], 4)

    def test_zero_filled_payload_rejected(self):
        self.assertIsNone(self.decoder.decode(bytes(300), 0))

    def test_bad_isin_checksum_rejected(self):
        payload = build_quote_payload(isin='KR7005930004')
        self.assertIsNone(self.decoder.decode(payload, 0))
        self.assertEqual(self.decoder.get_stats()['bad_instrument'], 1)

    def test_non_ascii_isin_rejected(self):
        payload = build_quote_payload(isin=b'KR70059300\xff\xfe')
        self.assertIsNone(self.decoder.decode(payload, 0))
        self.assertEqual(self.decoder.get_stats()['bad_instrument'], 1)

    def test_blank_isin_rejected(self):
        payload = build_quote_payload(isin=b' ' * 12)
        self.assertIsNone(self.decoder.decode(payload, 0))

    def test_truncated_levels_rejected(self):
        # Minimum size reached, but the ask levels run to offset 163
        payload = build_quote_payload(size=150)
        self.assertIsNone(self.decoder.decode(payload, 0))
        self.assertEqual(self.decoder.get_stats()['truncated'], 1)

    def test_missing_accept_time_rejected(self):
        # Book levels complete, acceptance time at 240..247 not present
        for size in (163, 200, 240, 247):
            with self.subTest(size=size):
                payload = build_quote_payload(size=size)
                self.assertIsNone(self.decoder.decode(payload, 0))
        self.assertEqual(self.decoder.get_stats()['truncated'], 4)

    def test_non_digit_accept_time_rejected(self):
        payload = build_quote_payload(accept_time=b'09:30:12')
        self.assertIsNone(self.decoder.decode(payload, 0))
        self.assertEqual(self.decoder.get_stats()['bad_accept_time'], 1)

    def test_rejection_logged_at_debug(self):
        with self.assertLogs('quote_decoder', level='DEBUG') as logs:
            self.decoder.decode(build_quote_payload(marker=b'XXXXX'), 0)
        self.assertTrue(any('Marker mismatch' in line for line in logs.output))


class TestDecoderStatistics(unittest.TestCase):

    def test_counts_and_reset(self):
        decoder = QuoteDecoder()
        decoder.decode(build_quote_payload(), 0)
        decoder.decode(build_quote_payload(), 1)
        decoder.decode(b'short', 2)

        stats = decoder.get_stats()
        self.assertEqual(stats['payloads_seen'], 3)
        self.assertEqual(stats['quotes_decoded'], 2)
        self.assertEqual(stats['too_short'], 1)

        decoder.reset_stats()
        self.assertTrue(all(value == 0 for value in decoder.get_stats().values()))

    def test_get_stats_returns_copy(self):
        decoder = QuoteDecoder()
        stats = decoder.get_stats()
        stats['payloads_seen'] = 99
        self.assertEqual(decoder.get_stats()['payloads_seen'], 0)

    def test_custom_marker(self):
        decoder = QuoteDecoder({'quote_marker': b'B6012'})
        self.assertIsNotNone(decoder.decode(build_quote_payload(marker=b'B6012'), 0))
        self.assertIsNone(decoder.decode(build_quote_payload(), 0))


if __name__ == '__main__':
    unittest.main(verbosity=2)
