"""
KRX Quote Reader - Main Application
===================================

Decodes KRX B6034 quote messages from a packet capture and prints one line
per quote.

This script:
1. Reads every frame of a pcap/pcapng trace file
2. Keeps UDP datagrams sent to the feed ports (15515, 15516)
3. Decodes B6034 quote payloads (ISIN, 5 bid levels, 5 ask levels, acceptance time)
4. Optionally sorts quotes by exchange acceptance time (-r)
5. Writes one formatted line per quote to stdout

Usage:
    python src/main.py [-r] <trace-file>
    krx-quote-reader [-r] <trace-file>

Output line:
    <capture-seconds> <HH:MM:SS.ff> <ISIN> <bid5> .. <bid1> <ask1> .. <ask5>

Logging goes to stderr; stdout carries quote lines only.

Exit codes:
    0 - trace processed
    1 - trace file missing, unreadable or not a capture file
    2 - bad command line
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import List, Optional, TextIO

from scapy.error import Scapy_Exception

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from config import DEFAULT_CONFIG
from frame_source import iter_frames
from transport_filter import TransportFilter
from quote_decoder import QuoteDecoder
from quote_collector import QuoteCollector
from quote_formatter import write_quotes

logger = logging.getLogger(__name__)

# Errors that mean the trace itself cannot be read
TRACE_ERRORS = (OSError, Scapy_Exception)


def setup_logging(level: int = DEFAULT_CONFIG['log_level']):
    """Send log records to stderr so stdout only carries quote lines."""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='krx-quote-reader',
        description='Decode KRX B6034 quote messages from a packet capture.'
    )
    parser.add_argument('-r', dest='chronological', action='store_true',
                        help='order quotes by exchange acceptance time')
    parser.add_argument('trace_file', help='pcap or pcapng trace file')
    return parser


def collect_quotes(trace_path: str,
                   transport: TransportFilter,
                   decoder: QuoteDecoder) -> QuoteCollector:
    """
    Drain the trace file through the filter and decoder.

    Args:
        trace_path: Path to the trace file
        transport: Feed-port filter
        decoder: B6034 decoder

    Returns:
        Collector holding decoded quotes in arrival order

    Raises:
        Any of TRACE_ERRORS if the trace cannot be read
    """
    collector = QuoteCollector()

    for capture_time, frame in iter_frames(trace_path):
        payload = transport.extract_payload(frame)
        if payload is None:
            continue

        quote = decoder.decode(payload, capture_time)
        if quote is not None:
            collector.add(quote)

    return collector


def run(trace_path: str, chronological: bool = False, out: Optional[TextIO] = None) -> int:
    """
    Decode a trace file and write quote lines.

    Nothing is written unless the whole trace was read.

    Args:
        trace_path: Path to the trace file
        chronological: Sort by acceptance time instead of arrival order
        out: Output stream (default: stdout)

    Returns:
        Number of quote lines written
    """
    out = out or sys.stdout
    transport = TransportFilter()
    decoder = QuoteDecoder()

    collector = collect_quotes(trace_path, transport, decoder)
    written = write_quotes(collector.quotes(chronological=chronological), out)

    filter_stats = transport.get_stats()
    decoder_stats = decoder.get_stats()
    logger.info("Session statistics:")
    logger.info(f"  Frames read:        {filter_stats['frames_seen']:,}")
    logger.info(f"  Non-UDP frames:     {filter_stats['non_udp']:,}")
    logger.info(f"  Other UDP ports:    {filter_stats['port_mismatch']:,}")
    logger.info(f"  Feed payloads:      {filter_stats['payloads_accepted']:,}")
    logger.info(f"  Quotes decoded:     {decoder_stats['quotes_decoded']:,}")
    logger.info(f"  Payloads rejected:  {decoder_stats['payloads_seen'] - decoder_stats['quotes_decoded']:,}")
    logger.info(f"  Lines written:      {written:,}")
    return written


def main(argv: Optional[List[str]] = None) -> int:
    """
    Command line entry point.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])

    Returns:
        Process exit code
    """
    setup_logging()
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return e.code

    try:
        run(args.trace_file, chronological=args.chronological)
    except FileNotFoundError:
        logger.error(f"Trace file not found: {args.trace_file}")
        return 1
    except TRACE_ERRORS as e:
        logger.error(f"Cannot read trace file {args.trace_file}: {e}")
        return 1

    return 0


if __name__ == '__main__':
    exit_code = main()
    sys.exit(exit_code)
