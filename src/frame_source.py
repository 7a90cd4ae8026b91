"""
Trace File Frame Source
=======================

Reads captured frames from a pcap or pcapng trace file.

Each frame is yielded as (capture_seconds, packet) where packet is the scapy
dissection of the link-layer frame and capture_seconds is its capture
timestamp truncated to whole seconds.

Iteration is lazy. The trace file stays open until the generator is
exhausted or closed.

Classic pcap files are checked record by record before any frame is yielded:
scapy's reader ends iteration quietly on a cut-short record header and only
warns on a cut-short record body, so both are turned into errors here.

Pcap layout (all fields in the byte order given by the magic):
- Global header: 24 bytes, magic at offset 0-3
- Record header: 16 bytes [ts_sec][ts_usec][caplen][wirelen] (uint32 each)
- Record body: caplen bytes

Errors:
- Missing or unreadable file: OSError from open
- Not a capture file / corrupt container: scapy Scapy_Exception
"""

import os
import struct
import logging
from typing import Iterator, Tuple

from scapy.all import PcapReader
from scapy.error import Scapy_Exception
from scapy.packet import Packet

logger = logging.getLogger(__name__)

PCAP_GLOBAL_HEADER_SIZE = 24
PCAP_RECORD_HEADER_SIZE = 16

# Classic pcap magic -> struct byte order (microsecond and nanosecond variants)
PCAP_MAGIC_ENDIAN = {
    b'\xa1\xb2\xc3\xd4': '>',
    b'\xd4\xc3\xb2\xa1': '<',
    b'\xa1\xb2\x3c\x4d': '>',
    b'\x4d\x3c\xb2\xa1': '<',
}


def check_pcap_records(trace_path: str) -> int:
    """
    Walk the record headers of a classic pcap file.

    Files that are not classic pcap (pcapng, gzip, garbage) are left to
    scapy and report 0 records.

    Args:
        trace_path: Path to the trace file

    Returns:
        Number of complete records

    Raises:
        Scapy_Exception: If a record header or body runs past the end of file
    """
    file_size = os.path.getsize(trace_path)

    with open(trace_path, 'rb') as f:
        endian = PCAP_MAGIC_ENDIAN.get(f.read(4))
        if endian is None or file_size < PCAP_GLOBAL_HEADER_SIZE:
            return 0

        offset = PCAP_GLOBAL_HEADER_SIZE
        records = 0
        while offset < file_size:
            if file_size - offset < PCAP_RECORD_HEADER_SIZE:
                raise Scapy_Exception(
                    f"Truncated pcap record header at offset {offset}: "
                    f"{file_size - offset} of {PCAP_RECORD_HEADER_SIZE} bytes")

            f.seek(offset)
            caplen = struct.unpack(endian + 'IIII', f.read(PCAP_RECORD_HEADER_SIZE))[2]
            body_end = offset + PCAP_RECORD_HEADER_SIZE + caplen
            if body_end > file_size:
                raise Scapy_Exception(
                    f"Truncated pcap record at offset {offset}: caplen={caplen}, "
                    f"only {file_size - offset - PCAP_RECORD_HEADER_SIZE} bytes captured")

            offset = body_end
            records += 1

    logger.debug(f"Pcap container check passed: {records:,} records")
    return records


def iter_frames(trace_path: str) -> Iterator[Tuple[int, Packet]]:
    """
    Yield (capture_seconds, frame) pairs from a trace file.

    Args:
        trace_path: Path to a pcap or pcapng file

    Yields:
        Tuple of capture time (whole seconds) and scapy packet
    """
    logger.info(f"Opening trace file: {trace_path}")
    check_pcap_records(trace_path)
    frame_count = 0

    with PcapReader(trace_path) as reader:
        for frame in reader:
            frame_count += 1
            yield int(frame.time), frame

    logger.info(f"Trace file exhausted: {frame_count:,} frames read")
