"""
UDP Transport Filter
====================

Extracts UDP payloads addressed to the quote feed channels.

A frame is accepted only when:
1. It dissects to a UDP datagram (any link layer scapy understands)
2. Its destination port is one of the feed ports (15515, 15516 by default)

Everything else (ARP, TCP, truncated or malformed frames, other UDP traffic)
is discarded without error; the reason is counted in the statistics.
"""

import struct
import logging
from typing import Dict, Optional, Union

from scapy.layers.inet import UDP
from scapy.layers.l2 import Ether
from scapy.packet import Packet

from config import build_config

logger = logging.getLogger(__name__)


class TransportFilter:
    """
    Destination-port filter for captured frames.

    Accepts scapy packets (as produced by the frame source) or raw
    Ethernet frame bytes.
    """

    def __init__(self, config: Optional[Dict] = None):
        self.config = build_config(config)
        self.feed_ports = frozenset(self.config['feed_ports'])

        self.stats = {
            'frames_seen': 0,
            'non_udp': 0,
            'port_mismatch': 0,
            'payloads_accepted': 0
        }
        logger.info(f"TransportFilter initialized - feed ports: {sorted(self.feed_ports)}")

    def extract_payload(self, frame: Union[Packet, bytes]) -> Optional[bytes]:
        """
        Return the UDP payload of a feed-port datagram, or None.

        Args:
            frame: scapy packet or raw Ethernet frame bytes

        Returns:
            UDP payload bytes if the frame is UDP to a feed port, else None
        """
        self.stats['frames_seen'] += 1

        if isinstance(frame, (bytes, bytearray)):
            try:
                frame = Ether(bytes(frame))
            except struct.error:
                self.stats['non_udp'] += 1
                logger.debug(f"Discarding undecodable frame of {len(frame)} bytes")
                return None

        if UDP not in frame:
            self.stats['non_udp'] += 1
            logger.debug(f"Discarding non-UDP frame ({frame.name})")
            return None

        datagram = frame[UDP]
        if datagram.dport not in self.feed_ports:
            self.stats['port_mismatch'] += 1
            logger.debug(f"Discarding UDP datagram to port {datagram.dport}")
            return None

        self.stats['payloads_accepted'] += 1
        return bytes(datagram.payload)

    def get_stats(self) -> Dict:
        """Get filter statistics."""
        return self.stats.copy()

    def reset_stats(self):
        """Reset statistics counters."""
        for key in self.stats:
            self.stats[key] = 0
