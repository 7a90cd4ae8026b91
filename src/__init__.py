"""
KRX Quote Reader
================

Decodes Korea Exchange B6034 quote messages (5-level bid/ask book) from UDP
multicast traffic captured in pcap/pcapng trace files.

Modules:
    - config: default feed ports, marker and message offsets
    - frame_source: lazy frame iteration over a trace file (scapy)
    - transport_filter: UDP payload extraction and feed-port filtering
    - byte_cursor: bounded Big-Endian reader
    - quote_models: immutable Quote and Level records
    - quote_decoder: B6034 payload decoding
    - quote_collector: arrival-order storage and acceptance-time ordering
    - quote_formatter: one text line per quote
    - main: command line application
"""

__version__ = '0.1.0'
