"""
KRX Quote Reader Configuration
==============================

Default settings for the quote pipeline.

The reader takes no configuration file and no environment variables; every
component receives a plain dictionary built from DEFAULT_CONFIG, optionally
with overrides (tests use this to point the filter at other ports).

Feed Details:
- Channel ports: 15515 and 15516 (UDP multicast, KOSPI quote channels)
- Quote message marker: ASCII "B6034" at payload offset 34
- Minimum decodable payload: 143 bytes
- Acceptance time: 8 ASCII digits at payload offset 240
"""

import logging
from typing import Dict, Optional

DEFAULT_CONFIG = {
    'feed_ports': (15515, 15516),
    'quote_marker': b'B6034',
    'marker_offset': 34,
    'min_payload_size': 143,
    'accept_time_offset': 240,
    'book_depth': 5,
    'log_level': logging.WARNING,
}


def build_config(overrides: Optional[Dict] = None) -> Dict:
    """
    Merge overrides on top of DEFAULT_CONFIG.

    Args:
        overrides: Optional dictionary of settings to replace

    Returns:
        New configuration dictionary (DEFAULT_CONFIG is never modified)

    Raises:
        KeyError: If an override names an unknown setting
    """
    config = dict(DEFAULT_CONFIG)
    for key, value in (overrides or {}).items():
        if key not in DEFAULT_CONFIG:
            raise KeyError(f"Unknown configuration key: {key}")
        config[key] = value
    return config
