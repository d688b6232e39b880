"""
Cross-domain messaging for fiatbridge.

This module provides the messenger the bridge consumes:
- Per-domain messenger contracts with sender attestation
- At-most-once delivery with failed-message replay
- An in-memory, unordered, asynchronous channel between two domains
"""

from .channel import CrossDomainChannel, MessageChannel
from .messenger import (
    FAILED_RELAYED_MESSAGE,
    RELAYED_MESSAGE,
    SENT_MESSAGE,
    CrossDomainMessage,
    CrossDomainMessenger,
)

__all__ = [
    "CrossDomainMessage",
    "CrossDomainMessenger",
    "MessageChannel",
    "CrossDomainChannel",
    "SENT_MESSAGE",
    "RELAYED_MESSAGE",
    "FAILED_RELAYED_MESSAGE",
]
