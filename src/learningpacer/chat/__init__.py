"""
Chat responses from the course workflow.

This module handles:
- Unwrapping the webhook JSON envelope
- Reading citations, retrieved materials and legacy sources
"""

from learningpacer.chat.payload import (
    PayloadError,
    load_chat_payload,
    loads_chat_payload,
    parse_chat_payload,
)

__all__ = [
    "PayloadError",
    "load_chat_payload",
    "loads_chat_payload",
    "parse_chat_payload",
]
