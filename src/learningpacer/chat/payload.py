"""
Read chat responses from the workflow webhook.

The webhook answers with JSON, sometimes wrapped in a "body" envelope:
    {
      "answer": "TCP uses a three-way handshake...",
      "citations": ["- ELEC3120 Textbook, Chapter 3, Page 199"],
      "retrieved_materials": [{"document_title": "...", "page_number": 199, ...}]
    }

Older deployments used "output" for the answer and a single
"source_document" / "source" string instead of citations.

Usage:
    from learningpacer.chat.payload import load_chat_payload

    response = load_chat_payload(Path("response.json"))
    print(response.answer)
"""

import json
from pathlib import Path
from typing import Any

from learningpacer.citations.models import ChatResponse, RetrievedMaterial
from learningpacer.logging import get_logger

logger = get_logger(__name__, component="payload")

DEFAULT_ANSWER = "I received your question and I'm processing it."


class PayloadError(ValueError):
    """The chat response could not be read as a JSON object."""


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def parse_chat_payload(data: dict[str, Any]) -> ChatResponse:
    """
    Build a ChatResponse from decoded webhook JSON.

    Args:
        data: The decoded JSON object

    Returns:
        ChatResponse; missing fields get their defaults
    """
    payload = data.get("body")
    if not isinstance(payload, dict):
        payload = data

    answer = payload.get("answer") or payload.get("output") or DEFAULT_ANSWER
    citations = _as_list(payload.get("citations"))

    raw_materials = _as_list(payload.get("retrieved_materials"))
    materials = [
        RetrievedMaterial.from_dict(item)
        for item in raw_materials
        if isinstance(item, dict)
    ]
    if len(materials) != len(raw_materials):
        logger.warning("invalid_materials_skipped", count=len(raw_materials) - len(materials))

    # Legacy single source, only meaningful when nothing else is attached
    source = payload.get("source_document") or payload.get("source")
    if citations or materials or not isinstance(source, str):
        source = None

    logger.debug(
        "chat_payload_parsed",
        citations=len(citations),
        materials=len(materials),
        legacy_source=source is not None,
    )

    return ChatResponse(
        answer=str(answer),
        citations=citations,
        retrieved_materials=materials,
        source=source,
    )


def load_chat_payload(path: Path | str) -> ChatResponse:
    """
    Read a chat response from a JSON file.

    Raises:
        PayloadError: If the file is not valid JSON or not a JSON object
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise PayloadError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise PayloadError(f"{path} must contain a JSON object, got {type(data).__name__}")

    logger.info("chat_payload_loaded", path=str(path))
    return parse_chat_payload(data)


def loads_chat_payload(text: str) -> ChatResponse:
    """Read a chat response from a JSON string (e.g. pasted into the viewer)."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise PayloadError(f"Payload is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise PayloadError(f"Payload must be a JSON object, got {type(data).__name__}")

    return parse_chat_payload(data)
