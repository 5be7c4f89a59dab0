"""
Build the source cards shown under a chat answer.

Pipeline for one chat turn:
1. Drop non-string citations; a "general knowledge" message means no citations
2. Parse each citation and match it to a retrieved material
3. Fold in materials no citation pointed at, as cards of their own
4. Deduplicate, keeping the first card for each source location and excerpt.
   A card with no material collapses with anything at its title and location

Usage:
    from learningpacer.citations.section import build_citation_cards

    cards = build_citation_cards(response.citations, response.retrieved_materials)
    for card in cards:
        print(card.citation.document_title, card.material is not None)
"""

import re
from collections.abc import Sequence
from enum import Enum
from typing import Any

from learningpacer.citations.formatting import get_material_content
from learningpacer.citations.matching import match_material_to_citation
from learningpacer.citations.models import (
    ChatResponse,
    CitationCard,
    ParsedCitation,
    RetrievedMaterial,
    as_material,
)
from learningpacer.citations.parser import (
    build_citation_from_material,
    is_no_citation_message,
    parse_citation,
)
from learningpacer.config import settings
from learningpacer.logging import get_logger

logger = get_logger(__name__, component="citation_section")

_WHITESPACE = re.compile(r"\s+")


class CitationMode(str, Enum):
    """What to show under an answer."""
    CITATIONS = "citations"
    GENERAL_KNOWLEDGE = "general_knowledge"
    LEGACY = "legacy"
    NONE = "none"


def _normalize(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip().lower()


def _material_id(material: RetrievedMaterial) -> str:
    """Identity of a material for "already cited" bookkeeping."""
    return f"{material.document_title}-{material.page_number}-{material.slide_number}"


def _location_key(citation: ParsedCitation) -> str:
    location = citation.location
    location_key = f"{location[0]}:{location[1]}" if location else "-"
    return f"{_normalize(citation.document_title)}|{location_key}"


def get_citation_dedupe_key(
        citation: ParsedCitation,
        material: RetrievedMaterial | None = None,
) -> str:
    """
    Key under which two cards count as the same source.

    Combines the title, the page or slide, and the start of the
    supporting excerpt (empty for unmatched citations).
    """
    content = _normalize(get_material_content(material))[: settings.dedupe_content_chars]
    return f"{_location_key(citation)}|{content}"


def build_citation_cards(
        citations: Sequence[Any] | None,
        materials: Sequence[RetrievedMaterial] | None = None,
) -> list[CitationCard]:
    """
    Turn one chat turn's citations and materials into source cards.

    Args:
        citations: Raw citation entries; non-strings are ignored
        materials: Retrieved materials in retrieval order

    Returns:
        Deduplicated cards, cited sources first. Empty means render nothing.
    """
    raw_citations = [item for item in citations or [] if isinstance(item, str)]
    if citations and len(raw_citations) != len(citations):
        logger.debug("non_string_citations_dropped", count=len(citations) - len(raw_citations))

    if is_no_citation_message(raw_citations):
        raw_citations = []

    materials = [as_material(material) for material in materials or []]

    cited_cards: list[CitationCard] = []
    matched_material_ids: set[str] = set()
    for raw in raw_citations:
        citation = parse_citation(raw)
        material = match_material_to_citation(citation, materials)
        if material is not None:
            matched_material_ids.add(_material_id(material))
        cited_cards.append(CitationCard(citation=citation, material=material))

    uncited_cards = [
        CitationCard(citation=build_citation_from_material(material), material=material)
        for material in materials
        if material.document_title and _material_id(material) not in matched_material_ids
    ]

    # Cards without material collapse on title and location alone
    cards: list[CitationCard] = []
    seen: set[str] = set()
    seen_locations: set[str] = set()
    bare_locations: set[str] = set()
    for card in cited_cards + uncited_cards:
        key = get_citation_dedupe_key(card.citation, card.material)
        location_key = _location_key(card.citation)
        if (
            key in seen
            or location_key in bare_locations
            or (card.material is None and location_key in seen_locations)
        ):
            continue
        seen.add(key)
        seen_locations.add(location_key)
        if card.material is None:
            bare_locations.add(location_key)
        cards.append(card)

    logger.debug(
        "citation_cards_built",
        citations=len(raw_citations),
        materials=len(materials),
        matched=len(matched_material_ids),
        cards=len(cards),
    )

    return cards


def select_citation_mode(response: ChatResponse) -> CitationMode:
    """
    Decide what goes under an answer.

    Real citations or any retrieved material give source cards. A
    "general knowledge" message with nothing retrieved gives the
    general-knowledge notice. Old messages fall back to their single
    legacy source string.
    """
    has_citations = bool(response.citations) and not is_no_citation_message(response.citations)

    if has_citations or response.retrieved_materials:
        return CitationMode.CITATIONS
    if response.citations:
        return CitationMode.GENERAL_KNOWLEDGE
    if response.source:
        return CitationMode.LEGACY
    return CitationMode.NONE
