"""
Chat source cards.

This module handles:
- Parsing raw citation strings from the chat workflow
- Matching citations to retrieved course materials
- Folding in uncited materials and deduplicating cards
- Display helpers (similarity, excerpts, lecture names)
"""

from learningpacer.citations.models import (
    ChatResponse,
    CitationCard,
    ParsedCitation,
    RetrievedMaterial,
    SourceType,
)
from learningpacer.citations.parser import (
    build_citation_from_material,
    is_no_citation_message,
    parse_citation,
)
from learningpacer.citations.matching import match_material_to_citation
from learningpacer.citations.section import (
    CitationMode,
    build_citation_cards,
    get_citation_dedupe_key,
    select_citation_mode,
)
from learningpacer.citations.formatting import (
    FormattedSource,
    format_lecture_name,
    format_similarity,
    format_source,
    get_collapsed_source_label,
    get_location_label,
    get_material_content,
    is_valid_quote,
    truncate_text,
)

__all__ = [
    "ChatResponse",
    "CitationCard",
    "ParsedCitation",
    "RetrievedMaterial",
    "SourceType",
    "build_citation_from_material",
    "is_no_citation_message",
    "parse_citation",
    "match_material_to_citation",
    "CitationMode",
    "build_citation_cards",
    "get_citation_dedupe_key",
    "select_citation_mode",
    "FormattedSource",
    "format_lecture_name",
    "format_similarity",
    "format_source",
    "get_collapsed_source_label",
    "get_location_label",
    "get_material_content",
    "is_valid_quote",
    "truncate_text",
]
