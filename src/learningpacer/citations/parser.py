"""
Parse raw citation strings from the chat workflow.

The model writes citations as free text, in a few shapes:
    "- ELEC3120 Textbook, Chapter 3: Transport Layer, Page 199 (LOCAL_UPLOAD)"
    "- **Source**: ELEC3120 Textbook (Page 199) [Textbook]"
    "- **Source**: 01-Introduction (Page N/A) [Lecture Slides]"
    "- Lecture 5, Slide 3"

Parsing is best-effort and never fails: anything we cannot read
falls back to "Unknown Source" with no chapter or location.

Usage:
    from learningpacer.citations.parser import parse_citation

    citation = parse_citation("- ELEC3120 Textbook, Chapter 3, Page 199")
    citation.page_number  # 199
"""

import re
from collections.abc import Sequence
from typing import Any

from learningpacer.citations.models import (
    ParsedCitation,
    RetrievedMaterial,
    SourceType,
    coerce_positive_int,
)

UNKNOWN_SOURCE = "Unknown Source"
COURSE_MATERIAL = "Course Material"

# Phrases the workflow uses when the answer did not come from course materials
NO_CITATION_PHRASES = (
    "no course materials",
    "no materials were retrieved",
    "general knowledge",
    "not from course materials",
    "no specific lecture slides were retrieved",
)

# ============================================================================
# Patterns
# ============================================================================

_LEADING_DASH = re.compile(r"^-\s*")
_SOURCE_PREFIX = re.compile(r"^Source:\s*", re.IGNORECASE)
_BRACKET_TYPE = re.compile(r"\[(Textbook|Lecture Slides|Lecture|Unknown)\]\s*$", re.IGNORECASE)
_TRAILING_BRACKET = re.compile(r"\s*\[[^\]]+\]\s*$")
_UPLOAD_SUFFIX = re.compile(r"\s*\([^)]*UPLOAD[^)]*\)\s*$", re.IGNORECASE)
_PAREN_PAGE = re.compile(r"\s*\(Page\s*(\d+)\)", re.IGNORECASE)
_PAREN_PAGE_NA = re.compile(r"\s*\(Page\s*N/A\)", re.IGNORECASE)
_PAREN_SLIDE = re.compile(r"\s*\(Slide\s*(\d+)\)", re.IGNORECASE)
_PAGE = re.compile(r"page\s*(\d+)", re.IGNORECASE)
_PAGE_NA = re.compile(r"page\s*N/A", re.IGNORECASE)
_SLIDE = re.compile(r"slide\s*(\d+)", re.IGNORECASE)
_SLIDE_NA = re.compile(r"slide\s*N/A", re.IGNORECASE)
_NUMBERED_LECTURE = re.compile(r"^\d+-")


def _take_paren_number(pattern: re.Pattern, text: str) -> tuple[int | None, str]:
    """Pull a "(Page 12)"-style number out of text, returning it and the rest."""
    match = pattern.search(text)
    number = int(match.group(1)) if match else None
    return number, pattern.sub("", text, count=1).strip()


def _find_designator(
        parts: list[str],
        pattern: re.Pattern,
        not_available: re.Pattern,
) -> tuple[str | None, int | None]:
    """First part carrying a "Page 12" / "Slide 3" designator and its number."""
    for part in parts:
        if not_available.search(part):
            continue
        match = pattern.search(part)
        if match:
            return part, int(match.group(1))
    return None, None


def _infer_source_type(title: str, hint: str | None = None) -> SourceType:
    """Source type from a bracket tag if we have one, otherwise from the title."""
    if hint and "textbook" in hint:
        return SourceType.TEXTBOOK
    if hint and "lecture" in hint:
        return SourceType.LECTURE

    lowered = title.lower()
    if "textbook" in lowered:
        return SourceType.TEXTBOOK
    if "lecture" in lowered or _NUMBERED_LECTURE.match(title):
        return SourceType.LECTURE
    return SourceType.UNKNOWN


def parse_citation(raw: str) -> ParsedCitation:
    """
    Parse a raw citation line into a ParsedCitation.

    Steps:
    1. Strip the list dash, markdown bold and a "Source:" prefix
    2. Strip trailing "[Textbook]" tags and "(LOCAL_UPLOAD)" suffixes
    3. Pull out "(Page N)" / "(Slide N)" parentheticals
    4. Split on commas: the first part is the title, the rest are
       chapter, page and slide designators

    Args:
        raw: One citation line as written by the model

    Returns:
        Best-effort ParsedCitation; never raises
    """
    cleaned = _LEADING_DASH.sub("", raw.strip()).replace("**", "")
    cleaned = _SOURCE_PREFIX.sub("", cleaned.strip()).strip()

    bracket_match = _BRACKET_TYPE.search(cleaned)
    bracket_hint = bracket_match.group(1).lower() if bracket_match else None
    cleaned = _TRAILING_BRACKET.sub("", cleaned).strip()
    cleaned = _UPLOAD_SUFFIX.sub("", cleaned).strip()

    paren_page, cleaned = _take_paren_number(_PAREN_PAGE, cleaned)
    cleaned = _PAREN_PAGE_NA.sub("", cleaned).strip()
    paren_slide, cleaned = _take_paren_number(_PAREN_SLIDE, cleaned)

    parts = [part.strip() for part in cleaned.split(",")]
    document_title = parts[0] or UNKNOWN_SOURCE
    details = parts[1:]

    chapter = next((part for part in details if "chapter" in part.lower()), None)

    page_part, page_number = _find_designator(details, _PAGE, _PAGE_NA)
    slide_part, slide_number = _find_designator(details, _SLIDE, _SLIDE_NA)
    if page_number is None:
        page_number = paren_page
    if slide_number is None:
        slide_number = paren_slide

    # Lecture notes carry a topic instead of a chapter: "Lecture 5, TCP Congestion"
    if chapter is None and details:
        topic = details[0]
        if (
            topic
            and not (page_part and topic in page_part)
            and not (slide_part and topic in slide_part)
        ):
            chapter = topic

    return ParsedCitation(
        document_title=document_title,
        source_type=_infer_source_type(document_title, bracket_hint),
        chapter=chapter,
        page_number=coerce_positive_int(page_number),
        slide_number=coerce_positive_int(slide_number),
    )


def build_citation_from_material(material: RetrievedMaterial) -> ParsedCitation:
    """
    Build a citation straight from a retrieved material.

    Used for materials that no citation string pointed at, so the
    student still sees everything retrieval found.
    """
    title = material.lecture_title or material.document_title or COURSE_MATERIAL
    is_textbook = (
        material.source_type == "Textbook"
        or "textbook" in (material.document_title or "").lower()
    )

    return ParsedCitation(
        document_title=title,
        source_type=SourceType.TEXTBOOK if is_textbook else SourceType.LECTURE,
        chapter=material.chapter or None,
        page_number=coerce_positive_int(material.page_number),
        slide_number=coerce_positive_int(material.slide_number),
    )


def is_no_citation_message(citations: Sequence[Any] | None) -> bool:
    """
    Check whether the citations say no course materials were used.

    An empty or missing list counts as "no citations". Entries that are
    not strings are real citation payloads, never a sentinel message.
    """
    if not citations:
        return True

    for item in citations:
        if not isinstance(item, str):
            continue
        lowered = item.lower()
        if any(phrase in lowered for phrase in NO_CITATION_PHRASES):
            return True
    return False
