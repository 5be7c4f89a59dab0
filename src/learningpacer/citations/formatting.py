"""
Display helpers for source cards.

Small pure functions shared by the CLI and the Streamlit viewer:
similarity badges, excerpt truncation, quote sanity checks,
lecture names and short labels for the collapsed source list.
"""

import math
import re
from dataclasses import dataclass

from learningpacer.citations.models import ParsedCitation, RetrievedMaterial, SourceType
from learningpacer.citations.parser import COURSE_MATERIAL, UNKNOWN_SOURCE
from learningpacer.config import settings

ELLIPSIS = "…"

# Markers of a raw LangChain document dumped as JSON instead of its text
_JSON_MARKERS = ('"pageContent"', '"metadata"', '"source":', '"has_ocr"')

_LECTURE_FILENAME = re.compile(r"(\d+)-([^.]+)")
_NUMBERED_TITLE = re.compile(r"^(\d+)-(.+)$")
_NUMBERED_LABEL = re.compile(r"^\d+-.+")


def format_similarity(similarity: float | None) -> str | None:
    """0.873 -> "87%". None when retrieval gave no usable score."""
    if similarity is None or not math.isfinite(similarity):
        return None
    # Halves round up, not to even
    return f"{math.floor(similarity * 100 + 0.5)}%"


def truncate_text(text: str | None, max_length: int | None = None) -> str | None:
    """Cut text to max_length characters and append an ellipsis."""
    if max_length is None:
        max_length = settings.truncate_length
    if not text or len(text) <= max_length:
        return text
    return text[:max_length].strip() + ELLIPSIS


def get_material_content(material: RetrievedMaterial | None) -> str:
    """The material's text, whichever field it arrived in."""
    if material is None:
        return ""
    return material.excerpt or material.content or ""


def is_valid_quote(content: str | None) -> bool:
    """
    Check that content reads as a quote worth showing.

    Rejects empty or very short text, and text that is really a
    serialized document (JSON objects, arrays, metadata dumps).
    """
    if not content or not content.strip():
        return False

    trimmed = content.strip()
    if trimmed.startswith(("{", "[")):
        return False
    if any(marker in trimmed for marker in _JSON_MARKERS):
        return False

    return len(trimmed) >= settings.quote_min_length


def _is_generic_title(doc_title: str | None) -> bool:
    return not doc_title or doc_title in (
        COURSE_MATERIAL,
        UNKNOWN_SOURCE,
        settings.generic_material_title,
    )


def format_lecture_name(doc_title: str | None, material: RetrievedMaterial | None = None) -> str:
    """
    Human-readable lecture name.

    "10-IP.pdf" -> "Lecture 10: IP"

    Prefers the material's lecture_title. A generic placeholder title is
    replaced with a name derived from the material's file name or id.
    """
    if material is not None and material.lecture_title:
        return material.lecture_title

    if _is_generic_title(doc_title) and material is not None:
        filename = material.source_url or material.document_title or ""
        match = _LECTURE_FILENAME.search(filename)
        if match:
            return f"Lecture {int(match.group(1))}: {match.group(2).replace('_', ' ')}"
        if material.lecture_id:
            return material.lecture_id

    doc_title = doc_title or ""
    lowered = doc_title.lower()
    if "lecture" in lowered:
        return doc_title
    if "textbook" in lowered:
        return "Textbook"

    match = _NUMBERED_TITLE.match(doc_title)
    if match:
        name = re.sub(r"[_-]", " ", match.group(2))
        return f"Lecture {int(match.group(1))}: {name}"

    return doc_title


def get_collapsed_source_label(
        citation: ParsedCitation,
        material: RetrievedMaterial | None = None,
) -> str:
    """
    Short label for the collapsed source list.

    Textbooks show their page, lectures keep the "15-LAN_Routing"
    file-style name; the expanded card shows the full details.
    """
    doc_title = citation.document_title
    if material is not None and material.document_title is not None:
        doc_title = material.document_title

    is_textbook = (
        (material is not None and material.source_type == "Textbook")
        or citation.source_type == SourceType.TEXTBOOK
    )
    if is_textbook:
        page = citation.page_number
        if material is not None and material.page_number is not None:
            page = material.page_number
        return f"Textbook (Page {page})" if page is not None else "Textbook"

    if doc_title and _NUMBERED_LABEL.match(doc_title):
        return doc_title
    if material is not None and material.lecture_id:
        return material.lecture_id
    return doc_title or "Lecture"


def get_location_label(citation: ParsedCitation) -> str | None:
    """Badge text for a card: "Page 199", "Slide 3" or None."""
    location = citation.location
    if location is None:
        return None
    kind, number = location
    return f"{kind.capitalize()} {number}"


# ============================================================================
# Legacy single-string sources
# ============================================================================
# Before citations existed the workflow returned one "source" string,
# e.g. "Based on knowledge base (vector store)". Old messages still have it.
# ============================================================================

@dataclass(frozen=True)
class FormattedSource:
    """Display label for a legacy source string."""
    label: str
    kind: str  # knowledge-base, lecture, document or unknown


_LEGACY_LECTURE = re.compile(r"lecture[_\s]*(\d+)", re.IGNORECASE)
_LEGACY_CHAPTER = re.compile(r"chapter[_\s]*(\d+)", re.IGNORECASE)
_LEGACY_CLEANUP = (
    re.compile(r"\.pdf$", re.IGNORECASE),
    re.compile(r"\.docx?$", re.IGNORECASE),
    re.compile(r"\.txt$", re.IGNORECASE),
    re.compile(r"^Sources?:\s*", re.IGNORECASE),
    re.compile(r"^-\s*"),
    re.compile(r"^\s*based on\s*", re.IGNORECASE),
)


def format_source(raw_source: str) -> FormattedSource:
    """Turn a legacy source string into a display label."""
    lowered = raw_source.lower()

    if "knowledge base" in lowered or "vector store" in lowered or "blob" in lowered:
        return FormattedSource(label="Course Materials", kind="knowledge-base")

    match = _LEGACY_LECTURE.search(raw_source)
    if match:
        return FormattedSource(label=f"Lecture {match.group(1)}", kind="lecture")

    match = _LEGACY_CHAPTER.search(raw_source)
    if match:
        return FormattedSource(label=f"Chapter {match.group(1)}", kind="lecture")

    cleaned = raw_source
    for pattern in _LEGACY_CLEANUP:
        cleaned = pattern.sub("", cleaned)
    cleaned = cleaned.strip()

    if cleaned:
        return FormattedSource(label=cleaned[0].upper() + cleaned[1:], kind="document")

    return FormattedSource(label="Course Reference", kind="unknown")
