"""
Data structures for chat sources.

A chat answer arrives with two lists from the upstream RAG workflow:
- citations: raw strings the model wrote, e.g.
  "- ELEC3120 Textbook, Chapter 3: Transport Layer, Page 199 (LOCAL_UPLOAD)"
- retrieved_materials: the excerpts retrieval actually returned, with scores

ParsedCitation is what we derive from a raw string. RetrievedMaterial is
the upstream excerpt record. A CitationCard pairs the two for display.

Usage:
    from learningpacer.citations.models import RetrievedMaterial

    material = RetrievedMaterial.from_dict({
        "document_title": "ELEC3120 Textbook",
        "page_number": 199,
        "similarity": 0.87,
        "excerpt": "TCP provides a reliable data transfer service...",
    })
"""

import math
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class SourceType(str, Enum):
    """Kind of course material a citation points at."""
    TEXTBOOK = "textbook"
    LECTURE = "lecture"
    UNKNOWN = "unknown"


def coerce_positive_int(value: Any) -> int | None:
    """
    Turn an upstream page/slide value into a positive int.

    The workflow sends numbers, numeric strings, "N/A" or nothing.
    Anything that is not a positive integer becomes None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            return None
        value = int(value)
    if isinstance(value, int) and value > 0:
        return value
    return None


@dataclass(frozen=True)
class ParsedCitation:
    """
    Structured form of a raw citation line.

    page_number and slide_number are independent. Upstream never sends
    both, but nothing stops it; location reports the page in that case.
    """
    document_title: str
    chapter: str | None = None
    page_number: int | None = None
    slide_number: int | None = None
    source_type: SourceType = SourceType.UNKNOWN

    @property
    def location(self) -> tuple[str, int] | None:
        """("page", n), ("slide", n) or None."""
        if self.page_number:
            return ("page", self.page_number)
        if self.slide_number:
            return ("slide", self.slide_number)
        return None


@dataclass(frozen=True)
class RetrievedMaterial:
    """
    One excerpt returned by retrieval for a chat turn.

    excerpt and content are two names for the same text: the current
    workflow sends excerpt, older messages stored content.
    """
    document_title: str | None = None
    chapter: str | None = None
    page_number: int | None = None
    slide_number: int | None = None
    similarity: float | None = None
    excerpt: str | None = None
    content: str | None = None
    source_url: str | None = None
    lecture_title: str | None = None
    lecture_id: str | None = None
    source_type: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RetrievedMaterial":
        """
        Build a material from an upstream JSON object.

        Unknown keys are ignored, page/slide numbers are coerced,
        and a non-numeric or non-finite similarity is dropped.
        """
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}

        values["page_number"] = coerce_positive_int(values.get("page_number"))
        values["slide_number"] = coerce_positive_int(values.get("slide_number"))

        similarity = values.get("similarity")
        if isinstance(similarity, bool) or not isinstance(similarity, (int, float)):
            similarity = None
        elif not math.isfinite(similarity):
            similarity = None
        values["similarity"] = float(similarity) if similarity is not None else None

        for key in ("document_title", "chapter", "excerpt", "content",
                    "source_url", "lecture_title", "lecture_id", "source_type"):
            value = values.get(key)
            if value is not None and not isinstance(value, str):
                values[key] = str(value)

        return cls(**values)


def as_material(obj: "RetrievedMaterial | dict[str, Any]") -> RetrievedMaterial:
    """Accept either a RetrievedMaterial or the raw upstream dict."""
    if isinstance(obj, RetrievedMaterial):
        return obj
    return RetrievedMaterial.from_dict(obj)


@dataclass(frozen=True)
class CitationCard:
    """A citation ready to render, with its supporting material if one matched."""
    citation: ParsedCitation
    material: RetrievedMaterial | None = None


@dataclass
class ChatResponse:
    """
    A chat answer as returned by the workflow webhook.

    source is the legacy single-string attribution; it is only kept
    when the response carries neither citations nor materials.
    """
    answer: str
    citations: list[Any] = field(default_factory=list)
    retrieved_materials: list[RetrievedMaterial] = field(default_factory=list)
    source: str | None = None
