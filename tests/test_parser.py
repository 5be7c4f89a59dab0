"""Tests for citation parsing."""

import pytest

from learningpacer.citations.models import RetrievedMaterial, SourceType
from learningpacer.citations.parser import (
    build_citation_from_material,
    is_no_citation_message,
    parse_citation,
)


def test_parse_textbook_citation(textbook_citation_line):
    """Test the workflow's comma-separated textbook format."""
    citation = parse_citation(textbook_citation_line)

    assert citation.document_title == "ELEC3120 Textbook"
    assert citation.chapter == "Chapter 3: Transport Layer"
    assert citation.page_number == 199
    assert citation.slide_number is None
    assert citation.source_type == SourceType.TEXTBOOK


@pytest.mark.parametrize("raw, title", [
    ("ELEC3120 Textbook", "ELEC3120 Textbook"),
    ("  Lecture Notes  ", "Lecture Notes"),
    ("- Networking basics", "Networking basics"),
    ("- Networking basics (LOCAL_UPLOAD)", "Networking basics"),
])
def test_parse_citation_without_commas(raw, title):
    """A line with no commas is all title."""
    citation = parse_citation(raw)

    assert citation.document_title == title
    assert citation.chapter is None
    assert citation.page_number is None
    assert citation.slide_number is None


def test_parse_lecture_slide():
    """Test a lecture citation with a slide designator."""
    citation = parse_citation("- Lecture 5, Slide 3")

    assert citation.document_title == "Lecture 5"
    assert citation.slide_number == 3
    assert citation.page_number is None
    # The slide designator is not a topic
    assert citation.chapter is None
    assert citation.source_type == SourceType.LECTURE


def test_parse_topic_fallback():
    """Without a chapter, the second part is used as a topic."""
    citation = parse_citation("- Lecture 7, TCP Congestion Control, Slide 14")

    assert citation.chapter == "TCP Congestion Control"
    assert citation.slide_number == 14


def test_page_designator_is_not_a_topic():
    citation = parse_citation("ELEC3120 Textbook, Page 42")

    assert citation.chapter is None
    assert citation.page_number == 42


def test_parse_bold_source_format():
    """Test the "**Source**: title (Page N) [Type]" format."""
    citation = parse_citation("- **Source**: ELEC3120 Textbook (Page 199) [Textbook]")

    assert citation.document_title == "ELEC3120 Textbook"
    assert citation.page_number == 199
    assert citation.source_type == SourceType.TEXTBOOK


def test_parse_bracket_type_overrides_title():
    """A [Lecture Slides] tag sets the type even when the title does not say so."""
    citation = parse_citation("- **Source**: 01-Introduction (Page N/A) [Lecture Slides]")

    assert citation.document_title == "01-Introduction"
    assert citation.page_number is None
    assert citation.source_type == SourceType.LECTURE


def test_parse_page_not_available():
    citation = parse_citation("ELEC3120 Textbook, Chapter 1, Page N/A")

    assert citation.page_number is None
    assert citation.chapter == "Chapter 1"


def test_parse_unknown_source_type():
    citation = parse_citation("- RFC 793, Section 3.4")

    assert citation.source_type == SourceType.UNKNOWN
    assert citation.chapter == "Section 3.4"


def test_parse_numbered_title_is_lecture():
    assert parse_citation("15-LAN_Routing, Slide 2").source_type == SourceType.LECTURE


@pytest.mark.parametrize("raw", ["", "-", "   ", ", Page 3"])
def test_parse_empty_title_defaults(raw):
    """Unparseable lines still give a citation."""
    citation = parse_citation(raw)

    assert citation.document_title == "Unknown Source"


def test_parse_zero_page_dropped():
    assert parse_citation("Textbook, Page 0").page_number is None


def test_location_prefers_page():
    citation = parse_citation("Textbook, Page 4, Slide 9")

    assert citation.location == ("page", 4)


def test_is_no_citation_message_empty():
    assert is_no_citation_message([]) is True
    assert is_no_citation_message(None) is True


@pytest.mark.parametrize("citations", [
    ["Answer uses general knowledge"],
    ["No course materials were used for this answer."],
    ["- Lecture 5, Slide 3", "NOT FROM COURSE MATERIALS"],
    ["No specific lecture slides were retrieved"],
])
def test_is_no_citation_message_phrases(citations):
    assert is_no_citation_message(citations) is True


def test_is_no_citation_message_real_citations():
    assert is_no_citation_message(["- Lecture 5, Slide 3"]) is False


def test_is_no_citation_message_ignores_non_strings():
    """Objects from the API are real citation payloads."""
    assert is_no_citation_message([{"title": "general knowledge"}]) is False


def test_build_citation_from_material():
    material = RetrievedMaterial(
        document_title="ELEC3120 Textbook",
        chapter="Chapter 4",
        page_number=310,
    )

    citation = build_citation_from_material(material)

    assert citation.document_title == "ELEC3120 Textbook"
    assert citation.chapter == "Chapter 4"
    assert citation.page_number == 310
    assert citation.source_type == SourceType.TEXTBOOK


def test_build_citation_from_material_prefers_lecture_title():
    material = RetrievedMaterial(
        document_title="10-IP.pdf",
        lecture_title="Lecture 10: IP",
        slide_number=4,
    )

    citation = build_citation_from_material(material)

    assert citation.document_title == "Lecture 10: IP"
    assert citation.slide_number == 4
    assert citation.source_type == SourceType.LECTURE


def test_build_citation_from_material_without_title():
    citation = build_citation_from_material(RetrievedMaterial(source_type="Textbook"))

    assert citation.document_title == "Course Material"
    assert citation.source_type == SourceType.TEXTBOOK
