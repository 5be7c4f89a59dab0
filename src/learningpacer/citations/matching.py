"""
Match parsed citations to the materials retrieval returned.

The model's citation text and the retrieval metadata rarely agree
exactly: the model writes "ELEC3120 Textbook", retrieval says
"Textbook"; the model writes "Chapter 3", retrieval says
"Chapter 3: Transport Layer". So matching is loose substring
matching in both directions, with the course prefix removed.

A material matches when title, page and chapter all agree.
The first matching material wins. Materials are never re-sorted,
so the order retrieval returned them in decides ties.

Usage:
    from learningpacer.citations.matching import match_material_to_citation

    material = match_material_to_citation(citation, materials)
    if material is not None:
        print(material.excerpt)
"""

from collections.abc import Sequence

from learningpacer.citations.models import ParsedCitation, RetrievedMaterial, as_material
from learningpacer.config import settings
from learningpacer.logging import get_logger

logger = get_logger(__name__, component="matching")


def _contains_either_way(a: str, b: str) -> bool:
    """Case-insensitive substring match in either direction."""
    a, b = a.lower(), b.lower()
    return b in a or a in b


def _title_matches(citation: ParsedCitation, material: RetrievedMaterial) -> bool:
    cited = citation.document_title.lower()
    title = (material.document_title or "").lower()
    # Only the material side is checked against the prefix-free title
    return cited.replace(settings.course_title_prefix, "", 1) in title or title in cited


def _page_matches(citation: ParsedCitation, material: RetrievedMaterial) -> bool:
    return not citation.page_number or material.page_number == citation.page_number


def _chapter_matches(citation: ParsedCitation, material: RetrievedMaterial) -> bool:
    return not citation.chapter or _contains_either_way(material.chapter or "", citation.chapter)


def match_material_to_citation(
        citation: ParsedCitation,
        materials: Sequence[RetrievedMaterial] | None,
) -> RetrievedMaterial | None:
    """
    Find the retrieved material a citation refers to.

    Args:
        citation: Parsed citation
        materials: Materials from the same chat turn, in retrieval order

    Returns:
        The first material whose title, page and chapter all match,
        or None
    """
    if not materials:
        return None

    for material in map(as_material, materials):
        if (
            _title_matches(citation, material)
            and _page_matches(citation, material)
            and _chapter_matches(citation, material)
        ):
            logger.debug(
                "material_matched",
                citation=citation.document_title,
                material=material.document_title,
                page=material.page_number,
            )
            return material

    logger.debug("material_not_matched", citation=citation.document_title)
    return None
