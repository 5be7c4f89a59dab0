"""
LearningPacer source-card viewer.

Paste a chat response from the course workflow and see the answer
with its source cards, the way students see them.

Run with: streamlit run streamlit_app/app.py
"""

import streamlit as st

from learningpacer.chat import PayloadError, loads_chat_payload
from learningpacer.citations import (
    CitationMode,
    build_citation_cards,
    format_similarity,
    format_source,
    get_collapsed_source_label,
    get_location_label,
    get_material_content,
    is_valid_quote,
    select_citation_mode,
    truncate_text,
)
from learningpacer.config import settings
from learningpacer.logging import configure_logging

configure_logging()

st.set_page_config(
    page_title="LearningPacer - Sources",
    page_icon="📚",
    layout="wide",
)

st.title("📚 LearningPacer")
st.markdown(f"*Source cards for the {settings.course_code} chat assistant*")

raw_payload = st.text_area("Chat response JSON", height=240)

if raw_payload.strip():
    try:
        response = loads_chat_payload(raw_payload)
    except PayloadError as e:
        st.error(str(e))
        st.stop()

    st.markdown(response.answer)

    mode = select_citation_mode(response)

    if mode == CitationMode.GENERAL_KNOWLEDGE:
        st.warning(
            "**General Knowledge** - This answer is based on general knowledge, "
            "not course materials. Verify with your slides."
        )
    elif mode == CitationMode.LEGACY:
        st.caption(f"Source: {format_source(response.source).label}")
    elif mode == CitationMode.CITATIONS:
        cards = build_citation_cards(response.citations, response.retrieved_materials)
        if cards:
            st.subheader(f"Sources ({len(cards)})")
        for card in cards:
            citation, material = card.citation, card.material
            location = get_location_label(citation)
            title = get_collapsed_source_label(citation, material)

            with st.expander(title):
                st.markdown(f"**{citation.document_title}**")
                if citation.chapter:
                    st.caption(citation.chapter)
                if location:
                    st.markdown(f"`{location}`")

                content = get_material_content(material)
                if material is not None and is_valid_quote(content):
                    st.markdown("*Why this source?*")
                    st.markdown(f"> {truncate_text(content, settings.preview_length)}")
                    similarity = format_similarity(material.similarity)
                    if similarity:
                        st.caption(f"{similarity} match")
                    if material.source_url and material.source_url != "LOCAL_UPLOAD":
                        st.caption(f"Source: {material.source_url}")
