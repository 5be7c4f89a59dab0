"""Pytest configuration and shared fixtures."""

import json

import pytest
from pathlib import Path


@pytest.fixture
def textbook_citation_line() -> str:
    """Citation line in the workflow's comma-separated format."""
    return "- ELEC3120 Textbook, Chapter 3: Transport Layer, Page 199 (LOCAL_UPLOAD)"


@pytest.fixture
def sample_materials():
    """Retrieved materials for one chat turn, in retrieval order."""
    from learningpacer.citations.models import RetrievedMaterial

    return [
        RetrievedMaterial(
            document_title="Textbook",
            chapter="Chapter 3: Transport Layer",
            page_number=199,
            similarity=0.873,
            excerpt="TCP provides a reliable, in-order byte stream between two hosts.",
            source_url="LOCAL_UPLOAD",
        ),
        RetrievedMaterial(
            document_title="Textbook",
            chapter="Chapter 3: Transport Layer",
            page_number=50,
            similarity=0.61,
            excerpt="UDP is a connectionless protocol without delivery guarantees.",
        ),
        RetrievedMaterial(
            document_title="05-TCP_Congestion",
            slide_number=12,
            similarity=0.55,
            content="Congestion window halves on triple duplicate ACK in TCP Reno.",
            source_url="https://example.edu/elec3120/05-TCP_Congestion.pdf",
        ),
    ]


@pytest.fixture
def sample_payload() -> dict:
    """Webhook response wrapped in a body envelope."""
    return {
        "body": {
            "answer": "TCP is **reliable**.",
            "citations": [
                "- ELEC3120 Textbook, Chapter 3: Transport Layer, Page 199 (LOCAL_UPLOAD)",
            ],
            "retrieved_materials": [
                {
                    "document_title": "Textbook",
                    "chapter": "Chapter 3: Transport Layer",
                    "page_number": 199,
                    "similarity": 0.873,
                    "excerpt": "TCP provides a reliable, in-order byte stream between two hosts.",
                    "source_url": "LOCAL_UPLOAD",
                },
                {
                    "document_title": "05-TCP_Congestion",
                    "slide_number": "12",
                    "page_number": "N/A",
                    "similarity": 0.55,
                    "content": "Congestion window halves on triple duplicate ACK in TCP Reno.",
                },
            ],
        }
    }


@pytest.fixture
def payload_file(tmp_path, sample_payload) -> Path:
    """Sample payload written to disk."""
    path = tmp_path / "response.json"
    path.write_text(json.dumps(sample_payload), encoding="utf-8")
    return path
