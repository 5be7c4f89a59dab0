"""
LearningPacer - source cards for the ELEC3120 chat assistant.

This package turns the citations and retrieved materials returned by the
course's RAG workflow into structured, deduplicated source cards.
"""

__version__ = "0.1.0"
