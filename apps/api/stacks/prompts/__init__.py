"""
LLM prompt templates for voice-call transcript extraction.

Placeholders (double-brace, replace before sending to LLM):
  - {{TRANSCRIPT}}    call transcript (extraction)
  - {{SCHEMA}}        output JSON schema (extraction)
  - {{PROFILE_JSON}}  extracted profile JSON (translation)
"""

from .transcript import (
    PROFILE_JSON_SCHEMA,
    PROMPT_EXTRACT_TRANSCRIPT,
    PROMPT_TRANSLATE_PROFILE,
    fill_prompt,
)

__all__ = [
    "PROFILE_JSON_SCHEMA",
    "PROMPT_EXTRACT_TRANSCRIPT",
    "PROMPT_TRANSLATE_PROFILE",
    "fill_prompt",
]
