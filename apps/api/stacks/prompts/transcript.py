"""
Voice-call transcript prompts.

  PROMPT_EXTRACT_TRANSCRIPT  transcript -> profile JSON (fixed output schema)
  PROMPT_TRANSLATE_PROFILE   profile JSON (non-English text) -> same JSON in English

Placeholders (double-brace, replace before sending to LLM):
  - {{TRANSCRIPT}}    conversation transcript
  - {{PROFILE_JSON}}  previously extracted profile JSON (translation)
"""

PROFILE_JSON_SCHEMA = """{
  "bio": "2-3 sentence bio based on their description",
  "personalMission": "extracted from 'what are you curious about' or 'what you want to get better at'",
  "lifePhilosophy": "extracted from their values or principles",
  "skills": ["skill1", "skill2", "skill3"],
  "experience": [
    {
      "title": "Job Title",
      "company": "Company Name",
      "description": "What they did",
      "startDate": "YYYY-MM-DD or null",
      "endDate": "YYYY-MM-DD or null",
      "currentlyWorking": true
    }
  ],
  "education": [
    {
      "school": "School Name",
      "degree": "Degree",
      "fieldOfStudy": "Field",
      "startDate": "YYYY-MM-DD or null",
      "endDate": "YYYY-MM-DD or null"
    }
  ],
  "projects": [
    {
      "name": "Project Name",
      "tagline": "One line description",
      "description": "Full description",
      "status": "wip or completed"
    }
  ]
}"""

PROMPT_EXTRACT_TRANSCRIPT = """Extract structured profile information from this conversation transcript.
Return ONLY valid JSON (no markdown, no code fence).

STRICT RULES:
1) Do NOT invent facts that the speaker did not say.
2) Keep names of companies, schools, and projects exactly as spoken.
3) If any section has no data, return an empty array or null.

Transcript:
{{TRANSCRIPT}}

Return this exact JSON structure:
{{SCHEMA}}
"""

PROMPT_TRANSLATE_PROFILE = """Translate this conversation data to English while preserving meaning.
Keep every key, array, null, and boolean exactly as given; translate only the text values.
Return ONLY valid JSON with the same structure (no markdown, no code fence).

{{PROFILE_JSON}}
"""


def fill_prompt(
    template: str,
    *,
    transcript: str | None = None,
    profile_json: str | None = None,
) -> str:
    out = template.replace("{{SCHEMA}}", PROFILE_JSON_SCHEMA)
    if transcript is not None:
        out = out.replace("{{TRANSCRIPT}}", transcript)
    if profile_json is not None:
        out = out.replace("{{PROFILE_JSON}}", profile_json)
    return out
