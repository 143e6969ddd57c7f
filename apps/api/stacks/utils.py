"""Shared utilities."""


def strip_json_from_response(raw: str) -> str:
    """Strip markdown/code fences from an LLM response and return JSON text."""
    s = (raw or "").strip()
    if "```" not in s:
        return s
    for part in s.split("```"):
        p = part.strip()
        if p.lower().startswith("json"):
            p = p[4:].strip()
        if p.startswith("{"):
            return p
    return s


def normalize_url_key(url: str | None) -> str:
    """Comparison key for URLs: lowercased, scheme, www. and trailing slash dropped."""
    s = (url or "").strip().lower()
    for prefix in ("https://", "http://"):
        if s.startswith(prefix):
            s = s[len(prefix):]
            break
    if s.startswith("www."):
        s = s[4:]
    return s.rstrip("/")
