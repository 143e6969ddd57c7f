"""
Short biography synthesis for account imports that carry no bio of their own.

Each strategy reads the extraction result plus the parts already chosen and
returns one fragment or None. Fragments are joined with " • " and closed with a
motivational ending picked by an injectable selector, so tests can pin output.
"""

from __future__ import annotations

import random
from typing import Callable, Optional, Sequence

from stacks.domain import ExtractionResult

BioStrategy = Callable[[ExtractionResult, list[str]], Optional[str]]
Selector = Callable[[Sequence[str]], str]

BIO_SEPARATOR = " • "

MOTIVATIONAL_ENDINGS: tuple[str, ...] = (
    "Building the future, one project at a time ✨",
    "Always learning, always building 🚀",
    "Turning ideas into reality 💡",
    "Creating solutions that matter 🌟",
)

FALLBACK_BIO = "Building something awesome ✨"


def _first_experience_title(extraction: ExtractionResult) -> Optional[str]:
    if not extraction.experience:
        return None
    return (extraction.experience[0].title or "").strip() or None


def _primary_company(extraction: ExtractionResult) -> Optional[str]:
    first = extraction.experience[0] if extraction.experience else None
    company = (first.company or "").strip() if first else ""
    return company or (extraction.company or "").strip() or None


def _role_at_company(extraction: ExtractionResult, parts: list[str]) -> Optional[str]:
    title = _first_experience_title(extraction)
    company = _primary_company(extraction)
    if title and company:
        return f"{title} at {company}"
    return None


def _working_at_company(extraction: ExtractionResult, parts: list[str]) -> Optional[str]:
    if parts:
        return None
    company = _primary_company(extraction)
    return f"Working at {company}" if company else None


def _top_skill(extraction: ExtractionResult, parts: list[str]) -> Optional[str]:
    skill = (extraction.skills[0] if extraction.skills else "").strip()
    if not skill:
        return None
    if any(skill.lower() in p.lower() for p in parts):
        return None
    return f"Passionate about {skill}"


def _based_in(extraction: ExtractionResult, parts: list[str]) -> Optional[str]:
    location = (extraction.location or "").strip()
    return f"Based in {location}" if location else None


BIO_STRATEGIES: tuple[BioStrategy, ...] = (
    _role_at_company,
    _working_at_company,
    _top_skill,
    _based_in,
)


def random_selector(options: Sequence[str]) -> str:
    return random.choice(list(options))


def synthesize_bio(
    extraction: ExtractionResult,
    *,
    selector: Selector = random_selector,
    endings: Sequence[str] = MOTIVATIONAL_ENDINGS,
) -> str:
    """Build a short bio from role/company/top-skill/location signals."""
    parts: list[str] = []
    for strategy in BIO_STRATEGIES:
        fragment = strategy(extraction, parts)
        if fragment:
            parts.append(fragment)
    if not parts:
        return FALLBACK_BIO
    if endings:
        parts.append(selector(endings))
    return BIO_SEPARATOR.join(parts)


def ensure_bio(
    extraction: ExtractionResult,
    *,
    selector: Selector = random_selector,
) -> ExtractionResult:
    """Return the extraction with a synthesized bio when the provider supplied none."""
    if (extraction.bio or "").strip():
        return extraction
    return extraction.model_copy(update={"bio": synthesize_bio(extraction, selector=selector)})
