"""Run stage and error types shared by source adapters, the store, and the orchestrator."""

from enum import Enum
from typing import Optional


class RunStage(str, Enum):
    """Reconciliation run stages, in order. FAILED is per source and does not halt the run."""
    IDLE = "idle"
    EXTRACTING = "extracting"
    MERGING = "merging"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


class SourceErrorKind(str, Enum):
    UNAVAILABLE = "unavailable"
    UNAUTHORIZED = "unauthorized"
    UNPARSEABLE = "unparseable"


class SourceError(Exception):
    """A source adapter could not produce an extraction result."""
    def __init__(self, kind: SourceErrorKind, detail: str, source: Optional[str] = None):
        self.kind = kind
        self.detail = detail
        self.source = source
        super().__init__(f"[{source or 'source'}:{kind.value}] {detail}")


class PersistenceError(Exception):
    """One write category could not be persisted."""
    def __init__(self, category: str, message: str, cause: Optional[Exception] = None):
        self.category = category
        self.message = message
        self.cause = cause
        super().__init__(f"[{category}] {message}")
