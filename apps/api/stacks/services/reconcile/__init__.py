"""Profile reconciliation: source adapters, merge engine, store, and run orchestrator."""

from .adapters import (
    AccountImportAdapter,
    AccountImportInput,
    DocumentAdapter,
    DocumentInput,
    SourceAdapter,
    TranscriptAdapter,
    TranscriptInput,
)
from .dates import normalize_date, is_current_marker
from .errors import PersistenceError, RunStage, SourceError, SourceErrorKind
from .merge import MergePolicy, apply_writes, merge
from .orchestrator import Reconciler, SourceJob
from .store import ProfileStore, SqlProfileStore

__all__ = [
    "AccountImportAdapter",
    "AccountImportInput",
    "DocumentAdapter",
    "DocumentInput",
    "SourceAdapter",
    "TranscriptAdapter",
    "TranscriptInput",
    "normalize_date",
    "is_current_marker",
    "PersistenceError",
    "RunStage",
    "SourceError",
    "SourceErrorKind",
    "MergePolicy",
    "apply_writes",
    "merge",
    "Reconciler",
    "SourceJob",
    "ProfileStore",
    "SqlProfileStore",
]
