"""
Reconciliation run: idle -> extracting -> merging -> persisting -> done.

  1. Load the profile snapshot once.
  2. Run every source job concurrently; a failed source is recorded, not fatal.
  3. Fold successful extractions through the merge engine in job order.
  4. Persist scalar updates and each child collection as independent atomic units.
  5. Return a RunSummary with per-type insert counts and failed sources.

A store that cannot be read ends the run with error=profile_unavailable and
every requested source listed as failed.

Public API (for routers and webhooks):
  - Reconciler.run(user_id, jobs)
  - Reconciler.import_accounts / import_document / import_transcript
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from stacks.core import get_settings
from stacks.domain import COLLECTION_CATEGORIES, ExtractionResult, InsertStats, RunSummary, WriteCategory, Writes
from .adapters import (
    AccountImportAdapter,
    AccountImportInput,
    DocumentAdapter,
    DocumentInput,
    SourceAdapter,
    TranscriptAdapter,
    TranscriptInput,
)
from .errors import PersistenceError, RunStage, SourceError, SourceErrorKind
from .merge import MergePolicy, apply_writes, merge
from .store import ProfileStore

logger = logging.getLogger(__name__)

PROFILE_NOT_FOUND = "profile_not_found"
PROFILE_UNAVAILABLE = "profile_unavailable"

WRITE_ORDER: tuple[WriteCategory, ...] = ("profile", *COLLECTION_CATEGORIES)


@dataclass(frozen=True)
class SourceJob:
    adapter: SourceAdapter
    payload: Any

    @property
    def name(self) -> str:
        return self.adapter.source_name(self.payload)


@dataclass
class SourceOutcome:
    name: str
    result: Optional[ExtractionResult] = None
    error: Optional[SourceError] = None


def _has_writes(writes: Writes, category: str) -> bool:
    if category == "profile":
        return bool(writes.scalar_updates)
    return bool(getattr(writes, category))


class Reconciler:
    def __init__(
        self,
        store: ProfileStore,
        *,
        document: DocumentAdapter | None = None,
        accounts: AccountImportAdapter | None = None,
        transcript: TranscriptAdapter | None = None,
        policy: MergePolicy | None = None,
    ):
        self.store = store
        self.document = document or DocumentAdapter()
        self.accounts = accounts or AccountImportAdapter()
        self.transcript = transcript or TranscriptAdapter()
        self.policy = policy or MergePolicy(max_projects=get_settings().max_import_projects)

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def _stage(self, user_id: str, stage: RunStage, **extra: Any) -> None:
        details = " ".join(f"{k}={v}" for k, v in extra.items())
        logger.info("reconcile user_id=%s stage=%s %s", user_id, stage.value, details)

    async def _extract(self, user_id: str, job: SourceJob) -> SourceOutcome:
        name = job.name
        try:
            result = await job.adapter.extract(job.payload)
            return SourceOutcome(name=name, result=result)
        except SourceError as e:
            error = e
        except Exception as e:
            logger.exception("source %s raised unexpectedly", name)
            error = SourceError(SourceErrorKind.UNAVAILABLE, str(e) or type(e).__name__, source=name)
        self._stage(user_id, RunStage.FAILED, source=name, kind=error.kind.value, detail=error.detail)
        return SourceOutcome(name=name, error=error)

    def _fold(self, snapshot, results: Iterable[ExtractionResult]) -> Writes:
        writes = Writes()
        current = snapshot
        for extraction in results:
            step = merge(current, extraction, policy=self.policy)
            current = apply_writes(current, step)
            writes = writes.combine(step)
        return writes

    async def _persist_unit(
        self, profile_id: str, category: str, writes: Writes
    ) -> tuple[str, int, Optional[PersistenceError]]:
        try:
            count = await self.store.persist(profile_id, category, writes)
            return category, count, None
        except PersistenceError as e:
            return category, 0, e
        except Exception as e:
            logger.exception("persisting %s raised unexpectedly", category)
            return category, 0, PersistenceError(category, str(e), cause=e)

    # -------------------------------------------------------------------------
    # Run
    # -------------------------------------------------------------------------

    async def run(self, user_id: str, jobs: list[SourceJob]) -> RunSummary:
        self._stage(user_id, RunStage.IDLE, sources=",".join(j.name for j in jobs) or "-")
        try:
            snapshot = await self.store.load_snapshot(user_id)
        except Exception:
            logger.exception("reconcile user_id=%s could not load profile", user_id)
            return RunSummary(success=False, failed_sources=[j.name for j in jobs], error=PROFILE_UNAVAILABLE)
        if snapshot is None:
            logger.warning("reconcile user_id=%s has no profile; nothing merged", user_id)
            return RunSummary(success=False, error=PROFILE_NOT_FOUND)

        self._stage(user_id, RunStage.EXTRACTING, count=len(jobs))
        outcomes = await asyncio.gather(*(self._extract(user_id, job) for job in jobs))
        succeeded = [o for o in outcomes if o.result is not None]
        failed_sources = [o.name for o in outcomes if o.error is not None]

        self._stage(user_id, RunStage.MERGING, succeeded=len(succeeded))
        writes = self._fold(snapshot, [o.result for o in succeeded])

        categories = [c for c in WRITE_ORDER if _has_writes(writes, c)]
        self._stage(user_id, RunStage.PERSISTING, categories=",".join(categories) or "-")
        units = await asyncio.gather(
            *(self._persist_unit(snapshot.profile_id, c, writes) for c in categories)
        )

        counts: dict[str, int] = {}
        failed_writes: list[str] = []
        updated_fields: list[str] = []
        for category, count, error in units:
            if error is not None:
                logger.warning("reconcile user_id=%s write %s failed: %s", user_id, category, error.message)
                failed_writes.append(category)
            elif category == "profile":
                updated_fields = list(writes.scalar_updates)
            else:
                counts[category] = count

        summary = RunSummary(
            success=not failed_writes and (bool(succeeded) or not jobs),
            stats=InsertStats(**counts),
            failed_sources=failed_sources,
            failed_writes=failed_writes,
            updated_fields=updated_fields,
        )
        self._stage(
            user_id,
            RunStage.DONE,
            success=summary.success,
            failed_sources=",".join(failed_sources) or "-",
            failed_writes=",".join(failed_writes) or "-",
        )
        return summary

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    async def import_accounts(self, user_id: str, providers: list[str]) -> RunSummary:
        """Import from linked OAuth accounts; a provider without a token fails as unauthorized."""
        wanted = list(dict.fromkeys(p.strip().lower() for p in providers if p and p.strip()))
        try:
            tokens = await self.store.get_access_tokens(user_id, wanted)
        except Exception:
            logger.exception("reconcile user_id=%s could not load access tokens", user_id)
            return RunSummary(success=False, failed_sources=wanted, error=PROFILE_UNAVAILABLE)
        jobs = [
            SourceJob(self.accounts, AccountImportInput(provider=p, access_token=tokens.get(p)))
            for p in wanted
        ]
        return await self.run(user_id, jobs)

    async def import_document(self, user_id: str, document: DocumentInput) -> RunSummary:
        return await self.run(user_id, [SourceJob(self.document, document)])

    async def import_transcript(self, call_id: str, transcript: str) -> RunSummary:
        """Resolve the user by onboarding call id, then reconcile the transcript. Raises LookupError."""
        try:
            user_id = await self.store.find_user_by_call_id(call_id)
        except Exception:
            logger.exception("reconcile call_id=%s could not resolve user", call_id)
            return RunSummary(success=False, failed_sources=[self.transcript.source], error=PROFILE_UNAVAILABLE)
        if not user_id:
            raise LookupError(f"No user found for call id '{call_id}'.")
        payload = TranscriptInput(transcript=transcript, call_id=call_id)
        return await self.run(user_id, [SourceJob(self.transcript, payload)])
