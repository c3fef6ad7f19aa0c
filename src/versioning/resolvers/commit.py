"""Short commit resolver: recover a full module commit id from its prefix."""

import logging
import threading
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import replace
from typing import Optional, Tuple

from common.errors import ResolutionNotFoundError
from common.logging_utils import extra_context, is_debug_enabled, Timer
from ..models import CommitRecord, Label, ModuleIdentity

logger = logging.getLogger(__name__)


class _CandidateSlot:
    """Single result slot shared by the per-label scan tasks.

    Writes are check-then-set under the lock: the candidate from the label
    with the lowest index (labels arrive newest-created first) wins, so the
    outcome does not depend on which thread finishes last.

    A commit is only a draft when no non-draft label history carries it.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._index: Optional[int] = None
        self._commit: Optional[CommitRecord] = None
        self._label: Optional[Label] = None
        self._published = set()
        self.conflicts = set()

    def offer(self, index: int, label: Label, commit: CommitRecord) -> None:
        with self._lock:
            if not commit.is_draft:
                self._published.add(commit.commit_id)
            if self._commit is not None and self._commit.commit_id != commit.commit_id:
                self.conflicts.add(commit.commit_id)
                self.conflicts.add(self._commit.commit_id)
            if self._index is None or index < self._index:
                self._index, self._label, self._commit = index, label, commit

    def result(self) -> Tuple[Optional[Label], Optional[CommitRecord]]:
        with self._lock:
            commit = self._commit
            if commit is not None and commit.is_draft and commit.commit_id in self._published:
                commit = replace(commit, is_draft=False)
            return self._label, commit


class CommitResolver:
    """Find the commit whose id starts with a short prefix across all labels.

    Lists the module's unarchived labels once, then scans every label's
    history concurrently, one task per label.
    """

    def __init__(self, client, max_workers: int = 16):
        self.client = client
        self.max_workers = max_workers

    def _scan_label(self, module: ModuleIdentity, index: int, label: Label, prefix: str,
                    slot: _CandidateSlot) -> None:
        for commit in self.client.list_label_history(module, label):
            if commit.commit_id.startswith(prefix):
                slot.offer(index, label, commit)
                return

    def resolve(self, module: ModuleIdentity, prefix: str) -> CommitRecord:
        """Return the full commit for ``prefix`` in ``module``.

        Raises:
            RemoteError: Listing labels or any label history failed; the
                first failure aborts the whole resolution.
            ResolutionNotFoundError: No label history contains a match.
        """
        if not prefix:
            raise ValueError("prefix must not be empty")

        with Timer() as t:
            labels = self.client.list_labels(module)
            slot = _CandidateSlot()
            if labels:
                workers = max(1, min(self.max_workers, len(labels)))
                with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="label-history") as executor:
                    futures = [
                        executor.submit(self._scan_label, module, index, label, prefix, slot)
                        for index, label in enumerate(labels)
                    ]
                    done, pending = wait(futures, return_when=FIRST_EXCEPTION)
                    for future in pending:
                        future.cancel()
                    for future in futures:
                        if future in done and future.exception() is not None:
                            raise future.exception()

        label, commit = slot.result()
        if is_debug_enabled(logger):
            logger.debug(
                "Resolved short commit",
                extra=extra_context(
                    event="function_exit",
                    component="commit_resolver",
                    action="resolve",
                    target=str(module),
                    outcome="found" if commit else "not_found",
                    label_count=len(labels),
                    duration_ms=t.duration_ms(),
                )
            )
        if commit is None:
            raise ResolutionNotFoundError(prefix)
        if slot.conflicts:
            logger.warning(
                "Prefix %s matches several commits (%s); using %s from label %s",
                prefix, ", ".join(sorted(slot.conflicts)), commit.commit_id, label.name,
            )
        return commit
