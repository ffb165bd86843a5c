# prompter/engine.py
from __future__ import annotations

import os
import logging
from typing import List, Optional

from . import config as CFG
from .errors import RemoteServiceError
from .loader import load_dataset
from .models import CandidateSet, DatasetIndexes, STATUS_OK, STATUS_REMOTE_UNAVAILABLE
from .normalize import normalize, tokenize
from .readiness import ReadinessCoordinator, State
from .remote import RemoteClient
from .spelling import EditDistanceOracle, SpellingOracle

log = logging.getLogger(__name__)


class PromptEngine:
    """
    Builds the prompt list for one query:
      1. normalize and split the query
      2. two local candidates from the spelling oracle:
           partial   = words as typed, last word suggested
           corrected = every word suggested
      3. fill the remaining slots with remote candidates, best rated first

    The engine holds no per-query state, so one instance can serve
    concurrent callers; the indexes are read-only.
    """

    def __init__(
        self,
        indexes: DatasetIndexes,
        oracle: SpellingOracle,
        remote: RemoteClient,
        *,
        capacity: int = CFG.MAX_PROMPTS,
        remote_mode: str = CFG.REMOTE_MODE,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        if remote_mode not in CFG.REMOTE_MODES:
            raise ValueError(f"unknown remote mode {remote_mode!r} (expected one of {CFG.REMOTE_MODES})")
        self.indexes = indexes
        self.oracle = oracle
        self.remote = remote
        self.capacity = capacity
        self.remote_mode = remote_mode

    # /* ~~~ local candidates: partial and fully corrected phrases ~~~ */
    def local_candidates(self, query_norm: str) -> tuple[List[str], str]:
        """Return (local prompts, fully corrected phrase) for a normalized query."""
        words = self.indexes.frequencies
        tokens = tokenize(query_norm)
        partial = corrected = ""
        for w in tokens[:-1]:
            partial += w + " "
            corrected += self.oracle.suggest(w, words) + " "
        # last word may still be typed: both phrases take its suggestion, no separator
        last = self.oracle.suggest(tokens[-1], words)
        partial += last
        corrected += last

        prompts: List[str] = []
        if partial != query_norm:
            prompts.append(partial)
        if corrected != query_norm and corrected != partial:
            prompts.append(corrected)
        return prompts, corrected

    # /* ~~~ remote candidates, best rating first (unknown last, stable) ~~~ */
    def rank_remote(self, items: List[str]) -> List[str]:
        rating = self.indexes.rating_of
        return sorted(items, key=lambda p: rating(normalize(p)), reverse=True)

    def generate_candidates(self, raw_query: str) -> CandidateSet:
        q = normalize(raw_query)
        prompts, corrected = self.local_candidates(q)
        # partial first: with capacity 1 only the partial prompt is kept
        prompts = prompts[:self.capacity]

        remaining = self.capacity - len(prompts)
        try:
            remote = self.remote.fetch(corrected, remaining)
        except RemoteServiceError:
            if self.remote_mode == "strict":
                raise
            log.warning("Remote service unavailable; returning %d local prompts for %r", len(prompts), q)
            return CandidateSet(tuple(prompts), self.capacity, STATUS_REMOTE_UNAVAILABLE)

        for p in self.rank_remote(remote):
            if len(prompts) >= self.capacity:
                break
            if p in prompts:
                continue
            prompts.append(p)
        return CandidateSet(tuple(prompts), self.capacity, STATUS_OK)


class Prompter:
    """
    Thin orchestration layer that glues together:
      - dataset indexing (loader.load_dataset),
      - the remote inference client and its readiness gate,
      - prompt generation (PromptEngine).

    Public API (used by the CLI and the Flask session):
      * build(dataset, ...):     index the dataset, wire client + engine
      * start_probing() / wait_until_ready(timeout): readiness gate
      * complete(query):         return the CandidateSet for a query
      * shutdown():              stop probing, close the HTTP session
    """

    # ------------- lifecycle -------------

    def __init__(self) -> None:
        self.engine: Optional[PromptEngine] = None
        self.coordinator: Optional[ReadinessCoordinator] = None
        self._remote: Optional[RemoteClient] = None

    def build(
        self,
        dataset: str = CFG.DATASET_PATH,
        *,
        with_ratings: bool = CFG.CAPTURE_RATINGS,
        host: Optional[str] = None,
        timeout: Optional[float] = None,
        capacity: Optional[int] = None,
        remote_mode: Optional[str] = None,
        oracle: Optional[SpellingOracle] = None,
        remote: Optional[RemoteClient] = None,
        verbose: bool = False,
    ) -> None:
        if verbose:
            logging.basicConfig(level=logging.INFO)
            os.environ["PROMPTER_VERBOSE"] = "1"

        indexes = load_dataset(dataset, with_ratings=with_ratings)  # DatasetError is startup-fatal

        self._remote = remote or RemoteClient(
            host or CFG.REMOTE_HOST,
            timeout=timeout if timeout is not None else CFG.REQUEST_TIMEOUT,
        )
        self.engine = PromptEngine(
            indexes,
            oracle or EditDistanceOracle(),
            self._remote,
            capacity=capacity if capacity is not None else CFG.MAX_PROMPTS,
            remote_mode=remote_mode or CFG.REMOTE_MODE,
        )
        log.info("Prompter build() complete: host=%s capacity=%d mode=%s",
                 self._remote.host, self.engine.capacity, self.engine.remote_mode)

    def start_probing(self, interval: float = CFG.PING_INTERVAL) -> ReadinessCoordinator:
        if self._remote is None:
            raise RuntimeError("Prompter not built. Call build() first.")
        if self.coordinator is None:
            self.coordinator = ReadinessCoordinator(self._remote.ping, interval=interval).start()
        return self.coordinator

    def wait_until_ready(self, timeout: Optional[float] = None, *, interval: float = CFG.PING_INTERVAL) -> bool:
        return self.start_probing(interval).wait(timeout)

    @property
    def ready(self) -> bool:
        return self.coordinator is not None and self.coordinator.state is State.READY

    # ------------- query -------------

    def complete(self, query: str) -> CandidateSet:
        if not self.engine:
            raise RuntimeError("Prompter not built. Call build() first.")
        return self.engine.generate_candidates(query)

    # ------------- teardown -------------

    def shutdown(self) -> None:
        try:
            if self.coordinator:
                self.coordinator.stop()
            if self._remote:
                self._remote.close()
        finally:
            self.coordinator = None
            self._remote = None
            self.engine = None
            log.info("Prompter shutdown complete")
