"""
Reviewer Directory
trl_engine/repositories/reviewer_directory.py

Resolves reviewer ids to profiles when a session does not embed them.
"""

import threading
from typing import Dict, Iterable, List, Optional, Protocol

from trl_engine.core.exceptions import DuplicateEntityException
from trl_engine.models.score import Reviewer


class ReviewerDirectory(Protocol):
    def get_reviewer(self, reviewer_id: str) -> Optional[Reviewer]:
        ...


class InMemoryReviewerDirectory:
    """Thread-safe reviewer lookup held in process memory."""

    def __init__(self, reviewers: Optional[Iterable[Reviewer]] = None):
        self._lock = threading.RLock()
        self._reviewers: Dict[str, Reviewer] = {}
        for reviewer in reviewers or []:
            self.add(reviewer)

    def add(self, reviewer: Reviewer) -> Reviewer:
        with self._lock:
            if reviewer.id in self._reviewers:
                raise DuplicateEntityException(f"Reviewer {reviewer.id} already exists")
            self._reviewers[reviewer.id] = reviewer
            return reviewer

    def upsert(self, reviewer: Reviewer) -> Reviewer:
        with self._lock:
            self._reviewers[reviewer.id] = reviewer
            return reviewer

    def get_reviewer(self, reviewer_id: str) -> Optional[Reviewer]:
        with self._lock:
            return self._reviewers.get(reviewer_id)

    def list_reviewers(self) -> List[Reviewer]:
        with self._lock:
            return list(self._reviewers.values())
