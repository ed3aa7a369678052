"""
Workflow Context Repository
trl_engine/repositories/context_repository.py

In-memory, thread-safe store of WorkflowContext snapshots keyed by
assessment id, with optimistic concurrency: ``save`` only succeeds when the
caller's expected version matches the stored one, and every successful
write bumps the version by one.
"""

import logging
import threading
from typing import Dict, List, Optional

from trl_engine.core.exceptions import (
    ConcurrentModificationException,
    DuplicateEntityException,
    EntityNotFoundException,
)
from trl_engine.models.workflow import WorkflowContext

logger = logging.getLogger(__name__)

ENTITY_TYPE = "WorkflowContext"


class WorkflowContextRepository:
    """Version-checked storage for workflow contexts."""

    def __init__(self):
        self._lock = threading.Lock()
        self._contexts: Dict[str, WorkflowContext] = {}

    def create(self, context: WorkflowContext) -> WorkflowContext:
        """Store a new context at version 1."""
        with self._lock:
            if context.assessment_id in self._contexts:
                raise DuplicateEntityException(
                    f"Workflow for assessment {context.assessment_id} already exists"
                )
            stored = context.model_copy(update={"version": 1})
            self._contexts[context.assessment_id] = stored

        logger.info(
            "Workflow context created",
            extra={"assessment_id": context.assessment_id, "version": 1},
        )
        return stored

    def get(self, assessment_id: str) -> WorkflowContext:
        with self._lock:
            context = self._contexts.get(assessment_id)
        if context is None:
            raise EntityNotFoundException(ENTITY_TYPE, assessment_id)
        return context

    def find(self, assessment_id: str) -> Optional[WorkflowContext]:
        with self._lock:
            return self._contexts.get(assessment_id)

    def save(self, context: WorkflowContext, expected_version: Optional[int] = None) -> WorkflowContext:
        """
        Replace the stored snapshot.

        Args:
            context: new snapshot (typically returned by an orchestrator action).
            expected_version: version the caller loaded; defaults to ``context.version``.

        Raises:
            EntityNotFoundException: nothing stored for this assessment.
            ConcurrentModificationException: stored version differs from expected.
        """
        expected = context.version if expected_version is None else expected_version

        with self._lock:
            current = self._contexts.get(context.assessment_id)
            if current is None:
                raise EntityNotFoundException(ENTITY_TYPE, context.assessment_id)
            if current.version != expected:
                logger.warning(
                    "Workflow context version conflict",
                    extra={
                        "assessment_id": context.assessment_id,
                        "expected_version": expected,
                        "actual_version": current.version,
                    },
                )
                raise ConcurrentModificationException(
                    context.assessment_id, expected, current.version
                )
            stored = context.model_copy(update={"version": current.version + 1})
            self._contexts[context.assessment_id] = stored

        logger.debug(
            "Workflow context saved",
            extra={"assessment_id": context.assessment_id, "version": stored.version},
        )
        return stored

    def delete(self, assessment_id: str) -> None:
        with self._lock:
            if self._contexts.pop(assessment_id, None) is None:
                raise EntityNotFoundException(ENTITY_TYPE, assessment_id)

    def list_ids(self) -> List[str]:
        with self._lock:
            return list(self._contexts)

    def clear(self) -> None:
        with self._lock:
            self._contexts.clear()
