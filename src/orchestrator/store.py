"""
src/orchestrator/store.py

Append-only conversation store keyed by (project, user).

Messages are frozen once written; nothing is updated or deleted, so concurrent
writers can only ever add rows. Reads are windowed by recency.
"""


import logging
import uuid
from typing import Dict, List, Optional, Tuple

from orchestrator.models import Message, MessageMetadata, ProcessingLogEntry


logger = logging.getLogger(__name__)


class ConversationStore:

    def __init__(self):

        self._messages: Dict[Tuple[str, str], List[Message]] = {}
        self.processing_log: List[ProcessingLogEntry] = []

    def append(
            self,
            project_id: str,
            user_id: str,
            role: str,
            content: str,
            metadata: Optional[MessageMetadata] = None,
    ) -> Message:

        message = Message(
            id=str(uuid.uuid4()),
            project_id=project_id,
            user_id=user_id,
            role=role,
            content=content,
            metadata=metadata,
        )
        self._messages.setdefault((project_id, user_id), []).append(message)

        return message

    def recent(self, project_id: str, user_id: str, limit: int) -> List[Message]:
        """Newest first."""

        rows = self._messages.get((project_id, user_id), [])

        return list(reversed(rows[-limit:])) if limit > 0 else []

    def history(self, project_id: str, user_id: str, limit: int) -> List[Message]:
        """The last `limit` messages, oldest first."""

        return list(reversed(self.recent(project_id, user_id, limit)))

    def log_processing(self, entry: ProcessingLogEntry) -> None:

        self.processing_log.append(entry)
        logger.info(
            "%s project=%s user=%s ok=%s in %dms%s",
            entry.operation,
            entry.project_id,
            entry.user_id,
            entry.success,
            entry.processing_ms,
            f" error={entry.error}" if entry.error else "",
        )
