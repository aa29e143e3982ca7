"""Process-wide registry of open builder sessions."""

import asyncio
import logging
import time
from collections import OrderedDict
from collections.abc import Callable

from app_builder.services.editor import DesignEditor
from app_builder.services.persistence import PersistenceAdapter, SaveStatus
from app_builder.services.publisher import PublishOrchestrator, PublishState
from app_builder.services.session import BuilderSession
from app_builder.services.state_store import StateStore

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Opens each user's session once and hands out the same editor afterwards.

    Sessions idle for ``idle_seconds`` and the least recently used ones beyond
    ``max_sessions`` are closed on the next ``open``. A session is only closed
    once its state has been written; one that is mid-publish stays open.
    """

    def __init__(
        self,
        store: StateStore,
        *,
        debounce: float | None = None,
        idle_seconds: float | None = None,
        max_sessions: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.debounce = debounce
        self.idle_seconds = idle_seconds
        self.max_sessions = max_sessions
        self.clock = clock
        self._editors: dict[str, DesignEditor] = {}
        self._publishers: dict[str, PublishOrchestrator] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._last_used: OrderedDict[str, float] = OrderedDict()

    def __len__(self) -> int:
        return len(self._editors)

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._editors

    async def open(self, user_id: str) -> DesignEditor:
        editor = self._editors.get(user_id)
        if editor is None:
            lock = self._locks.setdefault(user_id, asyncio.Lock())
            async with lock:
                editor = self._editors.get(user_id)
                if editor is None:
                    adapter = PersistenceAdapter(self.store, user_id, delay=self.debounce)
                    history = await adapter.load()
                    theme = await adapter.load_builder_theme()
                    editor = DesignEditor(BuilderSession(user_id, history, adapter, theme))
                    self._editors[user_id] = editor
                    logger.info(
                        "Opened builder session for %s (%d snapshots)", user_id, len(history)
                    )
        self._touch(user_id)
        for stale_id, used in self._stale(keep=user_id):
            await self._close(stale_id, used)
        return editor

    def publisher(self, user_id: str) -> PublishOrchestrator:
        orchestrator = self._publishers.get(user_id)
        if orchestrator is None:
            orchestrator = self._publishers[user_id] = PublishOrchestrator()
        return orchestrator

    async def flush_all(self) -> None:
        for editor in list(self._editors.values()):
            await editor.session.flush()

    # ------------------------------------------------------------------
    # Eviction
    # ------------------------------------------------------------------

    def _touch(self, user_id: str) -> None:
        self._last_used[user_id] = self.clock()
        self._last_used.move_to_end(user_id)

    def _stale(self, keep: str) -> list[tuple[str, float]]:
        """Sessions to close, oldest first."""
        now = self.clock()
        excess = len(self._editors) - self.max_sessions if self.max_sessions else 0
        stale = []
        for user_id, used in self._last_used.items():
            if user_id == keep or self._publishing(user_id):
                continue
            idle = self.idle_seconds is not None and now - used >= self.idle_seconds
            if not idle and excess <= 0:
                break
            stale.append((user_id, used))
            excess -= 1
        return stale

    def _publishing(self, user_id: str) -> bool:
        orchestrator = self._publishers.get(user_id)
        return orchestrator is not None and orchestrator.state is PublishState.PUBLISHING

    async def _close(self, user_id: str, used: float) -> None:
        editor = self._editors.get(user_id)
        if editor is None:
            return
        await editor.session.flush()
        # Reopened while flushing, or the write failed: keep it
        if self._last_used.get(user_id) != used:
            return
        if editor.session.save_status is not SaveStatus.SAVED:
            logger.warning("Keeping builder session for %s open: state not saved", user_id)
            return
        del self._editors[user_id]
        del self._last_used[user_id]
        self._publishers.pop(user_id, None)
        self._locks.pop(user_id, None)
        logger.info("Closed builder session for %s", user_id)
