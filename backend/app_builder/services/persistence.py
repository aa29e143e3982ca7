"""Debounced persistence of builder state, one adapter per user.

Every change calls ``schedule`` with the full (config, history, cursor)
record. Only the record current when the quiet period ends is written; a
newer change before that cancels and restarts the timer. A write that is
already running is never cancelled.
"""

import asyncio
import json
import logging
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from app_builder.core.config import settings
from app_builder.schemas.design_config import DesignConfig, default_design_config
from app_builder.services.history import HistoryStack
from app_builder.services.state_store import StateStore

logger = logging.getLogger(__name__)

STATE_KEY_TEMPLATE = "appBuilderState:v1:{user_id}"
THEME_KEY_TEMPLATE = "appBuilderTheme:v1:{user_id}"


class SaveStatus(StrEnum):
    UNSAVED = "unsaved"
    SAVING = "saving"
    SAVED = "saved"

    @property
    def label(self) -> str:
        return _SAVE_LABELS[self]


_SAVE_LABELS = {
    SaveStatus.UNSAVED: "Unsaved changes",
    SaveStatus.SAVING: "Saving...",
    SaveStatus.SAVED: "All changes saved",
}


class BuilderTheme(StrEnum):
    DEFAULT = "Default"
    LIGHT = "Light"
    DARK = "Dark"
    SERENE = "Serene"


class PersistedState(BaseModel):
    """The stored ``{designConfig, historyStack, currentIndex}`` record."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    design_config: DesignConfig
    history_stack: tuple[DesignConfig, ...] = Field(min_length=1)
    current_index: StrictInt

    @model_validator(mode="after")
    def check_cursor(self) -> "PersistedState":
        if not 0 <= self.current_index < len(self.history_stack):
            raise ValueError("currentIndex out of range")
        return self

    @classmethod
    def from_history(cls, history: HistoryStack) -> "PersistedState":
        return cls(
            design_config=history.current,
            history_stack=tuple(history.configs),
            current_index=history.cursor,
        )

    def to_history(self) -> HistoryStack:
        return HistoryStack(self.history_stack, cursor=self.current_index)


def state_key(user_id: str) -> str:
    return STATE_KEY_TEMPLATE.format(user_id=user_id)


def theme_key(user_id: str) -> str:
    return THEME_KEY_TEMPLATE.format(user_id=user_id)


class PersistenceAdapter:
    def __init__(self, store: StateStore, user_id: str, *, delay: float | None = None):
        self.store = store
        self.user_id = user_id
        self.delay = settings.SAVE_DEBOUNCE_SECONDS if delay is None else delay
        self._status = SaveStatus.SAVED
        self._generation = 0
        # Generation most recently stored
        self._written = 0
        self._pending: PersistedState | None = None
        self._write_lock = asyncio.Lock()
        self._timer: asyncio.Task | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def status(self) -> SaveStatus:
        return self._status

    @property
    def state_key(self) -> str:
        return state_key(self.user_id)

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    async def load(self) -> HistoryStack:
        """Return the stored history, or a fresh seeded one. Never raises."""
        try:
            raw = await self.store.get(self.state_key)
        except Exception:
            logger.exception("Could not read builder state for %s; using seed", self.user_id)
            return HistoryStack.seeded(default_design_config())

        if raw is None:
            return HistoryStack.seeded(default_design_config())
        try:
            return PersistedState.model_validate_json(raw).to_history()
        except ValidationError as exc:
            logger.warning(
                "Discarding malformed builder state for %s (%d errors)",
                self.user_id,
                exc.error_count(),
            )
            return HistoryStack.seeded(default_design_config())

    # ------------------------------------------------------------------
    # Debounced save
    # ------------------------------------------------------------------

    def mark_unsaved(self) -> None:
        self._status = SaveStatus.UNSAVED

    def schedule(self, state: PersistedState) -> None:
        """Queue ``state`` for writing once the quiet period elapses."""
        self._generation += 1
        self._pending = state
        self._status = SaveStatus.SAVING
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        task = asyncio.get_running_loop().create_task(self._write_after_delay())
        self._timer = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _write_after_delay(self) -> None:
        await asyncio.sleep(self.delay)
        # From here on the write is in flight and can no longer be cancelled.
        if self._timer is asyncio.current_task():
            self._timer = None
        await self._write()

    async def _write(self) -> bool:
        # One write at a time; the pending state is read once the previous
        # write has finished, so the newest state always lands last.
        async with self._write_lock:
            generation = self._generation
            state = self._pending
            if state is None or generation == self._written:
                return True
            try:
                await self.store.set(self.state_key, state.model_dump_json(by_alias=True))
            except Exception:
                logger.exception("Failed to persist builder state for %s", self.user_id)
                if generation == self._generation:
                    self._status = SaveStatus.UNSAVED
                return False
            self._written = generation
            if generation == self._generation:
                self._status = SaveStatus.SAVED
            return True

    async def flush(self) -> None:
        """Write any pending state now instead of waiting for the timer."""
        timer, self._timer = self._timer, None
        had_timer = timer is not None and not timer.done()
        if had_timer:
            timer.cancel()
        in_flight = [t for t in self._tasks if t is not timer and not t.done()]
        if in_flight:
            await asyncio.gather(*in_flight, return_exceptions=True)
        if had_timer:
            await self._write()

    # ------------------------------------------------------------------
    # Builder UI theme (not versioned, written immediately)
    # ------------------------------------------------------------------

    async def load_builder_theme(self) -> BuilderTheme:
        try:
            raw = await self.store.get(theme_key(self.user_id))
            if raw is None:
                return BuilderTheme.DEFAULT
            return BuilderTheme(json.loads(raw))
        except (ValueError, TypeError):
            logger.warning("Ignoring unreadable builder theme for %s", self.user_id)
            return BuilderTheme.DEFAULT
        except Exception:
            logger.exception("Could not read builder theme for %s", self.user_id)
            return BuilderTheme.DEFAULT

    async def save_builder_theme(self, theme: BuilderTheme) -> bool:
        try:
            await self.store.set(theme_key(self.user_id), json.dumps(theme.value))
        except Exception:
            logger.exception("Failed to persist builder theme for %s", self.user_id)
            return False
        return True
